import argparse
from datetime import date

from lending_library.core.config import logger
from lending_library.core.database import Base, SessionLocal, engine
from lending_library.models import models
from lending_library.services.catalog import BookCatalog
from lending_library.services.loans import LoanLedger
from lending_library.services.users import UserRegistry


def seed(db):
    # quick idempotent seed
    if db.query(models.User).count() == 0:
        users = UserRegistry(db)
        users.register('Alice', 'alice@example.com')
        users.register('Bob', 'bob@example.com')
    if db.query(models.Book).count() == 0:
        catalog = BookCatalog(db)
        catalog.register('Data Engineering with Python', author='J. Reader', isbn='978-1111111111')
        catalog.register('Designing Data-Intensive Applications', author='Martin Kleppmann',
                         isbn='978-0980000000')
    db.commit()


def main(argv=None):
    parser = argparse.ArgumentParser(description='Lending library utilities')
    parser.add_argument('--initdb', action='store_true', help='Create tables')
    parser.add_argument('--seed', action='store_true', help='Seed sample data')
    parser.add_argument('--overdue', action='store_true', help='List loans overdue as of today')
    args = parser.parse_args(argv)
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if args.seed:
            seed(db)
            logger.info('Seeded sample data')
        if args.overdue:
            for loan in LoanLedger(db).overdue(date.today()):
                print(f"loan {loan.id} user {loan.user_id} book {loan.book_id} due {loan.due_date}")
    finally:
        db.close()
    print('Done')
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
