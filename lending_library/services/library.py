from datetime import date, timedelta
from decimal import Decimal
from typing import Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from lending_library.core.config import LOAN_DAYS, logger
from lending_library.models import models
from lending_library.services.catalog import BookCatalog
from lending_library.services.errors import AlreadyReturned, BookUnavailable
from lending_library.services.fines import FineManager
from lending_library.services.loans import LoanLedger
from lending_library.services.notifications import LogNotifier, Notifier
from lending_library.services.users import UserRegistry


class LibraryManager:
    """Borrow and return workflows across the catalog, the user registry and the loan ledger.

    Each workflow runs inside a SAVEPOINT, so a failure undoes only its own
    writes. Nothing is committed; the caller owns the transaction.
    """

    def __init__(self, db: Session, loan_days: Optional[int] = None,
                 fines: Optional[FineManager] = None, notifier: Optional[Notifier] = None):
        self.db = db
        self.loan_days = loan_days if loan_days is not None else LOAN_DAYS
        self.catalog = BookCatalog(db)
        self.users = UserRegistry(db)
        self.loans = LoanLedger(db)
        self.fines = fines or FineManager(db)
        self.notifier = notifier or LogNotifier()

    def borrow_book(self, user_id: int, book_id: int, today: date) -> models.Loan:
        user = self.users.get(user_id)
        book = self.catalog.get(book_id, for_update=True)
        if not book.available:
            raise BookUnavailable("Book is not available")
        try:
            with self.db.begin_nested():
                loan = self.loans.create(user.id, book.id, today, today + timedelta(days=self.loan_days))
                self.catalog.set_availability(book.id, False)
        except IntegrityError:
            # another open loan got to the book first
            raise BookUnavailable("Book is not available")
        logger.info(f"User {user.id} borrowed book {book.id} loan {loan.id} due {loan.due_date}")
        return loan

    def return_book(self, loan_id: int, today: date) -> models.Loan:
        loan = self.loans.get(loan_id)
        if loan.returned_on is not None:
            raise AlreadyReturned("Loan already closed")
        overdue = self.loans.is_overdue(loan.id, today)
        with self.db.begin_nested():
            self.loans.mark_returned(loan.id, today)
            self.catalog.set_availability(loan.book_id, True)
            if overdue:
                amount = self.fines.calculate_fine(loan.id, today)
                self.fines.add_fine_to_user(loan.user_id, amount)
                loan.fine = amount
                self.db.flush()
        logger.info(f"Loan {loan.id} returned, fine {loan.fine or Decimal('0')}")
        return loan

    def notify_user(self, loan_id: int) -> None:
        loan = self.loans.get(loan_id)
        user = self.users.get(loan.user_id)
        self.notifier.notify(user.email, loan.due_date)
