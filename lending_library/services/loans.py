from datetime import date
from decimal import Decimal
from typing import List, Optional
from sqlalchemy.orm import Session

from lending_library.core.config import logger
from lending_library.models import models
from lending_library.services.errors import NotFound, AlreadyReturned


class LoanLedger:
    """Borrow transactions. A loan is open until its return date is recorded,
    after which it is never modified again."""

    def __init__(self, db: Session):
        self.db = db

    def create(self, user_id: int, book_id: int, borrowed_on: date, due_date: date) -> models.Loan:
        loan = models.Loan(user_id=user_id, book_id=book_id, borrowed_on=borrowed_on, due_date=due_date,
                           fine=Decimal("0"))
        self.db.add(loan)
        self.db.flush()
        return loan

    def get(self, loan_id: int) -> models.Loan:
        loan = self.db.query(models.Loan).filter(models.Loan.id == loan_id).first()
        if not loan:
            raise NotFound("Loan not found")
        return loan

    def mark_returned(self, loan_id: int, returned_on: date) -> models.Loan:
        loan = self.get(loan_id)
        if loan.returned_on is not None:
            raise AlreadyReturned("Loan already closed")
        loan.returned_on = returned_on
        self.db.flush()
        logger.info(f"Loan {loan.id} closed on {returned_on}")
        return loan

    def is_overdue(self, loan_id: int, as_of: date) -> bool:
        loan = self.get(loan_id)
        return loan.returned_on is None and as_of > loan.due_date

    def list(self, active: Optional[bool] = None, user_id: Optional[int] = None,
             skip: int = 0, limit: int = 50) -> List[models.Loan]:
        query = self.db.query(models.Loan).order_by(models.Loan.borrowed_on.desc(), models.Loan.id.desc())
        if active is not None:
            if active:
                query = query.filter(models.Loan.returned_on.is_(None))
            else:
                query = query.filter(models.Loan.returned_on.is_not(None))
        if user_id is not None:
            query = query.filter(models.Loan.user_id == user_id)
        return query.offset(skip).limit(limit).all()

    def overdue(self, as_of: date) -> List[models.Loan]:
        return (self.db.query(models.Loan)
                .filter(models.Loan.returned_on.is_(None), models.Loan.due_date < as_of)
                .order_by(models.Loan.due_date)
                .all())
