from datetime import date
from decimal import Decimal
from typing import Optional
from sqlalchemy.orm import Session

from lending_library.core.config import DAILY_RATE, logger
from lending_library.services.errors import InvalidAmount
from lending_library.services.loans import LoanLedger
from lending_library.services.users import UserRegistry


class FineManager:
    def __init__(self, db: Session, daily_rate: Optional[Decimal] = None):
        self.db = db
        self.daily_rate = Decimal(daily_rate) if daily_rate is not None else DAILY_RATE
        self.loans = LoanLedger(db)
        self.users = UserRegistry(db)

    def calculate_fine(self, loan_id: int, today: date) -> Decimal:
        """Fine owed on a loan as of ``today``.

        Only open loans, or loans returned on ``today`` itself, are assessed;
        anything else has already been settled at return and yields zero.
        """
        loan = self.loans.get(loan_id)
        if loan.returned_on is not None and loan.returned_on != today:
            return Decimal("0")
        days_late = max(0, (today - loan.due_date).days)
        return days_late * self.daily_rate

    def add_fine_to_user(self, user_id: int, amount: Decimal) -> Decimal:
        user = self.users.get(user_id)
        amount = Decimal(amount)
        if not amount.is_finite():
            raise InvalidAmount("Fine amount must be a finite number")
        if amount < 0:
            raise InvalidAmount("Fine amount must not be negative")
        user.fines = (user.fines or Decimal("0")) + amount
        self.db.flush()
        logger.info(f"Fined user {user.id} {amount}, balance {user.fines}")
        return user.fines
