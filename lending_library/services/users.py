from decimal import Decimal
from typing import List
from sqlalchemy.orm import Session

from lending_library.core.config import logger
from lending_library.models import models
from lending_library.services.errors import NotFound, AlreadyExists, InvalidAmount


class UserRegistry:
    def __init__(self, db: Session):
        self.db = db

    def register(self, name: str, email: str) -> models.User:
        email = email.strip()
        existing = self.db.query(models.User).filter(models.User.email == email).first()
        if existing:
            raise AlreadyExists("Email already registered")
        user = models.User(name=name.strip(), email=email, fines=Decimal("0"))
        self.db.add(user)
        self.db.flush()
        logger.info(f"Registered user id={user.id} email={user.email}")
        return user

    def get(self, user_id: int) -> models.User:
        user = self.db.query(models.User).filter(models.User.id == user_id).first()
        if not user:
            raise NotFound("User not found")
        return user

    def list(self, skip: int = 0, limit: int = 50) -> List[models.User]:
        return self.db.query(models.User).order_by(models.User.name).offset(skip).limit(limit).all()

    def pay_fine(self, user_id: int, amount: Decimal) -> Decimal:
        """Apply a payment against the user's balance and return the new balance.

        The payment may not be negative and may not exceed what is owed.
        """
        user = self.get(user_id)
        amount = Decimal(amount)
        if not amount.is_finite():
            raise InvalidAmount("Payment amount must be a finite number")
        if amount < 0:
            raise InvalidAmount("Payment amount must not be negative")
        if amount > user.fines:
            raise InvalidAmount(f"Payment of {amount} exceeds outstanding fines of {user.fines}")
        user.fines = user.fines - amount
        self.db.flush()
        logger.info(f"User {user.id} paid {amount}, balance {user.fines}")
        return user.fines
