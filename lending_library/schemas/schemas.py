from pydantic import BaseModel, ConfigDict, constr, field_validator
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

class BookBase(BaseModel):
    title: constr(min_length=1)
    author: Optional[str] = None
    isbn: Optional[str] = None

    @field_validator('title')
    @classmethod
    def ensure_title_not_blank(cls, v):
        if not v.strip():
            raise ValueError('title must not be blank')
        return v

class BookCreate(BookBase):
    pass

class BookOut(BookBase):
    model_config = ConfigDict(from_attributes=True)
    id: int
    available: bool
    created_at: datetime

class UserBase(BaseModel):
    name: constr(min_length=1)
    email: constr(min_length=5)

    @field_validator('name')
    @classmethod
    def ensure_name_not_blank(cls, v):
        if not v.strip():
            raise ValueError('name must not be blank')
        return v

class UserCreate(UserBase):
    pass

class UserOut(UserBase):
    model_config = ConfigDict(from_attributes=True)
    id: int
    fines: Decimal
    joined_at: datetime

class FinePayment(BaseModel):
    amount: Decimal

class LoanOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    user_id: int
    book_id: int
    borrowed_on: date
    due_date: date
    returned_on: Optional[date] = None
    fine: Decimal
    active: bool

class FineQuote(BaseModel):
    loan_id: int
    as_of: date
    overdue: bool
    amount: Decimal

class Metrics(BaseModel):
    total_books: int
    total_users: int
    active_loans: int
    overdue_loans: int
    outstanding_fines: Decimal
    top_borrowed: list
