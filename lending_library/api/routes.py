from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date
from decimal import Decimal
from sqlalchemy import func

from lending_library.core.database import get_db
from lending_library.models import models
from lending_library.schemas import schemas
from lending_library.services.catalog import BookCatalog
from lending_library.services.fines import FineManager
from lending_library.services.library import LibraryManager
from lending_library.services.loans import LoanLedger
from lending_library.services.notifications import LogNotifier
from lending_library.services.users import UserRegistry

router = APIRouter()
notifier = LogNotifier()

def get_library(db: Session = Depends(get_db)) -> LibraryManager:
    return LibraryManager(db, notifier=notifier)

# -----------------------------
# Books
# -----------------------------
@router.post("/books/", response_model=schemas.BookOut)
def create_book(book_in: schemas.BookCreate, db: Session = Depends(get_db)):
    book = BookCatalog(db).register(book_in.title, author=book_in.author, isbn=book_in.isbn)
    db.commit()
    db.refresh(book)
    return book

@router.get("/books/", response_model=List[schemas.BookOut])
def list_books(q: Optional[str] = Query(None, description="search title or author"),
               available: Optional[bool] = None,
               skip: int = 0, limit: int = 20, db: Session = Depends(get_db)):
    return BookCatalog(db).search(q=q, available=available, skip=skip, limit=limit)

@router.get("/books/{book_id}", response_model=schemas.BookOut)
def read_book(book_id: int, db: Session = Depends(get_db)):
    return BookCatalog(db).get(book_id)

# -----------------------------
# Users
# -----------------------------
@router.post("/users/", response_model=schemas.UserOut)
def create_user(user_in: schemas.UserCreate, db: Session = Depends(get_db)):
    user = UserRegistry(db).register(user_in.name, user_in.email)
    db.commit()
    db.refresh(user)
    return user

@router.get("/users/", response_model=List[schemas.UserOut])
def list_users(skip: int = 0, limit: int = 50, db: Session = Depends(get_db)):
    return UserRegistry(db).list(skip=skip, limit=limit)

@router.get("/users/{user_id}", response_model=schemas.UserOut)
def read_user(user_id: int, db: Session = Depends(get_db)):
    return UserRegistry(db).get(user_id)

@router.post("/users/{user_id}/payments", response_model=schemas.UserOut)
def pay_fine(user_id: int, payment: schemas.FinePayment, db: Session = Depends(get_db)):
    registry = UserRegistry(db)
    registry.pay_fine(user_id, payment.amount)
    db.commit()
    return registry.get(user_id)

# -----------------------------
# Loans (borrow & return)
# -----------------------------
@router.post("/loans/borrow", response_model=schemas.LoanOut)
def borrow_book(user_id: int, book_id: int, today: Optional[date] = None,
                library: LibraryManager = Depends(get_library)):
    loan = library.borrow_book(user_id, book_id, today or date.today())
    library.db.commit()
    library.db.refresh(loan)
    return loan

@router.post("/loans/return/{loan_id}", response_model=schemas.LoanOut)
def return_book(loan_id: int, today: Optional[date] = None,
                library: LibraryManager = Depends(get_library)):
    loan = library.return_book(loan_id, today or date.today())
    library.db.commit()
    library.db.refresh(loan)
    return loan

@router.get("/loans/", response_model=List[schemas.LoanOut])
def list_loans(active: Optional[bool] = None, user_id: Optional[int] = None,
               skip: int = 0, limit: int = 50, db: Session = Depends(get_db)):
    return LoanLedger(db).list(active=active, user_id=user_id, skip=skip, limit=limit)

@router.get("/loans/{loan_id}", response_model=schemas.LoanOut)
def read_loan(loan_id: int, db: Session = Depends(get_db)):
    return LoanLedger(db).get(loan_id)

@router.get("/loans/{loan_id}/fine", response_model=schemas.FineQuote)
def quote_fine(loan_id: int, today: Optional[date] = None, db: Session = Depends(get_db)):
    as_of = today or date.today()
    amount = FineManager(db).calculate_fine(loan_id, as_of)
    overdue = LoanLedger(db).is_overdue(loan_id, as_of)
    return schemas.FineQuote(loan_id=loan_id, as_of=as_of, overdue=overdue, amount=amount)

@router.post("/loans/{loan_id}/notify")
def notify_user(loan_id: int, library: LibraryManager = Depends(get_library)):
    library.notify_user(loan_id)
    return {"ok": True}

# -----------------------------
# Metrics
# -----------------------------
@router.get("/metrics", response_model=schemas.Metrics)
def metrics(db: Session = Depends(get_db)):
    today = date.today()
    total_books = db.query(func.count(models.Book.id)).scalar()
    total_users = db.query(func.count(models.User.id)).scalar()
    active_loans = db.query(func.count(models.Loan.id)).filter(models.Loan.returned_on.is_(None)).scalar()
    overdue = len(LoanLedger(db).overdue(today))
    outstanding = db.query(func.coalesce(func.sum(models.User.fines), 0)).scalar()
    top_borrowed = (db.query(models.Book.title, func.count(models.Loan.id).label('cnt'))
                    .join(models.Loan).group_by(models.Book.id)
                    .order_by(func.count(models.Loan.id).desc()).limit(5).all())
    return {
        'total_books': total_books,
        'total_users': total_users,
        'active_loans': active_loans,
        'overdue_loans': overdue,
        'outstanding_fines': Decimal(str(outstanding)),
        'top_borrowed': [{'title': t[0], 'count': t[1]} for t in top_borrowed],
    }
