from sqlalchemy import (Column, Integer, String, Date, DateTime, Boolean, Numeric, ForeignKey,
                        Index, CheckConstraint)
from sqlalchemy.orm import relationship
from datetime import datetime
from decimal import Decimal
from lending_library.core.database import Base

class Book(Base):
    __tablename__ = "books"
    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False, index=True)
    author = Column(String, nullable=True, index=True)
    isbn = Column(String, unique=True, index=True, nullable=True)
    available = Column(Boolean, default=True, nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    loans = relationship("Loan", back_populates="book")

Index('ix_books_title_author', Book.title, Book.author)

class User(Base):
    __tablename__ = "users"
    __table_args__ = (CheckConstraint("fines >= 0", name="ck_users_fines_non_negative"),)
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    email = Column(String, unique=True, nullable=False, index=True)
    fines = Column(Numeric(10, 2), default=Decimal("0"), nullable=False)
    joined_at = Column(DateTime, default=datetime.utcnow)
    loans = relationship("Loan", back_populates="user")

class Loan(Base):
    __tablename__ = "loans"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    book_id = Column(Integer, ForeignKey("books.id"), nullable=False, index=True)
    borrowed_on = Column(Date, nullable=False)
    due_date = Column(Date, nullable=False, index=True)
    returned_on = Column(Date, nullable=True)
    fine = Column(Numeric(10, 2), default=Decimal("0"), nullable=False)
    user = relationship("User", back_populates="loans")
    book = relationship("Book", back_populates="loans")

    @property
    def active(self):
        return self.returned_on is None

# at most one open loan per book
Index('uq_loans_open_book', Loan.book_id, unique=True,
      sqlite_where=Loan.returned_on.is_(None),
      postgresql_where=Loan.returned_on.is_(None))
