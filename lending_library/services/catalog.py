from typing import List, Optional
from sqlalchemy.orm import Session

from lending_library.core.config import logger
from lending_library.models import models
from lending_library.services.errors import NotFound, AlreadyExists


class BookCatalog:
    def __init__(self, db: Session):
        self.db = db

    def register(self, title: str, author: Optional[str] = None, isbn: Optional[str] = None) -> models.Book:
        if isbn:
            existing = self.db.query(models.Book).filter(models.Book.isbn == isbn).first()
            if existing:
                raise AlreadyExists("ISBN already exists")
        book = models.Book(
            title=title.strip(),
            author=author.strip() if author else None,
            isbn=isbn,
            available=True,
        )
        self.db.add(book)
        self.db.flush()
        logger.info(f"Registered book id={book.id} title={book.title}")
        return book

    def get(self, book_id: int, for_update: bool = False) -> models.Book:
        query = self.db.query(models.Book).filter(models.Book.id == book_id)
        if for_update:
            query = query.with_for_update()
        book = query.first()
        if not book:
            raise NotFound("Book not found")
        return book

    def set_availability(self, book_id: int, available: bool) -> None:
        # only LibraryManager calls this, as part of borrow/return
        book = self.get(book_id)
        book.available = available
        self.db.flush()

    def search(self, q: Optional[str] = None, available: Optional[bool] = None,
               skip: int = 0, limit: int = 20) -> List[models.Book]:
        query = self.db.query(models.Book)
        if q:
            like_q = f"%{q}%"
            query = query.filter((models.Book.title.ilike(like_q)) | (models.Book.author.ilike(like_q)))
        if available is not None:
            query = query.filter(models.Book.available == available)
        return query.order_by(models.Book.title).offset(skip).limit(limit).all()
