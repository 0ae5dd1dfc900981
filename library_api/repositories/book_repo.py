from typing import Optional

from sqlalchemy import func

from library_api.extensions import db
from library_api.models.book import Book


class BookRepo:
    @staticmethod
    def list_filtered(search: Optional[str] = None, category: Optional[str] = None,
                      author: Optional[str] = None, available: Optional[bool] = None):
        q = Book.query
        if search:
            pattern = f"%{search.lower()}%"
            q = q.filter(db.or_(func.lower(Book.title).like(pattern),
                                func.lower(Book.author).like(pattern)))
        if category:
            q = q.filter(func.lower(Book.category) == category.lower())
        if author:
            q = q.filter(func.lower(Book.author) == author.lower())
        if available is True:
            q = q.filter(Book.quantity - Book.active_loans > 0)
        elif available is False:
            q = q.filter(Book.quantity - Book.active_loans <= 0)
        return q.order_by(Book.id.asc()).all()

    @staticmethod
    def get(book_id: int):
        return db.session.get(Book, book_id)

    @staticmethod
    def get_quantity_for_update(book_id: int) -> Optional[int]:
        """Row-locks the book (where the dialect supports it) and returns its quantity."""
        row = (
            db.session.query(Book.id, Book.quantity)
            .filter(Book.id == book_id)
            .with_for_update()
            .one_or_none()
        )
        return None if row is None else row.quantity

    @staticmethod
    def get_by_isbn(isbn: str):
        return Book.query.filter_by(isbn=isbn).first()

    @staticmethod
    def add(book: Book):
        db.session.add(book)
        return book

    @staticmethod
    def delete(book: Book):
        db.session.delete(book)
