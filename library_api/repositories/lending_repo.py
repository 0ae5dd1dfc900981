from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import contains_eager

from library_api.extensions import db
from library_api.models.book import Book
from library_api.models.lending_record import LendingRecord


class LendingRepo:
    @staticmethod
    def get(record_id: int):
        return db.session.get(LendingRecord, record_id)

    @staticmethod
    def count_active(book_id: int) -> int:
        return LendingRecord.query.filter(
            LendingRecord.book_id == book_id,
            LendingRecord.return_date.is_(None)
        ).count()

    @staticmethod
    def list_filtered(status: Optional[str] = None, search: Optional[str] = None,
                      borrower: Optional[str] = None, book_id: Optional[int] = None,
                      book_title: Optional[str] = None):
        q = (
            LendingRecord.query
            .join(LendingRecord.book)
            .options(contains_eager(LendingRecord.book))
        )
        if status == "active":
            q = q.filter(LendingRecord.return_date.is_(None))
        elif status == "returned":
            q = q.filter(LendingRecord.return_date.isnot(None))
        if search:
            pattern = f"%{search.lower()}%"
            q = q.filter(db.or_(
                func.lower(LendingRecord.borrower).like(pattern),
                func.lower(Book.title).like(pattern),
                func.lower(Book.author).like(pattern),
            ))
        if borrower:
            q = q.filter(func.lower(LendingRecord.borrower) == borrower.lower())
        if book_id is not None:
            q = q.filter(LendingRecord.book_id == book_id)
        if book_title:
            q = q.filter(func.lower(Book.title) == book_title.lower())
        return q.order_by(LendingRecord.borrow_date.desc(), LendingRecord.id.desc()).all()

    @staticmethod
    def add(record: LendingRecord):
        db.session.add(record)
        return record

    @staticmethod
    def delete(record: LendingRecord):
        db.session.delete(record)

    @staticmethod
    def delete_history_for_book(book_id: int) -> int:
        return LendingRecord.query.filter(
            LendingRecord.book_id == book_id,
            LendingRecord.return_date.isnot(None)
        ).delete(synchronize_session=False)
