from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.orm import column_property

from library_api.extensions import db
from library_api.models.book import Book


class LendingRecord(db.Model):
    __tablename__ = "lending_records"

    id = db.Column(db.Integer, primary_key=True)

    book_id = db.Column(db.Integer, db.ForeignKey("books.id"), nullable=False, index=True)
    borrower = db.Column(db.String(100), nullable=False, index=True)

    borrow_date = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, index=True)
    return_date = db.Column(db.DateTime, nullable=True)  # null -> still on loan

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    book = db.relationship("Book")

    @property
    def is_active(self) -> bool:
        return self.return_date is None


# Count of loans still out, loaded alongside every Book row.
Book.active_loans = column_property(
    select(func.count(LendingRecord.id))
    .where(LendingRecord.book_id == Book.id, LendingRecord.return_date.is_(None))
    .correlate_except(LendingRecord)
    .scalar_subquery()
)
