from datetime import datetime
from library_api.extensions import db


class Book(db.Model):
    __tablename__ = "books"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False, index=True)
    author = db.Column(db.String(200), nullable=False, index=True)
    isbn = db.Column(db.String(32), unique=True, nullable=False, index=True)
    category = db.Column(db.String(100), nullable=True, index=True)

    # total copies owned; what is on the shelf is derived from the ledger
    quantity = db.Column(db.Integer, nullable=False, default=0)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        db.CheckConstraint("quantity >= 0", name="ck_books_quantity_non_negative"),
    )

    @property
    def available_copies(self) -> int:
        # active_loans is attached as a column_property in models/lending_record.py
        return self.quantity - (self.active_loans or 0)
