from typing import Optional

from sqlalchemy import func, literal_column

from library_api.extensions import db
from library_api.models.book import Book
from library_api.models.lending_record import LendingRecord

UNCATEGORIZED = "Uncategorized"


# Format strings are inlined as literals: bound parameters would render the
# SELECT and GROUP BY expressions differently on PostgreSQL.
def _month_of(column):
    """YYYY-MM bucket for a datetime column, per database dialect."""
    dialect = db.session.get_bind().dialect.name
    if dialect == "sqlite":
        return func.strftime(literal_column("'%Y-%m'"), column)
    if dialect == "mssql":
        return func.format(column, literal_column("'yyyy-MM'"))
    if dialect in ("mysql", "mariadb"):
        return func.date_format(column, literal_column("'%Y-%m'"))
    return func.to_char(column, literal_column("'YYYY-MM'"))


def _category_bucket():
    return func.coalesce(
        func.nullif(func.trim(Book.category), literal_column("''")),
        literal_column(f"'{UNCATEGORIZED}'"),
    )


class AnalyticsRepo:
    @staticmethod
    def borrow_counts(borrower: Optional[str] = None, limit: int = 10):
        borrows = func.count(LendingRecord.id).label("borrows")
        q = (
            db.session.query(Book.id.label("book_id"), Book.title.label("book_title"), borrows)
            .join(LendingRecord, LendingRecord.book_id == Book.id)
        )
        if borrower:
            q = q.filter(LendingRecord.borrower == borrower)
        return (
            q.group_by(Book.id, Book.title)
            .order_by(borrows.desc(), Book.id.asc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def monthly_counts(borrower: Optional[str] = None):
        month = _month_of(LendingRecord.borrow_date).label("month")
        q = db.session.query(month, func.count(LendingRecord.id).label("loans"))
        if borrower:
            q = q.filter(LendingRecord.borrower == borrower)
        return q.group_by(month).order_by(month.asc()).all()

    @staticmethod
    def category_counts(borrower: Optional[str] = None):
        category = _category_bucket().label("category")
        if borrower:
            # books this borrower has had, each counted once
            q = (
                db.session.query(category, func.count(func.distinct(Book.id)).label("books"))
                .select_from(Book)
                .join(LendingRecord, LendingRecord.book_id == Book.id)
                .filter(LendingRecord.borrower == borrower)
            )
        else:
            q = db.session.query(category, func.count(Book.id).label("books"))
        return q.group_by(category).order_by(category.asc()).all()
