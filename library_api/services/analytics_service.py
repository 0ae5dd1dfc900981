from typing import Optional

from flask import current_app

from library_api.errors import ValidationError
from library_api.repositories.analytics_repo import AnalyticsRepo

MAX_LIMIT = 100


class AnalyticsService:
    """
    Read-only reports over the ledger and the catalog. Each report is one
    aggregate query, so it reflects a single consistent snapshot. A
    ``borrower`` restricts the report to that borrower's own loans.
    """

    @staticmethod
    def most_borrowed(borrower: Optional[str] = None, limit=None):
        if limit in (None, ""):
            limit = current_app.config.get("ANALYTICS_TOP_N", 10)
        try:
            limit = int(limit)
        except (TypeError, ValueError):
            raise ValidationError("limit must be an integer")
        if not 1 <= limit <= MAX_LIMIT:
            raise ValidationError(f"limit must be between 1 and {MAX_LIMIT}")

        rows = AnalyticsRepo.borrow_counts(borrower=borrower, limit=limit)
        return [
            {"book_id": r.book_id, "book_title": r.book_title, "borrows": int(r.borrows)}
            for r in rows
        ]

    @staticmethod
    def monthly_trend(borrower: Optional[str] = None):
        rows = AnalyticsRepo.monthly_counts(borrower=borrower)
        return [{"month": r.month, "count": int(r.loans)} for r in rows if r.month]

    @staticmethod
    def category_distribution(borrower: Optional[str] = None):
        rows = AnalyticsRepo.category_counts(borrower=borrower)
        return [{"category": r.category, "count": int(r.books)} for r in rows]
