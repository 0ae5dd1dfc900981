from datetime import datetime

from flask import current_app

from library_api.errors import AlreadyReturned, NotFound, OutOfStock, ValidationError
from library_api.models.lending_record import LendingRecord
from library_api.repositories.book_repo import BookRepo
from library_api.repositories.lending_repo import LendingRepo
from library_api.utils.locks import book_locks
from library_api.utils.transaction import atomic
from library_api.utils.validation import int_value, text_value

STATUSES = ("active", "returned")


def _parse_book_id(value) -> int:
    if value is None:
        raise ValidationError("Book ID and Borrower name are required")
    book_id = int_value(value, "book_id must be a positive integer")
    if book_id <= 0:
        raise ValidationError("book_id must be a positive integer")
    return book_id


class LendingService:
    @staticmethod
    def lend(book_id, borrower: str) -> LendingRecord:
        book_id = _parse_book_id(book_id)
        borrower = text_value(borrower, "borrower must be a string")
        if not borrower:
            raise ValidationError("Book ID and Borrower name are required")

        # availability check and insert must not interleave with another lend
        with book_locks.hold(book_id), atomic():
            quantity = BookRepo.get_quantity_for_update(book_id)
            if quantity is None:
                raise NotFound("Book not found")

            active = LendingRepo.count_active(book_id)
            if quantity - active <= 0:
                current_app.logger.warning(
                    f"[lending] book {book_id} out of stock ({active}/{quantity} on loan), "
                    f"lend to '{borrower}' rejected"
                )
                raise OutOfStock()

            record = LendingRepo.add(LendingRecord(
                book_id=book_id,
                borrower=borrower,
                borrow_date=datetime.utcnow(),
                return_date=None,
            ))

        current_app.logger.info(f"[lending] record {record.id}: book {book_id} lent to '{borrower}'")
        return record

    @staticmethod
    def get_record(record_id: int) -> LendingRecord:
        record = LendingRepo.get(record_id)
        if not record:
            raise NotFound("Lending record not found")
        return record

    @staticmethod
    def return_book(record_id: int) -> LendingRecord:
        with atomic():
            record = LendingService.get_record(record_id)
            if not record.is_active:
                raise AlreadyReturned()
            record.return_date = max(datetime.utcnow(), record.borrow_date)

        current_app.logger.info(f"[lending] record {record_id} returned")
        return record

    @staticmethod
    def delete_record(record_id: int):
        with atomic():
            record = LendingService.get_record(record_id)
            was_active = record.is_active
            book_id = record.book_id
            LendingRepo.delete(record)

        if was_active:
            current_app.logger.info(
                f"[lending] active record {record_id} deleted, copy of book {book_id} released"
            )
        else:
            current_app.logger.info(
                f"[lending] returned record {record_id} deleted from history (book {book_id})"
            )

    @staticmethod
    def list_records(status=None, search=None, borrower=None, book_id=None,
                     book_title=None, scope=None):
        """
        ``scope`` is the borrower the caller is restricted to (None = whole ledger);
        it overrides any ``borrower`` filter.
        """
        status = (status or "").strip().lower() or None
        if status and status not in STATUSES:
            raise ValidationError("status must be 'active' or 'returned'")

        if book_id not in (None, ""):
            book_id = int_value(book_id, "book_id must be an integer")
        else:
            book_id = None

        if scope is not None:
            borrower = scope
        else:
            borrower = (borrower or "").strip() or None

        records = LendingRepo.list_filtered(
            status=status,
            search=(search or "").strip() or None,
            borrower=borrower,
            book_id=book_id,
            book_title=(book_title or "").strip() or None,
        )
        if scope is not None:
            # list_filtered compares case-insensitively; ownership is exact
            records = [r for r in records if r.borrower == scope]
        return records
