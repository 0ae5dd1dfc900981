from flask import current_app

from library_api.errors import Conflict, NotFound, ValidationError
from library_api.models.book import Book
from library_api.repositories.book_repo import BookRepo
from library_api.repositories.lending_repo import LendingRepo
from library_api.utils.locks import book_locks
from library_api.utils.transaction import atomic
from library_api.utils.validation import int_value, text_value

REQUIRED_FIELDS = ("title", "author", "isbn")


def _clean_text(value):
    return text_value(value, "Title, Author, ISBN and Category must be strings")


def _parse_quantity(value) -> int:
    quantity = int_value(value, "quantity must be an integer")
    if quantity < 0:
        raise ValidationError("Quantity cannot be negative")
    return quantity


def _parse_available_flag(value):
    if value is None or value == "":
        return None
    flag = str(value).strip().lower()
    if flag == "true":
        return True
    if flag == "false":
        return False
    raise ValidationError("available must be 'true' or 'false'")


class BookService:
    @staticmethod
    def list_books(search=None, category=None, author=None, available=None):
        return BookRepo.list_filtered(
            search=(search or "").strip() or None,
            category=(category or "").strip() or None,
            author=(author or "").strip() or None,
            available=_parse_available_flag(available),
        )

    @staticmethod
    def get_book(book_id: int):
        book = BookRepo.get(book_id)
        if not book:
            raise NotFound("Book not found")
        return book

    @staticmethod
    def create_book(data: dict):
        values = {k: _clean_text(data.get(k)) for k in REQUIRED_FIELDS}
        if not all(values.values()):
            raise ValidationError("Title, Author, and ISBN are required fields")

        quantity = _parse_quantity(data.get("quantity", 0))
        if BookRepo.get_by_isbn(values["isbn"]):
            raise Conflict("A book with this ISBN already exists")

        book = Book(
            title=values["title"],
            author=values["author"],
            isbn=values["isbn"],
            category=_clean_text(data.get("category")) or None,
            quantity=quantity,
        )
        with atomic():
            BookRepo.add(book)
        current_app.logger.info(f"[books] created book {book.id} (quantity={quantity})")
        return book

    @staticmethod
    def update_book(book_id: int, data: dict):
        with book_locks.hold(book_id), atomic():
            if BookRepo.get_quantity_for_update(book_id) is None:
                raise NotFound("Book not found")
            book = BookRepo.get(book_id)

            for k in REQUIRED_FIELDS:
                if k in data:
                    value = _clean_text(data[k])
                    if not value:
                        raise ValidationError(f"{k} cannot be empty")
                    if k == "isbn" and value != book.isbn:
                        other = BookRepo.get_by_isbn(value)
                        if other and other.id != book.id:
                            raise Conflict("A book with this ISBN already exists")
                    setattr(book, k, value)

            if "category" in data:
                book.category = _clean_text(data["category"]) or None

            if "quantity" in data:
                quantity = _parse_quantity(data["quantity"])
                active = LendingRepo.count_active(book_id)
                if quantity < active:
                    raise Conflict(
                        f"Quantity cannot be lower than the {active} copies currently on loan"
                    )
                book.quantity = quantity
        current_app.logger.info(f"[books] updated book {book_id}")
        return book

    @staticmethod
    def delete_book(book_id: int) -> int:
        with book_locks.hold(book_id), atomic():
            if BookRepo.get_quantity_for_update(book_id) is None:
                raise NotFound("Book not found")
            active = LendingRepo.count_active(book_id)
            if active > 0:
                raise Conflict("Book has active loans. All copies must be returned first.")

            book = BookRepo.get(book_id)
            history = LendingRepo.delete_history_for_book(book_id)
            BookRepo.delete(book)
        current_app.logger.info(f"[books] deleted book {book_id} with {history} returned loan(s)")
        return book_id
