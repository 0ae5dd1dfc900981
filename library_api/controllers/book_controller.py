# library_api/controllers/book_controller.py

from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required
from library_api.services.book_service import BookService
from library_api.utils.decorators import policy_required
from library_api.utils.validation import json_body

book_bp = Blueprint("books", __name__)


def book_json(b):
    return {
        "id": b.id,
        "title": b.title,
        "author": b.author,
        "isbn": b.isbn,
        "quantity": b.quantity,
        "category": b.category or "",
        "available_copies": b.available_copies,
        "created_at": b.created_at.isoformat() if b.created_at else None,
        "updated_at": b.updated_at.isoformat() if b.updated_at else None,
    }


@book_bp.get("")
@jwt_required()
def list_books():
    books = BookService.list_books(
        search=request.args.get("search"),
        category=request.args.get("category"),
        author=request.args.get("author"),
        available=request.args.get("available"),
    )
    return jsonify([book_json(b) for b in books])


@book_bp.get("/<int:book_id>")
@jwt_required()
def get_book(book_id: int):
    return jsonify(book_json(BookService.get_book(book_id)))


@book_bp.post("")
@policy_required("book:create")
def create_book():
    data = json_body()
    b = BookService.create_book(data)
    return jsonify(book_json(b)), 201


@book_bp.put("/<int:book_id>")
@policy_required("book:update")
def update_book(book_id: int):
    data = json_body()
    b = BookService.update_book(book_id, data)
    return jsonify(book_json(b))


@book_bp.delete("/<int:book_id>")
@policy_required("book:delete")
def delete_book(book_id: int):
    deleted_id = BookService.delete_book(book_id)
    return jsonify({"message": "Book deleted successfully", "id": deleted_id})
