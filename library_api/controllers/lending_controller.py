from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from library_api.services.access_policy import AccessPolicy
from library_api.services.lending_service import LendingService
from library_api.utils.auth import current_caller
from library_api.utils.decorators import policy_required
from library_api.utils.validation import json_body

lending_bp = Blueprint("lending", __name__)


def _iso(value):
    return value.isoformat() if value else None


def record_json(r):
    return {
        "id": r.id,
        "book_id": r.book_id,
        "borrower": r.borrower,
        "borrow_date": _iso(r.borrow_date),
        "return_date": _iso(r.return_date),
        "created_at": _iso(r.created_at),
        "updated_at": _iso(r.updated_at),
        "book_title": r.book.title if r.book else None,
        "book_author": r.book.author if r.book else None,
    }


@lending_bp.get("")
@jwt_required()
def list_records():
    caller = current_caller()
    records = LendingService.list_records(
        status=request.args.get("status"),
        search=request.args.get("search"),
        borrower=request.args.get("borrower"),
        book_id=request.args.get("book_id"),
        book_title=request.args.get("book_title") or request.args.get("bookTitle"),
        scope=AccessPolicy.ledger_scope(caller),
    )
    return jsonify([record_json(r) for r in records])


@lending_bp.get("/<int:record_id>")
@jwt_required()
def get_record(record_id: int):
    record = LendingService.get_record(record_id)
    AccessPolicy.ensure_owner(current_caller(), record.borrower)
    return jsonify(record_json(record))


@lending_bp.post("/lend")
@jwt_required()
def lend_book():
    data = json_body()
    borrower = AccessPolicy.lend_borrower(current_caller(), data.get("borrower"))
    record = LendingService.lend(data.get("book_id"), borrower)
    return jsonify(record_json(record)), 201


@lending_bp.post("/return/<int:record_id>")
@jwt_required()
def return_book(record_id: int):
    record = LendingService.get_record(record_id)
    AccessPolicy.ensure_owner(current_caller(), record.borrower)
    LendingService.return_book(record_id)
    return jsonify({"message": "Book returned successfully"})


@lending_bp.delete("/<int:record_id>")
@policy_required("lending:delete")
def delete_record(record_id: int):
    LendingService.delete_record(record_id)
    return jsonify({"message": "Lending record deleted successfully"})
