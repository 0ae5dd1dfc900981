"""Error taxonomy shared by services and controllers.

Services raise these; the handlers registered in ``register_error_handlers``
turn them into ``{"success": False, "message": ..., "error": ...}`` bodies.
"""
from typing import Optional

from flask import current_app, jsonify
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from werkzeug.exceptions import HTTPException

from library_api.extensions import db


class LibraryError(Exception):
    status_code = 500
    error_code = "INTERNAL_ERROR"

    def __init__(self, message: str, error_code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if error_code:
            self.error_code = error_code


class ValidationError(LibraryError):
    status_code = 400
    error_code = "VALIDATION_ERROR"


class Unauthorized(LibraryError):
    status_code = 401
    error_code = "UNAUTHORIZED"


class Forbidden(LibraryError):
    status_code = 403
    error_code = "FORBIDDEN"


class NotFound(LibraryError):
    status_code = 404
    error_code = "NOT_FOUND"


class Conflict(LibraryError):
    status_code = 409
    error_code = "CONFLICT"


class OutOfStock(Conflict):
    error_code = "OUT_OF_STOCK"

    def __init__(self, message: str = "Book is currently out of stock"):
        super().__init__(message)


class AlreadyReturned(Conflict):
    error_code = "ALREADY_RETURNED"

    def __init__(self, message: str = "Book already returned"):
        super().__init__(message)


class InternalError(LibraryError):
    pass


def error_response(message, code=400, error_code=None):
    body = {"success": False, "message": message}
    if error_code:
        body["error"] = error_code
    return jsonify(body), code


def register_error_handlers(app):
    @app.errorhandler(LibraryError)
    def _library_error(e: LibraryError):
        db.session.rollback()
        return error_response(e.message, e.status_code, e.error_code)

    @app.errorhandler(IntegrityError)
    def _integrity_error(e: IntegrityError):
        db.session.rollback()
        current_app.logger.warning(f"[db] integrity violation: {e.orig}")
        return error_response("Conflicting data", 409, Conflict.error_code)

    @app.errorhandler(SQLAlchemyError)
    def _storage_error(e: SQLAlchemyError):
        db.session.rollback()
        current_app.logger.exception(f"[db] storage failure: {e}")
        return error_response("Storage failure", 500, InternalError.error_code)

    @app.errorhandler(HTTPException)
    def _http_error(e: HTTPException):
        return error_response(e.description, e.code, e.name.upper().replace(" ", "_"))
