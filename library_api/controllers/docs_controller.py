from flask import Blueprint, current_app, jsonify

docs_bp = Blueprint("docs", __name__)

_BEARER = [{"bearerAuth": []}]


def _ref(name):
    return {"$ref": f"#/components/schemas/{name}"}


def _json(schema, description="OK"):
    return {"description": description, "content": {"application/json": {"schema": schema}}}


def _error(description):
    return _json(_ref("Error"), description)


def _array(name):
    return {"type": "array", "items": _ref(name)}


def _query(*names):
    return [{"name": n, "in": "query", "required": False, "schema": {"type": "string"}} for n in names]


def _id_param(name="id"):
    return [{"name": name, "in": "path", "required": True, "schema": {"type": "integer"}}]


SCHEMAS = {
    "Error": {
        "type": "object",
        "properties": {
            "success": {"type": "boolean"},
            "message": {"type": "string"},
            "error": {"type": "string"},
        },
    },
    "Message": {"type": "object", "properties": {"message": {"type": "string"}}},
    "User": {
        "type": "object",
        "properties": {
            "id": {"type": "integer"},
            "username": {"type": "string"},
            "email": {"type": "string"},
            "role": {"type": "string", "enum": ["admin", "user"]},
            "created_at": {"type": "string", "format": "date-time"},
            "updated_at": {"type": "string", "format": "date-time"},
        },
    },
    "BookInput": {
        "type": "object",
        "required": ["title", "author", "isbn"],
        "properties": {
            "title": {"type": "string"},
            "author": {"type": "string"},
            "isbn": {"type": "string"},
            "category": {"type": "string"},
            "quantity": {"type": "integer", "minimum": 0},
        },
    },
    "Book": {
        "type": "object",
        "properties": {
            "id": {"type": "integer"},
            "title": {"type": "string"},
            "author": {"type": "string"},
            "isbn": {"type": "string"},
            "category": {"type": "string"},
            "quantity": {"type": "integer"},
            "available_copies": {"type": "integer"},
            "created_at": {"type": "string", "format": "date-time"},
            "updated_at": {"type": "string", "format": "date-time"},
        },
    },
    "LendingRecord": {
        "type": "object",
        "properties": {
            "id": {"type": "integer"},
            "book_id": {"type": "integer"},
            "borrower": {"type": "string"},
            "borrow_date": {"type": "string", "format": "date-time"},
            "return_date": {"type": "string", "format": "date-time", "nullable": True},
            "created_at": {"type": "string", "format": "date-time"},
            "updated_at": {"type": "string", "format": "date-time"},
            "book_title": {"type": "string"},
            "book_author": {"type": "string"},
        },
    },
    "BorrowCount": {
        "type": "object",
        "properties": {
            "book_id": {"type": "integer"},
            "book_title": {"type": "string"},
            "borrows": {"type": "integer"},
        },
    },
    "MonthCount": {
        "type": "object",
        "properties": {"month": {"type": "string", "example": "2024-03"}, "count": {"type": "integer"}},
    },
    "CategoryCount": {
        "type": "object",
        "properties": {"category": {"type": "string"}, "count": {"type": "integer"}},
    },
}


def _paths():
    analytics_query = _query("username", "role")
    return {
        "/register": {"post": {
            "tags": ["auth"], "summary": "Register a user account",
            "requestBody": {"content": {"application/json": {"schema": {
                "type": "object", "required": ["username", "email", "password"],
                "properties": {k: {"type": "string"} for k in ("username", "email", "password")},
            }}}},
            "responses": {"201": _json({"type": "object", "properties": {
                "message": {"type": "string"}, "user": _ref("User")}}, "Created"),
                "400": _error("Missing fields"), "409": _error("Duplicate username or email")},
        }},
        "/login": {"post": {
            "tags": ["auth"], "summary": "Log in with username or email",
            "requestBody": {"content": {"application/json": {"schema": {
                "type": "object", "required": ["username", "password"],
                "properties": {"username": {"type": "string"}, "password": {"type": "string"}},
            }}}},
            "responses": {"200": _json({"type": "object", "properties": {
                "token": {"type": "string"}, "user": _ref("User")}}),
                "401": _error("Invalid credentials")},
        }},
        "/me": {"get": {
            "tags": ["auth"], "summary": "Current user", "security": _BEARER,
            "responses": {"200": _json({"type": "object", "properties": {"user": _ref("User")}}),
                          "401": _error("Missing or invalid token")},
        }},
        "/books": {
            "get": {
                "tags": ["books"], "summary": "List books", "security": _BEARER,
                "parameters": _query("search", "category", "author", "available"),
                "responses": {"200": _json(_array("Book")), "400": _error("Bad filter")},
            },
            "post": {
                "tags": ["books"], "summary": "Add a book (admin)", "security": _BEARER,
                "requestBody": {"content": {"application/json": {"schema": _ref("BookInput")}}},
                "responses": {"201": _json(_ref("Book"), "Created"), "400": _error("Invalid input"),
                              "403": _error("Admin only"), "409": _error("Duplicate ISBN")},
            },
        },
        "/books/{id}": {
            "parameters": _id_param(),
            "get": {
                "tags": ["books"], "summary": "Get a book", "security": _BEARER,
                "responses": {"200": _json(_ref("Book")), "404": _error("Book not found")},
            },
            "put": {
                "tags": ["books"], "summary": "Update a book (admin)", "security": _BEARER,
                "requestBody": {"content": {"application/json": {"schema": _ref("BookInput")}}},
                "responses": {"200": _json(_ref("Book")), "400": _error("Invalid input"),
                              "404": _error("Book not found"),
                              "409": _error("Duplicate ISBN or quantity below active loans")},
            },
            "delete": {
                "tags": ["books"], "summary": "Delete a book (admin)", "security": _BEARER,
                "responses": {"200": _json({"type": "object", "properties": {
                    "message": {"type": "string"}, "id": {"type": "integer"}}}),
                    "404": _error("Book not found"), "409": _error("Book has active loans")},
            },
        },
        "/lending": {"get": {
            "tags": ["lending"], "summary": "List lending records", "security": _BEARER,
            "parameters": _query("search", "status", "borrower", "book_id", "book_title"),
            "responses": {"200": _json(_array("LendingRecord")), "400": _error("Bad filter")},
        }},
        "/lending/lend": {"post": {
            "tags": ["lending"], "summary": "Lend a copy of a book", "security": _BEARER,
            "requestBody": {"content": {"application/json": {"schema": {
                "type": "object", "required": ["book_id"],
                "properties": {"book_id": {"type": "integer"}, "borrower": {"type": "string"}},
            }}}},
            "responses": {"201": _json(_ref("LendingRecord"), "Created"),
                          "400": _error("Invalid input"), "403": _error("Not your borrower name"),
                          "404": _error("Book not found"), "409": _error("Out of stock")},
        }},
        "/lending/return/{id}": {"post": {
            "tags": ["lending"], "summary": "Return a lent copy", "security": _BEARER,
            "parameters": _id_param(),
            "responses": {"200": _json(_ref("Message")), "404": _error("Record not found"),
                          "409": _error("Already returned")},
        }},
        "/lending/{id}": {
            "parameters": _id_param(),
            "get": {
                "tags": ["lending"], "summary": "Get a lending record", "security": _BEARER,
                "responses": {"200": _json(_ref("LendingRecord")), "404": _error("Record not found")},
            },
            "delete": {
                "tags": ["lending"], "summary": "Delete a lending record (admin)", "security": _BEARER,
                "responses": {"200": _json(_ref("Message")), "404": _error("Record not found")},
            },
        },
        "/analytics/most-borrowed": {"get": {
            "tags": ["analytics"], "summary": "Most borrowed books", "security": _BEARER,
            "parameters": analytics_query + _query("limit"),
            "responses": {"200": _json(_array("BorrowCount")), "400": _error("Bad limit")},
        }},
        "/analytics/monthly-trends": {"get": {
            "tags": ["analytics"], "summary": "Loans per month", "security": _BEARER,
            "parameters": analytics_query,
            "responses": {"200": _json(_array("MonthCount"))},
        }},
        "/analytics/category-distribution": {"get": {
            "tags": ["analytics"], "summary": "Books per category", "security": _BEARER,
            "parameters": analytics_query,
            "responses": {"200": _json(_array("CategoryCount"))},
        }},
    }


def openapi_document(prefix: str) -> dict:
    return {
        "openapi": "3.0.3",
        "info": {"title": "Library Lending API", "version": "1.0.0"},
        "servers": [{"url": prefix or "/"}],
        "paths": _paths(),
        "components": {
            "schemas": SCHEMAS,
            "securitySchemes": {"bearerAuth": {"type": "http", "scheme": "bearer", "bearerFormat": "JWT"}},
        },
    }


@docs_bp.get("/apidocs")
def apidocs():
    prefix = current_app.config.get("API_PREFIX", "").rstrip("/")
    return jsonify(openapi_document(prefix))
