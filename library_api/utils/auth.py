from flask_jwt_extended import get_jwt, get_jwt_identity

from library_api.errors import error_response
from library_api.services.access_policy import Caller, USER


def current_caller() -> Caller:
    """Caller built from the verified JWT of the current request."""
    claims = get_jwt() or {}
    return Caller(
        user_id=int(get_jwt_identity()),
        username=claims.get("username", ""),
        role=claims.get("role", USER),
    )


def register_jwt_handlers(jwt):
    # every credential problem is a 401 with the usual error body
    @jwt.unauthorized_loader
    def _missing_token(reason):
        return error_response(f"Unauthorized: {reason}", 401, "UNAUTHORIZED")

    @jwt.invalid_token_loader
    def _invalid_token(reason):
        return error_response(f"Invalid token: {reason}", 401, "UNAUTHORIZED")

    @jwt.expired_token_loader
    def _expired_token(jwt_header, jwt_payload):
        return error_response("Token has expired", 401, "UNAUTHORIZED")

    @jwt.revoked_token_loader
    def _revoked_token(jwt_header, jwt_payload):
        return error_response("Token has been revoked", 401, "UNAUTHORIZED")
