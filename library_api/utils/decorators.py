from functools import wraps
from flask_jwt_extended import verify_jwt_in_request

from library_api.services.access_policy import AccessPolicy
from library_api.utils.auth import current_caller


def policy_required(action: str):
    """JWT required, and the caller's role must allow ``action``."""
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            AccessPolicy.require(current_caller(), action)
            return fn(*args, **kwargs)
        return wrapper
    return decorator
