from flask import request

from library_api.errors import ValidationError


def json_body() -> dict:
    """Request JSON as a dict; a missing or unparsable body counts as empty."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def text_value(value, message: str) -> str:
    """Stripped string, or "" for None. Anything that isn't a string is rejected."""
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(message)
    return value.strip()


def int_value(value, message: str) -> int:
    """
    Whole number from JSON or a query string. Booleans, fractional floats and
    non-numeric strings are rejected rather than truncated.
    """
    if isinstance(value, bool):
        raise ValidationError(message)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValidationError(message)
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            raise ValidationError(message)
    raise ValidationError(message)
