"""Normalisation of errors into a single response body shape."""

from typing import Any, Dict, Iterable, Mapping

from quotevault.utils.exceptions import DuplicateKeyError, ValidationError

UNKNOWN_ERROR_MESSAGE = "Unknown error"


def format_error_response(error: Any) -> Dict[str, Any]:
    """
    Format an error for an API response body.

    Args:
        error: ValidationError, DuplicateKeyError, any other exception,
            a plain message string, or an already formatted ``{"message": ...}``

    Returns:
        Response body dictionary, always containing ``message``
    """
    if isinstance(error, ValidationError):
        return {
            "message": "Validation Error",
            "errors": [
                {"field": field, "message": message}
                for field, message in error.field_errors.items()
            ],
        }

    if isinstance(error, DuplicateKeyError):
        body: Dict[str, Any] = {"message": "Duplicate Key Error"}
        if error.key_value:
            field, value = next(iter(error.key_value.items()))
            body["field"] = field
            body["value"] = value
        return body

    if isinstance(error, BaseException):
        message = getattr(error, "message", None)
        if not isinstance(message, str):
            message = str(error)
        return {"message": message or UNKNOWN_ERROR_MESSAGE}

    if isinstance(error, str):
        return {"message": error or UNKNOWN_ERROR_MESSAGE}

    if isinstance(error, Mapping) and isinstance(error.get("message"), str) and error["message"]:
        return {"message": error["message"]}

    return {"message": UNKNOWN_ERROR_MESSAGE}


def validation_error_from_pydantic(errors: Iterable[Mapping[str, Any]]) -> ValidationError:
    """Build a ValidationError from pydantic / FastAPI ``errors()`` output."""
    field_errors: Dict[str, str] = {}
    for item in errors:
        location = [str(part) for part in item.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(location) or "body"
        field_errors.setdefault(field, str(item.get("msg", "Invalid value")))
    return ValidationError(message="Validation failed", field_errors=field_errors)
