"""Document identifier helpers."""

import re
import secrets
from typing import Any

OBJECT_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")


def new_object_id() -> str:
    """Generate a 24-character hex document id."""
    return secrets.token_hex(12)


def validate_object_id(value: Any) -> bool:
    """Check whether a value is a well-formed document id."""
    if not isinstance(value, str) or not value:
        return False
    return bool(OBJECT_ID_PATTERN.match(value))

