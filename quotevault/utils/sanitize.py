"""Removal of sensitive fields from user records."""

from typing import Any, Dict, Mapping

SENSITIVE_FIELDS = frozenset({"password", "password_hash", "__v"})


def sanitize_user(record: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Return a copy of a user record that is safe to send to clients.

    Args:
        record: Plain user record (see ``UserModel.to_dict``)

    Returns:
        New dictionary without password or versioning fields
    """
    return {key: value for key, value in record.items() if key not in SENSITIVE_FIELDS}
