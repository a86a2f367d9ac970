"""Conversion of raw query-string parameters into typed store filters."""

import re
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

FilterSet = Dict[str, Any]

RANGE_KEY_PATTERN = re.compile(r"^(?P<field>.+)\[(?P<op>gte|lte|gt|lt)\]$")
NUMBER_PATTERN = re.compile(r"^[+-]?\d+(\.\d+)?$")
DATE_PATTERN = re.compile(
    r"^\d{4}-\d{2}-\d{2}"
    r"(T\d{2}:\d{2}(:\d{2}(\.\d+)?)?(Z|[+-]\d{2}:?\d{2})?)?$"
)


def _parse_date(value: str) -> Optional[datetime]:
    """Parse an ISO date or datetime string as UTC, or None if it is not a real date."""
    text = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def convert_value(value: str) -> Any:
    """
    Convert a single query-string value to its most specific type.

    Numbers, booleans and ISO dates are recognised in that order, then
    comma-separated lists. Anything else is returned unchanged.

    Args:
        value: Raw string value

    Returns:
        int, float, bool, datetime, list of str, or the original string
    """
    if NUMBER_PATTERN.match(value):
        if "." in value:
            return float(value)
        return int(value)

    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False

    if DATE_PATTERN.match(value):
        parsed = _parse_date(value)
        if parsed is not None:
            return parsed

    if "," in value:
        return [part.strip() for part in value.split(",")]

    return value


def parse_query_filters(query: Mapping[str, Optional[str]]) -> FilterSet:
    """
    Build a filter set from raw query parameters.

    ``field[op]`` keys (op one of gte, lte, gt, lt) collect into a range dict
    such as ``{"$gte": 10, "$lte": 100}``. Empty values are dropped.

    Args:
        query: Mapping of parameter name to raw string value

    Returns:
        Filter set ready for ``matches_filters`` / the CRUD layer
    """
    result: FilterSet = {}

    for key, raw in query.items():
        if raw is None or raw == "":
            continue

        value = convert_value(str(raw))

        match = RANGE_KEY_PATTERN.match(key)
        if match:
            field = match.group("field")
            existing = result.get(field)
            if not isinstance(existing, dict):
                existing = {}
                result[field] = existing
            existing[f"${match.group('op')}"] = value
            continue

        result[key] = value

    return result
