"""In-memory pagination helper."""

import math
from typing import Any, Dict, Sequence

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


def _positive_int(value: Any, default: int) -> int:
    if isinstance(value, bool):
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def paginate_results(items: Sequence[Any], page: Any = DEFAULT_PAGE, limit: Any = DEFAULT_LIMIT) -> Dict[str, Any]:
    """
    Slice a collection and compute page metadata.

    Args:
        items: Ordered items to paginate
        page: Page number (1-indexed); invalid values fall back to 1
        limit: Items per page; invalid values fall back to 10

    Returns:
        Dictionary with ``items`` for the page and ``pagination`` metadata
    """
    page = _positive_int(page, DEFAULT_PAGE)
    limit = _positive_int(limit, DEFAULT_LIMIT)

    total = len(items)
    pages = math.ceil(total / limit) if total else 0
    start = (page - 1) * limit

    return {
        "items": list(items[start:start + limit]),
        "pagination": {
            "total": total,
            "page": page,
            "limit": limit,
            "pages": pages,
        },
    }
