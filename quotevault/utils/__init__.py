"""Pure helpers shared by the route and data-access layers."""

from quotevault.utils.errors import format_error_response, validation_error_from_pydantic
from quotevault.utils.filters import FilterSet, parse_query_filters
from quotevault.utils.pagination import paginate_results
from quotevault.utils.sanitize import sanitize_user
from quotevault.utils.streak import StreakResult, calculate_streak
from quotevault.utils.text import new_object_id, validate_object_id

__all__ = [
    "FilterSet",
    "StreakResult",
    "calculate_streak",
    "format_error_response",
    "new_object_id",
    "paginate_results",
    "parse_query_filters",
    "sanitize_user",
    "validate_object_id",
    "validation_error_from_pydantic",
]
