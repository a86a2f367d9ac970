"""Quote browsing and management endpoints."""

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, Request, status

from quotevault.crud.activity import ActivityCRUD
from quotevault.crud.quote import QuoteCRUD
from quotevault.crud.user import UserCRUD
from quotevault.dependencies import (
    get_activity_crud,
    get_current_user,
    get_optional_user,
    get_popular_quotes_service,
    get_quote_crud,
    get_user_crud,
)
from quotevault.models.activity import ActivityType
from quotevault.models.quote import QuoteModel
from quotevault.models.user import UserModel
from quotevault.schemas.quote_schema import CreateQuoteRequest, UpdateQuoteRequest
from quotevault.schemas.responses import ApiResponse
from quotevault.services.popularity.popular_quotes import PopularQuotesService
from quotevault.utils.exceptions import AuthorizationError, NotFoundError, ValidationError
from quotevault.utils.filters import parse_query_filters
from quotevault.utils.logger import get_logger
from quotevault.utils.pagination import paginate_results
from quotevault.utils.text import validate_object_id

logger = get_logger(__name__)
router = APIRouter()

# Query parameters with their own meaning; everything else is a filter
RESERVED_PARAMS = {"page", "limit", "search", "tag"}


def _load_quote(quotes: QuoteCRUD, quote_id: str) -> QuoteModel:
    if not validate_object_id(quote_id):
        raise ValidationError("Invalid ID format", field_errors={"id": "Invalid ID format"})
    quote = quotes.get_by_id(quote_id)
    if quote is None:
        raise NotFoundError("Quote not found")
    return quote


def _lower_tags(value: Any) -> Any:
    # stored tags are always lower case
    if isinstance(value, str):
        return value.lower()
    if isinstance(value, list):
        return [item.lower() if isinstance(item, str) else item for item in value]
    return value


def _check_can_modify(quote: QuoteModel, user: UserModel) -> None:
    if not (user.is_admin or quote.added_by == user.id):
        raise AuthorizationError("You can only modify quotes you added")


def _record_view(
    quote: QuoteModel,
    user: Optional[UserModel],
    quotes: QuoteCRUD,
    activities: ActivityCRUD,
    popular: PopularQuotesService,
) -> QuoteModel:
    viewed = quotes.increment_views(quote.id) or quote
    popular.note_view(viewed)
    if user is not None:
        activities.log_activity(user.id, ActivityType.VIEW, quote.id)
    return viewed


@router.get("", response_model=ApiResponse)
async def list_quotes(
    request: Request,
    page: Optional[str] = Query(None, description="Page number (1-indexed)"),
    limit: Optional[str] = Query(None, description="Items per page"),
    search: Optional[str] = Query(None, description="Text to look for in quote text and author"),
    tag: Optional[str] = Query(None, description="Only quotes with this tag"),
    quotes: QuoteCRUD = Depends(get_quote_crud),
) -> ApiResponse:
    """
    List quotes, newest first.

    Any other query parameter is parsed as a filter, e.g. ``author=Confucius``,
    ``tags=life,work`` or ``views[gte]=10``.
    """
    raw_filters = {
        key: value for key, value in request.query_params.items()
        if key not in RESERVED_PARAMS
    }
    filters = parse_query_filters(raw_filters)
    if "tags" in filters:
        filters["tags"] = _lower_tags(filters["tags"])
    if tag:
        filters["tags"] = tag.strip().lower()

    result = paginate_results(quotes.search(filters, search), page, limit)

    return ApiResponse.success_response(
        data={
            "quotes": [quote.to_dict() for quote in result["items"]],
            "pagination": result["pagination"],
        },
        message="Quotes retrieved successfully",
    )


@router.get("/random", response_model=ApiResponse)
async def get_random_quote(
    tag: Optional[str] = Query(None, description="Only pick among quotes with this tag"),
    current_user: Optional[UserModel] = Depends(get_optional_user),
    quotes: QuoteCRUD = Depends(get_quote_crud),
    activities: ActivityCRUD = Depends(get_activity_crud),
    popular: PopularQuotesService = Depends(get_popular_quotes_service),
) -> ApiResponse:
    """Get a random quote, optionally restricted to a tag."""
    quote = quotes.get_random(tag)
    if quote is None:
        raise NotFoundError("No quotes available" if not tag else f"No quotes found with tag '{tag}'")

    quote = _record_view(quote, current_user, quotes, activities, popular)

    return ApiResponse.success_response(
        data={"quote": quote.to_dict()},
        message="Random quote retrieved successfully",
    )


@router.get("/popular", response_model=ApiResponse)
async def get_popular_quotes(
    limit: int = Query(10, ge=1, le=100),
    popular: PopularQuotesService = Depends(get_popular_quotes_service),
) -> ApiResponse:
    """Get the most viewed quotes."""
    return ApiResponse.success_response(
        data={"quotes": popular.get_popular(limit)},
        message="Popular quotes retrieved successfully",
    )


@router.get("/tag/{tag}", response_model=ApiResponse)
async def get_quotes_by_tag(
    tag: str,
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    quotes: QuoteCRUD = Depends(get_quote_crud),
) -> ApiResponse:
    """Get quotes carrying a tag, newest first."""
    result = paginate_results(quotes.get_by_tag(tag), page, limit)

    return ApiResponse.success_response(
        data={
            "tag": tag.lower(),
            "quotes": [quote.to_dict() for quote in result["items"]],
            "pagination": result["pagination"],
        },
        message="Quotes retrieved successfully",
    )


@router.get("/{quote_id}", response_model=ApiResponse)
async def get_quote(
    quote_id: str,
    current_user: Optional[UserModel] = Depends(get_optional_user),
    quotes: QuoteCRUD = Depends(get_quote_crud),
    activities: ActivityCRUD = Depends(get_activity_crud),
    popular: PopularQuotesService = Depends(get_popular_quotes_service),
) -> ApiResponse:
    """
    Get a quote by ID.

    Counts a view, and logs a ``view`` activity for authenticated users.

    Raises:
        ValidationError: If the ID is malformed
        NotFoundError: If the quote does not exist
    """
    quote = _record_view(_load_quote(quotes, quote_id), current_user, quotes, activities, popular)

    return ApiResponse.success_response(
        data={"quote": quote.to_dict()},
        message="Quote retrieved successfully",
    )


@router.post("", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
async def create_quote(
    request: CreateQuoteRequest,
    current_user: UserModel = Depends(get_current_user),
    quotes: QuoteCRUD = Depends(get_quote_crud),
    popular: PopularQuotesService = Depends(get_popular_quotes_service),
) -> ApiResponse:
    """Add a new quote. The caller becomes its owner."""
    quote = quotes.create(QuoteModel(**request.model_dump(), added_by=current_user.id))
    popular.clear_cache()

    logger.info(f"Quote {quote.id} created by {current_user.id}")

    return ApiResponse.success_response(
        data={"quote": quote.to_dict()},
        message="Quote created successfully",
    )


@router.put("/{quote_id}", response_model=ApiResponse)
async def update_quote(
    quote_id: str,
    request: UpdateQuoteRequest,
    current_user: UserModel = Depends(get_current_user),
    quotes: QuoteCRUD = Depends(get_quote_crud),
    popular: PopularQuotesService = Depends(get_popular_quotes_service),
) -> ApiResponse:
    """
    Edit a quote.

    Raises:
        AuthorizationError: If the caller neither owns the quote nor is an admin
    """
    quote = _load_quote(quotes, quote_id)
    _check_can_modify(quote, current_user)

    # source may be cleared with null, the other fields only replaced
    changes = {
        key: value for key, value in request.model_dump(exclude_unset=True).items()
        if value is not None or key == "source"
    }
    updated = quotes.update(quote_id, changes)
    if updated is None:
        raise NotFoundError("Quote not found")
    popular.clear_cache()

    logger.info(f"Quote {quote_id} updated by {current_user.id}")

    return ApiResponse.success_response(
        data={"quote": updated.to_dict()},
        message="Quote updated successfully",
    )


@router.delete("/{quote_id}", response_model=ApiResponse)
async def delete_quote(
    quote_id: str,
    current_user: UserModel = Depends(get_current_user),
    quotes: QuoteCRUD = Depends(get_quote_crud),
    users: UserCRUD = Depends(get_user_crud),
    popular: PopularQuotesService = Depends(get_popular_quotes_service),
) -> ApiResponse:
    """Delete a quote and drop it from every user's favorites."""
    quote = _load_quote(quotes, quote_id)
    _check_can_modify(quote, current_user)

    quotes.delete(quote_id)
    users.remove_quote_everywhere(quote_id)
    popular.clear_cache()

    logger.info(f"Quote {quote_id} deleted by {current_user.id}")

    return ApiResponse.success_response(
        data={"quote_id": quote_id},
        message="Quote deleted successfully",
    )


@router.post("/{quote_id}/share", response_model=ApiResponse)
async def share_quote(
    quote_id: str,
    current_user: UserModel = Depends(get_current_user),
    quotes: QuoteCRUD = Depends(get_quote_crud),
    activities: ActivityCRUD = Depends(get_activity_crud),
) -> ApiResponse:
    """Record that the user shared a quote."""
    quote = _load_quote(quotes, quote_id)
    activity = activities.log_activity(current_user.id, ActivityType.SHARE, quote.id)

    return ApiResponse.success_response(
        data={"activity": activity.to_dict()},
        message="Share recorded",
    )
