"""User profile, favorites, activity and stats endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from quotevault.crud.activity import ActivityCRUD
from quotevault.crud.quote import QuoteCRUD
from quotevault.crud.user import UserCRUD
from quotevault.dependencies import (
    get_activity_crud,
    get_current_user,
    get_quote_crud,
    get_user_crud,
)
from quotevault.models.activity import ActivityType
from quotevault.models.user import UserModel
from quotevault.schemas.responses import ApiResponse
from quotevault.schemas.user_schema import AddFavoriteRequest, UpdateProfileRequest
from quotevault.services.stats.user_stats import UserStatsService
from quotevault.utils.exceptions import NotFoundError
from quotevault.utils.filters import parse_query_filters
from quotevault.utils.logger import get_logger
from quotevault.utils.pagination import paginate_results
from quotevault.utils.sanitize import sanitize_user

logger = get_logger(__name__)
router = APIRouter()

PAGINATION_PARAMS = {"page", "limit"}


@router.get("/profile", response_model=ApiResponse)
async def get_profile(
    current_user: UserModel = Depends(get_current_user),
) -> ApiResponse:
    """Get the current user's profile."""
    return ApiResponse.success_response(
        data={"user": sanitize_user(current_user.to_dict())},
        message="User profile retrieved successfully",
    )


@router.put("/profile", response_model=ApiResponse)
async def update_profile(
    request: UpdateProfileRequest,
    current_user: UserModel = Depends(get_current_user),
    users: UserCRUD = Depends(get_user_crud),
) -> ApiResponse:
    """
    Update the current user's profile.

    Email and password are not editable here and are ignored if sent.
    """
    user = users.update_profile(current_user.id, request.model_dump(exclude_unset=True))

    logger.info(f"User profile updated: {user.id}")

    return ApiResponse.success_response(
        data={"user": sanitize_user(user.to_dict())},
        message="Profile updated successfully",
    )


@router.get("/favorites", response_model=ApiResponse)
async def get_favorites(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    current_user: UserModel = Depends(get_current_user),
    quotes: QuoteCRUD = Depends(get_quote_crud),
) -> ApiResponse:
    """Get the current user's favorite quotes, paginated."""
    result = paginate_results(quotes.get_many(current_user.favorites), page, limit)

    return ApiResponse.success_response(
        data={
            "quotes": [quote.to_dict() for quote in result["items"]],
            "pagination": result["pagination"],
        },
        message="Favorites retrieved successfully",
    )


@router.post("/favorites", response_model=ApiResponse)
async def add_favorite(
    request: AddFavoriteRequest,
    current_user: UserModel = Depends(get_current_user),
    users: UserCRUD = Depends(get_user_crud),
    quotes: QuoteCRUD = Depends(get_quote_crud),
    activities: ActivityCRUD = Depends(get_activity_crud),
) -> ApiResponse:
    """
    Add a quote to the current user's favorites.

    Raises:
        NotFoundError: If the quote does not exist
        DuplicateKeyError: If the quote is already a favorite
    """
    if not quotes.exists(request.quote_id):
        raise NotFoundError("Quote not found")

    user = users.add_favorite(current_user.id, request.quote_id)
    activities.log_activity(user.id, ActivityType.FAVORITE, request.quote_id)

    return ApiResponse.success_response(
        data={"favorites": user.favorites},
        message="Quote added to favorites",
    )


@router.delete("/favorites/{quote_id}", response_model=ApiResponse)
async def remove_favorite(
    quote_id: str,
    current_user: UserModel = Depends(get_current_user),
    users: UserCRUD = Depends(get_user_crud),
) -> ApiResponse:
    """Remove a quote from the current user's favorites."""
    user = users.remove_favorite(current_user.id, quote_id)

    return ApiResponse.success_response(
        data={"favorites": user.favorites},
        message="Quote removed from favorites",
    )


@router.get("/favorites/check/{quote_id}", response_model=ApiResponse)
async def check_favorite(
    quote_id: str,
    current_user: UserModel = Depends(get_current_user),
    users: UserCRUD = Depends(get_user_crud),
) -> ApiResponse:
    """Tell whether a quote is among the current user's favorites."""
    return ApiResponse.success_response(
        data={"quote_id": quote_id, "is_favorite": users.is_favorite(current_user.id, quote_id)},
        message="Favorite status retrieved",
    )


@router.get("/activity", response_model=ApiResponse)
async def get_activity(
    request: Request,
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    current_user: UserModel = Depends(get_current_user),
    activities: ActivityCRUD = Depends(get_activity_crud),
    quotes: QuoteCRUD = Depends(get_quote_crud),
) -> ApiResponse:
    """
    Get the current user's activity, newest first.

    Other query parameters filter the log, e.g. ``type=view`` or
    ``timestamp[gte]=2024-01-01``.
    """
    filters = parse_query_filters({
        key: value for key, value in request.query_params.items()
        if key not in PAGINATION_PARAMS
    })
    result = paginate_results(activities.list_for_user(current_user.id, filters), page, limit)

    items = []
    for activity in result["items"]:
        quote = quotes.get_by_id(activity.quote_id)
        items.append({**activity.to_dict(), "quote": quote.to_dict() if quote else None})

    return ApiResponse.success_response(
        data={"activities": items, "pagination": result["pagination"]},
        message="Activity retrieved successfully",
    )


@router.get("/stats", response_model=ApiResponse)
async def get_stats(
    current_user: UserModel = Depends(get_current_user),
    activities: ActivityCRUD = Depends(get_activity_crud),
    quotes: QuoteCRUD = Depends(get_quote_crud),
) -> ApiResponse:
    """Get view/favorite counts, streaks and top categories for the current user."""
    user_activities = activities.list_for_user(current_user.id)
    quote_ids = list(dict.fromkeys([a.quote_id for a in user_activities] + current_user.favorites))

    stats = UserStatsService().build(current_user, user_activities, quotes.get_many(quote_ids))

    return ApiResponse.success_response(
        data={"stats": stats},
        message="Stats retrieved successfully",
    )
