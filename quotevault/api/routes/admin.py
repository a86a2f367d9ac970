"""Administration endpoints: user management, site statistics and quote import/export."""

from typing import Optional

import pydantic
from fastapi import APIRouter, Depends, Query, Request

from quotevault.crud.activity import ActivityCRUD
from quotevault.crud.quote import QuoteCRUD
from quotevault.crud.user import UserCRUD
from quotevault.dependencies import (
    get_activity_crud,
    get_popular_quotes_service,
    get_quote_crud,
    get_user_crud,
    require_admin,
)
from quotevault.models.quote import QuoteModel
from quotevault.models.user import UserModel
from quotevault.schemas.admin_schema import AdminUpdateUserRequest, ImportQuotesRequest
from quotevault.schemas.quote_schema import CreateQuoteRequest
from quotevault.schemas.responses import ApiResponse
from quotevault.services.popularity.popular_quotes import PopularQuotesService
from quotevault.services.stats.system_stats import SystemStatsService
from quotevault.utils.errors import format_error_response, validation_error_from_pydantic
from quotevault.utils.exceptions import NotFoundError, ValidationError
from quotevault.utils.filters import parse_query_filters
from quotevault.utils.logger import get_logger, log_context
from quotevault.utils.pagination import paginate_results
from quotevault.utils.sanitize import SENSITIVE_FIELDS, sanitize_user
from quotevault.utils.streak import calculate_streak
from quotevault.utils.text import validate_object_id

logger = get_logger(__name__)
router = APIRouter(dependencies=[Depends(require_admin)])

RESERVED_PARAMS = {"page", "limit", "search"}
RECENT_ACTIVITY_LIMIT = 10


def _query_filters(request: Request) -> dict:
    filters = parse_query_filters({
        key: value for key, value in request.query_params.items()
        if key not in RESERVED_PARAMS
    })
    # never match on credentials
    return {key: value for key, value in filters.items() if key not in SENSITIVE_FIELDS}


def _load_user(users: UserCRUD, user_id: str) -> UserModel:
    if not validate_object_id(user_id):
        raise ValidationError("Invalid ID format", field_errors={"id": "Invalid ID format"})
    user = users.get_by_id(user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


@router.get("/users", response_model=ApiResponse)
async def list_users(
    request: Request,
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    search: Optional[str] = Query(None, description="Text matched against email and display name"),
    users: UserCRUD = Depends(get_user_crud),
) -> ApiResponse:
    """
    List users, newest first.

    Other query parameters filter the list, e.g. ``role=admin`` or
    ``created_at[gte]=2024-01-01``.
    """
    result = paginate_results(users.search(_query_filters(request), search), page, limit)

    return ApiResponse.success_response(
        data={
            "users": [sanitize_user(user.to_dict()) for user in result["items"]],
            "pagination": result["pagination"],
        },
        message="Users retrieved successfully",
    )


@router.get("/users/{user_id}", response_model=ApiResponse)
async def get_user(
    user_id: str,
    users: UserCRUD = Depends(get_user_crud),
    activities: ActivityCRUD = Depends(get_activity_crud),
) -> ApiResponse:
    """Get a user with their latest activity and streak."""
    user = _load_user(users, user_id)
    history = activities.list_for_user(user.id)

    return ApiResponse.success_response(
        data={
            "user": sanitize_user(user.to_dict()),
            "recent_activity": [a.to_dict() for a in history[:RECENT_ACTIVITY_LIMIT]],
            "streak": calculate_streak(activities.activity_dates(user.id)).to_dict(),
        },
        message="User retrieved successfully",
    )


@router.put("/users/{user_id}", response_model=ApiResponse)
async def update_user(
    user_id: str,
    request: AdminUpdateUserRequest,
    admin: UserModel = Depends(require_admin),
    users: UserCRUD = Depends(get_user_crud),
) -> ApiResponse:
    """
    Change a user's role or display name.

    Raises:
        ValidationError: If an admin tries to demote themselves
    """
    user = _load_user(users, user_id)
    changes = {key: value for key, value in request.model_dump(exclude_unset=True).items() if value is not None}

    if user.id == admin.id and changes.get("role", "admin") != "admin":
        raise ValidationError(
            "You cannot downgrade your own role",
            field_errors={"role": "You cannot downgrade your own role"},
        )

    updated = users.update(user.id, changes) if changes else user
    if updated is None:
        raise NotFoundError("User not found")

    logger.info(
        f"User {user.id} updated by admin",
        extra=log_context(user_id=user.id, admin_id=admin.id, fields=sorted(changes)),
    )

    return ApiResponse.success_response(
        data={"user": sanitize_user(updated.to_dict())},
        message="User updated successfully",
    )


@router.delete("/users/{user_id}", response_model=ApiResponse)
async def delete_user(
    user_id: str,
    admin: UserModel = Depends(require_admin),
    users: UserCRUD = Depends(get_user_crud),
    activities: ActivityCRUD = Depends(get_activity_crud),
) -> ApiResponse:
    """Delete a user and their activity log. Quotes they added are kept."""
    if user_id == admin.id:
        raise ValidationError(
            "You cannot delete your own account",
            field_errors={"id": "You cannot delete your own account"},
        )
    user = _load_user(users, user_id)

    users.delete(user.id)
    removed = activities.delete_for_user(user.id)

    logger.info(
        f"User {user.id} deleted by admin",
        extra=log_context(user_id=user.id, admin_id=admin.id, activities_removed=removed),
    )

    return ApiResponse.success_response(
        data={"user_id": user.id, "activities_removed": removed},
        message="User deleted successfully",
    )


@router.get("/stats", response_model=ApiResponse)
async def get_system_stats(
    users: UserCRUD = Depends(get_user_crud),
    quotes: QuoteCRUD = Depends(get_quote_crud),
    activities: ActivityCRUD = Depends(get_activity_crud),
    popular: PopularQuotesService = Depends(get_popular_quotes_service),
) -> ApiResponse:
    """Get site-wide user, login and view counts plus the most viewed quotes."""
    stats = SystemStatsService(users, quotes, activities).build()
    stats["popular_cache"] = popular.get_cache_stats()

    return ApiResponse.success_response(
        data={"stats": stats},
        message="System stats retrieved successfully",
    )


@router.get("/activity", response_model=ApiResponse)
async def list_activity(
    request: Request,
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    users: UserCRUD = Depends(get_user_crud),
    activities: ActivityCRUD = Depends(get_activity_crud),
) -> ApiResponse:
    """
    List activity of all users, newest first.

    Other query parameters filter the log, e.g. ``user_id=...``, ``type=view``
    or ``timestamp[gte]=2024-01-01``.
    """
    result = paginate_results(activities.recent(_query_filters(request)), page, limit)

    owners = {}
    items = []
    for activity in result["items"]:
        if activity.user_id not in owners:
            owners[activity.user_id] = users.get_by_id(activity.user_id)
        owner = owners[activity.user_id]
        summary = {"id": owner.id, "email": owner.email, "display_name": owner.display_name} if owner else None
        items.append({**activity.to_dict(), "user": summary})

    return ApiResponse.success_response(
        data={"activities": items, "pagination": result["pagination"]},
        message="Activity retrieved successfully",
    )


@router.post("/quotes/import", response_model=ApiResponse)
async def import_quotes(
    request: ImportQuotesRequest,
    admin: UserModel = Depends(require_admin),
    quotes: QuoteCRUD = Depends(get_quote_crud),
    popular: PopularQuotesService = Depends(get_popular_quotes_service),
) -> ApiResponse:
    """
    Import quotes in bulk.

    Invalid entries are skipped and reported by index; the rest are stored
    with the importing admin as owner.
    """
    imported = 0
    errors = []
    for index, entry in enumerate(request.quotes):
        try:
            fields = CreateQuoteRequest.model_validate(entry)
        except pydantic.ValidationError as e:
            errors.append({"index": index, **format_error_response(validation_error_from_pydantic(e.errors()))})
            continue
        quotes.create(QuoteModel(**fields.model_dump(), added_by=admin.id))
        imported += 1

    if imported:
        popular.clear_cache()

    logger.info(
        f"Imported {imported}/{len(request.quotes)} quotes",
        extra=log_context(admin_id=admin.id, imported=imported, rejected=len(errors)),
    )

    return ApiResponse.success_response(
        data={"results": {"total": len(request.quotes), "imported": imported, "errors": errors}},
        message=f"Imported {imported} of {len(request.quotes)} quotes",
    )


@router.get("/quotes/export", response_model=ApiResponse)
async def export_quotes(
    quotes: QuoteCRUD = Depends(get_quote_crud),
) -> ApiResponse:
    """Export every quote, newest first."""
    exported = quotes.find(order_by="created_at", descending=True)

    return ApiResponse.success_response(
        data={"quotes": [quote.to_dict() for quote in exported], "total": len(exported)},
        message="Quotes exported successfully",
    )
