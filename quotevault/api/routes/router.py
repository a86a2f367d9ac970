"""Main API router that aggregates all sub-routers."""

from fastapi import APIRouter

from quotevault.schemas.responses import ErrorResponse

from .admin import router as admin_router
from .auth import router as auth_router
from .quotes import router as quotes_router
from .users import router as users_router

# Error bodies shared by every endpoint, documented in the OpenAPI schema
ERROR_RESPONSES = {
    status_code: {"model": ErrorResponse}
    for status_code in (400, 401, 403, 404, 409, 429)
}

# Main API router
router = APIRouter(prefix="/api", responses=ERROR_RESPONSES)

router.include_router(auth_router, prefix="/auth", tags=["Auth"])
router.include_router(quotes_router, prefix="/quotes", tags=["Quotes"])
router.include_router(users_router, prefix="/users", tags=["Users"])
router.include_router(admin_router, prefix="/admin", tags=["Admin"])

__all__ = ["router"]
