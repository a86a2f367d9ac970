"""
QuoteVault Schemas
Pydantic request/response schemas for API validation and documentation.
"""

from quotevault.schemas.admin_schema import AdminUpdateUserRequest, ImportQuotesRequest
from quotevault.schemas.quote_schema import CreateQuoteRequest, UpdateQuoteRequest
from quotevault.schemas.responses import ApiResponse, ErrorBody, ErrorResponse
from quotevault.schemas.user_schema import (
    AddFavoriteRequest,
    LoginRequest,
    RegisterRequest,
    UpdateProfileRequest,
)

__all__ = [
    "AdminUpdateUserRequest",
    "AddFavoriteRequest",
    "ApiResponse",
    "CreateQuoteRequest",
    "ErrorBody",
    "ErrorResponse",
    "ImportQuotesRequest",
    "LoginRequest",
    "RegisterRequest",
    "UpdateProfileRequest",
    "UpdateQuoteRequest",
]
