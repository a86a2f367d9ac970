"""Registration and login endpoints."""

from fastapi import APIRouter, Depends, status

from quotevault.config import Settings
from quotevault.core.security import create_access_token, hash_password, verify_password
from quotevault.crud.user import UserCRUD
from quotevault.dependencies import (
    check_rate_limit,
    get_app_settings,
    get_current_user,
    get_user_crud,
)
from quotevault.models.user import UserModel
from quotevault.schemas.responses import ApiResponse
from quotevault.schemas.user_schema import LoginRequest, RegisterRequest
from quotevault.utils.exceptions import AuthenticationError
from quotevault.utils.logger import get_logger
from quotevault.utils.sanitize import sanitize_user

logger = get_logger(__name__)
router = APIRouter()


def _auth_payload(user: UserModel, settings: Settings) -> dict:
    return {
        "user": sanitize_user(user.to_dict()),
        "access_token": create_access_token(user.id, user.role, settings),
        "token_type": "bearer",
        "expires_in": settings.access_token_expire_minutes * 60,
    }


@router.post(
    "/register",
    response_model=ApiResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(check_rate_limit)],
)
def register(
    request: RegisterRequest,
    settings: Settings = Depends(get_app_settings),
    users: UserCRUD = Depends(get_user_crud),
) -> ApiResponse:
    """
    Create an account and return an access token.

    Declared without ``async`` so bcrypt hashing runs in the worker threadpool.

    Raises:
        DuplicateKeyError: If the email is already registered
    """
    user = users.create_user(
        UserModel(
            email=request.email,
            password_hash=hash_password(request.password),
            display_name=request.display_name or request.email.split("@")[0],
        )
    )

    logger.info(f"User registered: {user.id}")

    return ApiResponse.success_response(
        data=_auth_payload(user, settings),
        message="Registration successful",
    )


@router.post("/login", response_model=ApiResponse, dependencies=[Depends(check_rate_limit)])
def login(
    request: LoginRequest,
    settings: Settings = Depends(get_app_settings),
    users: UserCRUD = Depends(get_user_crud),
) -> ApiResponse:
    """
    Exchange email and password for an access token.

    Runs in the worker threadpool, like ``register``.

    Raises:
        AuthenticationError: If the credentials do not match
    """
    user = users.get_by_email(request.email)
    if user is None or not verify_password(request.password, user.password_hash):
        raise AuthenticationError("Invalid email or password")

    user = users.touch_last_login(user.id) or user

    logger.info(f"User logged in: {user.id}")

    return ApiResponse.success_response(
        data=_auth_payload(user, settings),
        message="Login successful",
    )


@router.get("/me", response_model=ApiResponse)
async def get_me(current_user: UserModel = Depends(get_current_user)) -> ApiResponse:
    """Get the authenticated user."""
    return ApiResponse.success_response(
        data={"user": sanitize_user(current_user.to_dict())},
        message="User retrieved successfully",
    )
