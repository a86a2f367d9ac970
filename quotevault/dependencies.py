"""
Shared application dependencies.
Per-application objects (settings, store, services) live on ``app.state``
and are created by ``create_app``.
"""

import threading
import time
from typing import Dict, List, Optional

from fastapi import Depends, Header, Request

from quotevault.config import Settings
from quotevault.core.security import decode_token
from quotevault.crud.activity import ActivityCRUD
from quotevault.crud.quote import QuoteCRUD
from quotevault.crud.user import UserCRUD
from quotevault.models.user import UserModel
from quotevault.services.local_store import LocalStore
from quotevault.services.popularity.popular_quotes import PopularQuotesService
from quotevault.utils.exceptions import (
    AuthenticationError,
    AuthorizationError,
    RateLimitExceededError,
)
from quotevault.utils.logger import get_logger

logger = get_logger(__name__)


def get_app_settings(request: Request) -> Settings:
    """Get the settings the running application was built with."""
    return request.app.state.settings


def get_store(request: Request) -> LocalStore:
    """Get the application's document store."""
    return request.app.state.store


def get_quote_crud(store: LocalStore = Depends(get_store)) -> QuoteCRUD:
    return QuoteCRUD(store)


def get_user_crud(store: LocalStore = Depends(get_store)) -> UserCRUD:
    return UserCRUD(store)


def get_activity_crud(store: LocalStore = Depends(get_store)) -> ActivityCRUD:
    return ActivityCRUD(store)


def get_popular_quotes_service(request: Request) -> PopularQuotesService:
    return request.app.state.popular_quotes


def _bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        raise AuthenticationError("Authentication required. Please provide a valid token.")
    if not authorization.startswith("Bearer "):
        raise AuthenticationError("Invalid authorization header format")
    return authorization[len("Bearer "):].strip()


async def get_current_user(
    authorization: Optional[str] = Header(None),
    settings: Settings = Depends(get_app_settings),
    users: UserCRUD = Depends(get_user_crud),
) -> UserModel:
    """Get current user from the bearer token."""
    payload = decode_token(_bearer_token(authorization), settings)
    user = users.get_by_id(payload["sub"])
    if user is None:
        logger.warning(f"Token for unknown user {payload['sub']}")
        raise AuthenticationError("Invalid authentication token")
    return user


async def get_optional_user(
    authorization: Optional[str] = Header(None),
    settings: Settings = Depends(get_app_settings),
    users: UserCRUD = Depends(get_user_crud),
) -> Optional[UserModel]:
    """Get current user if authenticated, otherwise None."""
    if not authorization or not authorization.startswith("Bearer "):
        return None
    try:
        return await get_current_user(authorization, settings, users)
    except AuthenticationError:
        return None


async def require_admin(user: UserModel = Depends(get_current_user)) -> UserModel:
    """Only let administrators through."""
    if not user.is_admin:
        raise AuthorizationError("Admin privileges required")
    return user


class RateLimiter:
    """Sliding-window request counter keyed by client.

    Clients with no request inside the window are swept out once per window,
    so the table only holds recently active clients.
    """

    def __init__(self, max_requests: int = 100, window_seconds: int = 60):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.requests: Dict[str, List[float]] = {}
        self._lock = threading.Lock()
        self._last_sweep = time.time()

    def _sweep(self, cutoff: float) -> None:
        stale = [key for key, stamps in self.requests.items() if not stamps or stamps[-1] <= cutoff]
        for key in stale:
            del self.requests[key]

    def is_allowed(self, key: str) -> bool:
        now = time.time()
        cutoff = now - self.window_seconds
        with self._lock:
            if now - self._last_sweep >= self.window_seconds:
                self._sweep(cutoff)
                self._last_sweep = now
            recent = [t for t in self.requests.get(key, []) if t > cutoff]
            allowed = len(recent) < self.max_requests
            if allowed:
                recent.append(now)
            if recent:
                self.requests[key] = recent
            else:
                self.requests.pop(key, None)
        return allowed


def check_rate_limit(request: Request) -> None:
    """Reject the request once its client exceeds the configured rate."""
    limiter: RateLimiter = request.app.state.rate_limiter
    key = request.client.host if request.client else "anonymous"
    if not limiter.is_allowed(key):
        logger.warning(f"Rate limit exceeded for {key}")
        raise RateLimitExceededError()
