"""
Configuration module for the QuoteVault backend.
Loads settings from .env file and environment variables.
"""

import os
from pathlib import Path
from typing import Any, List

# Try to load .env file
_env_path = Path(__file__).parent.parent / ".env"
if _env_path.exists():
    with open(_env_path) as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith("#") and "=" in line:
                key, _, value = line.partition("=")
                key = key.strip()
                value = value.strip().strip('"').strip("'")
                if key and key not in os.environ:
                    os.environ[key] = value


def _as_bool(value: str) -> bool:
    return value.lower() in ("true", "1", "yes")


class Settings:
    """Application configuration loaded from environment variables.

    Keyword overrides win over the environment, so callers can build an
    explicit configuration and hand it to ``create_app``.
    """

    def __init__(self, **overrides: Any):
        self.app_name: str = os.getenv("APP_NAME", "QuoteVault")
        self.api_version: str = os.getenv("API_VERSION", "1.0.0")
        self.debug: bool = _as_bool(os.getenv("DEBUG", "false"))
        self.environment: str = os.getenv("ENVIRONMENT", "development")

        # CORS
        cors_raw = os.getenv("CORS_ORIGINS", "*")
        self.cors_origins: List[str] = [s.strip() for s in cors_raw.split(",")]

        # Security
        self.jwt_secret: str = os.getenv("JWT_SECRET", "quotevault-dev-secret")
        self.jwt_algorithm: str = os.getenv("JWT_ALGORITHM", "HS256")
        self.access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "1440"))

        # Storage (empty = in-memory only)
        self.data_dir: str = os.getenv("DATA_DIR", "")

        # Rate limiting for auth endpoints
        self.rate_limit_max_requests: int = int(os.getenv("RATE_LIMIT_MAX_REQUESTS", "100"))
        self.rate_limit_window_seconds: int = int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "900"))

        # Cache
        self.popular_cache_ttl_seconds: int = int(os.getenv("POPULAR_CACHE_TTL_SECONDS", "300"))

        for key, value in overrides.items():
            if not hasattr(self, key):
                raise AttributeError(f"Unknown setting: {key}")
            setattr(self, key, value)


_settings = None


def get_settings() -> Settings:
    """Get application settings singleton."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
