"""FastAPI application entry point for QuoteVault."""

from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from quotevault.api.routes import router as api_router
from quotevault.config import Settings, get_settings
from quotevault.crud.quote import QuoteCRUD
from quotevault.dependencies import RateLimiter
from quotevault.middleware.error_handler import register_error_handlers
from quotevault.middleware.request_logging import RequestLoggingMiddleware
from quotevault.services.local_store import LocalStore
from quotevault.services.popularity.popular_quotes import PopularQuotesService
from quotevault.utils.logger import configure_logging, get_logger

logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None, store: Optional[LocalStore] = None) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Configuration, defaults to ``get_settings()``
        store: Document store, defaults to one built from ``settings.data_dir``

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()
    configure_logging(debug=settings.debug, service=settings.app_name, environment=settings.environment)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage application startup and shutdown events."""
        logger.info(f"Starting {settings.app_name} API v{settings.api_version}")
        logger.info(f"Running in {settings.environment} mode")
        if app.state.store.persistent:
            logger.info(f"Persisting data to {settings.data_dir}")
        else:
            logger.info("Using in-memory store")
        yield
        logger.info(f"Shutting down {settings.app_name} API")

    app = FastAPI(
        title=settings.app_name,
        description="Motivational quotes, favorites and activity streaks API",
        version=settings.api_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.store = store if store is not None else LocalStore(settings.data_dir or None)
    app.state.rate_limiter = RateLimiter(
        max_requests=settings.rate_limit_max_requests,
        window_seconds=settings.rate_limit_window_seconds,
    )
    app.state.popular_quotes = PopularQuotesService(
        QuoteCRUD(app.state.store),
        ttl_seconds=settings.popular_cache_ttl_seconds,
    )

    # ── Middleware (order matters: last-added = outermost = first to run) ──

    # 1. Error handler added first → innermost layer
    register_error_handlers(app)

    # 2. Request ids and access log wrap the error handler, so 500s are logged too
    app.add_middleware(RequestLoggingMiddleware)

    # 3. CORS added last → outermost layer (processes OPTIONS preflight first)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)

    @app.get(
        "/health",
        status_code=status.HTTP_200_OK,
        tags=["Health"],
        summary="Health check endpoint",
    )
    async def health_check() -> JSONResponse:
        """Health check endpoint for monitoring."""
        return JSONResponse(
            status_code=status.HTTP_200_OK,
            content={
                "success": True,
                "status": "healthy",
                "service": settings.app_name,
                "version": settings.api_version,
            },
        )

    @app.get(
        "/",
        status_code=status.HTTP_200_OK,
        tags=["Root"],
        summary="Welcome endpoint",
    )
    async def root() -> JSONResponse:
        """Root endpoint with welcome message."""
        return JSONResponse(
            status_code=status.HTTP_200_OK,
            content={
                "success": True,
                "message": f"Welcome to {settings.app_name}",
                "version": settings.api_version,
                "docs_url": "/docs",
            },
        )

    return app


app = create_app()


if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        "quotevault.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info",
    )
