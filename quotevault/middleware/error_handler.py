"""Global exception handling: middleware plus FastAPI exception handlers."""

import logging
from typing import Any, Dict

import pydantic
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from quotevault.utils.errors import format_error_response, validation_error_from_pydantic
from quotevault.utils.exceptions import QuoteVaultException
from quotevault.utils.logger import get_logger, log_context

logger = get_logger(__name__)

HTTP_ERROR_CODES = {
    400: "BAD_REQUEST",
    401: "AUTHENTICATION_ERROR",
    403: "AUTHORIZATION_ERROR",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "DUPLICATE_KEY",
    429: "RATE_LIMIT_EXCEEDED",
}


def create_error_response(status_code: int, error_code: str, error: Any) -> JSONResponse:
    """
    Create JSON error response.

    Args:
        status_code: HTTP status code.
        error_code: Error code identifier.
        error: Exception or message, rendered with ``format_error_response``.

    Returns:
        JSON response.
    """
    body: Dict[str, Any] = {"code": error_code, **format_error_response(error)}
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": body},
    )


def quotevault_error_response(exc: QuoteVaultException) -> JSONResponse:
    logger.warning(
        f"QuoteVault exception: {exc.error_code} - {exc.message}",
        extra=log_context(error_code=exc.error_code, details=exc.details),
    )
    return create_error_response(exc.status_code, exc.error_code, exc)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Global error handler middleware that catches and formats all exceptions."""

    async def dispatch(self, request: Request, call_next: Any) -> JSONResponse:
        """
        Handle exceptions and return proper JSON responses.

        Args:
            request: HTTP request.
            call_next: Next middleware/route handler.

        Returns:
            JSON response with error details.
        """
        # Let OPTIONS (CORS preflight) requests pass through untouched
        if request.method == "OPTIONS":
            return await call_next(request)

        try:
            return await call_next(request)
        except QuoteVaultException as e:
            return quotevault_error_response(e)
        except pydantic.ValidationError as e:
            return quotevault_error_response(validation_error_from_pydantic(e.errors()))
        except Exception as e:
            logger.error(
                f"Unhandled exception: {str(e)}",
                extra=log_context(exception_type=type(e).__name__),
                exc_info=True,
            )
            message = str(e) if logger.isEnabledFor(logging.DEBUG) else "An unexpected error occurred"
            return create_error_response(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "INTERNAL_SERVER_ERROR",
                message,
            )


async def quotevault_exception_handler(request: Request, exc: QuoteVaultException) -> JSONResponse:
    return quotevault_error_response(exc)


async def model_validation_handler(request: Request, exc: pydantic.ValidationError) -> JSONResponse:
    """Report data rejected by a model inside a handler as a 400 validation error."""
    return quotevault_error_response(validation_error_from_pydantic(exc.errors()))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies and parameters as 400 validation errors."""
    return quotevault_error_response(validation_error_from_pydantic(exc.errors()))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Wrap framework HTTP errors (unknown route, wrong method) in the error envelope."""
    error_code = HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR")
    response = create_error_response(exc.status_code, error_code, str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


def register_error_handlers(app: FastAPI) -> None:
    """Install the error middleware and exception handlers on an application."""
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_exception_handler(QuoteVaultException, quotevault_exception_handler)
    app.add_exception_handler(pydantic.ValidationError, model_validation_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
