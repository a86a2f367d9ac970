"""Custom exceptions for the QuoteVault backend."""

from typing import Any, Dict, Optional


class QuoteVaultException(Exception):
    """Base exception for QuoteVault application."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Initialize QuoteVaultException.

        Args:
            message: Human-readable error message.
            status_code: HTTP status code.
            error_code: Machine-readable error code.
            details: Additional error details.
        """
        self.message = message
        self.status_code = status_code
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(QuoteVaultException):
    """Raised when client-supplied data is invalid.

    ``field_errors`` maps each offending field to its message.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field_errors: Optional[Dict[str, str]] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize ValidationError."""
        self.field_errors = dict(field_errors or {})
        super().__init__(
            message=message,
            status_code=400,
            error_code="VALIDATION_ERROR",
            details=details,
        )


class DuplicateKeyError(QuoteVaultException):
    """Raised when a uniqueness constraint is violated."""

    def __init__(
        self,
        key_value: Dict[str, Any],
        message: str = "A record with this information already exists",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize DuplicateKeyError."""
        self.key_value = dict(key_value)
        super().__init__(
            message=message,
            status_code=409,
            error_code="DUPLICATE_KEY",
            details=details,
        )


class AuthenticationError(QuoteVaultException):
    """Raised when authentication fails."""

    def __init__(
        self,
        message: str = "Authentication failed",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize AuthenticationError."""
        super().__init__(
            message=message,
            status_code=401,
            error_code="AUTHENTICATION_ERROR",
            details=details,
        )


class AuthorizationError(QuoteVaultException):
    """Raised when user is not authorized to access a resource."""

    def __init__(
        self,
        message: str = "Insufficient permissions",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize AuthorizationError."""
        super().__init__(
            message=message,
            status_code=403,
            error_code="AUTHORIZATION_ERROR",
            details=details,
        )


class NotFoundError(QuoteVaultException):
    """Raised when a resource is not found."""

    def __init__(
        self,
        message: str = "Resource not found",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize NotFoundError."""
        super().__init__(
            message=message,
            status_code=404,
            error_code="NOT_FOUND",
            details=details,
        )


class RateLimitExceededError(QuoteVaultException):
    """Raised when a client sends too many requests."""

    def __init__(
        self,
        message: str = "Too many requests, please try again later",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize RateLimitExceededError."""
        super().__init__(
            message=message,
            status_code=429,
            error_code="RATE_LIMIT_EXCEEDED",
            details=details,
        )
