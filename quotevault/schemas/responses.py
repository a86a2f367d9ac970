"""
Standard API Response Wrappers
Generic response schemas for API endpoints.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class ApiResponse(BaseModel):
    """Standard API response wrapper."""

    success: bool = Field(description="Whether the operation was successful")
    data: Optional[Dict[str, Any]] = Field(default=None, description="Response data")
    message: str = Field(default="", description="Response message")

    @classmethod
    def success_response(cls, data: Dict[str, Any], message: str = "Success") -> "ApiResponse":
        """Create a successful response."""
        return cls(success=True, data=data, message=message)


class ErrorBody(BaseModel):
    """Error details."""

    code: str = Field(description="Error code")
    message: str = Field(description="Error message")
    errors: Optional[List[Dict[str, str]]] = Field(default=None, description="Per-field validation errors")
    field: Optional[str] = Field(default=None, description="Field of a duplicate-key error")
    value: Optional[Any] = Field(default=None, description="Value of a duplicate-key error")


class ErrorResponse(BaseModel):
    """Error response."""

    success: bool = Field(default=False)
    error: ErrorBody
