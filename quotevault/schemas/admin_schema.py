"""
Admin Request Schemas
API schemas for user management and bulk quote import.
"""

from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class AdminUpdateUserRequest(BaseModel):
    """Change a user's role or display name."""

    model_config = ConfigDict(extra="ignore")

    role: Optional[Literal["user", "admin"]] = Field(default=None, description="New role")
    display_name: Optional[str] = Field(default=None, min_length=1, max_length=100)

    @field_validator("display_name")
    @classmethod
    def validate_display_name(cls, v: Optional[str]) -> Optional[str]:
        """Reject blank display names."""
        if v is not None:
            v = v.strip()
            if not v:
                raise ValueError("Display name must not be empty")
        return v


class ImportQuotesRequest(BaseModel):
    """Bulk quote import. Each entry is checked on its own."""

    quotes: List[Dict[str, Any]] = Field(min_length=1, description="Quotes to import")
