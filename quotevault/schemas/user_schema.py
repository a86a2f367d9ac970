"""
User Request Schemas
API schemas for authentication, profile management and favorites.
"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class RegisterRequest(BaseModel):
    """User registration request."""

    email: str = Field(min_length=3, max_length=254, description="Email address")
    password: str = Field(min_length=8, max_length=128, description="Password (minimum 8 characters)")
    display_name: str = Field(default="", max_length=100, description="Display name")

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        """Validate email format."""
        v = v.strip().lower()
        local, _, domain = v.partition("@")
        if not local or "." not in domain or " " in v:
            raise ValueError("Please enter a valid email")
        return v


class LoginRequest(BaseModel):
    """User login request."""

    email: str = Field(description="Email address")
    password: str = Field(description="Password")


class UpdateProfileRequest(BaseModel):
    """Update user profile request. Email and password cannot be changed here."""

    model_config = ConfigDict(extra="ignore")

    display_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    bio: Optional[str] = Field(default=None, max_length=500)
    location: Optional[str] = Field(default=None, max_length=100)
    favorite_categories: Optional[List[str]] = None

    @field_validator("display_name")
    @classmethod
    def validate_display_name(cls, v: Optional[str]) -> Optional[str]:
        """Reject blank display names."""
        if v is not None:
            v = v.strip()
            if not v:
                raise ValueError("Display name must not be empty")
        return v


class AddFavoriteRequest(BaseModel):
    """Add favorite request."""

    quote_id: str = Field(min_length=1, description="ID of the quote to favorite")
