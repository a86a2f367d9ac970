"""
User Model
Represents user data stored in the user store.
"""

from datetime import datetime
from typing import Optional, Dict, Any, List
from pydantic import BaseModel, Field, field_validator

from quotevault.models.quote import utc_now
from quotevault.utils.text import new_object_id

USER_ROLES = ("user", "admin")


class UserModel(BaseModel):
    """User model representing a user document."""

    id: str = Field(default_factory=new_object_id, description="Unique user ID")
    email: str = Field(description="Email address (unique, lower-case)")
    password_hash: str = Field(description="bcrypt password hash")
    display_name: str = Field(default="", max_length=100, description="Display name")
    bio: str = Field(default="", max_length=500, description="Short biography")
    location: str = Field(default="", max_length=100, description="Location")
    role: str = Field(default="user", description="Role (user, admin)")
    favorite_categories: List[str] = Field(default_factory=list, description="Favourite categories, in order")
    favorites: List[str] = Field(default_factory=list, description="Favourite quote IDs")
    last_login: Optional[datetime] = Field(default=None, description="Last login timestamp")
    created_at: datetime = Field(default_factory=utc_now, description="Account creation timestamp")
    updated_at: Optional[datetime] = Field(default=None, description="Last update timestamp")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Lower-case and validate the email address."""
        v = v.strip().lower()
        local, _, domain = v.partition("@")
        if not local or "." not in domain or " " in v:
            raise ValueError("Please enter a valid email")
        return v

    @field_validator("role")
    @classmethod
    def validate_role(cls, v: str) -> str:
        """Validate role."""
        if v not in USER_ROLES:
            raise ValueError("Invalid role")
        return v

    @field_validator("favorites")
    @classmethod
    def unique_favorites(cls, v: List[str]) -> List[str]:
        """Drop duplicate quote references, keeping first occurrence."""
        return list(dict.fromkeys(v))

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def to_dict(self) -> Dict[str, Any]:
        """Convert user to a plain record for the store.

        Pass the result through ``sanitize_user`` before returning it to a client.
        """
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserModel":
        """Create user from a stored record."""
        return cls(**data)
