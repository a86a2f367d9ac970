"""
Quote Model
Represents a quote stored in the content store.
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any, List
from pydantic import BaseModel, Field, field_validator

from quotevault.utils.text import new_object_id


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class QuoteModel(BaseModel):
    """Quote model representing a quote document."""

    id: str = Field(default_factory=new_object_id, description="Unique quote ID")
    text: str = Field(min_length=1, max_length=500, description="Quote text")
    author: str = Field(min_length=1, max_length=100, description="Author name")
    source: Optional[str] = Field(default=None, max_length=200, description="Where the quote comes from")
    tags: List[str] = Field(default_factory=list, description="Lower-case tags")
    views: int = Field(default=0, ge=0, description="View count")
    added_by: Optional[str] = Field(default=None, description="ID of the user who added the quote")
    created_at: datetime = Field(default_factory=utc_now, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(default=None, description="Last update timestamp")

    @field_validator("text", "author")
    @classmethod
    def strip_text(cls, v: str) -> str:
        """Trim surrounding whitespace and reject blank values."""
        v = v.strip()
        if not v:
            raise ValueError("Value must not be blank")
        return v

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, v: List[str]) -> List[str]:
        """Lower-case and trim tags, dropping blanks and duplicates."""
        tags: List[str] = []
        for tag in v:
            tag = tag.strip().lower()
            if tag and tag not in tags:
                tags.append(tag)
        return tags

    def to_dict(self) -> Dict[str, Any]:
        """Convert quote to a plain record for the store and API responses."""
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "QuoteModel":
        """Create quote from a stored record."""
        return cls(**data)
