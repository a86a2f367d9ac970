"""
Quote Request Schemas
API schemas for creating and editing quotes.
"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class CreateQuoteRequest(BaseModel):
    """Create quote request."""

    text: str = Field(min_length=1, max_length=500, description="Quote text")
    author: str = Field(min_length=1, max_length=100, description="Author name")
    source: Optional[str] = Field(default=None, max_length=200, description="Source (book, speech, ...)")
    tags: List[str] = Field(default_factory=list, description="Tags")


class UpdateQuoteRequest(BaseModel):
    """Update quote request. Omitted fields are left unchanged."""

    model_config = ConfigDict(extra="ignore")

    text: Optional[str] = Field(default=None, min_length=1, max_length=500)
    author: Optional[str] = Field(default=None, min_length=1, max_length=100)
    source: Optional[str] = Field(default=None, max_length=200)
    tags: Optional[List[str]] = None
