"""
Activity Model
Append-only record of a user acting on a quote (view, favorite, share).
"""

from datetime import datetime
from typing import Dict, Any
from enum import Enum
from pydantic import BaseModel, Field

from quotevault.models.quote import utc_now
from quotevault.utils.text import new_object_id


class ActivityType(str, Enum):
    """Type of user activity on a quote."""
    VIEW = "view"
    FAVORITE = "favorite"
    SHARE = "share"


class ActivityModel(BaseModel):
    """User activity on a quote."""

    id: str = Field(default_factory=new_object_id, description="Unique activity ID")
    user_id: str = Field(description="User ID")
    type: ActivityType = Field(description="Type of activity (view, favorite, share)")
    quote_id: str = Field(description="Quote ID")
    timestamp: datetime = Field(default_factory=utc_now, description="When the activity happened")

    def to_dict(self) -> Dict[str, Any]:
        """Convert activity to a plain record for the store."""
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ActivityModel":
        """Create activity from a stored record."""
        if "type" in data and isinstance(data["type"], str):
            data = {**data, "type": ActivityType(data["type"])}
        return cls(**data)
