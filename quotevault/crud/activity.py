"""
Activity CRUD Operations
Append-only log of user activity (views, favorites, shares).
"""

from datetime import timezone
from typing import List, Optional

from quotevault.crud.base import BaseCRUD
from quotevault.models.activity import ActivityModel, ActivityType
from quotevault.utils.filters import FilterSet


class ActivityCRUD(BaseCRUD[ActivityModel]):
    """CRUD operations for activity documents. Activities are never updated."""

    collection_name = "activities"
    model = ActivityModel

    def log_activity(self, user_id: str, activity_type: ActivityType, quote_id: str) -> ActivityModel:
        """
        Append an activity record.

        Args:
            user_id: User ID
            activity_type: Type of activity
            quote_id: Quote the user acted on

        Returns:
            Stored activity
        """
        return self.create(ActivityModel(user_id=user_id, type=activity_type, quote_id=quote_id))

    def list_for_user(self, user_id: str, filters: Optional[FilterSet] = None) -> List[ActivityModel]:
        """
        Get a user's activities, newest first.

        Args:
            user_id: User ID
            filters: Additional filters (e.g. ``type``, ``timestamp`` ranges)

        Returns:
            Activities
        """
        combined = {**(filters or {}), "user_id": user_id}
        return self.find(combined, order_by="timestamp", descending=True)

    def recent(self, filters: Optional[FilterSet] = None) -> List[ActivityModel]:
        """Get activities of all users matching filters, newest first."""
        return self.find(filters, order_by="timestamp", descending=True)

    def activity_dates(self, user_id: str) -> List[str]:
        """Get the UTC calendar dates (``YYYY-MM-DD``) of a user's activities."""
        dates = []
        for activity in self.list_for_user(user_id):
            stamp = activity.timestamp
            if stamp.tzinfo is not None:
                stamp = stamp.astimezone(timezone.utc)
            dates.append(stamp.date().isoformat())
        return dates

    def delete_for_user(self, user_id: str) -> int:
        """Bulk-delete a user's activities. Returns the number removed."""
        removed = 0
        for activity in self.list_for_user(user_id):
            if self.delete(activity.id):
                removed += 1
        return removed
