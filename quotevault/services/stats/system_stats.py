"""Site-wide statistics for the admin dashboard."""

from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional

from quotevault.crud.activity import ActivityCRUD
from quotevault.crud.quote import QuoteCRUD
from quotevault.crud.user import UserCRUD
from quotevault.models.activity import ActivityType


class SystemStatsService:
    """Counts users, logins, registrations and served quotes over rolling windows."""

    WINDOWS = {"daily": 1, "weekly": 7, "monthly": 30}
    TOP_QUOTES = 5

    def __init__(self, users: UserCRUD, quotes: QuoteCRUD, activities: ActivityCRUD):
        self._users = users
        self._quotes = quotes
        self._activities = activities

    def build(self, now: Optional[datetime] = None) -> Dict:
        """
        Compute the dashboard statistics.

        Args:
            now: Reference time, defaults to the current UTC time

        Returns:
            Totals, per-window counts and the most viewed quotes
        """
        now = now or datetime.now(timezone.utc)

        return {
            "total_users": self._users.count(),
            "active_users": self._per_window(
                now, lambda since: self._users.count({"last_login": {"$gte": since}})
            ),
            "registrations": self._per_window(
                now, lambda since: self._users.count({"created_at": {"$gte": since}})
            ),
            "total_quotes": self._quotes.count(),
            "quotes_served": self._per_window(
                now,
                lambda since: self._activities.count(
                    {"type": ActivityType.VIEW.value, "timestamp": {"$gte": since}}
                ),
            ),
            "top_quotes": [
                {"id": quote.id, "text": quote.text, "author": quote.author, "views": quote.views}
                for quote in self._quotes.most_viewed(self.TOP_QUOTES)
            ],
        }

    def _per_window(self, now: datetime, count_since: Callable[[datetime], int]) -> Dict[str, int]:
        return {
            name: count_since(now - timedelta(days=days))
            for name, days in self.WINDOWS.items()
        }
