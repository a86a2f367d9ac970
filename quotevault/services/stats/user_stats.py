"""Per-user activity statistics."""

from collections import Counter
from datetime import date, timedelta, timezone
from typing import Dict, Iterable, List, Optional

from quotevault.models.activity import ActivityModel, ActivityType
from quotevault.models.quote import QuoteModel
from quotevault.models.user import UserModel
from quotevault.utils.streak import calculate_streak, utc_today


class UserStatsService:
    """Aggregates a user's activity log into dashboard statistics."""

    TOP_CATEGORIES = 5
    ACTIVITY_WINDOW_DAYS = 7

    def build(
        self,
        user: UserModel,
        activities: List[ActivityModel],
        quotes: Iterable[QuoteModel],
        today: Optional[date] = None,
    ) -> Dict:
        """
        Compute statistics for a user.

        Args:
            user: The user
            activities: The user's activities
            quotes: Quotes referenced by the activities and favorites
            today: Reference day, defaults to the current UTC date

        Returns:
            Dictionary with view/favorite counts, streaks, top categories
            and a per-day activity count for the last week
        """
        today = today or utc_today()
        quotes_by_id = {quote.id: quote for quote in quotes}
        activity_days = [self._utc_day(activity) for activity in activities]
        streak = calculate_streak(activity_days, today=today)

        viewed_ids = [a.quote_id for a in activities if a.type == ActivityType.VIEW]

        tag_counts: Counter = Counter()
        for quote_id in [*viewed_ids, *user.favorites]:
            quote = quotes_by_id.get(quote_id)
            if quote is not None:
                tag_counts.update(quote.tags)

        per_day = Counter(activity_days)
        activity_by_day = {}
        for offset in range(self.ACTIVITY_WINDOW_DAYS - 1, -1, -1):
            day = today - timedelta(days=offset)
            activity_by_day[day.isoformat()] = per_day.get(day, 0)

        return {
            "quotes_viewed": len(viewed_ids),
            "favorite_quotes": len(user.favorites),
            "shares": sum(1 for a in activities if a.type == ActivityType.SHARE),
            "streak_days": streak.current_streak,
            "longest_streak": streak.longest_streak,
            "last_active_date": streak.last_active_date,
            "top_categories": [
                {"category": tag, "count": count}
                for tag, count in tag_counts.most_common(self.TOP_CATEGORIES)
            ],
            "activity_by_day": activity_by_day,
        }

    @staticmethod
    def _utc_day(activity: ActivityModel) -> date:
        stamp = activity.timestamp
        if stamp.tzinfo is not None:
            stamp = stamp.astimezone(timezone.utc)
        return stamp.date()
