"""Activity streak calculation over calendar days (UTC)."""

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Iterable, List, Optional, Union

DateLike = Union[str, date, datetime]


@dataclass(frozen=True)
class StreakResult:
    """Current and longest run of consecutive active days."""

    current_streak: int = 0
    longest_streak: int = 0
    last_active_date: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "current_streak": self.current_streak,
            "longest_streak": self.longest_streak,
            "last_active_date": self.last_active_date,
        }


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def _to_date(value: DateLike) -> date:
    if isinstance(value, str) and len(value) > 10:
        text = value[:-1] + "+00:00" if value.endswith("Z") else value
        value = datetime.fromisoformat(text)
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


def calculate_streak(dates: Iterable[DateLike], today: Optional[date] = None) -> StreakResult:
    """
    Derive current and longest streaks from activity dates.

    A streak is a run of calendar days, each exactly one day after the
    previous one. The current streak only counts when the most recent
    activity happened today; once a full day passes without activity it
    drops to zero while the longest streak keeps the historical best.

    Args:
        dates: Activity dates (``YYYY-MM-DD`` or ISO datetime strings, dates or
            datetimes), any order, duplicates allowed. Datetimes with an offset
            are counted on their UTC day.
        today: Reference day, defaults to the current UTC date

    Returns:
        StreakResult for the given dates

    Raises:
        ValueError: If a date string is not ISO formatted
    """
    today = today or utc_today()
    days: List[date] = sorted({_to_date(value) for value in dates}, reverse=True)

    if not days:
        return StreakResult()

    runs: List[int] = []
    run_length = 1
    for newer, older in zip(days, days[1:]):
        if newer - older == timedelta(days=1):
            run_length += 1
        else:
            runs.append(run_length)
            run_length = 1
    runs.append(run_length)

    most_recent = days[0]
    current = runs[0] if most_recent == today else 0

    return StreakResult(
        current_streak=current,
        longest_streak=max(runs),
        last_active_date=most_recent.isoformat(),
    )
