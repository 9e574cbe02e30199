"""UTC clock and calendar helpers.

Every day and hour bucket in the service is computed from the UTC calendar,
so results do not depend on the host timezone.
"""

from datetime import date, datetime, time, timezone
from typing import Any

from app.core.exceptions import MalformedRecordError

DAY_ABBREVIATIONS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]


class Clock:
    """Source of the current time. Subclass to pin time in tests."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def today(self) -> date:
        return self.now().date()


def to_utc(value: Any) -> datetime:
    """Normalize a stored timestamp to an aware UTC datetime.

    Naive datetimes are taken to be UTC already. Raises MalformedRecordError
    for anything that is not a datetime, date or ISO-8601 string.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)

    if isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return to_utc(datetime.fromisoformat(text))
        except ValueError as e:
            raise MalformedRecordError(value) from e

    raise MalformedRecordError(value)


def utc_date(value: Any) -> date:
    """UTC calendar date of a timestamp."""
    return to_utc(value).date()


def day_of_week(day: date) -> int:
    """Day of week with 0 = Sunday and 6 = Saturday."""
    return (day.weekday() + 1) % 7


def format_hour(hour: int) -> str:
    return f"{hour:02d}:00"
