"""
Week keys.

A week runs Sunday to Saturday and is identified by its Sunday at local
midnight. The same key partitions stored meal plans and grocery items and
selects which plan a shopping list is built from.

Week boundaries use the local calendar with no timezone anchoring, so two
clients in different timezones can disagree about which week an instant
belongs to.
"""

from datetime import date, datetime, timedelta
from typing import Optional, Union

WeekValue = Union[None, str, date, datetime]


def _to_local_datetime(value: WeekValue) -> datetime:
    if value is None:
        return datetime.now()
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone().replace(tzinfo=None)
        return value
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time())
    if isinstance(value, str):
        text = value.strip()
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            raise ValueError(f"Invalid week value: {value!r}") from None
        return _to_local_datetime(parsed)
    raise ValueError(f"Invalid week value: {value!r}")


def week_start(value: WeekValue = None) -> datetime:
    """
    Resolve a date to the Sunday 00:00:00.000 that starts its week.

    Args:
        value: date, datetime, ISO string ("2024-03-14") or None for today

    Returns:
        Naive local datetime at midnight on the week's Sunday

    Raises:
        ValueError: if a string cannot be parsed as an ISO date

    Examples:
        week_start("2024-03-14")  # Thursday
        -> datetime(2024, 3, 10, 0, 0)
    """
    moment = _to_local_datetime(value)
    days_since_sunday = (moment.weekday() + 1) % 7  # Sunday=0 .. Saturday=6
    start = moment - timedelta(days=days_since_sunday)
    return start.replace(hour=0, minute=0, second=0, microsecond=0)


def week_end(week_key: WeekValue) -> datetime:
    """Saturday of the week starting at ``week_key``."""
    return week_start(week_key) + timedelta(days=6)


def shift_week(week_key: WeekValue, weeks: int) -> datetime:
    """Move a week key forward (positive) or back (negative) whole weeks."""
    return week_start(week_key) + timedelta(weeks=weeks)


def week_key_str(week_key: WeekValue) -> str:
    """ISO date of the week's Sunday, as persisted ("2024-03-10")."""
    return week_start(week_key).date().isoformat()


def format_week_range(week_key: WeekValue) -> str:
    """
    Human readable span, e.g. "March 10 - March 16, 2024".

    The year is the year of the Sunday.
    """
    start = week_start(week_key)
    end = start + timedelta(days=6)
    return f"{start.strftime('%B')} {start.day} - {end.strftime('%B')} {end.day}, {start.year}"


def is_current_week(week_key: WeekValue, today: Optional[date] = None) -> bool:
    return week_start(week_key) == week_start(today)


def is_past_week(week_key: WeekValue, today: Optional[date] = None) -> bool:
    return week_start(week_key) < week_start(today)


def is_future_week(week_key: WeekValue, today: Optional[date] = None) -> bool:
    return week_start(week_key) > week_start(today)
