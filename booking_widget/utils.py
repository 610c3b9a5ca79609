"""Shared utilities used across the booking widget."""

import re
from datetime import date, datetime, time
from typing import Union

TimeLike = Union[str, time]
DateLike = Union[str, date]


def normalize_phone(value: str) -> str:
    """Normalize a phone number by stripping everything except digits and a leading +.

    Examples:
        >>> normalize_phone("0412 345 678")
        '0412345678'
        >>> normalize_phone("+61 (412) 345-678")
        '+61412345678'
    """
    value = value.strip()
    if value.startswith("+"):
        return "+" + re.sub(r"[^\d]", "", value[1:])
    return re.sub(r"[^\d]", "", value)


def parse_time(value: TimeLike) -> time:
    """Parse ``HH:MM`` or ``HH:MM:SS`` into a time.

    Raises:
        ValueError: If the value is not a valid clock time.
    """
    if isinstance(value, time):
        return value
    cleaned = value.strip()
    for fmt in ("%H:%M:%S", "%H:%M"):
        try:
            return datetime.strptime(cleaned, fmt).time()
        except ValueError:
            continue
    raise ValueError(f"Invalid time: {value!r}")


def parse_date(value: DateLike) -> date:
    """Parse a ``YYYY-MM-DD`` string into a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValueError(f"Invalid date: {value!r}") from None


def minutes_since_midnight(value: TimeLike) -> int:
    t = parse_time(value)
    return t.hour * 60 + t.minute


def time_from_minutes(total: int) -> str:
    """Format minutes since midnight as the datastore's ``HH:MM:SS``."""
    return f"{total // 60:02d}:{total % 60:02d}:00"


def to_db_time(value: TimeLike) -> str:
    """Normalize a time to ``HH:MM:SS``."""
    return parse_time(value).strftime("%H:%M:%S")


def to_db_date(value: DateLike) -> str:
    return parse_date(value).isoformat()


def format_time_12h(value: TimeLike) -> str:
    """Format a time for display, e.g. ``14:30:00`` -> ``2:30 PM``."""
    t = parse_time(value)
    period = "PM" if t.hour >= 12 else "AM"
    hour = t.hour % 12 or 12
    return f"{hour}:{t.minute:02d} {period}"


def format_long_date(value: DateLike) -> str:
    """Format a date for display, e.g. ``Saturday, December 20, 2025``."""
    d = parse_date(value)
    return f"{d.strftime('%A')}, {d.strftime('%B')} {d.day}, {d.year}"
