"""Month grids for the customer and admin calendars."""

import calendar
from datetime import date, timedelta
from typing import Iterable, Mapping, Optional

from booking_widget.scheduling.rules import is_date_bookable, resolve_date_status
from booking_widget.schemas.availability_schema import CalendarDay, DateAvailability

WEEKDAY_LABELS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


def start_of_month(day: date) -> date:
    return day.replace(day=1)


def end_of_month(day: date) -> date:
    return day.replace(day=calendar.monthrange(day.year, day.month)[1])


def add_months(day: date, months: int) -> date:
    """Shift by whole months, clamping the day to the target month's length."""
    index = day.year * 12 + (day.month - 1) + months
    year, month = divmod(index, 12)
    last = calendar.monthrange(year, month + 1)[1]
    return date(year, month + 1, min(day.day, last))


def month_window(anchor: date, months_ahead: int) -> tuple[date, date]:
    """First day of the anchor month to the last day ``months_ahead`` later."""
    return start_of_month(anchor), end_of_month(add_months(anchor, months_ahead))


def can_go_to_previous_month(current_month: date, today: date) -> bool:
    """The customer calendar never pages back past the current month."""
    return start_of_month(add_months(current_month, -1)) >= start_of_month(today)


def _grid_bounds(month: date) -> tuple[date, date]:
    first = start_of_month(month)
    last = end_of_month(month)
    # date.weekday(): Monday=0 .. Sunday=6; weeks here start on Sunday.
    grid_start = first - timedelta(days=(first.weekday() + 1) % 7)
    grid_end = last + timedelta(days=(5 - last.weekday()) % 7)
    return grid_start, grid_end


def build_month_grid(
    month: date,
    availabilities: Iterable[DateAvailability],
    today: date,
    selected: Optional[str] = None,
    bookings_count: Optional[Mapping[str, int]] = None,
) -> list[CalendarDay]:
    """
    Build whole weeks (Sunday first) covering ``month``.

    Each day carries its configuration status; ``is_available`` is only
    true for bookable days that are not in the past.
    """
    by_date = {a.date: a for a in availabilities}
    counts = bookings_count or {}
    grid_start, grid_end = _grid_bounds(month)

    days: list[CalendarDay] = []
    current = grid_start
    while current <= grid_end:
        key = current.isoformat()
        availability = by_date.get(key)
        is_past = current < today
        days.append(
            CalendarDay(
                date_string=key,
                is_current_month=(current.year, current.month) == (month.year, month.month),
                is_today=current == today,
                is_past=is_past,
                is_selected=selected == key,
                is_available=is_date_bookable(availability) and not is_past,
                status=resolve_date_status(availability),
                availability=availability,
                bookings_count=counts.get(key, 0),
            )
        )
        current += timedelta(days=1)
    return days
