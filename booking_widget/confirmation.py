"""Confirmation screen helpers: calendar link and messenger text."""

import logging
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import urlencode
from zoneinfo import ZoneInfo

from booking_widget.config import settings
from booking_widget.schemas.availability_schema import TimeSlot
from booking_widget.schemas.booking_schema import Booking
from booking_widget.schemas.catalog_schema import Service
from booking_widget.utils import (
    DateLike,
    TimeLike,
    format_long_date,
    format_time_12h,
    parse_date,
    parse_time,
)

logger = logging.getLogger(__name__)

GOOGLE_CALENDAR_URL = "https://calendar.google.com/calendar/render"
_GOOGLE_DATE_FORMAT = "%Y%m%dT%H%M%SZ"


def _to_utc(day: DateLike, clock: TimeLike, tz_name: str) -> datetime:
    local = datetime.combine(parse_date(day), parse_time(clock), tzinfo=ZoneInfo(tz_name))
    return local.astimezone(timezone.utc)


def google_calendar_url(
    booking: Booking,
    service: Service,
    slot: TimeSlot,
    day: DateLike,
    tz_name: Optional[str] = None,
) -> str:
    """Google Calendar "add event" link for a booking.

    Slot times are wall-clock times at the business, converted to UTC.
    """
    tz_name = tz_name or settings.business.timezone
    start = _to_utc(day, slot.start_time, tz_name)
    end = _to_utc(day, slot.end_time, tz_name)
    params = {
        "action": "TEMPLATE",
        "text": service.name,
        "dates": f"{start.strftime(_GOOGLE_DATE_FORMAT)}/{end.strftime(_GOOGLE_DATE_FORMAT)}",
        "details": f"Booking Reference: {booking.reference_number}",
    }
    return f"{GOOGLE_CALENDAR_URL}?{urlencode(params)}"


def format_time_range(slot: TimeSlot) -> str:
    return f"{format_time_12h(slot.start_time)} - {format_time_12h(slot.end_time)}"


def messenger_message(booking: Booking, service: Service, slot: TimeSlot, day: DateLike) -> str:
    """Text the customer pastes into the business's messenger chat."""
    return (
        "Hello, I would like to confirm my booking details:\n"
        "\n"
        f"Reference: {booking.reference_number}\n"
        f"Name: {booking.customer_name}\n"
        f"Service: {service.name}\n"
        f"Date: {format_long_date(day)}\n"
        f"Time: {format_time_range(slot)}\n"
        "\n"
        "Please let me know if there is anything else I need to do."
    )


def messenger_link() -> Optional[str]:
    """Configured messenger chat URL, if any."""
    url = settings.business.messenger_url.strip()
    if not url:
        logger.debug("No messenger URL configured")
        return None
    return url
