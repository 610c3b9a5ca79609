"""
Customer-side availability reads.

Open dates for the calendar, and for one selected date its bookable slots
and the active services offered that day.
"""

from datetime import date
from typing import Any, Optional

from booking_widget.backend import tables
from booking_widget.config import settings
from booking_widget.errors import describe_error
from booking_widget.logging_context import get_session_logger
from booking_widget.scheduling.month_grid import month_window
from booking_widget.scheduling.rules import bookable_slots, is_date_bookable
from booking_widget.schemas.availability_schema import (
    AvailabilityData,
    DateAvailability,
    TimeSlot,
)
from booking_widget.schemas.catalog_schema import Service
from booking_widget.schemas.response_schema import ApiResponse
from booking_widget.utils import DateLike, to_db_date

logger = get_session_logger(__name__)


def fetch_available_dates(
    client: Any, start: DateLike, end: DateLike
) -> ApiResponse[list[DateAvailability]]:
    """Open, non-overridden dates between ``start`` and ``end`` inclusive."""
    try:
        response = (
            client.table(tables.DATE_AVAILABILITY)
            .select("*")
            .gte("date", to_db_date(start))
            .lte("date", to_db_date(end))
            .eq("is_open", True)
            .order("date")
            .execute()
        )
        dates = [DateAvailability(**row) for row in response.data or []]
        return ApiResponse.ok([d for d in dates if is_date_bookable(d)])
    except Exception as exc:
        logger.warning("Fetching available dates failed: %s", exc)
        return ApiResponse.fail(describe_error(exc, "Failed to fetch dates"))


def fetch_month_availability(
    client: Any, anchor: date, months_ahead: Optional[int] = None
) -> ApiResponse[list[DateAvailability]]:
    """Open dates from the anchor's month through ``months_ahead`` more months."""
    if months_ahead is None:
        months_ahead = settings.booking.calendar_months_ahead
    start, end = month_window(anchor, months_ahead)
    return fetch_available_dates(client, start, end)


def _fetch_offered_services(client: Any, date_availability_id: str) -> list[Service]:
    links = (
        client.table(tables.SERVICE_DATE_AVAILABILITY)
        .select("service_id")
        .eq("date_availability_id", date_availability_id)
        .eq("is_available", True)
        .execute()
    )
    service_ids = [row["service_id"] for row in links.data or []]
    if not service_ids:
        return []

    response = (
        client.table(tables.SERVICES)
        .select("*")
        .in_("id", service_ids)
        .eq("active", True)
        .order("name")
        .execute()
    )
    return [Service(**row) for row in response.data or []]


def fetch_date_details(client: Any, day: DateLike) -> ApiResponse[AvailabilityData]:
    """
    Load a date's bookable slots and offered services.

    A date with no row, a closed date and an overridden date all succeed
    with ``data=None``: there is simply nothing to book.
    """
    try:
        response = (
            client.table(tables.DATE_AVAILABILITY)
            .select("*")
            .eq("date", to_db_date(day))
            .eq("is_open", True)
            .limit(1)
            .execute()
        )
        if not response.data:
            logger.debug("No open availability for %s", day)
            return ApiResponse.ok(None)

        availability = DateAvailability(**response.data[0])
        if not is_date_bookable(availability):
            return ApiResponse.ok(None)

        slots_response = (
            client.table(tables.TIME_SLOTS)
            .select("*")
            .eq("date_availability_id", availability.id)
            .eq("is_available", True)
            .order("start_time")
            .execute()
        )
        slots = bookable_slots(TimeSlot(**row) for row in slots_response.data or [])
        services = _fetch_offered_services(client, availability.id)

        return ApiResponse.ok(
            AvailabilityData(date=availability, time_slots=slots, services=services)
        )
    except Exception as exc:
        logger.warning("Fetching details for %s failed: %s", day, exc)
        return ApiResponse.fail(describe_error(exc, "Failed to fetch date details"))


def fetch_active_services(client: Any) -> ApiResponse[list[Service]]:
    try:
        response = (
            client.table(tables.SERVICES)
            .select("*")
            .eq("active", True)
            .order("name")
            .execute()
        )
        return ApiResponse.ok([Service(**row) for row in response.data or []])
    except Exception as exc:
        logger.warning("Fetching services failed: %s", exc)
        return ApiResponse.fail(describe_error(exc, "Failed to fetch services"))
