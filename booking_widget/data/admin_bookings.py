"""
Admin booking management.

Status changes keep the slot counters honest: moving a booking into
``cancelled`` frees its seat, moving it back out takes one again if the
slot still has room.
"""

import logging
from collections import Counter
from typing import Any, Iterable, Optional, Union

from booking_widget.backend import tables
from booking_widget.data.bookings import (
    ensure_seat_available,
    load_booking,
    settle_slot_counter,
)
from booking_widget.errors import describe_error
from booking_widget.schemas.booking_schema import (
    SEAT_HOLDING_STATUSES,
    Booking,
    BookingStatus,
    BookingWithDetails,
)
from booking_widget.schemas.response_schema import ApiResponse

logger = logging.getLogger(__name__)

ALL_STATUSES = "all"


def fetch_bookings(
    client: Any,
    date: Optional[str] = None,
    status: Optional[Union[BookingStatus, str]] = None,
    service_id: Optional[str] = None,
) -> ApiResponse[list[BookingWithDetails]]:
    """Bookings with their slot, date and service, newest first.

    The date filter runs here rather than in the query because the date
    lives on a nested relation.
    """
    try:
        query = (
            client.table(tables.BOOKINGS)
            .select(tables.BOOKING_WITH_DETAILS)
            .order("created_at", desc=True)
        )
        if status:
            query = query.eq("status", BookingStatus(status).value)
        if service_id:
            query = query.eq("service_id", service_id)
        response = query.execute()

        bookings = [BookingWithDetails(**row) for row in response.data or []]
        if date:
            bookings = [b for b in bookings if b.date == date]
        return ApiResponse.ok(bookings)
    except Exception as exc:
        logger.warning("Fetching bookings failed: %s", exc)
        return ApiResponse.fail(describe_error(exc, "Failed to fetch bookings"))


def update_booking_status(
    client: Any, booking_id: str, status: Union[BookingStatus, str]
) -> ApiResponse[bool]:
    """Change a booking's status, moving its seat in or out of the slot.

    Reinstating a cancelled booking needs a free seat, checked the same
    way a new booking is.
    """
    try:
        new_status = BookingStatus(status)
        existing = load_booking(client, booking_id)
        held = existing.holds_seat
        holds = new_status in SEAT_HOLDING_STATUSES
        if holds and not held:
            ensure_seat_available(client, existing.time_slot_id)
        (
            client.table(tables.BOOKINGS)
            .update({"status": new_status.value})
            .eq("id", booking_id)
            .execute()
        )
        if held != holds:
            settle_slot_counter(client, existing.time_slot_id, +1 if holds else -1)
        logger.info(
            "Booking %s: %s -> %s", existing.reference_number, existing.status.value, new_status.value
        )
        return ApiResponse.ok(True)
    except Exception as exc:
        logger.warning("Updating booking %s failed: %s", booking_id, exc)
        return ApiResponse.fail(describe_error(exc, "Failed to update booking"))


def delete_booking(client: Any, booking_id: str) -> ApiResponse[bool]:
    try:
        existing = load_booking(client, booking_id)
        client.table(tables.BOOKINGS).delete().eq("id", booking_id).execute()
        if existing.holds_seat:
            settle_slot_counter(client, existing.time_slot_id, -1)
        return ApiResponse.ok(True)
    except Exception as exc:
        logger.warning("Deleting booking %s failed: %s", booking_id, exc)
        return ApiResponse.fail(describe_error(exc, "Failed to delete booking"))


def filter_bookings(
    bookings: Iterable[Booking], query: str = "", status: str = ALL_STATUSES
) -> list[Booking]:
    """Search by name, email or reference and narrow by status."""
    needle = query.strip().lower()
    results = []
    for booking in bookings:
        matches_search = (
            not needle
            or needle in booking.customer_name.lower()
            or needle in booking.customer_email.lower()
            or needle in (booking.reference_number or "").lower()
        )
        matches_status = status == ALL_STATUSES or booking.status.value == status
        if matches_search and matches_status:
            results.append(booking)
    return results


def summarize_bookings(bookings: Iterable[Booking]) -> dict[str, int]:
    """Count bookings per status, plus a ``total``."""
    counts = Counter(b.status.value for b in bookings)
    summary = {s.value: counts.get(s.value, 0) for s in BookingStatus}
    summary["total"] = sum(counts.values())
    return summary
