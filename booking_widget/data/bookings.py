"""
Customer booking operations.

Creation is check-then-insert against the hosted datastore: the slot is
re-read, its capacity checked, then the booking inserted. Nothing wraps
the two steps, so a concurrent customer can still take the last seat in
between.
"""

import uuid
from typing import Any, Optional

from booking_widget.backend import tables
from booking_widget.config import settings
from booking_widget.errors import (
    DateFullyBookedError,
    NotFoundError,
    SlotFullError,
    SlotUnavailableError,
    describe_error,
)
from booking_widget.logging_context import get_session_logger
from booking_widget.scheduling.rules import counter_after_booking, day_has_capacity
from booking_widget.schemas.availability_schema import DateAvailability, TimeSlot
from booking_widget.schemas.booking_schema import (
    Booking,
    BookingInput,
    BookingStatus,
    BookingWithDetails,
)
from booking_widget.schemas.response_schema import ApiResponse

logger = get_session_logger(__name__)


def generate_reference(prefix: Optional[str] = None) -> str:
    """Human-readable booking reference, e.g. ``BK-3F9A1C``."""
    prefix = prefix or settings.booking.reference_prefix
    return f"{prefix}-{uuid.uuid4().hex[:6].upper()}"


def _load_slot(client: Any, slot_id: str) -> TimeSlot:
    response = (
        client.table(tables.TIME_SLOTS)
        .select("*")
        .eq("id", slot_id)
        .limit(1)
        .execute()
    )
    if not response.data:
        raise NotFoundError("This time slot no longer exists. Please select another.")
    return TimeSlot(**response.data[0])


def _check_day_capacity(client: Any, slot: TimeSlot) -> None:
    date_response = (
        client.table(tables.DATE_AVAILABILITY)
        .select("*")
        .eq("id", slot.date_availability_id)
        .limit(1)
        .execute()
    )
    if not date_response.data:
        return
    availability = DateAvailability(**date_response.data[0])
    if not availability.max_bookings_per_day:
        return

    slots_response = (
        client.table(tables.TIME_SLOTS)
        .select("*")
        .eq("date_availability_id", availability.id)
        .execute()
    )
    day_slots = [TimeSlot(**row) for row in slots_response.data or []]
    if not day_has_capacity(availability, day_slots):
        raise DateFullyBookedError()


def ensure_seat_available(client: Any, slot_id: str) -> TimeSlot:
    """Re-read a slot and raise unless it (and its day) can take one more booking."""
    slot = _load_slot(client, slot_id)
    if not slot.is_available:
        raise SlotUnavailableError()
    if slot.current_bookings >= slot.max_bookings:
        raise SlotFullError()
    _check_day_capacity(client, slot)
    return slot


def adjust_slot_counter(client: Any, slot_id: str, delta: int) -> None:
    """Move a slot's booking counter by ``delta`` seats.

    Skipped when counters are maintained by the datastore itself.
    """
    if not settings.booking.maintain_slot_counters or delta == 0:
        return
    slot = _load_slot(client, slot_id)
    current, available = counter_after_booking(slot, delta)
    (
        client.table(tables.TIME_SLOTS)
        .update({"current_bookings": current, "is_available": available})
        .eq("id", slot_id)
        .execute()
    )
    logger.debug("Slot %s counter -> %d (available=%s)", slot_id, current, available)


def settle_slot_counter(client: Any, slot_id: str, delta: int) -> bool:
    """Apply a counter change after the booking row itself was written.

    The booking write already happened, so a failure here is logged and
    reported as ``False`` instead of raised.
    """
    try:
        adjust_slot_counter(client, slot_id, delta)
        return True
    except Exception as exc:
        logger.warning("Slot %s counter not updated by %+d: %s", slot_id, delta, exc)
        return False


def create_booking(client: Any, booking: BookingInput) -> ApiResponse[Booking]:
    """Create a confirmed booking if its slot (and day) still has room."""
    try:
        slot = ensure_seat_available(client, booking.time_slot_id)
        response = (
            client.table(tables.BOOKINGS)
            .insert(
                {
                    "time_slot_id": booking.time_slot_id,
                    "service_id": booking.service_id,
                    "customer_name": booking.customer_name,
                    "customer_email": booking.customer_email,
                    "customer_phone": booking.customer_phone or None,
                    "notes": booking.notes or None,
                    "status": BookingStatus.CONFIRMED.value,
                    "reference_number": generate_reference(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create booking. No data returned.")
        created = Booking(**response.data[0])

        settle_slot_counter(client, slot.id, +1)
        logger.info(
            "Booking created: %s for %s in slot %s",
            created.reference_number, created.customer_name, slot.id,
        )
        return ApiResponse.ok(created)
    except Exception as exc:
        logger.warning("Booking creation failed: %s", exc)
        return ApiResponse.fail(describe_error(exc, "Failed to create booking"))


def load_booking(client: Any, booking_id: str) -> Booking:
    response = (
        client.table(tables.BOOKINGS)
        .select("*")
        .eq("id", booking_id)
        .limit(1)
        .execute()
    )
    if not response.data:
        raise NotFoundError("Booking not found")
    return Booking(**response.data[0])


def cancel_booking(client: Any, booking_id: str) -> ApiResponse[bool]:
    """Mark a booking cancelled and give its seat back."""
    try:
        existing = load_booking(client, booking_id)
        (
            client.table(tables.BOOKINGS)
            .update({"status": BookingStatus.CANCELLED.value})
            .eq("id", booking_id)
            .execute()
        )
        if existing.holds_seat:
            settle_slot_counter(client, existing.time_slot_id, -1)
        logger.info("Booking cancelled: %s", existing.reference_number)
        return ApiResponse.ok(True)
    except Exception as exc:
        logger.warning("Cancelling booking %s failed: %s", booking_id, exc)
        return ApiResponse.fail(describe_error(exc, "Failed to cancel booking"))


def get_booking_by_reference(client: Any, reference: str) -> ApiResponse[BookingWithDetails]:
    """Look up a booking, with its slot, date and service, by reference."""
    try:
        response = (
            client.table(tables.BOOKINGS)
            .select(tables.BOOKING_WITH_DETAILS)
            .eq("reference_number", reference.strip().upper())
            .limit(1)
            .execute()
        )
        if not response.data:
            raise NotFoundError("Booking not found")
        return ApiResponse.ok(BookingWithDetails(**response.data[0]))
    except Exception as exc:
        logger.warning("Booking lookup for %s failed: %s", reference, exc)
        return ApiResponse.fail(describe_error(exc, "Booking not found"))
