"""
Availability resolution rules.

Pure functions over rows already fetched from the hosted datastore. They
decide whether a date can be booked and whether a slot still has a seat;
the data layer calls them right before writing.
"""

from typing import Iterable, Optional

from booking_widget.schemas.availability_schema import DateAvailability, DateStatus, TimeSlot
from booking_widget.utils import minutes_since_midnight


def resolve_date_status(availability: Optional[DateAvailability]) -> DateStatus:
    """Classify a date; an override wins over the open flag."""
    if availability is None:
        return DateStatus.UNCONFIGURED
    if availability.is_override:
        return DateStatus.OVERRIDE
    if availability.is_open:
        return DateStatus.OPEN
    return DateStatus.CLOSED


def is_date_bookable(availability: Optional[DateAvailability]) -> bool:
    return resolve_date_status(availability) == DateStatus.OPEN


def slot_has_capacity(slot: TimeSlot) -> bool:
    return slot.is_available and slot.current_bookings < slot.max_bookings


def remaining_capacity(slot: TimeSlot) -> int:
    if not slot.is_available:
        return 0
    return max(slot.max_bookings - slot.current_bookings, 0)


def bookable_slots(slots: Iterable[TimeSlot]) -> list[TimeSlot]:
    """Slots a customer can still pick, earliest first."""
    return sorted(
        (s for s in slots if slot_has_capacity(s)),
        key=lambda s: minutes_since_midnight(s.start_time),
    )


def day_has_capacity(availability: DateAvailability, slots: Iterable[TimeSlot]) -> bool:
    """Check the optional per-day booking cap against the slot counters."""
    cap = availability.max_bookings_per_day
    if not cap:
        return True
    booked = sum(s.current_bookings for s in slots)
    return booked < cap


def counter_after_booking(slot: TimeSlot, delta: int) -> tuple[int, bool]:
    """Return the slot's next ``(current_bookings, is_available)``.

    Filling the last seat closes the slot. Freeing a seat reopens a slot
    that was closed for being full, but not one an admin switched off.
    """
    current = max(slot.current_bookings + delta, 0)
    if delta > 0:
        return current, slot.is_available and current < slot.max_bookings
    if delta < 0:
        was_full = slot.current_bookings >= slot.max_bookings
        return current, slot.is_available or (was_full and current < slot.max_bookings)
    return current, slot.is_available
