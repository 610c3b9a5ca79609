"""Fixed-width time slot generation inside a date's working hours."""

import logging

from booking_widget.schemas.availability_schema import GeneratedSlot
from booking_widget.utils import TimeLike, minutes_since_midnight, time_from_minutes

logger = logging.getLogger(__name__)


def generate_slot_ranges(
    start_time: TimeLike,
    end_time: TimeLike,
    interval_minutes: int,
    max_bookings: int = 1,
) -> list[GeneratedSlot]:
    """
    Partition ``[start_time, end_time)`` into back-to-back slots.

    A trailing remainder shorter than one interval is dropped, so
    09:00-10:30 at 60 minutes yields only 09:00-10:00. An empty or
    inverted window yields no slots.

    Raises:
        ValueError: If the interval or capacity is not positive, or a time
            cannot be parsed.
    """
    if interval_minutes <= 0:
        raise ValueError(f"Slot interval must be positive, got {interval_minutes}")
    if max_bookings < 1:
        raise ValueError(f"Max bookings per slot must be >= 1, got {max_bookings}")

    current = minutes_since_midnight(start_time)
    end = minutes_since_midnight(end_time)

    slots: list[GeneratedSlot] = []
    while current + interval_minutes <= end:
        slot_end = current + interval_minutes
        slots.append(
            GeneratedSlot(
                start_time=time_from_minutes(current),
                end_time=time_from_minutes(slot_end),
                max_bookings=max_bookings,
            )
        )
        current = slot_end

    logger.debug(
        "Generated %d slots for %s-%s every %d min",
        len(slots), start_time, end_time, interval_minutes,
    )
    return slots
