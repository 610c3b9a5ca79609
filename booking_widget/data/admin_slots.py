"""Admin time slot management, including bulk generation from working hours."""

import logging
from typing import Any, Optional

from booking_widget.backend import tables
from booking_widget.config import settings
from booking_widget.data.admin_dates import create_or_update_date
from booking_widget.errors import NoSlotsGeneratedError, describe_error
from booking_widget.scheduling.slots import generate_slot_ranges
from booking_widget.schemas.availability_schema import (
    DateAvailabilityInput,
    TimeSlot,
    TimeSlotInput,
)
from booking_widget.schemas.response_schema import ApiResponse
from booking_widget.utils import TimeLike, to_db_time

logger = logging.getLogger(__name__)

# Columns an admin may edit directly on a slot.
EDITABLE_SLOT_FIELDS = frozenset(
    {"start_time", "end_time", "max_bookings", "current_bookings", "is_available"}
)


def fetch_time_slots(client: Any, date_availability_id: str) -> ApiResponse[list[TimeSlot]]:
    try:
        response = (
            client.table(tables.TIME_SLOTS)
            .select("*")
            .eq("date_availability_id", date_availability_id)
            .order("start_time")
            .execute()
        )
        return ApiResponse.ok([TimeSlot(**row) for row in response.data or []])
    except Exception as exc:
        logger.warning("Fetching time slots failed: %s", exc)
        return ApiResponse.fail(describe_error(exc, "Failed to fetch time slots"))


def create_time_slot(client: Any, data: TimeSlotInput) -> ApiResponse[TimeSlot]:
    try:
        response = (
            client.table(tables.TIME_SLOTS)
            .insert(
                {
                    "date_availability_id": data.date_availability_id,
                    "start_time": to_db_time(data.start_time),
                    "end_time": to_db_time(data.end_time),
                    "max_bookings": data.max_bookings or 1,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create time slot. No data returned.")
        return ApiResponse.ok(TimeSlot(**response.data[0]))
    except Exception as exc:
        logger.warning("Creating time slot failed: %s", exc)
        return ApiResponse.fail(describe_error(exc, "Failed to create time slot"))


def update_time_slot(client: Any, slot_id: str, updates: dict[str, Any]) -> ApiResponse[bool]:
    unknown = set(updates) - EDITABLE_SLOT_FIELDS
    if unknown:
        return ApiResponse.fail(f"Unknown time slot fields: {', '.join(sorted(unknown))}")
    try:
        client.table(tables.TIME_SLOTS).update(updates).eq("id", slot_id).execute()
        return ApiResponse.ok(True)
    except Exception as exc:
        logger.warning("Updating time slot %s failed: %s", slot_id, exc)
        return ApiResponse.fail(describe_error(exc, "Failed to update time slot"))


def delete_time_slot(client: Any, slot_id: str) -> ApiResponse[bool]:
    try:
        client.table(tables.TIME_SLOTS).delete().eq("id", slot_id).execute()
        return ApiResponse.ok(True)
    except Exception as exc:
        logger.warning("Deleting time slot %s failed: %s", slot_id, exc)
        return ApiResponse.fail(describe_error(exc, "Failed to delete time slot"))


def generate_time_slots(
    client: Any,
    date_availability_id: str,
    start_time: TimeLike,
    end_time: TimeLike,
    interval_minutes: int,
    max_bookings_per_slot: int = 1,
) -> ApiResponse[list[TimeSlot]]:
    """Slice working hours into slots and insert them in one request."""
    try:
        generated = generate_slot_ranges(start_time, end_time, interval_minutes, max_bookings_per_slot)
        if not generated:
            raise NoSlotsGeneratedError()

        rows = [
            {"date_availability_id": date_availability_id, **slot.model_dump()}
            for slot in generated
        ]
        response = client.table(tables.TIME_SLOTS).insert(rows).execute()
        created = [TimeSlot(**row) for row in response.data or []]
        logger.info("Generated %d time slots for date %s", len(created), date_availability_id)
        return ApiResponse.ok(created)
    except Exception as exc:
        logger.warning("Generating time slots failed: %s", exc)
        return ApiResponse.fail(describe_error(exc, "Failed to generate time slots"))


def generate_slots_for_date(
    client: Any,
    data: DateAvailabilityInput,
    interval_minutes: Optional[int] = None,
    max_bookings_per_slot: Optional[int] = None,
    date_availability_id: Optional[str] = None,
) -> ApiResponse[list[TimeSlot]]:
    """Generate slots for a date, saving the date first if it has no row yet.

    Working hours default to the configured day when the input leaves them
    blank.
    """
    interval_minutes = interval_minutes or settings.booking.default_slot_interval
    max_bookings_per_slot = max_bookings_per_slot or settings.booking.default_slots_per_interval
    start = data.start_time or settings.booking.default_start_time
    end = data.end_time or settings.booking.default_end_time

    if date_availability_id is None:
        saved = create_or_update_date(
            client, data.model_copy(update={"start_time": start, "end_time": end})
        )
        if not saved.success or saved.data is None:
            return ApiResponse.fail(saved.error or "Failed to save date")
        date_availability_id = saved.data.id

    return generate_time_slots(
        client, date_availability_id, start, end, interval_minutes, max_bookings_per_slot
    )
