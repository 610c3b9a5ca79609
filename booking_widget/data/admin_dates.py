"""
Admin date management: opening days, working hours and emergency overrides.

An override forces a date closed. Setting one writes ``is_open = False`` in
the same update so the customer calendar (which filters on the open flag)
drops the date immediately.
"""

import logging
from typing import Any, Iterable, Optional

from booking_widget.backend import tables
from booking_widget.data.admin_service_availability import bulk_set_services_for_date
from booking_widget.errors import describe_error
from booking_widget.schemas.availability_schema import (
    DateAvailability,
    DateAvailabilityInput,
    ServiceSetting,
)
from booking_widget.schemas.response_schema import ApiResponse
from booking_widget.utils import DateLike, to_db_date, to_db_time

logger = logging.getLogger(__name__)


def fetch_dates(client: Any, start: DateLike, end: DateLike) -> ApiResponse[list[DateAvailability]]:
    """Every configured date in range, open or not."""
    try:
        response = (
            client.table(tables.DATE_AVAILABILITY)
            .select("*")
            .gte("date", to_db_date(start))
            .lte("date", to_db_date(end))
            .order("date")
            .execute()
        )
        return ApiResponse.ok([DateAvailability(**row) for row in response.data or []])
    except Exception as exc:
        logger.warning("Fetching dates failed: %s", exc)
        return ApiResponse.fail(describe_error(exc, "Failed to fetch dates"))


def _date_payload(data: DateAvailabilityInput) -> dict[str, Any]:
    return {
        "is_open": data.is_open,
        "start_time": to_db_time(data.start_time) if data.start_time else None,
        "end_time": to_db_time(data.end_time) if data.end_time else None,
        "max_bookings_per_day": data.max_bookings_per_day or None,
    }


def create_or_update_date(
    client: Any, data: DateAvailabilityInput
) -> ApiResponse[DateAvailability]:
    """Upsert by calendar date; blank optional fields are stored as null."""
    try:
        day = to_db_date(data.date)
        existing = (
            client.table(tables.DATE_AVAILABILITY)
            .select("id")
            .eq("date", day)
            .limit(1)
            .execute()
        )
        if existing.data:
            response = (
                client.table(tables.DATE_AVAILABILITY)
                .update(_date_payload(data))
                .eq("id", existing.data[0]["id"])
                .execute()
            )
        else:
            response = (
                client.table(tables.DATE_AVAILABILITY)
                .insert({"date": day, **_date_payload(data)})
                .execute()
            )
        if not response.data:
            raise RuntimeError("Failed to save date. No data returned.")
        saved = DateAvailability(**response.data[0])
        logger.info("Date %s saved (open=%s)", saved.date, saved.is_open)
        return ApiResponse.ok(saved)
    except Exception as exc:
        logger.warning("Saving date %s failed: %s", data.date, exc)
        return ApiResponse.fail(describe_error(exc, "Failed to save date"))


def toggle_date_open(client: Any, date_id: str, is_open: bool) -> ApiResponse[bool]:
    try:
        (
            client.table(tables.DATE_AVAILABILITY)
            .update({"is_open": is_open})
            .eq("id", date_id)
            .execute()
        )
        return ApiResponse.ok(True)
    except Exception as exc:
        logger.warning("Toggling date %s failed: %s", date_id, exc)
        return ApiResponse.fail(describe_error(exc, "Failed to toggle date"))


def set_override(
    client: Any, date_id: str, is_override: bool, reason: Optional[str] = None
) -> ApiResponse[bool]:
    """Switch the emergency override; turning it on also closes the date.

    Clearing the override leaves the open flag as it is.
    """
    payload: dict[str, Any] = {
        "is_override": is_override,
        "override_reason": (reason or None) if is_override else None,
    }
    if is_override:
        payload["is_open"] = False
    try:
        (
            client.table(tables.DATE_AVAILABILITY)
            .update(payload)
            .eq("id", date_id)
            .execute()
        )
        logger.info("Override %s for date %s", "set" if is_override else "cleared", date_id)
        return ApiResponse.ok(True)
    except Exception as exc:
        logger.warning("Setting override on %s failed: %s", date_id, exc)
        return ApiResponse.fail(describe_error(exc, "Failed to set override"))


def delete_date(client: Any, date_id: str) -> ApiResponse[bool]:
    try:
        client.table(tables.DATE_AVAILABILITY).delete().eq("id", date_id).execute()
        return ApiResponse.ok(True)
    except Exception as exc:
        logger.warning("Deleting date %s failed: %s", date_id, exc)
        return ApiResponse.fail(describe_error(exc, "Failed to delete date"))


def save_date_configuration(
    client: Any,
    data: DateAvailabilityInput,
    is_override: bool = False,
    override_reason: Optional[str] = None,
    services: Optional[Iterable[ServiceSetting]] = None,
) -> ApiResponse[DateAvailability]:
    """Save everything the date manager edits in one go.

    Writes the date (closed while an override is on), applies the override,
    then replaces the day's service list when one is given.
    """
    effective = data.model_copy(update={"is_open": data.is_open and not is_override})
    saved = create_or_update_date(client, effective)
    if not saved.success or saved.data is None:
        return saved

    if is_override:
        result = set_override(client, saved.data.id, True, override_reason)
        if not result.success:
            return ApiResponse.fail(result.error or "Failed to set override")
        saved.data = saved.data.model_copy(
            update={"is_override": True, "override_reason": override_reason or None, "is_open": False}
        )

    if services is not None:
        result = bulk_set_services_for_date(client, saved.data.id, services)
        if not result.success:
            return ApiResponse.fail(result.error or "Failed to update services")

    return saved
