"""Admin control over which services are offered on which dates."""

import logging
from typing import Any, Iterable

from booking_widget.backend import tables
from booking_widget.errors import describe_error
from booking_widget.schemas.availability_schema import ServiceDateAvailability, ServiceSetting
from booking_widget.schemas.response_schema import ApiResponse

logger = logging.getLogger(__name__)


def fetch_service_availability(
    client: Any, date_availability_id: str
) -> ApiResponse[list[ServiceDateAvailability]]:
    try:
        response = (
            client.table(tables.SERVICE_DATE_AVAILABILITY)
            .select("*")
            .eq("date_availability_id", date_availability_id)
            .execute()
        )
        return ApiResponse.ok([ServiceDateAvailability(**row) for row in response.data or []])
    except Exception as exc:
        logger.warning("Fetching service availability failed: %s", exc)
        return ApiResponse.fail(describe_error(exc, "Failed to fetch service availability"))


def set_service_for_date(
    client: Any, service_id: str, date_availability_id: str, is_available: bool
) -> ApiResponse[bool]:
    """Update the join row if it exists, insert it otherwise."""
    try:
        existing = (
            client.table(tables.SERVICE_DATE_AVAILABILITY)
            .select("id")
            .eq("service_id", service_id)
            .eq("date_availability_id", date_availability_id)
            .limit(1)
            .execute()
        )
        if existing.data:
            (
                client.table(tables.SERVICE_DATE_AVAILABILITY)
                .update({"is_available": is_available})
                .eq("id", existing.data[0]["id"])
                .execute()
            )
        else:
            (
                client.table(tables.SERVICE_DATE_AVAILABILITY)
                .insert(
                    {
                        "service_id": service_id,
                        "date_availability_id": date_availability_id,
                        "is_available": is_available,
                    }
                )
                .execute()
            )
        return ApiResponse.ok(True)
    except Exception as exc:
        logger.warning("Setting service %s for date failed: %s", service_id, exc)
        return ApiResponse.fail(describe_error(exc, "Failed to set service availability"))


def bulk_set_services_for_date(
    client: Any, date_availability_id: str, settings: Iterable[ServiceSetting]
) -> ApiResponse[bool]:
    """Replace a date's service list; only enabled services get a row."""
    try:
        (
            client.table(tables.SERVICE_DATE_AVAILABILITY)
            .delete()
            .eq("date_availability_id", date_availability_id)
            .execute()
        )
        rows = [
            {
                "service_id": s.service_id,
                "date_availability_id": date_availability_id,
                "is_available": True,
            }
            for s in settings
            if s.is_available
        ]
        if rows:
            client.table(tables.SERVICE_DATE_AVAILABILITY).insert(rows).execute()
        logger.info("Date %s now offers %d services", date_availability_id, len(rows))
        return ApiResponse.ok(True)
    except Exception as exc:
        logger.warning("Bulk service update failed: %s", exc)
        return ApiResponse.fail(describe_error(exc, "Failed to update services"))
