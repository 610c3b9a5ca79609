"""Admin service catalog management."""

import logging
from typing import Any, Iterable

from booking_widget.backend import tables
from booking_widget.errors import describe_error
from booking_widget.schemas.catalog_schema import Service, ServiceInput, ServiceUpdate
from booking_widget.schemas.response_schema import ApiResponse

logger = logging.getLogger(__name__)


def fetch_services(client: Any, include_inactive: bool = True) -> ApiResponse[list[Service]]:
    try:
        query = client.table(tables.SERVICES).select("*").order("name")
        if not include_inactive:
            query = query.eq("active", True)
        response = query.execute()
        return ApiResponse.ok([Service(**row) for row in response.data or []])
    except Exception as exc:
        logger.warning("Fetching services failed: %s", exc)
        return ApiResponse.fail(describe_error(exc, "Failed to fetch services"))


def create_service(client: Any, data: ServiceInput) -> ApiResponse[Service]:
    try:
        response = client.table(tables.SERVICES).insert(data.model_dump()).execute()
        if not response.data:
            raise RuntimeError("Failed to create service. No data returned.")
        created = Service(**response.data[0])
        logger.info("Service created: %s", created.name)
        return ApiResponse.ok(created)
    except Exception as exc:
        logger.warning("Creating service failed: %s", exc)
        return ApiResponse.fail(describe_error(exc, "Failed to create service"))


def update_service(client: Any, service_id: str, updates: ServiceUpdate) -> ApiResponse[bool]:
    payload = updates.model_dump(exclude_unset=True)
    if not payload:
        return ApiResponse.ok(True)
    try:
        client.table(tables.SERVICES).update(payload).eq("id", service_id).execute()
        return ApiResponse.ok(True)
    except Exception as exc:
        logger.warning("Updating service %s failed: %s", service_id, exc)
        return ApiResponse.fail(describe_error(exc, "Failed to update service"))


def toggle_service_active(client: Any, service: Service) -> ApiResponse[bool]:
    return update_service(client, service.id, ServiceUpdate(active=not service.active))


def delete_service(client: Any, service_id: str) -> ApiResponse[bool]:
    try:
        client.table(tables.SERVICES).delete().eq("id", service_id).execute()
        return ApiResponse.ok(True)
    except Exception as exc:
        logger.warning("Deleting service %s failed: %s", service_id, exc)
        return ApiResponse.fail(describe_error(exc, "Failed to delete service"))


def search_services(services: Iterable[Service], query: str) -> list[Service]:
    """Case-insensitive match on name and category."""
    needle = query.strip().lower()
    if not needle:
        return list(services)
    return [
        s for s in services
        if needle in s.name.lower() or needle in (s.category or "").lower()
    ]
