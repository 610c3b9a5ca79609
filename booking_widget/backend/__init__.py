from booking_widget.backend.client import create_async_client, get_client, reset_client
from booking_widget.backend.realtime import (
    subscribe_to_availability,
    subscribe_to_bookings,
    subscribe_to_date,
    unsubscribe,
)

__all__ = [
    "get_client",
    "create_async_client",
    "reset_client",
    "subscribe_to_availability",
    "subscribe_to_bookings",
    "subscribe_to_date",
    "unsubscribe",
]
