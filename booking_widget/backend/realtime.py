"""
Real-time change subscriptions.

Every subscription simply re-runs a fetch callback whenever a watched table
changes. The payload is not inspected: there is no ordering, deduplication
or conflict resolution, only "something changed, reload".

Plain callbacks such as ``BookingFlow.refresh`` make blocking datastore
calls, so they run in a worker thread. Coroutine callbacks run on the loop.

Usage:
    client = await create_async_client()
    channel = await subscribe_to_availability(client, flow.refresh)
    ...
    await unsubscribe(client, channel)
"""

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Iterable, Union

from booking_widget.backend import tables

logger = logging.getLogger(__name__)

RefreshCallback = Callable[[], Union[None, Awaitable[None]]]

# Scheduled refreshes, held until done so they are not garbage collected.
_pending: "set[asyncio.Future[Any]]" = set()


def _make_handler(callback: RefreshCallback, table: str) -> Callable[[Any], "asyncio.Future[Any]"]:
    """Adapt a no-argument refresh callback to a change-payload handler.

    The handler returns the scheduled refresh. Failures are logged and kept
    away from the realtime client's dispatch loop.
    """

    def _log_failure(future: "asyncio.Future[Any]") -> None:
        _pending.discard(future)
        if not future.cancelled() and future.exception() is not None:
            logger.warning(
                "Refresh after %s change failed: %s", table, future.exception()
            )

    def handler(payload: Any) -> "asyncio.Future[Any]":
        logger.debug("Change received on %s", table)
        if inspect.iscoroutinefunction(callback):
            future = asyncio.ensure_future(callback())
        else:
            future = asyncio.ensure_future(asyncio.to_thread(callback))
        _pending.add(future)
        future.add_done_callback(_log_failure)
        return future

    return handler


async def _subscribe(
    client: Any, channel_name: str, table_names: Iterable[str], callback: RefreshCallback
) -> Any:
    channel = client.channel(channel_name)
    for table in table_names:
        channel = channel.on_postgres_changes(
            event="*",
            schema="public",
            table=table,
            callback=_make_handler(callback, table),
        )
    await channel.subscribe()
    logger.info("Subscribed to %s", channel_name)
    return channel


async def subscribe_to_availability(client: Any, callback: RefreshCallback) -> Any:
    """Watch dates, slots and per-date services."""
    return await _subscribe(client, "availability-changes", tables.AVAILABILITY_TABLES, callback)


async def subscribe_to_bookings(client: Any, callback: RefreshCallback) -> Any:
    """Watch the bookings table (admin dashboard)."""
    return await _subscribe(client, "booking-changes", (tables.BOOKINGS,), callback)


async def subscribe_to_date(client: Any, date: str, callback: RefreshCallback) -> Any:
    """Watch the slot and service rows behind one selected date."""
    return await _subscribe(
        client,
        f"date-{date}",
        (tables.TIME_SLOTS, tables.SERVICE_DATE_AVAILABILITY),
        callback,
    )


async def unsubscribe(client: Any, channel: Any) -> None:
    await client.remove_channel(channel)
    logger.info("Channel removed")
