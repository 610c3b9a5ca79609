"""
Booking widget command line entry point.

Operational helpers around the hosted backend: preview generated slots,
seed a date's availability, look up a booking and watch live changes.

Usage:
    Preview slots:  python main.py preview-slots --start 09:00 --end 17:00 --interval 30
    Seed a date:    python main.py seed 2025-12-20
    Lookup:         python main.py lookup BK-3F9A1C
    Watch changes:  python main.py watch
"""

import argparse
import asyncio
import logging
import sys

from booking_widget.config import settings

logger = logging.getLogger(__name__)


def _preview_slots(args: argparse.Namespace) -> int:
    """Print the slots a date manager would generate (no backend needed)."""
    from booking_widget.scheduling.slots import generate_slot_ranges
    from booking_widget.utils import format_time_12h

    slots = generate_slot_ranges(args.start, args.end, args.interval, args.capacity)
    if not slots:
        print("No time slots could be generated with the given parameters")
        return 1
    for slot in slots:
        print(
            f"{format_time_12h(slot.start_time)} - {format_time_12h(slot.end_time)}"
            f"  (capacity {slot.max_bookings})"
        )
    print(f"{len(slots)} slots")
    return 0


def _seed(args: argparse.Namespace) -> int:
    """Open a date with default working hours."""
    from booking_widget.backend.client import get_client
    from booking_widget.data.admin_dates import create_or_update_date
    from booking_widget.schemas.availability_schema import DateAvailabilityInput

    result = create_or_update_date(
        get_client(),
        DateAvailabilityInput(
            date=args.date,
            is_open=True,
            start_time=args.start,
            end_time=args.end,
            max_bookings_per_day=args.max_per_day,
        ),
    )
    if not result.success:
        print(f"Error inserting data: {result.error}", file=sys.stderr)
        return 1
    print(f"Successfully seeded availability for: {result.data.date}")
    return 0


def _lookup(args: argparse.Namespace) -> int:
    from booking_widget.backend.client import get_client
    from booking_widget.data.bookings import get_booking_by_reference
    from booking_widget.utils import format_long_date, format_time_12h

    result = get_booking_by_reference(get_client(), args.reference)
    if not result.success:
        print(result.error, file=sys.stderr)
        return 1

    booking = result.data
    print(f"Reference: {booking.reference_number}")
    print(f"Status:    {booking.status.value}")
    print(f"Name:      {booking.customer_name} <{booking.customer_email}>")
    if booking.service:
        print(f"Service:   {booking.service.name}")
    if booking.date:
        print(f"Date:      {format_long_date(booking.date)}")
    if booking.time_slot:
        print(
            f"Time:      {format_time_12h(booking.time_slot.start_time)}"
            f" - {format_time_12h(booking.time_slot.end_time)}"
        )
    return 0


async def _watch() -> None:
    from booking_widget.backend.client import create_async_client
    from booking_widget.backend.realtime import (
        subscribe_to_availability,
        subscribe_to_bookings,
        unsubscribe,
    )

    client = await create_async_client()
    channels = [
        await subscribe_to_availability(client, lambda: print("availability changed")),
        await subscribe_to_bookings(client, lambda: print("bookings changed")),
    ]
    print("Watching for changes. Press Ctrl+C to stop.")
    try:
        await asyncio.Event().wait()
    finally:
        for channel in channels:
            await unsubscribe(client, channel)


def _run_watch(args: argparse.Namespace) -> int:
    try:
        asyncio.run(_watch())
    except KeyboardInterrupt:
        print("Stopped.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    booking = settings.booking
    parser = argparse.ArgumentParser(description=f"{settings.business.name} booking tools")
    commands = parser.add_subparsers(dest="command", required=True)

    preview = commands.add_parser("preview-slots", help="Print generated time slots")
    preview.add_argument("--start", default=booking.default_start_time)
    preview.add_argument("--end", default=booking.default_end_time)
    preview.add_argument("--interval", type=int, default=booking.default_slot_interval)
    preview.add_argument("--capacity", type=int, default=booking.default_slots_per_interval)
    preview.set_defaults(handler=_preview_slots)

    seed = commands.add_parser("seed", help="Open a date for bookings")
    seed.add_argument("date", help="YYYY-MM-DD")
    seed.add_argument("--start", default="09:00")
    seed.add_argument("--end", default="17:00")
    seed.add_argument("--max-per-day", type=int, default=5)
    seed.set_defaults(handler=_seed)

    lookup = commands.add_parser("lookup", help="Find a booking by reference")
    lookup.add_argument("reference")
    lookup.set_defaults(handler=_lookup)

    watch = commands.add_parser("watch", help="Print real-time change events")
    watch.set_defaults(handler=_run_watch)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return args.handler(args)
    except (RuntimeError, ValueError) as exc:
        logger.error("%s", exc)
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
