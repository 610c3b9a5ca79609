from booking_widget.scheduling.month_grid import build_month_grid, month_window
from booking_widget.scheduling.rules import (
    bookable_slots,
    counter_after_booking,
    day_has_capacity,
    is_date_bookable,
    remaining_capacity,
    resolve_date_status,
    slot_has_capacity,
)
from booking_widget.scheduling.slots import generate_slot_ranges

__all__ = [
    "generate_slot_ranges",
    "resolve_date_status",
    "is_date_bookable",
    "slot_has_capacity",
    "remaining_capacity",
    "bookable_slots",
    "day_has_capacity",
    "counter_after_booking",
    "build_month_grid",
    "month_window",
]
