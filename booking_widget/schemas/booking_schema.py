"""Booking data models."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from booking_widget.schemas.availability_schema import DateAvailability, TimeSlot
from booking_widget.schemas.catalog_schema import Service


class BookingStatus(str, Enum):
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    NO_SHOW = "no_show"


# Statuses that keep a seat in their time slot.
SEAT_HOLDING_STATUSES = frozenset(
    {BookingStatus.CONFIRMED, BookingStatus.COMPLETED, BookingStatus.NO_SHOW}
)


class Booking(BaseModel):
    """Stored booking row."""
    id: str
    time_slot_id: str
    service_id: str
    customer_name: str
    customer_email: str
    customer_phone: Optional[str] = None
    notes: Optional[str] = None
    status: BookingStatus = BookingStatus.CONFIRMED
    reference_number: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def holds_seat(self) -> bool:
        return self.status in SEAT_HOLDING_STATUSES


class TimeSlotWithDate(TimeSlot):
    date_availability: Optional[DateAvailability] = None


class BookingWithDetails(Booking):
    """Booking joined with its slot, date and service."""
    time_slot: Optional[TimeSlotWithDate] = None
    service: Optional[Service] = None

    @property
    def date(self) -> Optional[str]:
        if self.time_slot and self.time_slot.date_availability:
            return self.time_slot.date_availability.date
        return None


class BookingInput(BaseModel):
    """Validated booking request."""
    time_slot_id: str
    service_id: str
    customer_name: str = Field(min_length=1)
    customer_email: str = Field(min_length=3)
    customer_phone: Optional[str] = None
    notes: Optional[str] = None


class BookingFormData(BaseModel):
    """Raw values typed into the details step."""
    customer_name: str = ""
    customer_email: str = ""
    customer_phone: str = ""
    notes: str = ""
