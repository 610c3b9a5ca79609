"""Date, time slot and per-date service availability models."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from booking_widget.schemas.catalog_schema import Service


class DateStatus(str, Enum):
    """How a calendar day is configured."""
    UNCONFIGURED = "unconfigured"
    OVERRIDE = "override"
    OPEN = "open"
    CLOSED = "closed"


class DateAvailability(BaseModel):
    """Opening state and working hours of one calendar date."""
    id: str
    date: str
    is_open: bool = False
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    max_bookings_per_day: Optional[int] = None
    is_override: bool = False
    override_reason: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class TimeSlot(BaseModel):
    """A bookable interval inside one date's working hours."""
    id: str
    date_availability_id: str
    start_time: str
    end_time: str
    max_bookings: int = 1
    current_bookings: int = 0
    is_available: bool = True
    created_at: Optional[str] = None


class ServiceDateAvailability(BaseModel):
    """Join row marking a service bookable on a date."""
    id: str
    service_id: str
    date_availability_id: str
    is_available: bool = True
    created_at: Optional[str] = None


class DateAvailabilityInput(BaseModel):
    date: str
    is_open: bool
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    max_bookings_per_day: Optional[int] = Field(default=None, ge=1)


class TimeSlotInput(BaseModel):
    date_availability_id: str
    start_time: str
    end_time: str
    max_bookings: int = Field(default=1, ge=1)


class ServiceSetting(BaseModel):
    """One entry of a bulk per-date service update."""
    service_id: str
    is_available: bool


class GeneratedSlot(BaseModel):
    """A generated slot before it is persisted."""
    start_time: str
    end_time: str
    max_bookings: int = 1


class AvailabilityData(BaseModel):
    """Everything the customer flow needs for one selected date."""
    date: DateAvailability
    time_slots: list[TimeSlot] = Field(default_factory=list)
    services: list[Service] = Field(default_factory=list)


class CalendarDay(BaseModel):
    """One cell of a month grid."""
    date_string: str
    is_current_month: bool
    is_today: bool
    is_past: bool
    is_selected: bool = False
    is_available: bool = False
    status: DateStatus = DateStatus.UNCONFIGURED
    availability: Optional[DateAvailability] = None
    bookings_count: int = 0
