"""Booking errors and conversion of hosted-client failures into display text."""

from typing import Optional


class BookingError(Exception):
    """Base class for conditions the booking widget detects itself."""


class SlotUnavailableError(BookingError):
    def __init__(self, message: str = "This time slot is no longer available. Please select another.") -> None:
        super().__init__(message)


class SlotFullError(BookingError):
    def __init__(self, message: str = "This time slot is fully booked. Please select another.") -> None:
        super().__init__(message)


class DateFullyBookedError(BookingError):
    def __init__(self, message: str = "This date is fully booked. Please choose another date.") -> None:
        super().__init__(message)


class NoSlotsGeneratedError(BookingError):
    def __init__(self, message: str = "No time slots could be generated with the given parameters") -> None:
        super().__init__(message)


class NotFoundError(BookingError):
    """Raised when a row the operation depends on does not exist."""


def describe_error(exc: BaseException, fallback: str) -> str:
    """Return a human-readable message for any failure.

    Hosted client errors carry ``message`` and sometimes ``details``;
    everything else falls back to the exception text, then to ``fallback``.
    """
    message: Optional[str] = getattr(exc, "message", None)
    if isinstance(message, str) and message.strip():
        return message
    details: Optional[str] = getattr(exc, "details", None)
    if isinstance(details, str) and details.strip():
        return details
    text = str(exc).strip()
    return text or fallback
