"""
Validation for the customer details step.

Collect -> Validate -> normalize: raw form values come in, a field-to-message
error map comes out, and a clean BookingInput is built only when the map is
empty.
"""

import logging
import re

from email_validator import EmailNotValidError, validate_email

from booking_widget.schemas.booking_schema import BookingFormData, BookingInput
from booking_widget.utils import normalize_phone

logger = logging.getLogger(__name__)

# Validation thresholds
MIN_PHONE_DIGITS = 7
MAX_PHONE_DIGITS = 15
MAX_NOTES_LENGTH = 1000


def _validate_email(value: str) -> bool:
    try:
        validate_email(value, check_deliverability=False)
        return True
    except EmailNotValidError:
        return False


def _validate_phone(value: str) -> bool:
    digits = re.sub(r"[^\d]", "", value)
    return MIN_PHONE_DIGITS <= len(digits) <= MAX_PHONE_DIGITS


def validate_booking_form(form: BookingFormData) -> dict[str, str]:
    """Return ``{field: message}`` for every invalid field; empty when valid."""
    errors: dict[str, str] = {}

    if not form.customer_name.strip():
        errors["customer_name"] = "Name is required"

    email = form.customer_email.strip()
    if not email:
        errors["customer_email"] = "Email is required"
    elif not _validate_email(email):
        errors["customer_email"] = "Invalid email address"

    phone = form.customer_phone.strip()
    if phone and not _validate_phone(phone):
        errors["customer_phone"] = "Invalid phone number"

    if len(form.notes) > MAX_NOTES_LENGTH:
        errors["notes"] = f"Notes must be {MAX_NOTES_LENGTH} characters or fewer"

    if errors:
        logger.debug("Booking form rejected: %s", sorted(errors))
    return errors


def build_booking_input(form: BookingFormData, time_slot_id: str, service_id: str) -> BookingInput:
    """Normalize an already validated form into a booking request."""
    phone = form.customer_phone.strip()
    notes = form.notes.strip()
    return BookingInput(
        time_slot_id=time_slot_id,
        service_id=service_id,
        customer_name=" ".join(form.customer_name.split()),
        customer_email=form.customer_email.strip(),
        customer_phone=normalize_phone(phone) if phone else None,
        notes=notes or None,
    )
