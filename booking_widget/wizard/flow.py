"""
Customer booking flow.

Ties the step machine to the data operations. Each customer visit gets
its own session id so every log line of one booking attempt can be
grepped together.
"""

from typing import Any, Optional

from booking_widget.data.availability import fetch_date_details
from booking_widget.data.bookings import create_booking
from booking_widget.logging_context import (
    get_session_logger,
    new_session_id,
    set_session_id,
)
from booking_widget.schemas.availability_schema import AvailabilityData, TimeSlot
from booking_widget.schemas.booking_schema import Booking, BookingFormData
from booking_widget.schemas.catalog_schema import Service
from booking_widget.schemas.response_schema import ApiResponse
from booking_widget.utils import DateLike, to_db_date
from booking_widget.wizard.booking_form import build_booking_input, validate_booking_form
from booking_widget.wizard.state_machine import BookingStep, BookingWizard, WizardTrigger

logger = get_session_logger(__name__)


class BookingFlow:
    """One customer's pass through the booking wizard."""

    def __init__(self, client: Any) -> None:
        self._client = client
        self.wizard = BookingWizard()
        self.session_id = new_session_id()
        self._reset_selection()

    def _reset_selection(self) -> None:
        self.selected_date: Optional[str] = None
        self.availability: Optional[AvailabilityData] = None
        self.selected_service: Optional[Service] = None
        self.selected_slot: Optional[TimeSlot] = None
        self.booking: Optional[Booking] = None
        self.form_errors: dict[str, str] = {}
        self.error: Optional[str] = None

    def _activate(self) -> None:
        set_session_id(self.session_id)

    @property
    def step(self) -> BookingStep:
        return self.wizard.current_step

    @property
    def services(self) -> list[Service]:
        return self.availability.services if self.availability else []

    @property
    def time_slots(self) -> list[TimeSlot]:
        return self.availability.time_slots if self.availability else []

    def _load(self, day: str) -> ApiResponse[AvailabilityData]:
        result = fetch_date_details(self._client, day)
        if result.success:
            self.availability = result.data
            self.error = None
        else:
            self.error = result.error
        return result

    def select_date(self, day: DateLike) -> ApiResponse[AvailabilityData]:
        """Load a date's slots and services and advance to the service step.

        A date with nothing to book (or a failed load) keeps the wizard on
        the date step. After a booking is confirmed, ``new_booking`` has to
        be called first.
        """
        self._activate()
        if self.step == BookingStep.CONFIRMATION:
            raise ValueError("Start a new booking before choosing another date")
        if self.step != BookingStep.DATE:
            # Picking a date again after going back clears later choices.
            while self.wizard.can_go_back():
                self.wizard.transition(WizardTrigger.BACK)

        self.selected_date = to_db_date(day)
        self.availability = None
        self.selected_service = None
        self.selected_slot = None

        result = self._load(self.selected_date)
        if not result.success:
            return result
        if result.data is None:
            self.error = "No availability for this date"
            return ApiResponse.fail(self.error)

        self.wizard.transition(WizardTrigger.DATE_SELECTED)
        logger.info(
            "Date %s selected: %d slots, %d services",
            self.selected_date, len(self.time_slots), len(self.services),
        )
        return result

    def select_service(self, service_id: str) -> Service:
        self._activate()
        service = next((s for s in self.services if s.id == service_id), None)
        if service is None:
            raise ValueError(f"Service {service_id} is not offered on {self.selected_date}")
        self.wizard.transition(WizardTrigger.SERVICE_SELECTED)
        self.selected_service = service
        return service

    def select_time_slot(self, slot_id: str) -> TimeSlot:
        self._activate()
        slot = next((s for s in self.time_slots if s.id == slot_id), None)
        if slot is None:
            raise ValueError(f"Time slot {slot_id} is not available on {self.selected_date}")
        self.wizard.transition(WizardTrigger.TIME_SELECTED)
        self.selected_slot = slot
        return slot

    def submit(self, form: BookingFormData) -> ApiResponse[Booking]:
        """Validate the details step and create the booking.

        On failure the wizard stays on the details step with ``error`` or
        ``form_errors`` set.
        """
        self._activate()
        if self.step != BookingStep.DETAILS:
            raise ValueError(f"Cannot submit from step '{self.step.value}'")

        self.form_errors = validate_booking_form(form)
        if self.form_errors:
            return ApiResponse.fail("Please correct the highlighted fields")

        if self.selected_slot is None or self.selected_service is None:
            self.error = "Please select a service and time slot"
            return ApiResponse.fail(self.error)

        request = build_booking_input(form, self.selected_slot.id, self.selected_service.id)
        result = create_booking(self._client, request)
        if not result.success:
            self.error = result.error
            return result

        self.booking = result.data
        self.error = None
        self.wizard.transition(WizardTrigger.BOOKING_CREATED)
        return result

    def back(self) -> BookingStep:
        self._activate()
        step = self.wizard.transition(WizardTrigger.BACK)
        if step == BookingStep.TIME:
            self.selected_slot = None
        elif step in (BookingStep.SERVICE, BookingStep.DATE):
            self.selected_service = None
            self.selected_slot = None
        return step

    def refresh(self, *_: Any) -> None:
        """Re-fetch the selected date; used as the realtime callback.

        A selected slot that vanished or filled up is dropped.
        """
        self._activate()
        if self.selected_date is None or self.step == BookingStep.CONFIRMATION:
            return
        result = self._load(self.selected_date)
        if not result.success:
            return
        if self.selected_slot is not None and all(
            s.id != self.selected_slot.id for s in self.time_slots
        ):
            logger.info("Selected slot %s is no longer available", self.selected_slot.id)
            self.selected_slot = None
            self.error = "Your selected time is no longer available. Please choose another."

    def new_booking(self) -> None:
        """Start over from the date step with a fresh session id."""
        self.wizard.transition(WizardTrigger.NEW_BOOKING)
        self._reset_selection()
        self.session_id = new_session_id()
        self._activate()
