from booking_widget.wizard.booking_form import build_booking_input, validate_booking_form
from booking_widget.wizard.flow import BookingFlow
from booking_widget.wizard.state_machine import (
    BookingStep,
    BookingWizard,
    InvalidTransitionError,
    StepIndicator,
    WizardTrigger,
)

__all__ = [
    "BookingFlow",
    "BookingStep",
    "BookingWizard",
    "InvalidTransitionError",
    "StepIndicator",
    "WizardTrigger",
    "build_booking_input",
    "validate_booking_form",
]
