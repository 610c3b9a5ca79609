"""
Finite state machine for the customer booking wizard.

Four linear steps (date, service, time, details) and a confirmation
screen. Every move is an explicit transition; anything else is rejected
with the list of triggers valid from the current step.

Usage:
    wizard = BookingWizard()
    wizard.transition(WizardTrigger.DATE_SELECTED)
    assert wizard.current_step == BookingStep.SERVICE
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class BookingStep(str, Enum):
    """Screens of the booking flow."""
    DATE = "date"
    SERVICE = "service"
    TIME = "time"
    DETAILS = "details"
    CONFIRMATION = "confirmation"


class WizardTrigger(str, Enum):
    """Events that move the wizard."""
    DATE_SELECTED = "date_selected"
    SERVICE_SELECTED = "service_selected"
    TIME_SELECTED = "time_selected"
    BOOKING_CREATED = "booking_created"
    BACK = "back"
    NEW_BOOKING = "new_booking"


@dataclass
class Transition:
    """A single valid step transition."""
    from_step: BookingStep
    to_step: BookingStep
    trigger: WizardTrigger


@dataclass
class StepEntry:
    """Recorded history entry for a step visit."""
    step: BookingStep
    entered_at: datetime
    trigger: Optional[WizardTrigger] = None


@dataclass(frozen=True)
class StepIndicator:
    """One numbered marker of the progress bar."""
    step: BookingStep
    number: int
    label: str
    completed: bool
    active: bool


class InvalidTransitionError(Exception):
    """Raised when a transition is not valid from the current step."""


PROGRESS_STEPS: list[tuple[BookingStep, str]] = [
    (BookingStep.DATE, "Date"),
    (BookingStep.SERVICE, "Service"),
    (BookingStep.TIME, "Time"),
    (BookingStep.DETAILS, "Details"),
]


class BookingWizard:
    """Deterministic step controller for the booking flow."""

    TRANSITIONS: list[Transition] = [
        # --- Forward ---
        Transition(BookingStep.DATE, BookingStep.SERVICE, WizardTrigger.DATE_SELECTED),
        Transition(BookingStep.SERVICE, BookingStep.TIME, WizardTrigger.SERVICE_SELECTED),
        Transition(BookingStep.TIME, BookingStep.DETAILS, WizardTrigger.TIME_SELECTED),
        Transition(BookingStep.DETAILS, BookingStep.CONFIRMATION, WizardTrigger.BOOKING_CREATED),

        # --- Back ---
        Transition(BookingStep.SERVICE, BookingStep.DATE, WizardTrigger.BACK),
        Transition(BookingStep.TIME, BookingStep.SERVICE, WizardTrigger.BACK),
        Transition(BookingStep.DETAILS, BookingStep.TIME, WizardTrigger.BACK),

        # --- Start over ---
        Transition(BookingStep.CONFIRMATION, BookingStep.DATE, WizardTrigger.NEW_BOOKING),
    ]

    def __init__(self) -> None:
        self._current_step = BookingStep.DATE
        self._history: list[StepEntry] = [
            StepEntry(step=BookingStep.DATE, entered_at=datetime.now(timezone.utc))
        ]

    @property
    def current_step(self) -> BookingStep:
        return self._current_step

    def transition(self, trigger: WizardTrigger) -> BookingStep:
        """
        Execute a step transition.

        Raises:
            InvalidTransitionError: If no valid transition exists.
        """
        for t in self.TRANSITIONS:
            if t.from_step == self._current_step and t.trigger == trigger:
                old_step = self._current_step
                self._current_step = t.to_step
                self._history.append(StepEntry(
                    step=self._current_step,
                    entered_at=datetime.now(timezone.utc),
                    trigger=trigger,
                ))
                logger.debug(
                    "Wizard step: %s -> %s (trigger: %s)",
                    old_step.value, self._current_step.value, trigger.value,
                )
                return self._current_step

        valid = [t.value for t in self.get_valid_triggers()]
        raise InvalidTransitionError(
            f"No valid transition from '{self._current_step.value}' "
            f"with trigger '{trigger.value}'. Valid triggers: {valid}"
        )

    def get_valid_triggers(self) -> list[WizardTrigger]:
        return [t.trigger for t in self.TRANSITIONS if t.from_step == self._current_step]

    def can_go_back(self) -> bool:
        return WizardTrigger.BACK in self.get_valid_triggers()

    def get_history(self) -> list[StepEntry]:
        return list(self._history)

    def get_step_trace(self) -> list[str]:
        """Return ordered list of step names visited."""
        return [entry.step.value for entry in self._history]

    def is_complete(self) -> bool:
        return self._current_step == BookingStep.CONFIRMATION

    def progress(self) -> list[StepIndicator]:
        """Progress bar markers; hidden (empty) on the confirmation screen."""
        if self.is_complete():
            return []
        current_index = [s for s, _ in PROGRESS_STEPS].index(self._current_step)
        return [
            StepIndicator(
                step=step,
                number=index + 1,
                label=label,
                completed=index < current_index,
                active=index == current_index,
            )
            for index, (step, label) in enumerate(PROGRESS_STEPS)
        ]
