"""Correlation ID logging context for following one booking session.

Provides a session_id-aware logger that attaches a correlation ID to every
log message, so a single customer's wizard run can be traced through the
flow, the data operations and the real-time refreshes.

Usage:
    from booking_widget.logging_context import get_session_logger, set_session_id

    set_session_id("WS-abc123")
    logger = get_session_logger(__name__)
    logger.info("Date selected")  # record.session_id == "WS-abc123"
"""

import logging
import uuid
from contextvars import ContextVar

_session_id: ContextVar[str] = ContextVar("session_id", default="NO_SESSION")


def new_session_id() -> str:
    """Create a fresh booking-session correlation ID."""
    return f"WS-{uuid.uuid4().hex[:8]}"


def set_session_id(session_id: str) -> None:
    """Set the correlation ID for the current context."""
    _session_id.set(session_id)


def get_session_id() -> str:
    """Retrieve the current correlation ID."""
    return _session_id.get()


class SessionIdFilter(logging.Filter):
    """Injects session_id into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.session_id = _session_id.get()  # type: ignore[attr-defined]
        return True


def add_session_filter(handler: logging.Handler) -> None:
    """Attach the SessionIdFilter to a handler, once.

    Every record the handler emits then carries ``session_id``, including
    records from loggers that were not created with ``get_session_logger``.
    """
    if not any(isinstance(f, SessionIdFilter) for f in handler.filters):
        handler.addFilter(SessionIdFilter())


def get_session_logger(name: str) -> logging.Logger:
    """Return a logger with the SessionIdFilter attached.

    The filter adds ``session_id`` to each record so formatters can
    include ``%(session_id)s`` in their format string.
    """
    logger = logging.getLogger(name)
    if not any(isinstance(f, SessionIdFilter) for f in logger.filters):
        logger.addFilter(SessionIdFilter())
    return logger
