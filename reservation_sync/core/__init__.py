"""Core modules for reservation processing."""

from .logging import configure_logging, get_logger, bind_context, clear_context
from .exceptions import (
    ReservationSyncError,
    SelectionError,
    ConfigurationError,
    DateNormalizationError,
)
from .models import (
    CandidateMessage,
    MessageThread,
    ReservationRecord,
    CalendarEvent,
    ProcessingOutcome,
    ProcessingResult,
)

__all__ = [
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    "ReservationSyncError",
    "SelectionError",
    "ConfigurationError",
    "DateNormalizationError",
    "CandidateMessage",
    "MessageThread",
    "ReservationRecord",
    "CalendarEvent",
    "ProcessingOutcome",
    "ProcessingResult",
]
