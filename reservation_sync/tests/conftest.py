"""
Shared pytest fixtures for reservation_sync tests.
"""

import pytest

from reservation_sync.core.models import CandidateMessage
from reservation_sync.extractors.reservation import ExtractionConfig
from reservation_sync.handlers.event_creator import EventCreator
from reservation_sync.processors.reservation import ReservationProcessor
from reservation_sync.processors.selector import MessageSelector
from reservation_sync.services.base import EventSink, MessageSource
from reservation_sync.tests.fakes import SENDER, SUBJECT, InMemoryEventSink, make_message


@pytest.fixture
def sample_message() -> CandidateMessage:
    """Unread confirmation email with both labels."""
    return make_message()


@pytest.fixture
def event_sink() -> InMemoryEventSink:
    """Calendar fake that accepts every event."""
    return InMemoryEventSink()


@pytest.fixture
def build_processor():
    """Factory wiring a ReservationProcessor to in-memory fakes."""

    def _build(source: MessageSource, sink: EventSink, reminders=(120, 30)) -> ReservationProcessor:
        return ReservationProcessor(
            source=source,
            selector=MessageSelector(source, SENDER, SUBJECT),
            event_creator=EventCreator(sink, list(reminders)),
            extraction=ExtractionConfig(),
        )

    return _build
