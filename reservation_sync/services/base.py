"""
Capability interfaces for the mail and calendar services.

The processing core only talks to these, so real services and in-memory
fakes are interchangeable.
"""

from abc import ABC, abstractmethod
from typing import Iterator

from reservation_sync.core.models import CalendarEvent, CandidateMessage, MessageThread


class MessageSource(ABC):
    """Mailbox that can be searched and can mark messages read."""

    def connect(self) -> None:
        """Open any underlying connection. No-op by default."""

    def disconnect(self) -> None:
        """Close any underlying connection. No-op by default."""

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()

    @abstractmethod
    def search(self, sender: str, subject: str) -> Iterator[MessageThread]:
        """
        Find threads holding unread messages from sender with subject.

        Args:
            sender: Sender address to match
            subject: Subject line to match

        Yields:
            MessageThread objects
        """
        pass

    @abstractmethod
    def is_unread(self, message: CandidateMessage) -> bool:
        """Re-read the current unread flag of a message from the service."""
        pass

    @abstractmethod
    def mark_read(self, message: CandidateMessage) -> None:
        """Mark a message read. Idempotent."""
        pass


class EventSink(ABC):
    """Calendar that accepts new events."""

    @abstractmethod
    def create_event(self, event: CalendarEvent) -> str:
        """
        Persist an event, reminders included.

        Args:
            event: Event to create

        Returns:
            Identifier assigned by the calendar service
        """
        pass
