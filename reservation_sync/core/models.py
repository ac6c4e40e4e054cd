"""
Data models for reservation processing.

Uses dataclasses for clean, typed data structures.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from email.utils import parseaddr
from enum import Enum

# Fixed length of every calendar event created from a reservation
EVENT_DURATION = timedelta(minutes=60)


class ProcessingOutcome(str, Enum):
    """Terminal state of one candidate message within a run."""

    COMPLETED = "completed"  # Event created, message marked read
    SKIPPED_MALFORMED = "skipped_malformed"  # Extraction incomplete, message marked read
    RETRY_PENDING = "retry_pending"  # Event creation failed, message left unread
    ALREADY_READ = "already_read"  # Read by someone else since selection


@dataclass
class CandidateMessage:
    """An inbox message matching the reservation sender/subject filter."""

    message_id: str = ""
    uid: str = ""  # Source-specific handle (IMAP UID)
    thread_id: str = ""
    subject: str = ""
    sender: str = ""
    body_plain: str = ""
    body_html: str = ""
    unread: bool = True

    @property
    def body(self) -> str:
        """Get message body, preferring plain text."""
        return self.body_plain or self._strip_html(self.body_html)

    @property
    def sender_email(self) -> str:
        """Extract email address from sender header."""
        if not self.sender:
            return ""
        _, email = parseaddr(self.sender)
        return email.lower() if email else ""

    @staticmethod
    def _strip_html(html: str) -> str:
        """Strip HTML tags, keeping line structure for label matching."""
        if not html:
            return ""
        text = re.sub(r"(?i)<br\s*/?>|</p>|</div>|</tr>", "\n", html)
        text = re.sub(r"<[^>]+>", "", text)
        return re.sub(r"[ \t]+", " ", text).strip()


@dataclass
class MessageThread:
    """A conversation thread returned by a message search."""

    thread_id: str
    messages: list[CandidateMessage] = field(default_factory=list)


@dataclass(frozen=True)
class ReservationRecord:
    """Venue and visit time extracted from a confirmation email.

    Only built when both fields were extracted.
    """

    venue_name: str
    visit_start: datetime

    def __post_init__(self):
        if not self.venue_name.strip():
            raise ValueError("venue_name must not be empty")


@dataclass(frozen=True)
class CalendarEvent:
    """Event handed to the calendar service."""

    title: str
    start: datetime
    end: datetime
    location: str
    description: str
    reminders: tuple[int, ...] = ()

    @classmethod
    def from_record(
        cls,
        record: ReservationRecord,
        reminders: list[int] | tuple[int, ...],
        description: str,
    ) -> "CalendarEvent":
        """Derive an event from a reservation record."""
        return cls(
            title=record.venue_name,
            start=record.visit_start,
            end=record.visit_start + EVENT_DURATION,
            location=record.venue_name,
            description=description,
            reminders=tuple(reminders),
        )


@dataclass
class ProcessingResult:
    """Result from processing one candidate message."""

    message_id: str
    subject: str
    outcome: ProcessingOutcome
    event_id: str | None = None
    error: str | None = None
    reasons: list[str] = field(default_factory=list)  # Why extraction was incomplete
