"""
Selection of candidate reservation messages.
"""

from typing import Iterator

from reservation_sync.core.logging import get_logger
from reservation_sync.core.models import CandidateMessage
from reservation_sync.services.base import MessageSource

log = get_logger(__name__)


class MessageSelector:
    """Yields unread messages whose sender and subject equal fixed values."""

    def __init__(self, source: MessageSource, sender: str, subject: str):
        self.source = source
        self.sender = sender.strip().lower()
        self.subject = subject.strip()

    def matches(self, message: CandidateMessage) -> bool:
        """Exact predicate: sender address, subject and unread flag."""
        return (
            message.unread
            and message.sender_email == self.sender
            and message.subject.strip() == self.subject
        )

    def select(self) -> Iterator[CandidateMessage]:
        """
        Lazily expand every matching thread into its messages.

        Read-only. Errors from the source propagate to the caller.
        """
        for thread in self.source.search(self.sender, self.subject):
            for message in thread.messages:
                if self.matches(message):
                    yield message
                else:
                    log.debug(
                        "message_not_candidate",
                        message_id=message.message_id,
                        thread_id=thread.thread_id,
                    )
