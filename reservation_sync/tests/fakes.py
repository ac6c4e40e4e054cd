"""
In-memory fakes of the mail and calendar services, plus sample messages.
"""

import itertools

from reservation_sync.core.models import CalendarEvent, CandidateMessage, MessageThread
from reservation_sync.services.base import EventSink, MessageSource

SENDER = "noreply@reserve.example.jp"
SUBJECT = "【ご予約確定】ご来店予約のお知らせ"

VALID_BODY = """山田 太郎 様

この度はご予約いただき誠にありがとうございます。
以下の内容でご予約が確定いたしました。

【店舗名】
　渋谷道玄坂店　

【来店日時】
2025年07月11日（金）14:00

ご来店をお待ちしております。
"""

VENUE_ONLY_BODY = """山田 太郎 様

【店舗名】渋谷道玄坂店
ご来店をお待ちしております。
"""


class InMemoryMessageSource(MessageSource):
    """Mailbox fake: threads held in memory, read flag toggled in place."""

    def __init__(self, threads: list[MessageThread] | None = None, search_error: Exception | None = None):
        self.threads = threads or []
        self.search_error = search_error
        self.marked_read: list[str] = []
        self.connected = False

    def connect(self) -> None:
        self.connected = True

    def disconnect(self) -> None:
        self.connected = False

    def search(self, sender, subject):
        if self.search_error:
            raise self.search_error
        for thread in self.threads:
            if any(m.unread for m in thread.messages):
                yield thread

    def is_unread(self, message):
        return message.unread

    def mark_read(self, message):
        message.unread = False
        self.marked_read.append(message.message_id)


class InMemoryEventSink(EventSink):
    """Calendar fake recording created events; optionally fails every call."""

    def __init__(self, error: Exception | None = None):
        self.error = error
        self.events: list[CalendarEvent] = []
        self._ids = itertools.count(1)

    def create_event(self, event):
        if self.error:
            raise self.error
        self.events.append(event)
        return f"evt-{next(self._ids)}"


def make_message(
    message_id: str = "<msg-1@reserve.example.jp>",
    body: str = VALID_BODY,
    sender: str = f"予約センター <{SENDER}>",
    subject: str = SUBJECT,
    unread: bool = True,
) -> CandidateMessage:
    return CandidateMessage(
        message_id=message_id,
        uid=message_id.strip("<>"),
        thread_id=message_id,
        subject=subject,
        sender=sender,
        body_plain=body,
        unread=unread,
    )


def single_threads(*messages: CandidateMessage) -> list[MessageThread]:
    return [MessageThread(thread_id=m.message_id, messages=[m]) for m in messages]


