"""
Calendar event creation for extracted reservations.
"""

from reservation_sync.core.exceptions import ConfigurationError
from reservation_sync.core.logging import get_logger
from reservation_sync.core.models import CalendarEvent, ReservationRecord
from reservation_sync.services.base import EventSink

log = get_logger(__name__)

DEFAULT_DESCRIPTION = "予約確認メールから自動登録"


class EventCreator:
    """Turns a ReservationRecord into a calendar event with popup reminders."""

    def __init__(
        self,
        sink: EventSink,
        reminder_minutes_before: list[int] | tuple[int, ...],
        description: str = DEFAULT_DESCRIPTION,
    ):
        if any(minutes < 0 for minutes in reminder_minutes_before):
            raise ConfigurationError(f"Negative reminder offset in {list(reminder_minutes_before)}")
        self.sink = sink
        self.reminder_minutes_before = tuple(reminder_minutes_before)
        self.description = description

    def build_event(self, record: ReservationRecord) -> CalendarEvent:
        """Derive the event: one hour long, titled and located at the venue."""
        return CalendarEvent.from_record(record, self.reminder_minutes_before, self.description)

    def create(self, record: ReservationRecord) -> str:
        """
        Create the calendar event for a reservation.

        Errors from the sink are not caught here; the caller decides
        whether the message is retried.

        Returns:
            Event id assigned by the calendar service
        """
        event = self.build_event(record)
        event_id = self.sink.create_event(event)
        log.info(
            "event_created",
            event_id=event_id,
            venue=event.title,
            start=event.start.isoformat(),
            reminders=list(event.reminders),
        )
        return event_id
