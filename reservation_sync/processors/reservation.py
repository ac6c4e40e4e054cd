"""
Reservation email processor.

Turns unread reservation-confirmation emails into calendar events. The
mailbox read flag is the only record of what has been handled:

- event created            -> mark read
- body cannot be parsed    -> mark read (permanent skip)
- event creation failed    -> leave unread, retried next run
"""

from zoneinfo import ZoneInfo

from reservation_sync.config import Settings, settings as default_settings
from reservation_sync.core.exceptions import SelectionError
from reservation_sync.core.logging import get_logger, bind_context, clear_context
from reservation_sync.core.models import CandidateMessage, ProcessingOutcome, ProcessingResult
from reservation_sync.extractors.reservation import ExtractionConfig, extract_reservation
from reservation_sync.handlers.event_creator import EventCreator
from reservation_sync.processors.base import BaseProcessor
from reservation_sync.processors.selector import MessageSelector
from reservation_sync.services.base import MessageSource

log = get_logger(__name__)

_STAT_KEYS = {
    ProcessingOutcome.COMPLETED: "created",
    ProcessingOutcome.SKIPPED_MALFORMED: "skipped_malformed",
    ProcessingOutcome.RETRY_PENDING: "retry_pending",
    ProcessingOutcome.ALREADY_READ: "already_read",
}


class ReservationProcessor(BaseProcessor):
    """
    Drives one run over all candidate messages.

    A failure on one message never stops the run; a failure to select
    messages aborts it with SelectionError.
    """

    def __init__(
        self,
        source: MessageSource,
        selector: MessageSelector,
        event_creator: EventCreator,
        extraction: ExtractionConfig | None = None,
    ):
        self.source = source
        self.selector = selector
        self.event_creator = event_creator
        self.extraction = extraction or ExtractionConfig()

    def process(self) -> dict:
        """
        Run the reservation pipeline once.

        Returns:
            Statistics dict with counts per outcome

        Raises:
            SelectionError: if candidate messages could not be queried
        """
        stats = {
            "selected": 0,
            "created": 0,
            "skipped_malformed": 0,
            "retry_pending": 0,
            "already_read": 0,
        }

        try:
            with self.source:
                for message in self.selector.select():
                    stats["selected"] += 1
                    result = self.process_message(message)
                    stats[_STAT_KEYS[result.outcome]] += 1
        except Exception as e:
            log.error("selection_failed", error=str(e), **stats)
            raise SelectionError(str(e)) from e

        log.info("reservation_processing_complete", **stats)
        return stats

    def process_message(self, message: CandidateMessage) -> ProcessingResult:
        """Process one candidate; never raises."""
        bind_context(message_id=message.message_id, subject=message.subject)
        try:
            return self._process_single(message)
        except Exception as e:
            # Message stays unread and is picked up again next run
            log.error("message_processing_error", error=str(e))
            return ProcessingResult(
                message_id=message.message_id,
                subject=message.subject,
                outcome=ProcessingOutcome.RETRY_PENDING,
                error=str(e),
            )
        finally:
            clear_context()

    def _process_single(self, message: CandidateMessage) -> ProcessingResult:
        # Another path may have handled it since selection
        if not self.source.is_unread(message):
            log.info("message_already_read")
            return ProcessingResult(
                message_id=message.message_id,
                subject=message.subject,
                outcome=ProcessingOutcome.ALREADY_READ,
            )

        extraction = extract_reservation(message.body, self.extraction)

        if not extraction.complete:
            self.source.mark_read(message)
            log.warning("reservation_skipped_malformed", reasons=extraction.reasons)
            return ProcessingResult(
                message_id=message.message_id,
                subject=message.subject,
                outcome=ProcessingOutcome.SKIPPED_MALFORMED,
                reasons=extraction.reasons,
            )

        record = extraction.record
        log.info(
            "reservation_extracted",
            venue=record.venue_name,
            visit_start=record.visit_start.isoformat(),
        )

        try:
            event_id = self.event_creator.create(record)
        except Exception as e:
            log.error("event_creation_failed", error=str(e))
            return ProcessingResult(
                message_id=message.message_id,
                subject=message.subject,
                outcome=ProcessingOutcome.RETRY_PENDING,
                error=str(e),
            )

        self.source.mark_read(message)
        return ProcessingResult(
            message_id=message.message_id,
            subject=message.subject,
            outcome=ProcessingOutcome.COMPLETED,
            event_id=event_id,
        )


def build_processor(config: Settings | None = None) -> ReservationProcessor:
    """Wire a processor to IMAP and Google Calendar from settings."""
    from reservation_sync.services.google_calendar import GoogleCalendarSink
    from reservation_sync.services.imap import IMAPMessageSource

    config = config or default_settings
    source = IMAPMessageSource(
        host=config.imap_host,
        user=config.imap_user,
        password=config.imap_password,
        folder=config.imap_folder,
        port=config.imap_port,
    )
    sink = GoogleCalendarSink(
        calendar_id=config.google_calendar_id,
        timezone=config.timezone,
        service_account_json=config.google_service_account_json,
        subject=config.google_calendar_subject,
    )

    return ReservationProcessor(
        source=source,
        selector=MessageSelector(source, config.reservation_sender, config.reservation_subject),
        event_creator=EventCreator(
            sink,
            config.reminder_minutes_before,
            description=config.event_description,
        ),
        extraction=ExtractionConfig(
            venue_label=config.venue_label,
            visit_label=config.visit_label,
            tz=ZoneInfo(config.timezone) if config.timezone else None,
        ),
    )


def run():
    """Entry point for a single processing run."""
    from reservation_sync.core.logging import configure_logging
    configure_logging(default_settings.log_level, default_settings.log_json)

    processor = build_processor()
    stats = processor.process()
    print(f"Reservation processing complete: {stats}")


if __name__ == "__main__":
    run()
