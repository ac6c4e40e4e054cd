"""
Google Calendar event sink.
"""

import json

from google.oauth2 import service_account
from googleapiclient.discovery import build

from reservation_sync.config import settings
from reservation_sync.core.exceptions import ConfigurationError
from reservation_sync.core.logging import get_logger
from reservation_sync.core.models import CalendarEvent
from reservation_sync.services.base import EventSink

log = get_logger(__name__)

SCOPES = ["https://www.googleapis.com/auth/calendar"]


class GoogleCalendarSink(EventSink):
    """Creates events through the Google Calendar v3 API using a service account."""

    def __init__(
        self,
        service=None,
        calendar_id: str | None = None,
        timezone: str | None = None,
        service_account_json: str | None = None,
        subject: str | None = None,
    ):
        self.calendar_id = calendar_id or settings.google_calendar_id
        self.timezone = timezone if timezone is not None else settings.timezone
        self.service_account_json = service_account_json or settings.google_service_account_json
        self.subject = subject if subject is not None else settings.google_calendar_subject
        self._service = service or self._build_service()

    def _build_service(self):
        """Build an authorized Calendar API client from service account credentials."""
        if not self.service_account_json:
            raise ConfigurationError("GOOGLE_SERVICE_ACCOUNT_JSON is not set")

        sa_info = json.loads(self.service_account_json)
        credentials = service_account.Credentials.from_service_account_info(sa_info, scopes=SCOPES)
        if self.subject:
            credentials = credentials.with_subject(self.subject)

        return build("calendar", "v3", credentials=credentials, cache_discovery=False)

    def event_body(self, event: CalendarEvent) -> dict:
        """Translate a CalendarEvent into a Calendar API resource."""
        start = {"dateTime": event.start.isoformat()}
        end = {"dateTime": event.end.isoformat()}
        if self.timezone:
            start["timeZone"] = self.timezone
            end["timeZone"] = self.timezone

        return {
            "summary": event.title,
            "location": event.location,
            "description": event.description,
            "start": start,
            "end": end,
            "reminders": {
                "useDefault": False,
                "overrides": [
                    {"method": "popup", "minutes": minutes} for minutes in event.reminders
                ],
            },
        }

    def create_event(self, event: CalendarEvent) -> str:
        """Insert the event; API errors propagate to the caller."""
        created = (
            self._service.events()
            .insert(calendarId=self.calendar_id, body=self.event_body(event))
            .execute()
        )
        event_id = created.get("id", "")
        log.info(
            "google_calendar_event_created",
            event_id=event_id,
            calendar_id=self.calendar_id,
            start=event.start.isoformat(),
        )
        return event_id
