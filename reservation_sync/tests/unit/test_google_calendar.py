"""Unit tests for the Google Calendar sink."""

import pytest
from datetime import datetime, timedelta
from unittest.mock import MagicMock, patch
from zoneinfo import ZoneInfo

from reservation_sync.core.exceptions import ConfigurationError
from reservation_sync.core.models import CalendarEvent
from reservation_sync.services.google_calendar import GoogleCalendarSink


@pytest.fixture
def event() -> CalendarEvent:
    start = datetime(2025, 7, 11, 14, 0, tzinfo=ZoneInfo("Asia/Tokyo"))
    return CalendarEvent(
        title="渋谷道玄坂店",
        start=start,
        end=start + timedelta(minutes=60),
        location="渋谷道玄坂店",
        description="予約確認メールから自動登録",
        reminders=(120, 30),
    )


@pytest.fixture
def service():
    """Mocked Calendar API client."""
    service = MagicMock()
    service.events.return_value.insert.return_value.execute.return_value = {"id": "abc123"}
    return service


class TestGoogleCalendarSink:
    """Tests for event body construction and insertion."""

    def test_event_body(self, service, event):
        body = GoogleCalendarSink(service=service, calendar_id="primary", timezone="").event_body(event)

        assert body["summary"] == "渋谷道玄坂店"
        assert body["location"] == "渋谷道玄坂店"
        assert body["start"] == {"dateTime": "2025-07-11T14:00:00+09:00"}
        assert body["end"] == {"dateTime": "2025-07-11T15:00:00+09:00"}
        assert body["reminders"] == {
            "useDefault": False,
            "overrides": [
                {"method": "popup", "minutes": 120},
                {"method": "popup", "minutes": 30},
            ],
        }

    def test_event_body_with_timezone(self, service, event):
        body = GoogleCalendarSink(service=service, timezone="Asia/Tokyo").event_body(event)

        assert body["start"]["timeZone"] == "Asia/Tokyo"
        assert body["end"]["timeZone"] == "Asia/Tokyo"

    def test_create_event_inserts_and_returns_id(self, service, event):
        sink = GoogleCalendarSink(service=service, calendar_id="team@example.com", timezone="")

        assert sink.create_event(event) == "abc123"

        insert = service.events.return_value.insert
        insert.assert_called_once()
        assert insert.call_args.kwargs["calendarId"] == "team@example.com"
        assert insert.call_args.kwargs["body"]["summary"] == "渋谷道玄坂店"

    def test_api_error_propagates(self, service, event):
        service.events.return_value.insert.return_value.execute.side_effect = RuntimeError("503")

        with pytest.raises(RuntimeError, match="503"):
            GoogleCalendarSink(service=service, timezone="").create_event(event)

    def test_missing_credentials(self):
        with patch("reservation_sync.services.google_calendar.settings") as settings:
            settings.google_service_account_json = ""
            settings.google_calendar_subject = ""
            settings.google_calendar_id = "primary"
            settings.timezone = None

            with pytest.raises(ConfigurationError):
                GoogleCalendarSink()

    def test_builds_delegated_credentials(self):
        with patch("reservation_sync.services.google_calendar.service_account") as sa, \
                patch("reservation_sync.services.google_calendar.build") as build:
            credentials = sa.Credentials.from_service_account_info.return_value

            GoogleCalendarSink(service_account_json='{"type": "service_account"}', subject="owner@example.com")

            sa.Credentials.from_service_account_info.assert_called_once_with(
                {"type": "service_account"},
                scopes=["https://www.googleapis.com/auth/calendar"],
            )
            credentials.with_subject.assert_called_once_with("owner@example.com")
            build.assert_called_once_with(
                "calendar", "v3", credentials=credentials.with_subject.return_value, cache_discovery=False
            )
