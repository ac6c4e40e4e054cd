"""
Centralized configuration using Pydantic Settings.

All environment variables are loaded and validated here.
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # IMAP
    imap_host: str = "imap.gmail.com"
    imap_port: int = 993
    imap_user: str = ""
    imap_password: str = ""
    imap_folder: str = "INBOX"

    # Which messages count as reservation confirmations
    reservation_sender: str = ""
    reservation_subject: str = ""

    # Body label markers
    venue_label: str = "【店舗名】"
    visit_label: str = "【来店日時】"

    # IANA zone for visit times; host local time when unset
    timezone: str | None = None

    # Calendar event
    reminder_minutes_before: list[int] = [120, 30]
    event_description: str = "予約確認メールから自動登録"

    # Google Calendar integration
    google_service_account_json: str = ""  # Full JSON string of service account key
    google_calendar_subject: str = ""  # Account the SA impersonates (domain-wide delegation)
    google_calendar_id: str = "primary"

    # Scheduler
    scheduler_enabled: bool = True
    scheduler_interval_minutes: int = 15

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    @field_validator("reminder_minutes_before")
    @classmethod
    def _reminders_non_negative(cls, value: list[int]) -> list[int]:
        if any(minutes < 0 for minutes in value):
            raise ValueError("reminder offsets must be non-negative")
        return value

    @property
    def google_calendar_configured(self) -> bool:
        """Whether Google Calendar credentials are present."""
        return bool(self.google_service_account_json)


# Global settings instance
settings = Settings()
