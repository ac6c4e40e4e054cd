"""
Field extraction for reservation-confirmation emails.

Pure functions: a message body goes in, either a complete ReservationRecord
or the list of reasons it could not be built comes out.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from typing import Generic, TypeVar

from reservation_sync.core.exceptions import DateNormalizationError
from reservation_sync.core.models import ReservationRecord
from reservation_sync.extractors.dates import VISIT_TOKEN_PATTERN, normalize_visit_token

T = TypeVar("T")

DEFAULT_VENUE_LABEL = "【店舗名】"
DEFAULT_VISIT_LABEL = "【来店日時】"


@dataclass(frozen=True)
class FieldResult(Generic[T]):
    """Outcome of extracting one field: a value or the reason there is none."""

    value: T | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.value is not None


@dataclass(frozen=True)
class ExtractionResult:
    """Outcome of extracting a whole reservation."""

    record: ReservationRecord | None = None
    reasons: list[str] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return self.record is not None


@dataclass(frozen=True)
class ExtractionConfig:
    """Label markers and zone used to read a body."""

    venue_label: str = DEFAULT_VENUE_LABEL
    visit_label: str = DEFAULT_VISIT_LABEL
    tz: tzinfo | None = None


def extract_venue_name(body: str, label: str = DEFAULT_VENUE_LABEL) -> FieldResult[str]:
    """
    Extract the venue name following the venue label.

    Whitespace after the label (full-width spaces and line breaks included)
    is skipped; the rest of that line is the venue name.
    """
    match = re.search(re.escape(label) + r"\s*([^\r\n]*)", body)
    if not match:
        return FieldResult(error="venue_label_missing")

    venue = match.group(1).strip()
    if not venue:
        return FieldResult(error="venue_name_empty")
    return FieldResult(value=venue)


def extract_visit_start(
    body: str,
    label: str = DEFAULT_VISIT_LABEL,
    tz: tzinfo | None = None,
) -> FieldResult[datetime]:
    """Extract and normalize the visit date-time following the visit label."""
    if label not in body:
        return FieldResult(error="visit_label_missing")

    match = re.search(re.escape(label) + r"\s*(" + VISIT_TOKEN_PATTERN + ")", body)
    if not match:
        return FieldResult(error="visit_date_missing")

    try:
        return FieldResult(value=normalize_visit_token(match.group(1), tz))
    except DateNormalizationError as e:
        return FieldResult(error=f"visit_date_invalid: {e}")


def extract_reservation(
    body: str,
    config: ExtractionConfig | None = None,
) -> ExtractionResult:
    """
    Extract a complete reservation record from a message body.

    Args:
        body: Plain-text message body
        config: Label markers and time zone (defaults when None)

    Returns:
        ExtractionResult holding a record only if both fields were found
    """
    config = config or ExtractionConfig()
    venue = extract_venue_name(body or "", config.venue_label)
    visit = extract_visit_start(body or "", config.visit_label, config.tz)

    if venue.ok and visit.ok:
        return ExtractionResult(
            record=ReservationRecord(venue_name=venue.value, visit_start=visit.value)
        )

    reasons = [result.error for result in (venue, visit) if result.error]
    return ExtractionResult(reasons=reasons)
