"""Reservation field extractors."""

from .dates import normalize_visit_token, to_slash_format
from .reservation import (
    ExtractionConfig,
    ExtractionResult,
    FieldResult,
    extract_reservation,
    extract_venue_name,
    extract_visit_start,
)

__all__ = [
    "normalize_visit_token",
    "to_slash_format",
    "ExtractionConfig",
    "ExtractionResult",
    "FieldResult",
    "extract_reservation",
    "extract_venue_name",
    "extract_visit_start",
]
