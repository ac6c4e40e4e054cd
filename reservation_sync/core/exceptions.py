"""
Exception hierarchy for reservation sync.
"""


class ReservationSyncError(Exception):
    """Base class for errors raised by reservation sync."""


class SelectionError(ReservationSyncError):
    """Candidate messages could not be queried; the whole run is aborted."""


class ConfigurationError(ReservationSyncError):
    """A collaborator was built with missing or invalid settings."""


class DateNormalizationError(ReservationSyncError, ValueError):
    """A visit date token matched the expected shape but is not a real date."""
