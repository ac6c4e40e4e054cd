"""
Normalization of Japanese reservation date tokens.

Turns ``2025年07月11日（金）14:00`` into an aware datetime. The weekday glyph is
discarded, never checked against the real weekday.
"""

import re
from datetime import datetime, tzinfo

from reservation_sync.core.exceptions import DateNormalizationError

# Token as it appears in the body: YYYY年M月D日（W）H:MM
VISIT_TOKEN_PATTERN = r"\d{4}年\d{1,2}月\d{1,2}日（.）\d{1,2}:\d{2}"

_WEEKDAY = re.compile(r"（.）")
_UNIT_GLYPHS = str.maketrans({"年": "/", "月": "/", "日": " "})
_SLASH_FORMAT = re.compile(r"(\d{4})/(\d{1,2})/(\d{1,2}) (\d{1,2}):(\d{2})")


def to_slash_format(token: str) -> str:
    """Rewrite a token as ``YYYY/M/D H:MM``.

    >>> to_slash_format("2025年07月11日（金）14:00")
    '2025/07/11 14:00'
    """
    return _WEEKDAY.sub("", token.strip()).translate(_UNIT_GLYPHS)


def normalize_visit_token(token: str, tz: tzinfo | None = None) -> datetime:
    """
    Convert a visit date token into an absolute timestamp.

    Args:
        token: Matched date token, e.g. ``2025年7月1日（火）9:30``
        tz: Zone the visit time is expressed in. Host local time when None.

    Returns:
        Time-zone aware datetime

    Raises:
        DateNormalizationError: if the token is malformed or out of range
    """
    normalized = to_slash_format(token)
    match = _SLASH_FORMAT.fullmatch(normalized)
    if not match:
        raise DateNormalizationError(f"Unrecognized visit date: {token!r}")

    year, month, day, hour, minute = (int(part) for part in match.groups())
    try:
        naive = datetime(year, month, day, hour, minute)
    except ValueError as e:
        raise DateNormalizationError(f"Invalid visit date {token!r}: {e}") from e

    if tz is None:
        # Interprets the naive value as host local time
        return naive.astimezone()
    return naive.replace(tzinfo=tz)
