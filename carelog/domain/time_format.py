"""
24-hour time invariant.

Every time of day that enters or leaves carelog is written as ``H:MM`` or
``HH:MM`` (hour 0-23, minute 00-59) and never carries an AM/PM marker.
This module detects markers, validates the strict format, strips markers
that slipped in, and renders timestamps without ever producing 12-hour
notation.

Marker detection is word-boundary based, so ``"Campus"`` and ``"8:00am"``
do not match. Dotted markers followed by punctuation or whitespace
(``"10:00 a.m. and"``) are not detected either: the boundary after the
final period never holds. Existing callers rely on that behavior.
"""

import re
from datetime import UTC, datetime, tzinfo
from zoneinfo import ZoneInfo

_MARKER_PATTERN = re.compile(r"\b(AM|PM|am|pm|a\.m\.|p\.m\.|A\.M\.|P\.M\.)\b", re.IGNORECASE)

# No trailing boundary here: a marker is stripped together with the whitespace after it.
_MARKER_STRIP_PATTERN = re.compile(r"\b(AM|PM|am|pm|a\.m\.|p\.m\.|A\.M\.|P\.M\.)\s*", re.IGNORECASE)

STRICT_24_HOUR_PATTERN = re.compile(r"([01]?[0-9]|2[0-3]):[0-5][0-9]")


def contains_twelve_hour_marker(text: str) -> bool:
    """Return True if ``text`` contains a word-delimited AM/PM token."""
    return _MARKER_PATTERN.search(text) is not None


def extract_twelve_hour_markers(text: str) -> list[str]:
    """Return every AM/PM token in ``text``, in order and original case."""
    return [match.group(0) for match in _MARKER_PATTERN.finditer(text)]


def is_strict_24_hour(text: str) -> bool:
    """Return True if ``text`` is exactly ``H:MM`` or ``HH:MM`` on a 24-hour clock."""
    return STRICT_24_HOUR_PATTERN.fullmatch(text) is not None


def normalize_to_24_hour(text: str) -> str:
    """
    Strip surrounding whitespace and AM/PM markers from a time string.

    Digits are never reinterpreted: ``"2:30 PM"`` becomes ``"2:30"``. When
    the cleaned text is not a strict 24-hour time the original input is
    returned untouched so the caller can report it.
    """
    cleaned = _MARKER_STRIP_PATTERN.sub("", text).strip()
    if is_strict_24_hour(cleaned):
        return cleaned
    return text


def resolve_timezone(name: str) -> tzinfo:
    """Map a configured timezone name to a tzinfo."""
    if name.upper() == "UTC":
        return UTC
    return ZoneInfo(name)


def _localize(timestamp: datetime, tz: tzinfo | None) -> datetime:
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=UTC)
    return timestamp.astimezone(tz or UTC)


def format_time_24(timestamp: datetime, tz: tzinfo | None = None) -> str:
    """Format as ``HH:MM``."""
    return _localize(timestamp, tz).strftime("%H:%M")


def format_date(timestamp: datetime, tz: tzinfo | None = None) -> str:
    """Format as ``DD-MM-YYYY``."""
    return _localize(timestamp, tz).strftime("%d-%m-%Y")


def format_datetime_24(timestamp: datetime, tz: tzinfo | None = None) -> str:
    """Format as ``DD-MM-YYYY HH:MM``."""
    return _localize(timestamp, tz).strftime("%d-%m-%Y %H:%M")


def format_date_short(timestamp: datetime, tz: tzinfo | None = None) -> str:
    """Format as ``DD/MM`` for chart axes."""
    return _localize(timestamp, tz).strftime("%d/%m")
