"""Utility functions for metadata processing.

This module provides the timestamp parsing shared by the XMP and EXIF readers.

Design:
- Camera and editor software write capture dates in a handful of layouts
  (EXIF colon dates, ISO 8601 with or without fractions and offsets); all are
  normalised to naive local datetimes so the template sees wall-clock time.
"""

from datetime import datetime
from typing import Optional

DATE_FORMATS = (
    "%Y:%m:%d %H:%M:%S",
    "%Y-%m-%d %H:%M:%S",
    "%Y:%m:%d %H:%M:%S%z",
    "%Y:%m:%d %H:%M:%S.%f",
)


def parse_capture_date(value: Optional[str]) -> Optional[datetime]:
    """Parse a capture timestamp as written by cameras and XMP editors.

    Args:
        value: Raw timestamp text, e.g. ``"2026:02:08 10:20:30"`` or
            ``"2026-02-08T10:20:30.123+09:00"``.

    Returns:
        A naive datetime in local time, or None if the text is not a date.
    """
    if not value:
        return None
    text = value.strip().rstrip("\x00")
    if not text or text.startswith("0000"):
        return None

    parsed: Optional[datetime] = None
    for fmt in DATE_FORMATS:
        try:
            parsed = datetime.strptime(text, fmt)
            break
        except ValueError:
            continue
    if parsed is None:
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None

    if parsed.tzinfo is not None:
        # Reason: offsets are converted to the machine's wall clock, matching
        # how naive EXIF dates are interpreted.
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def first_present(values: dict[str, str], keys: tuple[str, ...]) -> Optional[str]:
    """Return the first non-empty value among *keys* (in priority order)."""
    for key in keys:
        value = values.get(key)
        if value and value.strip():
            return value.strip()
    return None
