"""
Time helpers for the Formation Board application.

Formation timestamps are stored as ISO-8601 strings. Catalogs written by the
first mobile release encoded dates as seconds since the platform reference
date (2001-01-01 UTC), so both forms are accepted when reading.
"""
from datetime import datetime, timedelta, timezone
from typing import Union

from .constants import DATE_DISPLAY_FORMAT

# Reference date of the platform date encoding
REFERENCE_DATE = datetime(2001, 1, 1, tzinfo=timezone.utc)


def utc_now() -> datetime:
    """
    Get the current time as a timezone-aware UTC datetime.

    Returns:
        Current time in UTC
    """
    return datetime.now(timezone.utc)


def to_iso(value: datetime) -> str:
    """Serialize a datetime as an ISO-8601 string."""
    return value.isoformat()


def parse_timestamp(raw: Union[str, int, float]) -> datetime:
    """
    Parse a persisted timestamp.

    Args:
        raw: ISO-8601 string, or seconds since 2001-01-01 UTC

    Returns:
        Parsed datetime; naive ISO values are assumed to be UTC

    Raises:
        ValueError: If the value is neither a valid ISO-8601 string nor a number
            in the representable date range

    Example:
        >>> parse_timestamp(0).year
        2001
    """
    if isinstance(raw, bool):
        raise ValueError(f"Invalid timestamp: {raw!r}")
    if isinstance(raw, (int, float)):
        try:
            return REFERENCE_DATE + timedelta(seconds=raw)
        except (OverflowError, ValueError) as e:
            raise ValueError(f"Timestamp out of range: {raw!r}") from e
    if not isinstance(raw, str):
        raise ValueError(f"Invalid timestamp: {raw!r}")
    text = raw.strip()
    # fromisoformat only understands the Z suffix on newer interpreters
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def fmt_created_at(value: datetime) -> str:
    """
    Format a creation timestamp for list display in local time.

    Example:
        '2025/12/03 14:30'
    """
    return value.astimezone().strftime(DATE_DISPLAY_FORMAT)
