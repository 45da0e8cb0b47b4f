"""
Timestamp helpers.

All timestamps are handled as timezone-aware UTC datetimes.
"""

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Return the current UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(dt: datetime) -> datetime:
    """Attach UTC to naive datetimes, convert aware ones."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_timestamp(value) -> datetime | None:
    """
    Parse a timestamp into an aware UTC datetime.

    Accepts datetimes, unix seconds (int/float) and ISO-8601 strings
    (including a trailing 'Z'). Returns None if the value can't be parsed.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return as_utc(value)
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        try:
            return as_utc(datetime.fromisoformat(value.strip().replace("Z", "+00:00")))
        except ValueError:
            return None
    return None


def to_iso_utc(value) -> str:
    """
    Normalize a timestamp to 'YYYY-MM-DDTHH:MM:SSZ'.

    Raises ValueError if the value can't be parsed.
    """
    dt = parse_timestamp(value)
    if dt is None:
        raise ValueError(f"Invalid timestamp: {value!r}")
    return dt.isoformat(timespec="seconds").replace("+00:00", "Z")
