"""
Utilities for standardized datetime handling.
"""
from datetime import datetime, timezone
from typing import Optional, Union
from zoneinfo import ZoneInfo

Number = Union[int, float]

# Minute first, then hour: mm/hh dd/mm/yyyy
DISPLAY_FORMAT = "%M/%H %d/%m/%Y"


def utc_now() -> datetime:
    """
    Get current UTC time as timezone-aware datetime.

    Returns:
        datetime: Current UTC time
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """
    Ensure datetime is UTC timezone-aware.

    Args:
        dt: Datetime to process

    Returns:
        datetime: UTC timezone-aware datetime
    """
    # If timezone-naive, assume it's already UTC and add timezone
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)

    # If it has a different timezone, convert to UTC
    return dt.astimezone(timezone.utc)


def from_epoch_ms(epoch_ms: Number) -> datetime:
    """
    Convert epoch milliseconds to an aware UTC datetime.

    Raises:
        ValueError: If the instant cannot be represented
    """
    try:
        return datetime.fromtimestamp(epoch_ms / 1000, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as e:
        raise ValueError(f"Timestamp out of range: {epoch_ms}") from e


def from_epoch_seconds(epoch_s: Number) -> datetime:
    """Convert epoch seconds to an aware UTC datetime."""
    return from_epoch_ms(epoch_s * 1000)


def format_datetime(dt: Optional[datetime] = None) -> str:
    """
    Format datetime as ISO 8601 string.

    Args:
        dt: Datetime to format (defaults to current UTC time)

    Returns:
        str: ISO 8601 formatted string
    """
    if dt is None:
        dt = utc_now()
    return ensure_utc(dt).isoformat()


def format_display_time(epoch_ms: Number, tz_name: str) -> str:
    """
    Render an epoch-millisecond instant for notifications.

    Args:
        epoch_ms: Instant in epoch milliseconds
        tz_name: IANA timezone to render in

    Returns:
        str: Local time as ``mm/hh dd/mm/yyyy`` on a 24 hour clock
    """
    local = from_epoch_ms(epoch_ms).astimezone(ZoneInfo(tz_name))
    return local.strftime(DISPLAY_FORMAT)


def format_display_time_from_seconds(epoch_s: Number, tz_name: str) -> str:
    return format_display_time(epoch_s * 1000, tz_name)
