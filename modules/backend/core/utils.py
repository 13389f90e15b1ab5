"""
Core Utilities.

Shared utility functions used across the backend.
All modules should import utilities from this module.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-naive datetime.

    All datetime values in the application should be timezone-naive
    and assumed to be UTC.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def utc_timestamp() -> str:
    """
    Return the current UTC time as ISO 8601 text with milliseconds and a Z suffix.

    Example: 2026-10-19T09:40:00.123Z. Stored timestamps use this format so
    that ordering them as text orders them in time.
    """
    return utc_now().isoformat(timespec="milliseconds") + "Z"
