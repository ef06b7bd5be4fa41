"""Shared utility functions for the agent memory hook.

Timestamps written to the event journal and to the memory store use a
single format: UTC, whole seconds, ``Z`` suffix (``2026-01-02T03:04:05Z``).
Centralizing the format here keeps journal entries and store metadata
comparable.
"""

from datetime import datetime, timezone

UTC_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def utc_now() -> datetime:
    """Get current UTC datetime (timezone-aware).

    Returns:
        A timezone-aware datetime object representing the current time in UTC.
    """
    return datetime.now(timezone.utc)


def format_utc_timestamp(dt: datetime) -> str:
    """Format a datetime as ISO-8601 UTC with second precision.

    Naive datetimes are assumed to already be UTC. Fractional seconds
    are truncated, never rounded.

    Args:
        dt: A datetime object (naive or timezone-aware).

    Returns:
        Timestamp string such as ``2026-01-02T03:04:05Z``.

    Example:
        >>> from datetime import datetime, timezone
        >>> format_utc_timestamp(datetime(2024, 1, 15, 10, 30, 5, 999999, tzinfo=timezone.utc))
        '2024-01-15T10:30:05Z'
    """
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)
    return dt.replace(microsecond=0).strftime(UTC_TIMESTAMP_FORMAT)


def utc_timestamp() -> str:
    """Get the current instant as a second-precision UTC timestamp string."""
    return format_utc_timestamp(utc_now())
