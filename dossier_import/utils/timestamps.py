"""Timestamp utilities for UTC handling and ISO date formatting.

Import metadata carries two kinds of stamps: calendar dates (sourcingDate,
accessedDate) formatted YYYY-MM-DD, and full instants (importDate) formatted
as ISO 8601 with a 'Z' suffix. Both are derived from a single injected
reference time so normalization stays deterministic under test.
"""

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Ensure a datetime is timezone-aware and in UTC.

    Naive datetimes are treated as UTC; aware ones are converted.

    Example:
        >>> naive = datetime(2026, 10, 18, 12, 0, 0)
        >>> ensure_utc(naive).tzinfo == timezone.utc
        True
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def format_timestamp(dt: datetime, include_microseconds: bool = False) -> str:
    """Format a datetime as ISO 8601 string in UTC with a 'Z' suffix.

    Example:
        >>> format_timestamp(datetime(2026, 10, 18, 12, 0, 0, tzinfo=timezone.utc))
        '2026-10-18T12:00:00Z'
    """
    dt_utc = ensure_utc(dt)
    if dt_utc is None:
        return ""

    if include_microseconds:
        return dt_utc.strftime("%Y-%m-%dT%H:%M:%S.%fZ")
    return dt_utc.strftime("%Y-%m-%dT%H:%M:%SZ")


def format_date(dt: datetime) -> str:
    """Format the UTC calendar date of a datetime as YYYY-MM-DD."""
    dt_utc = ensure_utc(dt)
    if dt_utc is None:
        return ""
    return dt_utc.strftime("%Y-%m-%d")


def today_iso(now: Optional[datetime] = None) -> str:
    """Today's UTC date as YYYY-MM-DD, relative to ``now`` when given."""
    return format_date(now or utc_now())
