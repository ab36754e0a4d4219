"""Utility functions for hashing and time handling."""

from .hashing import hash_string
from .timestamps import (
    ensure_utc,
    format_date,
    format_timestamp,
    today_iso,
    utc_now,
)

__all__ = [
    # Hashing
    "hash_string",
    # Timestamps
    "utc_now",
    "ensure_utc",
    "format_timestamp",
    "format_date",
    "today_iso",
]
