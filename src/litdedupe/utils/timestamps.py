"""Timestamp utilities for litdedupe.

This module provides consistent timestamp functions across the codebase.
"""

import re
from datetime import UTC, datetime

__all__ = ["get_iso_timestamp", "parse_iso_year"]

_YEAR_PREFIX = re.compile(r"^\s*(\d{4})(?:\D|$)")


def get_iso_timestamp() -> str:
    """Get current UTC timestamp in ISO8601 format with microseconds.

    Returns
    -------
    str
        ISO8601 timestamp with microseconds (e.g., "2026-02-03T12:34:56.123456Z").
    """
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


def parse_iso_year(value: str | None) -> int | None:
    """Extract the year from an ISO-like date string.

    Parameters
    ----------
    value : str | None
        Date such as "2021", "2021-05" or "2021-05-04T00:00:00Z".

    Returns
    -------
    int | None
        Four-digit year, or None when the value does not start with one.
    """
    if not value:
        return None
    match = _YEAR_PREFIX.match(value)
    return int(match.group(1)) if match else None
