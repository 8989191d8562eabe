"""Common utility functions for litdedupe."""

from litdedupe.utils.timestamps import get_iso_timestamp, parse_iso_year

__all__ = ["get_iso_timestamp", "parse_iso_year"]
