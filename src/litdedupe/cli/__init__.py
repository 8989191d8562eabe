"""Command-line interface for litdedupe."""
