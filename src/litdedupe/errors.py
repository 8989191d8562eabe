"""Exceptions raised by the detection engine.

Only caller errors and cancellation are raised. Recoverable conditions
(insufficient data, judgment-service failures, merge races) are reported as
values and audit events instead.
"""

import threading

__all__ = [
    "DetectionCancelledError",
    "InvalidThresholdError",
    "RecordStoreError",
    "raise_if_cancelled",
    "validate_threshold",
]


class InvalidThresholdError(ValueError):
    """Raised when a similarity threshold lies outside [0, 1]."""

    def __init__(self, name: str, value: float) -> None:
        """Initialize threshold error.

        Parameters
        ----------
        name : str
            Parameter name (e.g., "threshold").
        value : float
            Rejected value.
        """
        super().__init__(f"{name} must be in [0, 1], got {value}")
        self.name = name
        self.value = value


class DetectionCancelledError(Exception):
    """Raised when a detection run is cancelled between comparisons."""


class RecordStoreError(Exception):
    """Raised by a record store when a write cannot be applied."""

    def __init__(self, message: str, record_id: str | None = None) -> None:
        """Initialize store error.

        Parameters
        ----------
        message : str
            Error message.
        record_id : str | None, optional
            Record the failed operation targeted.
        """
        super().__init__(message)
        self.record_id = record_id


def validate_threshold(value: float, name: str = "threshold") -> float:
    """Return ``value`` if it lies in [0, 1], else raise InvalidThresholdError."""
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise InvalidThresholdError(name, value)
    if not 0.0 <= value <= 1.0:
        raise InvalidThresholdError(name, value)
    return float(value)


def raise_if_cancelled(cancel_event: threading.Event | None) -> None:
    """Raise DetectionCancelledError when ``cancel_event`` is set."""
    if cancel_event is not None and cancel_event.is_set():
        raise DetectionCancelledError("Duplicate detection was cancelled")
