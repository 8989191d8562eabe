"""Structured audit logger for JSONL event logging.

Every detection run can be traced through append-only JSONL events: which
strategy ran, when the judgment service was bypassed and why, and which
pointers the merge executor re-resolved.
"""

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any

from litdedupe.audit.models import LOG_LEVELS, LogEvent
from litdedupe.utils import get_iso_timestamp

__all__ = ["AuditLogger"]


class AuditLogger:
    """Append detection and merge events to a JSONL file.

    The file is opened once in append mode, so several runs (or a detection
    run followed by a ``check``) can share one trace. Each event is flushed
    as soon as it is written.

    Attributes
    ----------
    run_id : str
        Identifier stamped on every event.
    log_path : Path
        JSONL file receiving the events.
    current_stage : str | None
        Stage inherited by events that do not name one.
    """

    def __init__(self, run_id: str, log_path: Path) -> None:
        """Open ``log_path`` for appending, creating parent directories.

        Parameters
        ----------
        run_id : str
            Identifier stamped on every event, usually from
            ``generate_run_id()``.
        log_path : Path
            JSONL file receiving the events.
        """
        self.run_id = run_id
        self.log_path = Path(log_path)
        self.current_stage: str | None = None

        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        self._file = self.log_path.open("a", encoding="utf-8")

    def __enter__(self) -> "AuditLogger":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the file; safe to call more than once."""
        if not self._file.closed:
            self._file.flush()
            self._file.close()

    def set_stage(self, stage: str | None) -> None:
        """Set the stage inherited by later events (None clears it)."""
        self.current_stage = stage

    def event(
        self,
        event_type: str,
        data: dict[str, Any] | None = None,
        level: str = "INFO",
        stage: str | None = None,
        rid: str | None = None,
    ) -> None:
        """Append one event.

        Parameters
        ----------
        event_type : str
            Event name, e.g. "judgment_fallback" or "merge_complete".
        data : dict[str, Any] | None, optional
            JSON-serializable payload; an empty object when omitted.
        level : str, optional
            One of "DEBUG", "INFO", "WARN", "ERROR", by default "INFO".
        stage : str | None, optional
            Overrides ``current_stage`` for this event.
        rid : str | None, optional
            Id of the record the event concerns.

        Raises
        ------
        ValueError
            If ``level`` is not a known log level.
        """
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {level}")

        self._write(
            LogEvent(
                ts=get_iso_timestamp(),
                run_id=self.run_id,
                level=level,
                event=event_type,
                data=data or {},
                stage=stage if stage is not None else self.current_stage,
                rid=rid,
            )
        )

    def _write(self, event: LogEvent) -> None:
        json.dump(asdict(event), self._file, ensure_ascii=False, separators=(",", ":"))
        self._file.write("\n")
        self._file.flush()

    def warn(
        self,
        event_type: str,
        data: dict[str, Any] | None = None,
        rid: str | None = None,
    ) -> None:
        """Write a WARN-level event for a recovered condition."""
        self.event(event_type, data=data, level="WARN", rid=rid)

    def stage_started(self, stage: str, expected_records: int | None = None) -> None:
        """Enter ``stage`` and record how many records it will look at."""
        self.set_stage(stage)
        data = {} if expected_records is None else {"expected_records": expected_records}
        self.event("stage_started", data=data, stage=stage)

    def stage_finished(
        self,
        stage: str,
        duration_seconds: float,
        counters: dict[str, int] | None = None,
    ) -> None:
        """Leave ``stage``, recording its wall time and counters.

        Parameters
        ----------
        stage : str
            Stage being left.
        duration_seconds : float
            Wall time spent in the stage.
        counters : dict[str, int] | None, optional
            Stage totals such as groups or duplicates; omitted when empty.
        """
        data: dict[str, Any] = {"duration_seconds": duration_seconds}
        if counters:
            data["counters"] = counters

        self.event("stage_finished", data=data, stage=stage)
        self.set_stage(None)

    def error(
        self,
        exception_class: str,
        message: str,
        stage: str | None = None,
        rid: str | None = None,
    ) -> None:
        """Write an ERROR event for an exception that is about to propagate."""
        self.event(
            "error",
            data={"exception_class": exception_class, "message": message},
            stage=stage,
            level="ERROR",
            rid=rid,
        )
