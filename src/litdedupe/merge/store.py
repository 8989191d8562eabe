"""Record store boundary used by the merge executor.

Records reference their primary through ``duplicate_of`` (an id, never an
object reference), so every store is an arena keyed by record id.
"""

import json
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Protocol, runtime_checkable

from litdedupe.errors import RecordStoreError
from litdedupe.models import BibliographicRecord

__all__ = ["InMemoryRecordStore", "JsonlRecordStore", "RecordStore"]


@runtime_checkable
class RecordStore(Protocol):
    """Persistence operations needed to mark duplicates."""

    def get(self, record_id: str) -> BibliographicRecord | None:
        """Return the current snapshot of a record, or None if unknown."""
        ...

    def update_duplicate(
        self,
        record_id: str,
        duplicate_of: str,
        similarity_score: float,
        updated_at: str,
    ) -> BibliographicRecord:
        """Persist the deduplication fields of one record."""
        ...

    def dependents_of(self, record_id: str) -> list[BibliographicRecord]:
        """Return records whose ``duplicate_of`` is ``record_id``."""
        ...


class InMemoryRecordStore:
    """Dictionary-backed record arena.

    Insertion order is preserved, so ``records()`` returns records in the
    order they were loaded.
    """

    def __init__(self, records: Iterable[BibliographicRecord] = ()) -> None:
        """Initialize store.

        Parameters
        ----------
        records : Iterable[BibliographicRecord], optional
            Initial records.

        Raises
        ------
        ValueError
            If two records share an id.
        """
        self._records: dict[str, BibliographicRecord] = {}
        for record in records:
            if record.id in self._records:
                raise ValueError(f"Duplicate record id: {record.id}")
            self._records[record.id] = record

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[BibliographicRecord]:
        return iter(self._records.values())

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._records

    def get(self, record_id: str) -> BibliographicRecord | None:
        """Current snapshot of ``record_id``, or None when unknown."""
        return self._records.get(record_id)

    def records(self) -> list[BibliographicRecord]:
        """All records in insertion order."""
        return list(self._records.values())

    def unmarked(self) -> list[BibliographicRecord]:
        """Records not yet marked as duplicates (detection input)."""
        return [r for r in self._records.values() if r.duplicate_of is None]

    def update_duplicate(
        self,
        record_id: str,
        duplicate_of: str,
        similarity_score: float,
        updated_at: str,
    ) -> BibliographicRecord:
        """Swap in a new snapshot with updated deduplication fields.

        Raises
        ------
        RecordStoreError
            If the record does not exist.
        """
        current = self._records.get(record_id)
        if current is None:
            raise RecordStoreError(f"Record not found: {record_id}", record_id=record_id)

        updated = current.mark_duplicate(
            duplicate_of=duplicate_of,
            similarity_score=similarity_score,
            updated_at=updated_at,
        )
        self._records[record_id] = updated
        return updated

    def dependents_of(self, record_id: str) -> list[BibliographicRecord]:
        """Records whose ``duplicate_of`` points at ``record_id``."""
        return [r for r in self._records.values() if r.duplicate_of == record_id]


class JsonlRecordStore(InMemoryRecordStore):
    """In-memory arena loaded from, and saved to, a JSONL file."""

    def __init__(self, path: Path | str, records: Iterable[BibliographicRecord] = ()) -> None:
        super().__init__(records)
        self.path = Path(path)

    @classmethod
    def load(cls, path: Path | str) -> "JsonlRecordStore":
        """Load records from a JSONL file (one record object per line).

        Blank lines are ignored.

        Raises
        ------
        FileNotFoundError
            If the file does not exist.
        ValueError
            If a line is not valid JSON, lacks an id, or repeats an id.
        """
        path = Path(path)
        records: list[BibliographicRecord] = []
        with path.open(encoding="utf-8") as f:
            for line_num, line in enumerate(f, start=1):
                if not line.strip():
                    continue
                try:
                    data = json.loads(line)
                except json.JSONDecodeError as e:
                    raise ValueError(f"{path}:{line_num}: invalid JSON: {e.msg}") from e
                if not isinstance(data, dict):
                    raise ValueError(f"{path}:{line_num}: expected a JSON object")
                try:
                    records.append(BibliographicRecord.from_dict(data))
                except ValueError as e:
                    raise ValueError(f"{path}:{line_num}: {e}") from e
        return cls(path, records)

    def save(self, path: Path | str | None = None) -> Path:
        """Write all records as JSONL, to ``path`` or back to the source file."""
        out_path = Path(path) if path is not None else self.path
        out_path.parent.mkdir(parents=True, exist_ok=True)
        with out_path.open("w", encoding="utf-8") as f:
            for record in self._records.values():
                f.write(json.dumps(record.to_dict(), ensure_ascii=False) + "\n")
        return out_path
