"""Application of duplicate groups to a record store.

The executor is the only component that writes. Every write keeps the
duplicate graph a forest of depth at most one: a duplicate always points at
a record that is not itself a duplicate, and no record points at itself.
"""

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from litdedupe.audit.logger import AuditLogger
from litdedupe.clustering import DuplicateGroup
from litdedupe.errors import RecordStoreError
from litdedupe.merge.store import RecordStore
from litdedupe.models import BibliographicRecord
from litdedupe.utils import get_iso_timestamp

__all__ = [
    "ForestViolation",
    "apply_merges",
    "duplicate_chain_depth",
    "find_forest_violations",
]


@dataclass(frozen=True)
class ForestViolation:
    """A record whose ``duplicate_of`` breaks the depth-one forest shape.

    Attributes
    ----------
    record_id : str
        Offending record.
    kind : str
        "self_reference", "chain" or "cycle".
    duplicate_of : str
        The pointer value found on the record.
    """

    record_id: str
    kind: str
    duplicate_of: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"recordId": self.record_id, "kind": self.kind, "duplicateOf": self.duplicate_of}


def _resolve_primary(store: RecordStore, record_id: str) -> str | None:
    """Follow ``duplicate_of`` from ``record_id`` to a record that is not a duplicate.

    Returns None if ``record_id`` is unknown or the pointers loop.
    """
    seen: set[str] = set()
    current = store.get(record_id)
    if current is None:
        return None

    while current.duplicate_of is not None:
        seen.add(current.id)
        if current.duplicate_of in seen:
            return None
        target = store.get(current.duplicate_of)
        if target is None:
            # Dangling weak reference: the pointer value is the best primary known
            return current.duplicate_of
        current = target

    return current.id


def _write(
    store: RecordStore,
    record_id: str,
    duplicate_of: str,
    similarity_score: float,
    updated_at: str,
    logger: AuditLogger | None,
) -> bool:
    try:
        store.update_duplicate(record_id, duplicate_of, similarity_score, updated_at)
    except RecordStoreError as e:
        if logger:
            logger.event(
                "merge_write_failed",
                data={"duplicate_of": duplicate_of, "error": str(e)},
                level="ERROR",
                rid=record_id,
            )
        return False
    return True


def apply_merges(
    groups: Iterable[DuplicateGroup],
    store: RecordStore,
    *,
    logger: AuditLogger | None = None,
    now: Callable[[], str] | None = None,
) -> int:
    """Mark every duplicate of every group in ``store``.

    Before each write the group's primary is re-read from the store. If it
    has meanwhile been marked as a duplicate, the write targets the record it
    points at instead. Records already pointing at the duplicate being marked
    are re-pointed at the same target. Failed writes are logged and skipped.

    Parameters
    ----------
    groups : Iterable[DuplicateGroup]
        Groups to apply.
    store : RecordStore
        Record store receiving the writes.
    logger : AuditLogger | None, optional
        Receives merge events.
    now : Callable[[], str] | None, optional
        Timestamp factory, by default current UTC time.

    Returns
    -------
    int
        Number of duplicates successfully marked (dependent re-pointing is
        not counted).
    """
    now = now or get_iso_timestamp
    merged = 0
    failed = 0
    skipped = 0

    for group in groups:
        primary_id = group.primary.id

        for duplicate in group.duplicates:
            target_id = _resolve_primary(store, primary_id)

            if target_id is None:
                failed += 1
                if logger:
                    logger.event(
                        "merge_write_failed",
                        data={"duplicate_of": primary_id, "error": "primary cannot be resolved"},
                        level="ERROR",
                        rid=duplicate.id,
                    )
                continue

            if target_id != primary_id and logger:
                logger.warn(
                    "merge_primary_resolved",
                    data={"group_primary": primary_id, "resolved_primary": target_id},
                    rid=duplicate.id,
                )

            if target_id == duplicate.id:
                skipped += 1
                if logger:
                    logger.warn(
                        "merge_self_reference_skipped",
                        data={"group_primary": primary_id},
                        rid=duplicate.id,
                    )
                continue

            timestamp = now()
            written = _write(
                store, duplicate.id, target_id, group.similarity_score, timestamp, logger
            )
            if not written:
                failed += 1
                continue
            merged += 1

            for dependent in store.dependents_of(duplicate.id):
                score = (
                    dependent.similarity_score
                    if dependent.similarity_score is not None
                    else group.similarity_score
                )
                if _write(store, dependent.id, target_id, score, timestamp, logger) and logger:
                    logger.event(
                        "merge_dependent_repointed",
                        data={"previous": duplicate.id, "duplicate_of": target_id},
                        rid=dependent.id,
                    )

    if logger:
        logger.event(
            "merge_complete",
            data={"merged": merged, "failed": failed, "skipped": skipped},
        )

    return merged


def duplicate_chain_depth(records: Sequence[BibliographicRecord]) -> int:
    """Length of the longest ``duplicate_of`` chain among ``records``.

    Pointers to ids outside ``records`` count as one step.

    Raises
    ------
    ValueError
        If the pointers contain a cycle.
    """
    by_id = {r.id: r for r in records}
    deepest = 0

    for record in records:
        depth = 0
        seen = {record.id}
        current = record
        while current.duplicate_of is not None:
            depth += 1
            if current.duplicate_of in seen:
                raise ValueError(f"duplicate_of cycle through record {current.duplicate_of}")
            seen.add(current.duplicate_of)
            target = by_id.get(current.duplicate_of)
            if target is None:
                break
            current = target
        deepest = max(deepest, depth)

    return deepest


def find_forest_violations(records: Sequence[BibliographicRecord]) -> list[ForestViolation]:
    """List records whose pointers break the depth-one forest shape."""
    by_id = {r.id: r for r in records}
    violations: list[ForestViolation] = []

    for record in records:
        pointer = record.duplicate_of
        if pointer is None:
            continue

        if pointer == record.id:
            violations.append(ForestViolation(record.id, "self_reference", pointer))
            continue

        target = by_id.get(pointer)
        if target is None or target.duplicate_of is None:
            continue

        # Walk on to tell a plain chain from a pointer loop
        kind = "chain"
        seen = {record.id}
        current = target
        while current is not None and current.duplicate_of is not None:
            if current.duplicate_of in seen:
                kind = "cycle"
                break
            seen.add(current.id)
            current = by_id.get(current.duplicate_of)

        violations.append(ForestViolation(record.id, kind, pointer))

    return violations
