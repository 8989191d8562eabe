"""Judgment-assisted grouping with rule-based fallback."""

import threading
from collections.abc import Sequence

from litdedupe.audit.logger import AuditLogger
from litdedupe.clustering import JUDGMENT_FIELD, DuplicateGroup, group_rule_based
from litdedupe.errors import raise_if_cancelled
from litdedupe.judgment.models import (
    JudgmentMalformed,
    JudgmentOk,
    JudgmentResult,
    JudgmentUnavailable,
    Verdict,
)
from litdedupe.judgment.prompt import DEFAULT_ABSTRACT_CHARS, build_summaries
from litdedupe.judgment.service import JudgmentService
from litdedupe.models import BibliographicRecord

__all__ = ["DEFAULT_MAX_BATCH_SIZE", "group_assisted"]

DEFAULT_MAX_BATCH_SIZE = 20


def group_assisted(
    records: Sequence[BibliographicRecord],
    threshold: float,
    *,
    service: JudgmentService | None,
    max_batch_size: int = DEFAULT_MAX_BATCH_SIZE,
    abstract_chars: int = DEFAULT_ABSTRACT_CHARS,
    logger: AuditLogger | None = None,
    cancel_event: threading.Event | None = None,
) -> list[DuplicateGroup]:
    """Group records using an external judgment service.

    Only the first ``max_batch_size`` records are sent; callers needing full
    coverage should combine this with the rule-based pass (hybrid method).

    Parameters
    ----------
    records : Sequence[BibliographicRecord]
        Records in a stable order.
    threshold : float
        Minimum verdict confidence (inclusive).
    service : JudgmentService | None
        Judgment backend. None behaves like an unavailable service.
    max_batch_size : int, optional
        Batch cap, by default 20.
    abstract_chars : int, optional
        Abstract truncation length, by default 200.
    logger : AuditLogger | None, optional
        Receives truncation and fallback events.
    cancel_event : threading.Event | None, optional
        Checked before the service call and during fallback.

    Returns
    -------
    list[DuplicateGroup]
        Groups built from accepted verdicts, or the rule-based groups over
        all records when the service is unavailable or answers malformed.
    """
    batch = list(records[:max_batch_size])
    batch_ids = [r.id for r in batch]

    if logger and len(records) > len(batch):
        logger.event(
            "judgment_batch_truncated",
            data={"records_total": len(records), "records_sent": len(batch)},
        )

    raise_if_cancelled(cancel_event)

    result: JudgmentResult
    if service is None:
        result = JudgmentUnavailable(reason="no judgment service configured")
    else:
        summaries = build_summaries(batch, abstract_chars=abstract_chars)
        try:
            result = service.classify(summaries)
        except Exception as e:
            # Third-party backends may raise despite the tagged contract
            result = JudgmentUnavailable(reason=f"{type(e).__name__}: {e}")

    if isinstance(result, JudgmentOk):
        return _groups_from_verdicts(batch, result.verdicts, threshold)

    if logger:
        logger.warn(
            "judgment_fallback",
            data={
                "kind": "malformed" if isinstance(result, JudgmentMalformed) else "unavailable",
                "reason": result.reason,
                "fallback": "rule_based",
                "threshold": threshold,
                "record_ids": batch_ids,
            },
        )

    return group_rule_based(records, threshold, cancel_event=cancel_event)


def _groups_from_verdicts(
    batch: Sequence[BibliographicRecord],
    verdicts: Sequence[Verdict],
    threshold: float,
) -> list[DuplicateGroup]:
    """Turn each verdict at or above ``threshold`` into a group.

    A verdict's own primary index and repeated indexes are dropped. Groups may
    overlap or chain; the merge executor keeps the stored pointers flat.
    """
    groups: list[DuplicateGroup] = []

    for verdict in verdicts:
        if verdict.confidence < threshold:
            continue

        duplicate_indexes: list[int] = []
        for index in verdict.duplicate_indexes:
            if index == verdict.primary_index or index in duplicate_indexes:
                continue
            duplicate_indexes.append(index)

        if not duplicate_indexes:
            continue

        groups.append(
            DuplicateGroup(
                primary=batch[verdict.primary_index],
                duplicates=tuple(batch[i] for i in duplicate_indexes),
                similarity_score=verdict.confidence,
                matching_fields=(JUDGMENT_FIELD,),
            )
        )

    return groups
