"""Duplicate detection orchestrator.

Chains the detection strategies into a single auditable run:

    rule_based          weighted comparison + greedy (or transitive) grouping
    judgment_assisted   external judgment service, rule-based fallback
    hybrid              both, merged by primary id (rule-based first)

and optionally applies the resulting groups to a record store.
"""

import threading
import time
from collections.abc import Sequence
from dataclasses import replace

from litdedupe.audit.helpers import get_package_version
from litdedupe.audit.logger import AuditLogger
from litdedupe.clustering import (
    ClusteringMode,
    DuplicateGroup,
    count_duplicates,
    group_rule_based,
    group_transitive,
)
from litdedupe.engine.config import DetectionConfig, DetectionMethod, DetectionResult
from litdedupe.judgment import JudgmentService, group_assisted
from litdedupe.merge import RecordStore, apply_merges, merge_group_sets
from litdedupe.models import BibliographicRecord
from litdedupe.utils import get_iso_timestamp

__all__ = ["INSUFFICIENT_DATA_MESSAGE", "detect"]

INSUFFICIENT_DATA_MESSAGE = "At least 2 unmarked records are required for duplicate detection"

_STAGE = "detection"


# ---------------------------------------------------------------------------
# Strategy helpers
# ---------------------------------------------------------------------------


def _run_rule_based(
    records: Sequence[BibliographicRecord],
    config: DetectionConfig,
    cancel_event: threading.Event | None,
) -> list[DuplicateGroup]:
    if config.clustering == ClusteringMode.TRANSITIVE:
        return group_transitive(records, config.threshold, cancel_event=cancel_event)
    return group_rule_based(records, config.threshold, cancel_event=cancel_event)


def _run_assisted(
    records: Sequence[BibliographicRecord],
    threshold: float,
    config: DetectionConfig,
    service: JudgmentService | None,
    logger: AuditLogger | None,
    cancel_event: threading.Event | None,
) -> list[DuplicateGroup]:
    return group_assisted(
        records,
        threshold,
        service=service,
        max_batch_size=config.max_batch_size,
        abstract_chars=config.abstract_chars,
        logger=logger,
        cancel_event=cancel_event,
    )


def _find_groups(
    records: Sequence[BibliographicRecord],
    config: DetectionConfig,
    service: JudgmentService | None,
    logger: AuditLogger | None,
    cancel_event: threading.Event | None,
) -> list[DuplicateGroup]:
    if config.method == DetectionMethod.RULE_BASED:
        return _run_rule_based(records, config, cancel_event)

    if config.method == DetectionMethod.JUDGMENT_ASSISTED:
        return _run_assisted(records, config.threshold, config, service, logger, cancel_event)

    rule_groups = _run_rule_based(records, config, cancel_event)
    assisted_groups = _run_assisted(
        records, config.assisted_threshold, config, service, logger, cancel_event
    )
    return merge_group_sets(rule_groups, assisted_groups)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------


def detect(
    records: Sequence[BibliographicRecord],
    threshold: float | None = None,
    method: DetectionMethod | str | None = None,
    auto_merge: bool = False,
    *,
    config: DetectionConfig | None = None,
    judgment_service: JudgmentService | None = None,
    store: RecordStore | None = None,
    logger: AuditLogger | None = None,
    cancel_event: threading.Event | None = None,
) -> DetectionResult:
    """Detect duplicate records and optionally mark them in a store.

    Parameters
    ----------
    records : Sequence[BibliographicRecord]
        Candidate records in a stable order. Records already marked as
        duplicates are ignored.
    threshold : float | None, optional
        Rule-based threshold in [0, 1]. Overrides ``config.threshold``
        (default 0.85).
    method : DetectionMethod | str | None, optional
        "rule_based", "judgment_assisted" or "hybrid". Overrides
        ``config.method`` (default "hybrid").
    auto_merge : bool, optional
        Apply the groups to ``store`` after detection, by default False.
    config : DetectionConfig | None, optional
        Remaining settings. If None, uses defaults.
    judgment_service : JudgmentService | None, optional
        Backend for the assisted strategies. Without one they fall back to
        rule-based grouping.
    store : RecordStore | None, optional
        Record store; required when ``auto_merge`` is True.
    logger : AuditLogger | None, optional
        Audit logger for tracking. If None, no logging.
    cancel_event : threading.Event | None, optional
        Set it from another thread to stop the run between comparisons.

    Returns
    -------
    DetectionResult
        Groups and counters. Fewer than two eligible records give an empty,
        successful result flagged ``insufficient_data``.

    Raises
    ------
    InvalidThresholdError
        If a threshold lies outside [0, 1].
    ValueError
        If the method or clustering mode is unknown, or ``auto_merge`` is
        requested without a store.
    DetectionCancelledError
        If ``cancel_event`` is set during the run.

    Examples
    --------
    Rule-based only:

        >>> from litdedupe import detect
        >>> result = detect(records, threshold=0.85, method="rule_based")
        >>> print(result.total_duplicates)

    Hybrid with merges applied:

        >>> from litdedupe.merge import InMemoryRecordStore
        >>> store = InMemoryRecordStore(records)
        >>> result = detect(store.unmarked(), auto_merge=True, store=store)
    """
    config = config or DetectionConfig()
    overrides: dict[str, object] = {}
    if threshold is not None:
        overrides["threshold"] = threshold
    if method is not None:
        overrides["method"] = method
    if overrides:
        # replace() re-runs validation
        config = replace(config, **overrides)

    if auto_merge and store is None:
        raise ValueError("auto_merge requires a record store")

    eligible = [r for r in records if r.duplicate_of is None]
    start = time.perf_counter()

    if logger:
        logger.stage_started(_STAGE, expected_records=len(eligible))
        logger.event(
            "detection_started",
            data={
                "config": config.to_dict(),
                "auto_merge": auto_merge,
                "judgment_service": type(judgment_service).__name__ if judgment_service else None,
                "version": get_package_version(),
            },
        )

    if len(eligible) < 2:
        if logger:
            logger.event(
                "detection_insufficient_data",
                data={"records_total": len(records), "records_eligible": len(eligible)},
            )
            logger.stage_finished(_STAGE, time.perf_counter() - start, {"groups": 0})
        return DetectionResult(
            success=True,
            duplicate_groups=[],
            total_duplicates=0,
            method=str(config.method),
            threshold=config.threshold,
            timestamp=get_iso_timestamp(),
            auto_merged=False if auto_merge else None,
            merged_count=0 if auto_merge else None,
            message=INSUFFICIENT_DATA_MESSAGE,
            insufficient_data=True,
        )

    try:
        groups = _find_groups(eligible, config, judgment_service, logger, cancel_event)
    except Exception as e:
        if logger:
            logger.error(type(e).__name__, str(e), stage=_STAGE)
        raise

    total_duplicates = count_duplicates(groups)

    merged_count: int | None = None
    if auto_merge and store is not None:
        merged_count = apply_merges(groups, store, logger=logger)

    if logger:
        logger.event(
            "detection_complete",
            data={
                "method": str(config.method),
                "groups": len(groups),
                "total_duplicates": total_duplicates,
                "merged_count": merged_count,
            },
        )
        logger.stage_finished(
            _STAGE,
            time.perf_counter() - start,
            {"records": len(eligible), "groups": len(groups), "duplicates": total_duplicates},
        )

    return DetectionResult(
        success=True,
        duplicate_groups=groups,
        total_duplicates=total_duplicates,
        method=str(config.method),
        threshold=config.threshold,
        timestamp=get_iso_timestamp(),
        auto_merged=auto_merge if auto_merge else None,
        merged_count=merged_count,
    )
