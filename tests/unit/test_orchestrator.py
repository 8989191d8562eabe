"""Unit tests for the detection orchestrator."""

import json
import threading
from collections.abc import Callable, Sequence
from pathlib import Path

import jsonschema
import pytest

from litdedupe.audit import AuditLogger
from litdedupe.clustering import JUDGMENT_FIELD, group_rule_based
from litdedupe.engine import DetectionConfig, DetectionMethod, DetectionResult, detect
from litdedupe.engine.runner import INSUFFICIENT_DATA_MESSAGE
from litdedupe.errors import DetectionCancelledError, InvalidThresholdError
from litdedupe.judgment import (
    JudgmentOk,
    JudgmentResult,
    JudgmentUnavailable,
    RecordSummary,
    Verdict,
)
from litdedupe.merge import InMemoryRecordStore, find_forest_violations
from litdedupe.models import BibliographicRecord

RecordFactory = Callable[..., BibliographicRecord]

_SCHEMAS_DIR = Path(__file__).parent.parent.parent / "schemas"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class FakeJudgmentService:
    """Judgment service returning a canned result."""

    def __init__(self, result: JudgmentResult) -> None:
        self.result = result
        self.calls = 0

    def classify(self, summaries: Sequence[RecordSummary]) -> JudgmentResult:
        self.calls += 1
        return self.result


@pytest.fixture
def records(make_record: RecordFactory) -> list[BibliographicRecord]:
    """r0/r1 are exact duplicates; r2 is a paraphrase only a judge would catch."""
    return [
        make_record("r0", title="ML in Healthcare", doi="10.1/x"),
        make_record("r1", title="ML in Healthcare", doi="10.1/x"),
        make_record("r2", title="Machine learning in health care", year=2020),
        make_record("r3", title="Soil fungi", year=2019),
    ]


@pytest.fixture(scope="module")
def result_schema() -> dict:
    """Load detection result JSON schema."""
    with (_SCHEMAS_DIR / "detection_result.schema.json").open() as f:
        return json.load(f)


def _read_events(path: Path) -> list[dict]:
    with path.open() as f:
        return [json.loads(line) for line in f if line.strip()]


# ---------------------------------------------------------------------------
# DetectionConfig
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_detection_config_defaults() -> None:
    """Test DetectionConfig default values."""
    config = DetectionConfig()

    assert config.threshold == 0.85
    assert config.assisted_threshold == 0.9
    assert config.method == DetectionMethod.HYBRID
    assert config.clustering == "greedy"
    assert config.max_batch_size == 20
    assert config.abstract_chars == 200


@pytest.mark.unit
@pytest.mark.parametrize(
    ("kwargs", "error", "match"),
    [
        ({"threshold": -0.1}, InvalidThresholdError, "threshold must be in"),
        ({"threshold": 1.5}, InvalidThresholdError, "threshold must be in"),
        ({"threshold": True}, InvalidThresholdError, "threshold must be in"),
        ({"threshold": float("nan")}, InvalidThresholdError, "threshold must be in"),
        ({"assisted_threshold": 2}, InvalidThresholdError, "assisted_threshold must be in"),
        ({"method": "fuzzy"}, ValueError, "Unknown detection method"),
        ({"clustering": "hierarchical"}, ValueError, "Unknown clustering mode"),
        ({"max_batch_size": 0}, ValueError, "max_batch_size"),
        ({"abstract_chars": -1}, ValueError, "abstract_chars"),
    ],
    ids=[
        "threshold_negative",
        "threshold_above_1",
        "threshold_bool",
        "threshold_nan",
        "assisted_threshold_above_1",
        "unknown_method",
        "unknown_clustering",
        "batch_size_zero",
        "abstract_chars_negative",
    ],
)
def test_detection_config_validation(kwargs: dict, error: type[Exception], match: str) -> None:
    """Test DetectionConfig rejects invalid settings up front."""
    with pytest.raises(error, match=match):
        DetectionConfig(**kwargs)


@pytest.mark.unit
def test_detection_config_to_dict() -> None:
    """Test enums serialize as plain strings."""
    data = DetectionConfig(method="rule_based", clustering="transitive").to_dict()

    assert data == {
        "threshold": 0.85,
        "assisted_threshold": 0.9,
        "method": "rule_based",
        "clustering": "transitive",
        "max_batch_size": 20,
        "abstract_chars": 200,
    }


# ---------------------------------------------------------------------------
# detect — caller errors
# ---------------------------------------------------------------------------


@pytest.mark.unit
@pytest.mark.parametrize("threshold", [-0.01, 1.01])
def test_detect_invalid_threshold(records: list[BibliographicRecord], threshold: float) -> None:
    """Test out-of-range thresholds are rejected before any work."""
    with pytest.raises(InvalidThresholdError):
        detect(records, threshold=threshold)


@pytest.mark.unit
def test_detect_unknown_method(records: list[BibliographicRecord]) -> None:
    """Test unknown methods are rejected."""
    with pytest.raises(ValueError, match="Unknown detection method"):
        detect(records, method="magic")


@pytest.mark.unit
def test_detect_auto_merge_requires_store(records: list[BibliographicRecord]) -> None:
    """Test auto-merge without a store is a caller error."""
    with pytest.raises(ValueError, match="record store"):
        detect(records, auto_merge=True)


@pytest.mark.unit
def test_detect_cancelled(records: list[BibliographicRecord], tmp_path: Path) -> None:
    """Test a set cancel event aborts the run and is logged."""
    event = threading.Event()
    event.set()

    with AuditLogger(run_id="test_run", log_path=tmp_path / "events.jsonl") as logger:
        with pytest.raises(DetectionCancelledError):
            detect(records, method="rule_based", logger=logger, cancel_event=event)

    events = _read_events(tmp_path / "events.jsonl")
    assert events[-1]["event"] == "error"
    assert events[-1]["data"]["exception_class"] == "DetectionCancelledError"


# ---------------------------------------------------------------------------
# detect — insufficient data
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_detect_insufficient_data(make_record: RecordFactory) -> None:
    """Test fewer than two records give an empty, successful result."""
    result = detect([make_record("only", title="T")])

    assert result.success
    assert result.insufficient_data
    assert result.duplicate_groups == []
    assert result.total_duplicates == 0
    assert result.message == INSUFFICIENT_DATA_MESSAGE
    assert result.to_dict()["insufficientData"] is True


@pytest.mark.unit
def test_detect_ignores_marked_records(make_record: RecordFactory) -> None:
    """Test records already marked as duplicates are not eligible."""
    records = [
        make_record("a", title="T"),
        make_record("b", title="T", duplicate_of="a", similarity_score=1.0),
    ]

    result = detect(records, method="rule_based")

    assert result.insufficient_data
    assert result.duplicate_groups == []


@pytest.mark.unit
def test_detect_insufficient_data_with_auto_merge(make_record: RecordFactory) -> None:
    """Test auto-merge on too few records reports zero merges."""
    store = InMemoryRecordStore([make_record("a", title="T")])

    result = detect(store.unmarked(), auto_merge=True, store=store)

    assert result.auto_merged is False
    assert result.merged_count == 0


# ---------------------------------------------------------------------------
# detect — strategies
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_detect_rule_based(records: list[BibliographicRecord]) -> None:
    """Test the rule-based method finds the exact duplicate pair."""
    result = detect(records, threshold=0.85, method="rule_based")

    assert result.method == "rule_based"
    assert result.threshold == 0.85
    assert [(g.primary.id, g.duplicate_ids) for g in result.duplicate_groups] == [
        ("r0", ("r1",))
    ]
    assert result.total_duplicates == 1
    assert result.auto_merged is None
    assert "autoMerged" not in result.to_dict()


@pytest.mark.unit
def test_detect_transitive_clustering(make_record: RecordFactory) -> None:
    """Test transitive clustering is used when configured."""
    records = [
        make_record("a", title="abcdefghij"),
        make_record("b", title="abcdefghxy"),
        make_record("c", title="abcdefzzxy"),
    ]
    config = DetectionConfig(clustering="transitive")

    greedy = detect(records, threshold=0.8, method="rule_based")
    transitive = detect(records, threshold=0.8, method="rule_based", config=config)

    assert greedy.duplicate_groups[0].duplicate_ids == ("b",)
    assert transitive.duplicate_groups[0].duplicate_ids == ("b", "c")


@pytest.mark.unit
def test_detect_arguments_override_config(records: list[BibliographicRecord]) -> None:
    """Test explicit threshold and method win over the config without mutating it."""
    config = DetectionConfig(threshold=0.5, method="hybrid")

    result = detect(records, threshold=0.9, method="rule_based", config=config)

    assert result.threshold == 0.9
    assert result.method == "rule_based"
    assert config.threshold == 0.5
    assert config.method == DetectionMethod.HYBRID


@pytest.mark.unit
def test_detect_judgment_assisted(records: list[BibliographicRecord]) -> None:
    """Test the assisted method uses verdicts at the main threshold."""
    service = FakeJudgmentService(JudgmentOk(verdicts=(Verdict(0, (1, 2), 0.88),)))

    result = detect(
        records, threshold=0.85, method="judgment_assisted", judgment_service=service
    )

    assert service.calls == 1
    assert len(result.duplicate_groups) == 1
    assert result.duplicate_groups[0].duplicate_ids == ("r1", "r2")
    assert result.duplicate_groups[0].matching_fields == (JUDGMENT_FIELD,)


@pytest.mark.unit
def test_detect_hybrid_unions_strategies(records: list[BibliographicRecord]) -> None:
    """Test hybrid keeps rule-based metadata and adds judged duplicates."""
    service = FakeJudgmentService(JudgmentOk(verdicts=(Verdict(0, (1, 2), 0.95),)))

    result = detect(records, threshold=0.85, method="hybrid", judgment_service=service)

    assert len(result.duplicate_groups) == 1
    group = result.duplicate_groups[0]
    assert group.primary.id == "r0"
    assert group.duplicate_ids == ("r1", "r2")
    assert group.similarity_score == pytest.approx(1.0)
    assert "doi" in group.matching_fields
    assert result.total_duplicates == 2


@pytest.mark.unit
def test_detect_hybrid_uses_stricter_judgment_threshold(
    records: list[BibliographicRecord],
) -> None:
    """Test verdicts below the assisted threshold are ignored in hybrid mode."""
    service = FakeJudgmentService(JudgmentOk(verdicts=(Verdict(0, (2,), 0.88),)))

    result = detect(records, threshold=0.85, method="hybrid", judgment_service=service)

    assert [(g.primary.id, g.duplicate_ids) for g in result.duplicate_groups] == [
        ("r0", ("r1",))
    ]


@pytest.mark.unit
@pytest.mark.parametrize("method", ["judgment_assisted", "hybrid"])
def test_detect_degrades_without_judgment(
    records: list[BibliographicRecord],
    method: str,
) -> None:
    """Test an unavailable service yields the rule-based groups."""
    service = FakeJudgmentService(JudgmentUnavailable(reason="timeout"))

    result = detect(records, threshold=0.85, method=method, judgment_service=service)

    assert result.success
    assert result.duplicate_groups == group_rule_based(records, 0.85)


# ---------------------------------------------------------------------------
# detect — auto merge and output
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_detect_auto_merge(records: list[BibliographicRecord]) -> None:
    """Test auto-merge marks duplicates in the store and reports the count."""
    store = InMemoryRecordStore(records)

    result = detect(store.unmarked(), method="rule_based", auto_merge=True, store=store)

    assert result.auto_merged is True
    assert result.merged_count == 1
    assert store.get("r1").duplicate_of == "r0"
    assert store.get("r1").similarity_score == pytest.approx(1.0)
    assert find_forest_violations(store.records()) == []

    data = result.to_dict()
    assert data["autoMerged"] is True
    assert data["mergedCount"] == 1


@pytest.mark.unit
def test_detect_second_run_sees_no_duplicates(records: list[BibliographicRecord]) -> None:
    """Test merged records drop out of later runs."""
    store = InMemoryRecordStore(records)
    detect(store.unmarked(), method="rule_based", auto_merge=True, store=store)

    second = detect(store.unmarked(), method="rule_based")

    assert second.duplicate_groups == []


@pytest.mark.unit
def test_result_matches_schema(
    records: list[BibliographicRecord],
    result_schema: dict,
) -> None:
    """Test serialized results validate against the published schema."""
    store = InMemoryRecordStore(records)

    result = detect(store.unmarked(), method="hybrid", auto_merge=True, store=store)

    jsonschema.validate(instance=result.to_dict(), schema=result_schema)
    jsonschema.validate(instance=detect(records[:1]).to_dict(), schema=result_schema)


@pytest.mark.unit
def test_result_to_dict_keys() -> None:
    """Test optional keys are omitted when unset."""
    result = DetectionResult(
        success=True,
        duplicate_groups=[],
        total_duplicates=0,
        method="rule_based",
        threshold=0.85,
        timestamp="2026-01-01T00:00:00Z",
    )

    assert set(result.to_dict()) == {
        "success",
        "duplicateGroups",
        "totalDuplicates",
        "method",
        "threshold",
        "timestamp",
    }


@pytest.mark.unit
def test_detect_logs_run(records: list[BibliographicRecord], tmp_path: Path) -> None:
    """Test a run is traced from start to finish."""
    with AuditLogger(run_id="test_run", log_path=tmp_path / "events.jsonl") as logger:
        detect(records, method="rule_based", logger=logger)

    events = _read_events(tmp_path / "events.jsonl")
    names = [e["event"] for e in events]

    assert names == ["stage_started", "detection_started", "detection_complete", "stage_finished"]
    assert all(e["stage"] == "detection" for e in events)
    assert events[1]["data"]["config"]["method"] == "rule_based"
    assert events[2]["data"]["total_duplicates"] == 1
    assert events[3]["data"]["counters"] == {"records": 4, "groups": 1, "duplicates": 1}
