"""Detection configuration and result dataclasses."""

from dataclasses import asdict, dataclass
from enum import StrEnum
from typing import Any

from litdedupe.clustering import ClusteringMode, DuplicateGroup
from litdedupe.errors import validate_threshold
from litdedupe.judgment import DEFAULT_MAX_BATCH_SIZE
from litdedupe.judgment.prompt import DEFAULT_ABSTRACT_CHARS

__all__ = ["DetectionConfig", "DetectionMethod", "DetectionResult"]


class DetectionMethod(StrEnum):
    """Duplicate detection strategy.

    Attributes
    ----------
    RULE_BASED : str
        Weighted field comparison and greedy grouping.
    JUDGMENT_ASSISTED : str
        External judgment service, rule-based fallback.
    HYBRID : str
        Union of both, rule-based groups first.
    """

    RULE_BASED = "rule_based"
    JUDGMENT_ASSISTED = "judgment_assisted"
    HYBRID = "hybrid"


@dataclass
class DetectionConfig:
    """Configuration for a detection run.

    Attributes
    ----------
    threshold : float
        Rule-based score threshold, inclusive (default: 0.85).
    assisted_threshold : float
        Judgment confidence threshold used by the hybrid method (default: 0.9).
    method : DetectionMethod
        Detection strategy (default: hybrid).
    clustering : ClusteringMode
        Rule-based grouping mode (default: greedy).
    max_batch_size : int
        Records sent to the judgment service per run (default: 20).
    abstract_chars : int
        Abstract truncation for judgment summaries (default: 200).
    """

    threshold: float = 0.85
    assisted_threshold: float = 0.9
    method: DetectionMethod = DetectionMethod.HYBRID
    clustering: ClusteringMode = ClusteringMode.GREEDY
    max_batch_size: int = DEFAULT_MAX_BATCH_SIZE
    abstract_chars: int = DEFAULT_ABSTRACT_CHARS

    def __post_init__(self) -> None:
        """Coerce enums and validate."""
        self.threshold = validate_threshold(self.threshold, "threshold")
        self.assisted_threshold = validate_threshold(self.assisted_threshold, "assisted_threshold")

        try:
            self.method = DetectionMethod(self.method)
        except ValueError:
            valid = ", ".join(m.value for m in DetectionMethod)
            raise ValueError(f"Unknown detection method '{self.method}'. Valid: {valid}") from None

        try:
            self.clustering = ClusteringMode(self.clustering)
        except ValueError:
            valid = ", ".join(m.value for m in ClusteringMode)
            raise ValueError(
                f"Unknown clustering mode '{self.clustering}'. Valid: {valid}"
            ) from None

        if self.max_batch_size < 1:
            raise ValueError(f"max_batch_size must be >= 1, got {self.max_batch_size}")

        if self.abstract_chars < 0:
            raise ValueError(f"abstract_chars must be >= 0, got {self.abstract_chars}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        data = asdict(self)
        data["method"] = str(self.method)
        data["clustering"] = str(self.clustering)
        return data


@dataclass
class DetectionResult:
    """Outcome of a detection run.

    Attributes
    ----------
    success : bool
        Whether detection completed (True for insufficient data as well).
    duplicate_groups : list[DuplicateGroup]
        Groups found.
    total_duplicates : int
        Sum of group duplicate counts.
    method : str
        Strategy used.
    threshold : float
        Rule-based threshold used.
    timestamp : str
        ISO8601 completion time.
    auto_merged : bool | None
        Whether merges were applied; None when auto-merge was not requested.
    merged_count : int | None
        Duplicates marked by the merge executor, when auto-merge ran.
    message : str | None
        Informational message (e.g., insufficient data).
    insufficient_data : bool
        True when fewer than two eligible records were given.
    """

    success: bool
    duplicate_groups: list[DuplicateGroup]
    total_duplicates: int
    method: str
    threshold: float
    timestamp: str
    auto_merged: bool | None = None
    merged_count: int | None = None
    message: str | None = None
    insufficient_data: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON output structure (camelCase keys).

        Optional keys are included only when set.
        """
        data: dict[str, Any] = {
            "success": self.success,
            "duplicateGroups": [g.to_dict() for g in self.duplicate_groups],
            "totalDuplicates": self.total_duplicates,
            "method": self.method,
            "threshold": self.threshold,
            "timestamp": self.timestamp,
        }
        if self.auto_merged is not None:
            data["autoMerged"] = self.auto_merged
        if self.merged_count is not None:
            data["mergedCount"] = self.merged_count
        if self.message is not None:
            data["message"] = self.message
        if self.insufficient_data:
            data["insufficientData"] = True
        return data
