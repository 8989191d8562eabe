"""Duplicate detection for literature-review records.

This package provides:
- Data models (litdedupe.models) — bibliographic record type
- Scoring (litdedupe.scoring) — field similarity and weighted comparison
- Clustering (litdedupe.clustering) — greedy and transitive grouping
- Judgment (litdedupe.judgment) — judgment-service assisted grouping
- Merge (litdedupe.merge) — group merging, record stores, merge executor
- Engine (litdedupe.engine) — detection orchestration
- Audit (litdedupe.audit) — logging and traceability
- CLI (litdedupe.cli) — command-line interface
- Public API (litdedupe.api) — high-level convenience functions
"""

__version__ = "0.1.0"
__license__ = "MIT"

from litdedupe.api import (
    consolidate_group,
    detect,
    find_potential_duplicates,
    load_records,
    write_records,
    write_result,
)
from litdedupe.engine import DetectionConfig, DetectionResult
from litdedupe.models import BibliographicRecord

__all__ = [
    "__version__",
    "__license__",
    "BibliographicRecord",
    "DetectionConfig",
    "DetectionResult",
    "consolidate_group",
    "detect",
    "find_potential_duplicates",
    "load_records",
    "write_records",
    "write_result",
]
