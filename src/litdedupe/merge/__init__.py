"""Merging of duplicate groups: strategy combination, store writes, consolidation."""

from litdedupe.merge.executor import (
    ForestViolation,
    apply_merges,
    duplicate_chain_depth,
    find_forest_violations,
)
from litdedupe.merge.store import InMemoryRecordStore, JsonlRecordStore, RecordStore
from litdedupe.merge.strategy import merge_group_sets
from litdedupe.merge.survivor import completeness_score, consolidate_group, select_survivor

__all__ = [
    "ForestViolation",
    "InMemoryRecordStore",
    "JsonlRecordStore",
    "RecordStore",
    "apply_merges",
    "completeness_score",
    "consolidate_group",
    "duplicate_chain_depth",
    "find_forest_violations",
    "merge_group_sets",
    "select_survivor",
]
