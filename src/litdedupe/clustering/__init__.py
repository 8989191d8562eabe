"""Grouping of bibliographic records into duplicate groups.

The default grouper is a single greedy pass; a transitive (Union-Find)
mode is available as an explicit alternative.
"""

from litdedupe.clustering.models import (
    JUDGMENT_FIELD,
    ClusteringMode,
    DuplicateGroup,
    count_duplicates,
)
from litdedupe.clustering.rule_based import group_rule_based, group_transitive

__all__ = [
    "JUDGMENT_FIELD",
    "ClusteringMode",
    "DuplicateGroup",
    "count_duplicates",
    "group_rule_based",
    "group_transitive",
]
