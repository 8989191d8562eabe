"""Pairwise scoring for duplicate detection.

This module provides field similarity functions, the weighted record
comparator and helpers that score one record against a collection.
"""

from litdedupe.scoring.comparators import (
    FIELD_CONFIGS,
    FieldConfig,
    classify_match,
    compare_records,
)
from litdedupe.scoring.models import (
    Comparison,
    FieldComparison,
    MatchStrength,
    PotentialDuplicate,
)
from litdedupe.scoring.score_pairs import find_potential_duplicates
from litdedupe.scoring.similarity import (
    levenshtein_distance,
    list_similarity,
    string_similarity,
)

__all__ = [
    "FIELD_CONFIGS",
    "Comparison",
    "FieldComparison",
    "FieldConfig",
    "MatchStrength",
    "PotentialDuplicate",
    "classify_match",
    "compare_records",
    "find_potential_duplicates",
    "levenshtein_distance",
    "list_similarity",
    "string_similarity",
]
