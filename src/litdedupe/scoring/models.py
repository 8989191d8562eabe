"""Data models for pairwise record comparison."""

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from litdedupe.models import BibliographicRecord


class MatchStrength(StrEnum):
    """Coarse label for how strongly two records match.

    Attributes
    ----------
    EXACT : str
        DOI or PMID identical.
    STRONG : str
        Aggregate score >= 0.9.
    MODERATE : str
        Aggregate score >= 0.7.
    WEAK : str
        Anything below.
    """

    EXACT = "exact"
    STRONG = "strong"
    MODERATE = "moderate"
    WEAK = "weak"


@dataclass(frozen=True)
class FieldComparison:
    """Outcome of comparing one field present in both records.

    Attributes
    ----------
    name : str
        Field name as reported in ``matching_fields``.
    similarity : float
        Field similarity in [0, 1].
    weight : int
        Field weight in the aggregate score.
    matched : bool
        Whether the field crossed its reporting threshold.
    """

    name: str
    similarity: float
    weight: int
    matched: bool

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "similarity": self.similarity,
            "weight": self.weight,
            "matched": self.matched,
        }


@dataclass(frozen=True)
class Comparison:
    """Aggregate comparison of a record pair.

    Attributes
    ----------
    score : float
        Weighted average of field similarities, 0.0 when no field is shared.
    matching_fields : tuple[str, ...]
        Fields that crossed their reporting threshold, in field-table order.
    fields : tuple[FieldComparison, ...]
        Per-field breakdown for every field present in both records.
    """

    score: float
    matching_fields: tuple[str, ...]
    fields: tuple[FieldComparison, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "score": self.score,
            "matchingFields": list(self.matching_fields),
            "fields": [f.to_dict() for f in self.fields],
        }


@dataclass(frozen=True)
class PotentialDuplicate:
    """An existing record that an incoming record likely duplicates.

    Attributes
    ----------
    record : BibliographicRecord
        The existing record.
    comparison : Comparison
        Comparison of the incoming record against it.
    strength : MatchStrength
        Coarse match label.
    """

    record: BibliographicRecord
    comparison: Comparison
    strength: MatchStrength

    @property
    def score(self) -> float:
        """Aggregate score of the comparison."""
        return self.comparison.score

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "record": self.record.to_summary_dict(),
            "similarityScore": self.comparison.score,
            "matchingFields": list(self.comparison.matching_fields),
            "strength": self.strength.value,
        }
