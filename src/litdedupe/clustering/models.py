"""Data models for duplicate groups."""

from collections.abc import Iterable
from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Any

from litdedupe.models import BibliographicRecord

JUDGMENT_FIELD = "judgment"


class ClusteringMode(StrEnum):
    """How rule-based matches are turned into groups.

    Attributes
    ----------
    GREEDY : str
        Single pass in input order; not transitive.
    TRANSITIVE : str
        Connected components of the pairwise match graph.
    """

    GREEDY = "greedy"
    TRANSITIVE = "transitive"


@dataclass(frozen=True)
class DuplicateGroup:
    """A primary record plus the records judged to describe the same work.

    Attributes
    ----------
    primary : BibliographicRecord
        Canonical representative of the group.
    duplicates : tuple[BibliographicRecord, ...]
        Records to be marked as duplicates of ``primary``.
    similarity_score : float
        Maximum pairwise score observed between primary and a duplicate.
    matching_fields : tuple[str, ...]
        Fields that drove the match for the representative pair.
    """

    primary: BibliographicRecord
    duplicates: tuple[BibliographicRecord, ...]
    similarity_score: float
    matching_fields: tuple[str, ...]

    @property
    def duplicate_ids(self) -> tuple[str, ...]:
        """Ids of the duplicate records, in group order."""
        return tuple(d.id for d in self.duplicates)

    @property
    def members(self) -> tuple[BibliographicRecord, ...]:
        """Primary followed by its duplicates."""
        return (self.primary, *self.duplicates)

    def with_duplicates(self, extra: Iterable[BibliographicRecord]) -> "DuplicateGroup":
        """Return a copy with ``extra`` unioned into the duplicates by id.

        Records already in the group, and the primary itself, are skipped.
        Score and matching fields are kept.
        """
        seen = {self.primary.id, *self.duplicate_ids}
        added: list[BibliographicRecord] = []
        for record in extra:
            if record.id in seen:
                continue
            seen.add(record.id)
            added.append(record)
        if not added:
            return self
        return replace(self, duplicates=(*self.duplicates, *added))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization.

        Returns
        -------
        dict[str, Any]
            Dictionary with record summaries.
        """
        return {
            "primary": self.primary.to_summary_dict(),
            "duplicates": [d.to_summary_dict() for d in self.duplicates],
            "similarityScore": self.similarity_score,
            "matchingFields": list(self.matching_fields),
        }


def count_duplicates(groups: Iterable[DuplicateGroup]) -> int:
    """Total number of duplicate records across groups."""
    return sum(len(g.duplicates) for g in groups)
