"""Data models for the judgment-service boundary.

A judgment service receives compact record summaries and answers with a
tagged result: verdicts on success, or a reason why none are available.
"""

from dataclasses import dataclass, field
from typing import Any

__all__ = [
    "JudgmentMalformed",
    "JudgmentOk",
    "JudgmentResult",
    "JudgmentUnavailable",
    "RecordSummary",
    "Verdict",
]


@dataclass(frozen=True)
class RecordSummary:
    """Compact view of a record sent to the judgment service.

    Attributes
    ----------
    index : int
        Position of the record in the batch; verdicts refer to it.
    id : str
        Record identifier.
    title : str
        Title or "".
    authors : str
        Authors joined with ", ".
    journal : str
        Journal or "".
    year : int | str
        Publication year or "".
    doi : str
        DOI or "".
    abstract : str
        Truncated abstract or "".
    """

    index: int
    id: str
    title: str
    authors: str
    journal: str
    year: int | str
    doi: str
    abstract: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "index": self.index,
            "id": self.id,
            "title": self.title,
            "authors": self.authors,
            "journal": self.journal,
            "year": self.year,
            "doi": self.doi,
            "abstract": self.abstract,
        }


@dataclass(frozen=True)
class Verdict:
    """One duplicate group proposed by the judgment service.

    Attributes
    ----------
    primary_index : int
        Batch index of the primary record.
    duplicate_indexes : tuple[int, ...]
        Batch indexes of its duplicates.
    confidence : float
        Service confidence in [0, 1].
    reasoning : str | None
        Free-text justification, if given.
    """

    primary_index: int
    duplicate_indexes: tuple[int, ...]
    confidence: float
    reasoning: str | None = None


@dataclass(frozen=True)
class JudgmentOk:
    """Service answered with a well-formed verdict list."""

    verdicts: tuple[Verdict, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class JudgmentUnavailable:
    """Service could not be reached (network, timeout, auth, missing config)."""

    reason: str


@dataclass(frozen=True)
class JudgmentMalformed:
    """Service answered, but the answer does not fit the verdict format."""

    reason: str
    raw: str | None = None


JudgmentResult = JudgmentOk | JudgmentUnavailable | JudgmentMalformed
