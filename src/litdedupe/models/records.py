"""Bibliographic record data model.

Records arrive already parsed and normalized from upstream ingestion. The
engine treats them as immutable snapshots; deduplication state changes are
written through a record store, which swaps in a new snapshot.
"""

from dataclasses import dataclass, replace
from typing import Any

from litdedupe.utils import parse_iso_year

__all__ = ["BibliographicRecord"]


def _clean_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None


def _clean_authors(value: Any) -> tuple[str, ...] | None:
    if value is None:
        return None
    if isinstance(value, str):
        return (value,) if value.strip() else ()
    return tuple(str(a) for a in value if a is not None and str(a).strip())


def _first_present(data: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


@dataclass(frozen=True)
class BibliographicRecord:
    """A literature entry under review.

    Attributes
    ----------
    id : str
        Opaque, unique, stable record identifier.
    project_id : str | None
        Owning review project.
    title : str | None
        Article title.
    authors : tuple[str, ...] | None
        Authors in publication order. None when the source gave no author
        list; an empty tuple when it gave an empty one.
    journal : str | None
        Journal name.
    publication_year : int | None
        Year of publication.
    doi : str | None
        Digital Object Identifier.
    pmid : str | None
        PubMed (or other external) identifier.
    abstract : str | None
        Abstract text.
    duplicate_of : str | None
        Id of the primary record this one duplicates. Weak reference.
    similarity_score : float | None
        Score recorded when the record was marked as a duplicate.
    updated_at : str | None
        ISO8601 timestamp of the last deduplication write.
    """

    id: str
    project_id: str | None = None
    title: str | None = None
    authors: tuple[str, ...] | None = None
    journal: str | None = None
    publication_year: int | None = None
    doi: str | None = None
    pmid: str | None = None
    abstract: str | None = None
    duplicate_of: str | None = None
    similarity_score: float | None = None
    updated_at: str | None = None

    def __post_init__(self) -> None:
        """Coerce author lists to tuples so records stay hashable."""
        if self.authors is not None and not isinstance(self.authors, tuple):
            object.__setattr__(self, "authors", _clean_authors(self.authors))

    @property
    def is_duplicate(self) -> bool:
        """Whether the record has been marked as a duplicate."""
        return self.duplicate_of is not None

    def mark_duplicate(
        self,
        duplicate_of: str,
        similarity_score: float,
        updated_at: str,
    ) -> "BibliographicRecord":
        """Return a copy pointing at ``duplicate_of``."""
        return replace(
            self,
            duplicate_of=duplicate_of,
            similarity_score=similarity_score,
            updated_at=updated_at,
        )

    def to_summary_dict(self) -> dict[str, Any]:
        """Compact representation used in detection results."""
        return {
            "id": self.id,
            "title": self.title,
            "authors": list(self.authors) if self.authors is not None else None,
            "journal": self.journal,
            "publicationYear": self.publication_year,
            "doi": self.doi,
            "pmid": self.pmid,
        }

    def to_dict(self) -> dict[str, Any]:
        """Convert record to its JSON form (camelCase keys).

        Returns
        -------
        dict[str, Any]
            Dictionary representation.
        """
        return {
            "id": self.id,
            "projectId": self.project_id,
            "title": self.title,
            "authors": list(self.authors) if self.authors is not None else None,
            "journal": self.journal,
            "publicationYear": self.publication_year,
            "doi": self.doi,
            "pmid": self.pmid,
            "abstract": self.abstract,
            "duplicateOf": self.duplicate_of,
            "similarityScore": self.similarity_score,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BibliographicRecord":
        """Build a record from its JSON form.

        Accepts camelCase keys as written by ``to_dict`` plus snake_case
        aliases. ``externalId`` is read as ``pmid`` and the year falls back
        to the leading year of ``publicationDate``.

        Parameters
        ----------
        data : dict[str, Any]
            Dictionary (e.g. from JSON) with record fields.

        Returns
        -------
        BibliographicRecord
            Reconstructed record.

        Raises
        ------
        ValueError
            If the record has no id.
        """
        record_id = data.get("id")
        if record_id is None or str(record_id) == "":
            raise ValueError("Record is missing an 'id'")

        year = _first_present(data, "publicationYear", "publication_year", "year")
        if year is None:
            year = parse_iso_year(
                _first_present(data, "publicationDate", "publication_date")
            )

        score = _first_present(data, "similarityScore", "similarity_score")
        duplicate_of = _first_present(data, "duplicateOf", "duplicate_of")
        project_id = _first_present(data, "projectId", "project_id")

        return cls(
            id=str(record_id),
            project_id=str(project_id) if project_id is not None else None,
            title=_clean_text(data.get("title")),
            authors=_clean_authors(data.get("authors")),
            journal=_clean_text(data.get("journal")),
            publication_year=int(year) if year is not None else None,
            doi=_clean_text(data.get("doi")),
            pmid=_clean_text(_first_present(data, "pmid", "externalId", "external_id")),
            abstract=_clean_text(data.get("abstract")),
            duplicate_of=str(duplicate_of) if duplicate_of is not None else None,
            similarity_score=float(score) if score is not None else None,
            updated_at=_first_present(data, "updatedAt", "updated_at"),
        )
