"""Survivor selection and field consolidation for a duplicate group."""

from dataclasses import replace

from litdedupe.clustering import DuplicateGroup
from litdedupe.models import BibliographicRecord

__all__ = ["completeness_score", "consolidate_group", "select_survivor"]


def completeness_score(record: BibliographicRecord) -> int:
    """Count populated descriptive fields.

    Fields: title, authors, abstract, journal, doi, pmid, publication_year.

    Parameters
    ----------
    record : BibliographicRecord
        Record to score.

    Returns
    -------
    int
        Completeness score (0-7).
    """
    fields = [
        record.title,
        record.authors or None,
        record.abstract,
        record.journal,
        record.doi,
        record.pmid,
        record.publication_year,
    ]
    return sum(1 for f in fields if f is not None)


def select_survivor(group: DuplicateGroup) -> BibliographicRecord:
    """Pick the most complete member; ties go to group order (primary first)."""
    members = group.members
    # max() keeps the first of equal keys, so group order breaks ties
    return max(members, key=completeness_score)


def _first_value(members: tuple[BibliographicRecord, ...], attr: str) -> object | None:
    for member in members:
        value = getattr(member, attr)
        if value is not None:
            return value
    return None


def consolidate_group(group: DuplicateGroup) -> BibliographicRecord:
    """Build a consolidated view of a duplicate group.

    The survivor keeps its id and deduplication fields. Its missing fields
    are filled from other members in group order, authors become the
    order-preserving union across members, and the longest abstract wins.
    Nothing is written to any store.

    Parameters
    ----------
    group : DuplicateGroup
        Group to consolidate.

    Returns
    -------
    BibliographicRecord
        Consolidated record.
    """
    survivor = select_survivor(group)
    # Survivor first, then the rest in group order
    ordered = (survivor, *(m for m in group.members if m.id != survivor.id))

    authors: list[str] = []
    seen_authors: set[str] = set()
    for member in ordered:
        for author in member.authors or ():
            key = author.strip().lower()
            if key in seen_authors:
                continue
            seen_authors.add(key)
            authors.append(author)

    abstracts = [m.abstract for m in ordered if m.abstract]
    abstract = max(abstracts, key=len) if abstracts else None

    return replace(
        survivor,
        title=_first_value(ordered, "title"),
        authors=tuple(authors) if any(m.authors is not None for m in ordered) else None,
        journal=_first_value(ordered, "journal"),
        publication_year=_first_value(ordered, "publication_year"),
        doi=_first_value(ordered, "doi"),
        pmid=_first_value(ordered, "pmid"),
        abstract=abstract,
    )
