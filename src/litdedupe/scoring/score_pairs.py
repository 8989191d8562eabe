"""Score an incoming record against an existing collection."""

from collections.abc import Iterable

from litdedupe.models import BibliographicRecord
from litdedupe.scoring.comparators import classify_match, compare_records
from litdedupe.scoring.models import PotentialDuplicate

__all__ = ["find_potential_duplicates"]


def find_potential_duplicates(
    record: BibliographicRecord,
    candidates: Iterable[BibliographicRecord],
    threshold: float = 0.8,
) -> list[PotentialDuplicate]:
    """Find existing records that ``record`` likely duplicates.

    Used at ingestion time, before a record joins the project, so that a
    reviewer can be warned about a likely duplicate up front.

    Parameters
    ----------
    record : BibliographicRecord
        Incoming record.
    candidates : Iterable[BibliographicRecord]
        Existing records to compare against.
    threshold : float, optional
        Minimum aggregate score, by default 0.8.

    Returns
    -------
    list[PotentialDuplicate]
        Matches with ``score >= threshold``, highest score first. Equal
        scores keep candidate order.
    """
    matches: list[PotentialDuplicate] = []
    for candidate in candidates:
        if candidate.id == record.id:
            continue
        comparison = compare_records(record, candidate)
        if comparison.score >= threshold:
            matches.append(
                PotentialDuplicate(
                    record=candidate,
                    comparison=comparison,
                    strength=classify_match(record, candidate, comparison),
                )
            )

    matches.sort(key=lambda m: -m.score)
    return matches
