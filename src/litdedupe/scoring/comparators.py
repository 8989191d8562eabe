"""Record comparator for pairwise duplicate scoring.

Each field is described by a ``FieldConfig``: how to pull the value out of a
record, how to score two values, its weight and its reporting threshold.
Every field present in both records contributes to the weighted average,
whether or not it crosses its reporting threshold.

| Field   | Weight | Similarity        | Reported when |
|---------|--------|-------------------|---------------|
| title   | 3      | string_similarity | > 0.8         |
| authors | 2      | list_similarity   | > 0.7         |
| doi     | 2      | exact equality    | equal         |
| journal | 1      | string_similarity | > 0.9         |
| year    | 1      | exact equality    | equal         |

DOI and year are binary while the other fields are continuous. An author
list is present whenever it was supplied, so an empty list scores 0 against a
non-empty one and 1 against another empty one.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from litdedupe.models import BibliographicRecord
from litdedupe.scoring.models import Comparison, FieldComparison, MatchStrength
from litdedupe.scoring.similarity import list_similarity, string_similarity

__all__ = [
    "FIELD_CONFIGS",
    "FieldConfig",
    "classify_match",
    "compare_records",
    "exact_similarity",
]

STRONG_MATCH_SCORE = 0.9
MODERATE_MATCH_SCORE = 0.7


def exact_similarity(a: Any, b: Any) -> float:
    """Binary similarity: 1.0 when equal, else 0.0."""
    return 1.0 if a == b else 0.0


def _text(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value


def _extract_title(record: BibliographicRecord) -> str | None:
    return _text(record.title)


def _extract_authors(record: BibliographicRecord) -> tuple[str, ...] | None:
    return record.authors


def _extract_doi(record: BibliographicRecord) -> str | None:
    return _text(record.doi)


def _extract_journal(record: BibliographicRecord) -> str | None:
    return _text(record.journal)


def _extract_year(record: BibliographicRecord) -> int | None:
    return record.publication_year


@dataclass(frozen=True, slots=True)
class FieldConfig:
    """Configuration for a weighted field comparator.

    Attributes
    ----------
    name : str
        Field name reported in ``matching_fields``.
    weight : int
        Contribution weight in the aggregate score.
    extractor : Callable[[BibliographicRecord], Any]
        Returns the field value, or None when the field is absent.
    similarity : Callable[[Any, Any], float]
        Similarity function for two present values.
    match_threshold : float
        Similarity the field must exceed to be reported as matching.
    exact : bool
        Binary fields are reported when equal rather than above a threshold.
    """

    name: str
    weight: int
    extractor: Callable[[BibliographicRecord], Any]
    similarity: Callable[[Any, Any], float]
    match_threshold: float = 0.0
    exact: bool = False

    def compare(
        self,
        record_a: BibliographicRecord,
        record_b: BibliographicRecord,
    ) -> FieldComparison | None:
        """Compare this field across two records.

        Parameters
        ----------
        record_a : BibliographicRecord
            First record.
        record_b : BibliographicRecord
            Second record.

        Returns
        -------
        FieldComparison | None
            Field outcome, or None when the field is missing on either side.
        """
        value_a = self.extractor(record_a)
        value_b = self.extractor(record_b)
        if value_a is None or value_b is None:
            return None

        sim = self.similarity(value_a, value_b)
        matched = sim == 1.0 if self.exact else sim > self.match_threshold
        return FieldComparison(name=self.name, similarity=sim, weight=self.weight, matched=matched)


FIELD_CONFIGS: tuple[FieldConfig, ...] = (
    FieldConfig("title", 3, _extract_title, string_similarity, match_threshold=0.8),
    FieldConfig("authors", 2, _extract_authors, list_similarity, match_threshold=0.7),
    FieldConfig("doi", 2, _extract_doi, exact_similarity, exact=True),
    FieldConfig("journal", 1, _extract_journal, string_similarity, match_threshold=0.9),
    FieldConfig("year", 1, _extract_year, exact_similarity, exact=True),
)


def compare_records(
    record_a: BibliographicRecord,
    record_b: BibliographicRecord,
    field_configs: tuple[FieldConfig, ...] = FIELD_CONFIGS,
) -> Comparison:
    """Compare two records field by field.

    Parameters
    ----------
    record_a : BibliographicRecord
        First record.
    record_b : BibliographicRecord
        Second record.
    field_configs : tuple[FieldConfig, ...], optional
        Field table, by default ``FIELD_CONFIGS``.

    Returns
    -------
    Comparison
        Weighted score over fields present in both records and the fields
        that crossed their reporting thresholds.

    Notes
    -----
    Fields missing on either side are excluded from both numerator and
    denominator. With no shared field the score is 0.0, so sparse records
    never look alike by default.
    """
    outcomes: list[FieldComparison] = []
    for config in field_configs:
        outcome = config.compare(record_a, record_b)
        if outcome is not None:
            outcomes.append(outcome)

    total_weight = sum(o.weight for o in outcomes)
    if total_weight == 0:
        return Comparison(score=0.0, matching_fields=(), fields=())

    weighted = sum(o.weight * o.similarity for o in outcomes)
    return Comparison(
        score=weighted / total_weight,
        matching_fields=tuple(o.name for o in outcomes if o.matched),
        fields=tuple(outcomes),
    )


def classify_match(
    record_a: BibliographicRecord,
    record_b: BibliographicRecord,
    comparison: Comparison | None = None,
) -> MatchStrength:
    """Label a record pair as an exact, strong, moderate or weak match.

    Parameters
    ----------
    record_a : BibliographicRecord
        First record.
    record_b : BibliographicRecord
        Second record.
    comparison : Comparison | None, optional
        Precomputed comparison; computed when omitted.

    Returns
    -------
    MatchStrength
        EXACT when DOI or PMID are present and identical, otherwise a label
        derived from the aggregate score.
    """
    if record_a.doi and record_b.doi and record_a.doi == record_b.doi:
        return MatchStrength.EXACT
    if record_a.pmid and record_b.pmid and record_a.pmid == record_b.pmid:
        return MatchStrength.EXACT

    if comparison is None:
        comparison = compare_records(record_a, record_b)

    if comparison.score >= STRONG_MATCH_SCORE:
        return MatchStrength.STRONG
    if comparison.score >= MODERATE_MATCH_SCORE:
        return MatchStrength.MODERATE
    return MatchStrength.WEAK
