"""Rule-based grouping of records using the weighted comparator.

Two modes are available:

* ``group_rule_based`` — single greedy pass in input order. A record joins
  the first earlier unprocessed record it scores ``>= threshold`` against.
  This is not transitive closure: with A~B, B~C and A!~C, C stays out of
  A's group (and may be grouped later, or not at all).
* ``group_transitive`` — connected components of the full pairwise match
  graph via Union-Find. Opt-in only.
"""

import threading
from collections.abc import Sequence

from litdedupe.clustering.models import DuplicateGroup
from litdedupe.clustering.union_find import UnionFind
from litdedupe.errors import raise_if_cancelled
from litdedupe.models import BibliographicRecord
from litdedupe.scoring import Comparison, compare_records

__all__ = ["group_rule_based", "group_transitive"]


def _build_group(
    primary: BibliographicRecord,
    members: Sequence[tuple[BibliographicRecord, Comparison]],
) -> DuplicateGroup:
    """Assemble a group from (duplicate, comparison-with-primary) pairs."""
    return DuplicateGroup(
        primary=primary,
        duplicates=tuple(record for record, _ in members),
        similarity_score=max(comparison.score for _, comparison in members),
        matching_fields=members[0][1].matching_fields,
    )


def group_rule_based(
    records: Sequence[BibliographicRecord],
    threshold: float,
    *,
    cancel_event: threading.Event | None = None,
) -> list[DuplicateGroup]:
    """Group records with a single greedy pass.

    Parameters
    ----------
    records : Sequence[BibliographicRecord]
        Records in a stable order; the order decides which record becomes
        primary.
    threshold : float
        Minimum aggregate score (inclusive) for a record to join a group.
    cancel_event : threading.Event | None, optional
        Checked before every comparison.

    Returns
    -------
    list[DuplicateGroup]
        Groups with at least one duplicate, in order of their primaries.

    Raises
    ------
    DetectionCancelledError
        If ``cancel_event`` is set during the pass.
    """
    groups: list[DuplicateGroup] = []
    processed: set[str] = set()

    for i, primary in enumerate(records):
        if primary.id in processed:
            continue

        members: list[tuple[BibliographicRecord, Comparison]] = []
        for candidate in records[i + 1 :]:
            if candidate.id in processed or candidate.id == primary.id:
                continue

            raise_if_cancelled(cancel_event)
            comparison = compare_records(primary, candidate)
            if comparison.score >= threshold:
                members.append((candidate, comparison))
                processed.add(candidate.id)

        if members:
            groups.append(_build_group(primary, members))
            processed.add(primary.id)

    return groups


def group_transitive(
    records: Sequence[BibliographicRecord],
    threshold: float,
    *,
    cancel_event: threading.Event | None = None,
) -> list[DuplicateGroup]:
    """Group records by connected components of the pairwise match graph.

    Every pair is compared; pairs scoring ``>= threshold`` are joined. The
    earliest record of each component (input order) becomes its primary.
    ``similarity_score`` is the best score between the primary and any
    member, and ``matching_fields`` come from the primary's comparison with
    the first member, so a member linked only through others may score below
    ``threshold`` against the primary.

    Parameters
    ----------
    records : Sequence[BibliographicRecord]
        Records in a stable order.
    threshold : float
        Minimum aggregate score (inclusive) for an edge.
    cancel_event : threading.Event | None, optional
        Checked before every comparison.

    Returns
    -------
    list[DuplicateGroup]
        One group per component with two or more records.
    """
    by_id: dict[str, BibliographicRecord] = {}
    uf = UnionFind()
    for record in records:
        if record.id not in by_id:
            by_id[record.id] = record
            uf.make_set(record.id)

    unique = list(by_id.values())
    for i, record_a in enumerate(unique):
        for record_b in unique[i + 1 :]:
            raise_if_cancelled(cancel_event)
            if compare_records(record_a, record_b).score >= threshold:
                uf.union(record_a.id, record_b.id)

    groups: list[DuplicateGroup] = []
    for component in uf.get_components():
        if len(component) < 2:
            continue
        primary = by_id[component[0]]
        members = [(by_id[rid], compare_records(primary, by_id[rid])) for rid in component[1:]]
        groups.append(_build_group(primary, members))

    return groups
