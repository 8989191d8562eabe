"""Combination of group sets produced by different strategies."""

from collections.abc import Sequence

from litdedupe.clustering import DuplicateGroup

__all__ = ["merge_group_sets"]


def merge_group_sets(
    groups_a: Sequence[DuplicateGroup],
    groups_b: Sequence[DuplicateGroup],
) -> list[DuplicateGroup]:
    """Merge two group sets keyed on primary id.

    Groups of ``groups_b`` whose primary is new are appended. Groups sharing
    a primary with an earlier group have their duplicates unioned (by id)
    into it; the earlier group's score and matching fields are kept.

    Parameters
    ----------
    groups_a : Sequence[DuplicateGroup]
        First group set; its groups win on conflicts.
    groups_b : Sequence[DuplicateGroup]
        Second group set.

    Returns
    -------
    list[DuplicateGroup]
        Merged groups in first-seen order. Inputs are not modified.
    """
    merged: dict[str, DuplicateGroup] = {}

    for group in (*groups_a, *groups_b):
        existing = merged.get(group.primary.id)
        if existing is None:
            # Normalizes away self-references and repeated ids
            merged[group.primary.id] = DuplicateGroup(
                primary=group.primary,
                duplicates=(),
                similarity_score=group.similarity_score,
                matching_fields=group.matching_fields,
            ).with_duplicates(group.duplicates)
        else:
            merged[group.primary.id] = existing.with_duplicates(group.duplicates)

    return [g for g in merged.values() if g.duplicates]
