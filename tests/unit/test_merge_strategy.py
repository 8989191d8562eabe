"""Tests for combining group sets from different strategies."""

from collections.abc import Callable

import pytest

from litdedupe.clustering import JUDGMENT_FIELD, DuplicateGroup
from litdedupe.merge import merge_group_sets
from litdedupe.models import BibliographicRecord

RecordFactory = Callable[..., BibliographicRecord]


def _group(
    primary: BibliographicRecord,
    *duplicates: BibliographicRecord,
    score: float = 0.9,
    fields: tuple[str, ...] = ("title",),
) -> DuplicateGroup:
    return DuplicateGroup(
        primary=primary,
        duplicates=duplicates,
        similarity_score=score,
        matching_fields=fields,
    )


@pytest.fixture
def records(make_record: RecordFactory) -> dict[str, BibliographicRecord]:
    return {rid: make_record(rid, title="T") for rid in ["a", "b", "c", "d", "e", "f"]}


@pytest.mark.unit
def test_disjoint_primaries_are_appended(records: dict[str, BibliographicRecord]) -> None:
    """Test groups with new primaries are kept in order."""
    groups_a = [_group(records["a"], records["b"])]
    groups_b = [_group(records["c"], records["d"], fields=(JUDGMENT_FIELD,))]

    merged = merge_group_sets(groups_a, groups_b)

    assert [(g.primary.id, g.duplicate_ids) for g in merged] == [("a", ("b",)), ("c", ("d",))]
    assert merged[1].matching_fields == (JUDGMENT_FIELD,)


@pytest.mark.unit
def test_shared_primary_unions_duplicates(records: dict[str, BibliographicRecord]) -> None:
    """Test duplicates are unioned by id and the first group's metadata wins."""
    groups_a = [_group(records["a"], records["b"], records["c"], score=0.88)]
    groups_b = [
        _group(records["a"], records["c"], records["d"], score=0.97, fields=(JUDGMENT_FIELD,))
    ]

    merged = merge_group_sets(groups_a, groups_b)

    assert len(merged) == 1
    assert merged[0].duplicate_ids == ("b", "c", "d")
    assert merged[0].similarity_score == 0.88
    assert merged[0].matching_fields == ("title",)


@pytest.mark.unit
def test_inputs_are_not_modified(records: dict[str, BibliographicRecord]) -> None:
    """Test merging leaves both input lists and groups untouched."""
    first = _group(records["a"], records["b"])
    second = _group(records["a"], records["c"])
    groups_a = [first]
    groups_b = [second]

    merge_group_sets(groups_a, groups_b)

    assert groups_a == [first]
    assert groups_b == [second]
    assert first.duplicate_ids == ("b",)


@pytest.mark.unit
def test_self_reference_is_dropped(records: dict[str, BibliographicRecord]) -> None:
    """Test a duplicate equal to its primary never survives the merge."""
    groups_b = [_group(records["e"], records["e"], records["f"])]

    merged = merge_group_sets([], groups_b)

    assert merged[0].duplicate_ids == ("f",)


@pytest.mark.unit
def test_group_left_empty_is_dropped(records: dict[str, BibliographicRecord]) -> None:
    """Test a group whose only duplicate was its primary disappears."""
    merged = merge_group_sets([_group(records["e"], records["e"])], [])

    assert merged == []


@pytest.mark.unit
def test_empty_inputs() -> None:
    """Test merging nothing yields nothing."""
    assert merge_group_sets([], []) == []
