"""Tests for the public API module."""

import json
from pathlib import Path

import pytest

from litdedupe import (
    BibliographicRecord,
    DetectionResult,
    detect,
    load_records,
    write_records,
    write_result,
)


@pytest.fixture
def records_file(tmp_path: Path) -> Path:
    """JSONL file using both camelCase and snake_case keys."""
    path = tmp_path / "records.jsonl"
    rows = [
        {
            "id": "r1",
            "projectId": "p1",
            "title": "Vitamin D and fracture risk",
            "authors": ["Smith J", "Doe A"],
            "publicationDate": "2019-04-01",
            "doi": "10.1/vd",
        },
        {
            "id": "r2",
            "project_id": "p1",
            "title": "Vitamin D and fracture risk",
            "authors": ["Smith J", "Doe A"],
            "publication_year": 2019,
            "externalId": "31234567",
        },
    ]
    # Blank lines between records are ignored
    path.write_text("\n\n".join(json.dumps(r) for r in rows) + "\n", encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# load_records
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_load_records_returns_list(records_file: Path) -> None:
    """Test load_records returns records in file order, skipping blank lines."""
    records = load_records(records_file)

    assert [r.id for r in records] == ["r1", "r2"]
    assert all(isinstance(r, BibliographicRecord) for r in records)


@pytest.mark.unit
def test_load_records_field_aliases(records_file: Path) -> None:
    """Test alias keys map onto record fields."""
    r1, r2 = load_records(records_file)

    assert r1.project_id == "p1"
    assert r1.publication_year == 2019
    assert r1.authors == ("Smith J", "Doe A")
    assert r2.project_id == "p1"
    assert r2.publication_year == 2019
    assert r2.pmid == "31234567"


@pytest.mark.unit
def test_load_records_nonexistent_raises_error() -> None:
    """Test missing file raises FileNotFoundError."""
    with pytest.raises(FileNotFoundError, match="File not found"):
        load_records("/nonexistent/records.jsonl")


@pytest.mark.unit
@pytest.mark.parametrize(
    ("content", "match"),
    [
        ('{"id": "a"}\n{oops\n', "records.jsonl:2: invalid JSON"),
        ('["a", "b"]\n', "expected a JSON object"),
        ('{"title": "No id"}\n', "missing an 'id'"),
        ('{"id": "a"}\n{"id": "a"}\n', "Duplicate record id: a"),
    ],
    ids=["bad_json", "not_object", "missing_id", "repeated_id"],
)
def test_load_records_invalid_content(tmp_path: Path, content: str, match: str) -> None:
    """Test malformed files raise ValueError naming the problem."""
    path = tmp_path / "records.jsonl"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ValueError, match=match):
        load_records(path)


# ---------------------------------------------------------------------------
# write_records / write_result
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_write_records_creates_file(records_file: Path, tmp_path: Path) -> None:
    """Test write_records writes one JSON object per line."""
    output = tmp_path / "out" / "records.jsonl"

    write_records(load_records(records_file), output)

    lines = output.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    first = json.loads(lines[0])
    assert first["id"] == "r1"
    assert first["publicationYear"] == 2019
    assert first["duplicateOf"] is None


@pytest.mark.unit
def test_write_records_deterministic(records_file: Path, tmp_path: Path) -> None:
    """Test repeated writes produce identical, key-sorted output."""
    records = load_records(records_file)
    out1 = tmp_path / "a.jsonl"
    out2 = tmp_path / "b.jsonl"

    write_records(records, out1)
    write_records(records, out2)

    assert out1.read_bytes() == out2.read_bytes()
    keys = list(json.loads(out1.read_text().splitlines()[0]))
    assert keys == sorted(keys)


@pytest.mark.unit
def test_round_trip_serialization(records_file: Path, tmp_path: Path) -> None:
    """Test records survive a write/load cycle unchanged."""
    records = load_records(records_file)
    output = tmp_path / "copy.jsonl"

    write_records(records, output)

    assert load_records(output) == records


@pytest.mark.unit
def test_write_result(records_file: Path, tmp_path: Path) -> None:
    """Test write_result stores the camelCase result structure."""
    result = detect(load_records(records_file), method="rule_based")
    output = tmp_path / "result.json"

    write_result(result, output)

    data = json.loads(output.read_text(encoding="utf-8"))
    assert isinstance(result, DetectionResult)
    assert data == result.to_dict()
    assert data["totalDuplicates"] == 1
