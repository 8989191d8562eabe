"""Public API for duplicate detection.

This module provides the main public API for litdedupe, enabling:
- Loading records from JSONL files
- Running duplicate detection
- Writing records and detection results back to disk
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path

from litdedupe.engine import DetectionResult, detect
from litdedupe.merge import JsonlRecordStore, consolidate_group
from litdedupe.models import BibliographicRecord
from litdedupe.scoring import find_potential_duplicates

__all__ = [
    "consolidate_group",
    "detect",
    "find_potential_duplicates",
    "load_records",
    "write_records",
    "write_result",
]


def load_records(path: str | Path) -> list[BibliographicRecord]:
    """Load records from a JSONL file.

    Parameters
    ----------
    path : str | Path
        JSONL file with one record object per line.

    Returns
    -------
    list[BibliographicRecord]
        Records in file order.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    ValueError
        If a line is malformed or ids repeat.

    Examples
    --------
        >>> from litdedupe import load_records, detect
        >>> records = load_records("records.jsonl")
        >>> result = detect(records, method="rule_based")
    """
    file_path = Path(path)

    if not file_path.is_file():
        raise FileNotFoundError(f"File not found: {path}")

    return JsonlRecordStore.load(file_path).records()


def write_records(
    records: Iterable[BibliographicRecord],
    path: str | Path,
    *,
    sort_keys: bool = True,
) -> None:
    """Write records to a JSONL file (one JSON object per line).

    Parameters
    ----------
    records : Iterable[BibliographicRecord]
        Records to write.
    path : str | Path
        Output file path.
    sort_keys : bool, optional
        Whether to sort dictionary keys for deterministic output,
        by default True.
    """
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    with file_path.open("w", encoding="utf-8", newline="\n") as f:
        for record in records:
            f.write(json.dumps(record.to_dict(), ensure_ascii=False, sort_keys=sort_keys) + "\n")


def write_result(result: DetectionResult, path: str | Path) -> None:
    """Write a detection result as indented JSON.

    Parameters
    ----------
    result : DetectionResult
        Result returned by ``detect``.
    path : str | Path
        Output file path.
    """
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    with file_path.open("w", encoding="utf-8") as f:
        json.dump(result.to_dict(), f, indent=2, ensure_ascii=False)
        f.write("\n")
