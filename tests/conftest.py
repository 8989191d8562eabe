"""Pytest configuration and fixtures for test suite."""

import sys
from collections.abc import Callable, Sequence
from pathlib import Path

import pytest

# Add src directory to path for imports
SRC_PATH = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(SRC_PATH))

from litdedupe.models import BibliographicRecord  # noqa: E402


@pytest.fixture
def make_record() -> Callable[..., BibliographicRecord]:
    """Factory for test records with minimal boilerplate.

    Every descriptive field defaults to absent, so a test only spells out
    the fields that matter for its comparison.
    """

    def _factory(
        rid: str = "rid_001",
        *,
        title: str | None = None,
        authors: Sequence[str] | None = None,
        journal: str | None = None,
        year: int | None = None,
        doi: str | None = None,
        pmid: str | None = None,
        abstract: str | None = None,
        duplicate_of: str | None = None,
        similarity_score: float | None = None,
        project_id: str | None = "proj_1",
    ) -> BibliographicRecord:
        return BibliographicRecord(
            id=rid,
            project_id=project_id,
            title=title,
            authors=tuple(authors) if authors is not None else None,
            journal=journal,
            publication_year=year,
            doi=doi,
            pmid=pmid,
            abstract=abstract,
            duplicate_of=duplicate_of,
            similarity_score=similarity_score,
        )

    return _factory
