"""Request construction for the judgment service."""

import json
from collections.abc import Sequence

from litdedupe.judgment.models import RecordSummary
from litdedupe.models import BibliographicRecord

__all__ = [
    "DEFAULT_ABSTRACT_CHARS",
    "SYSTEM_INSTRUCTION",
    "build_summaries",
    "build_user_message",
]

DEFAULT_ABSTRACT_CHARS = 200

SYSTEM_INSTRUCTION = """\
You are a research duplicate detection expert. Analyze the provided articles \
and identify potential duplicates based on titles, authors, journals, and \
abstracts. Refer to articles by their "index".

Return your analysis as JSON in this format, and nothing else:
{
  "duplicateGroups": [
    {
      "primaryIndex": 0,
      "duplicateIndexes": [5, 12],
      "confidence": 0.95,
      "reasoning": "Same title, authors, and journal"
    }
  ]
}
Use an empty "duplicateGroups" list when there are no duplicates.\
"""


def build_summaries(
    records: Sequence[BibliographicRecord],
    abstract_chars: int = DEFAULT_ABSTRACT_CHARS,
) -> list[RecordSummary]:
    """Summarize records for the judgment request.

    Parameters
    ----------
    records : Sequence[BibliographicRecord]
        Batch of records; list position becomes the summary index.
    abstract_chars : int, optional
        Abstract truncation length, by default 200.

    Returns
    -------
    list[RecordSummary]
        One summary per record, missing values rendered as "".
    """
    return [
        RecordSummary(
            index=index,
            id=record.id,
            title=record.title or "",
            authors=", ".join(record.authors or ()),
            journal=record.journal or "",
            year=record.publication_year if record.publication_year is not None else "",
            doi=record.doi or "",
            abstract=(record.abstract or "")[:abstract_chars],
        )
        for index, record in enumerate(records)
    ]


def build_user_message(summaries: Sequence[RecordSummary]) -> str:
    """Render the summaries as the user turn of the request."""
    payload = json.dumps([s.to_dict() for s in summaries], indent=2, ensure_ascii=False)
    return f"Analyze these articles for duplicates:\n\n{payload}"
