"""Judgment-assisted duplicate detection.

An external judgment service (typically a large language model) is asked
which records in a small batch describe the same work. Unavailability or a
malformed answer falls back to rule-based grouping.
"""

from litdedupe.judgment.grouper import DEFAULT_MAX_BATCH_SIZE, group_assisted
from litdedupe.judgment.models import (
    JudgmentMalformed,
    JudgmentOk,
    JudgmentResult,
    JudgmentUnavailable,
    RecordSummary,
    Verdict,
)
from litdedupe.judgment.parse import VERDICT_SCHEMA, parse_verdict_response
from litdedupe.judgment.prompt import build_summaries
from litdedupe.judgment.service import JudgmentService, OpenAIJudgmentService

__all__ = [
    "DEFAULT_MAX_BATCH_SIZE",
    "VERDICT_SCHEMA",
    "JudgmentMalformed",
    "JudgmentOk",
    "JudgmentResult",
    "JudgmentService",
    "JudgmentUnavailable",
    "OpenAIJudgmentService",
    "RecordSummary",
    "Verdict",
    "build_summaries",
    "group_assisted",
    "parse_verdict_response",
]
