"""Parsing and validation of judgment-service responses."""

import json
import re
from typing import Any

import jsonschema

from litdedupe.judgment.models import JudgmentMalformed, JudgmentOk, JudgmentResult, Verdict

__all__ = ["VERDICT_SCHEMA", "parse_verdict_response"]

VERDICT_SCHEMA: dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "required": ["duplicateGroups"],
    "properties": {
        "duplicateGroups": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["primaryIndex", "duplicateIndexes", "confidence"],
                "properties": {
                    "primaryIndex": {"type": "integer", "minimum": 0},
                    "duplicateIndexes": {
                        "type": "array",
                        "items": {"type": "integer", "minimum": 0},
                    },
                    "confidence": {"type": "number", "minimum": 0, "maximum": 1},
                    "reasoning": {"type": ["string", "null"]},
                },
            },
        }
    },
}

_CODE_FENCE = re.compile(r"^```[a-zA-Z]*\s*(.*?)\s*```$", re.DOTALL)


def _strip_code_fence(text: str) -> str:
    stripped = text.strip()
    match = _CODE_FENCE.match(stripped)
    return match.group(1) if match else stripped


def parse_verdict_response(text: str | None, batch_size: int) -> JudgmentResult:
    """Parse a service answer into verdicts.

    Parameters
    ----------
    text : str | None
        Raw response text. A surrounding markdown code fence is tolerated.
    batch_size : int
        Number of records sent; every index must fall below it.

    Returns
    -------
    JudgmentResult
        ``JudgmentOk`` with the verdicts, or ``JudgmentMalformed`` describing
        why the answer was rejected.
    """
    if not text or not text.strip():
        return JudgmentMalformed(reason="empty response", raw=text)

    try:
        payload = json.loads(_strip_code_fence(text))
    except json.JSONDecodeError as e:
        return JudgmentMalformed(reason=f"invalid JSON: {e.msg}", raw=text)

    try:
        jsonschema.validate(instance=payload, schema=VERDICT_SCHEMA)
    except jsonschema.ValidationError as e:
        return JudgmentMalformed(reason=f"schema violation: {e.message}", raw=text)

    verdicts: list[Verdict] = []
    for item in payload["duplicateGroups"]:
        primary_index = int(item["primaryIndex"])
        duplicate_indexes = tuple(int(i) for i in item["duplicateIndexes"])

        out_of_range = [i for i in (primary_index, *duplicate_indexes) if i >= batch_size]
        if out_of_range:
            return JudgmentMalformed(
                reason=f"index out of range for batch of {batch_size}: {out_of_range}",
                raw=text,
            )

        verdicts.append(
            Verdict(
                primary_index=primary_index,
                duplicate_indexes=duplicate_indexes,
                confidence=float(item["confidence"]),
                reasoning=item.get("reasoning"),
            )
        )

    return JudgmentOk(verdicts=tuple(verdicts))
