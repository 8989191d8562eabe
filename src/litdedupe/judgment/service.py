"""Judgment service interface and the OpenAI-backed implementation.

Any model or service can back duplicate judgment as long as it implements
``JudgmentService.classify``. Implementations report failures through the
tagged result instead of raising.
"""

import os
from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

import openai

from litdedupe.judgment.models import (
    JudgmentMalformed,
    JudgmentResult,
    JudgmentUnavailable,
    RecordSummary,
)
from litdedupe.judgment.parse import parse_verdict_response
from litdedupe.judgment.prompt import SYSTEM_INSTRUCTION, build_user_message

__all__ = [
    "DEFAULT_MODEL",
    "DEFAULT_TIMEOUT_SECONDS",
    "JudgmentService",
    "OpenAIJudgmentService",
]

DEFAULT_MODEL = "gpt-4"
DEFAULT_TIMEOUT_SECONDS = 30.0


@runtime_checkable
class JudgmentService(Protocol):
    """Structural protocol for duplicate judgment backends."""

    def classify(self, summaries: Sequence[RecordSummary]) -> JudgmentResult:
        """Return verdicts for a batch of record summaries."""
        ...


class OpenAIJudgmentService:
    """Judgment service backed by an OpenAI-compatible chat completion API.

    Attributes
    ----------
    client : openai.OpenAI
        API client.
    model : str
        Chat model name.
    temperature : float
        Sampling temperature.
    max_tokens : int
        Completion token cap.
    timeout : float
        Per-request timeout in seconds.
    """

    def __init__(
        self,
        client: Any | None = None,
        *,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str = DEFAULT_MODEL,
        temperature: float = 0.1,
        max_tokens: int = 2000,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        max_retries: int = 1,
    ) -> None:
        """Initialize the service.

        Parameters
        ----------
        client : Any | None, optional
            Preconfigured ``openai.OpenAI`` client (or a compatible object).
            Built from ``api_key``/``base_url`` when omitted.
        api_key : str | None, optional
            API key for a new client.
        base_url : str | None, optional
            Base URL for a new client (e.g., a local OpenAI-compatible server).
        model : str, optional
            Chat model, by default "gpt-4".
        temperature : float, optional
            Sampling temperature, by default 0.1.
        max_tokens : int, optional
            Completion token cap, by default 2000.
        timeout : float, optional
            Request timeout in seconds, by default 30.
        max_retries : int, optional
            Client-level retries for transient errors, by default 1.

        Raises
        ------
        ValueError
            If timeout or max_tokens is not positive.
        """
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")
        if max_tokens <= 0:
            raise ValueError(f"max_tokens must be positive, got {max_tokens}")

        if client is None:
            client = openai.OpenAI(
                api_key=api_key,
                base_url=base_url,
                timeout=timeout,
                max_retries=max_retries,
            )

        self.client = client
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout

    @classmethod
    def from_env(cls) -> "OpenAIJudgmentService | None":
        """Build a service from environment variables.

        Reads ``OPENAI_API_KEY``, ``OPENAI_BASE_URL``,
        ``LITDEDUPE_JUDGMENT_MODEL`` and ``LITDEDUPE_JUDGMENT_TIMEOUT``.

        Returns
        -------
        OpenAIJudgmentService | None
            Configured service, or None when no API key is set.
        """
        api_key = os.environ.get("OPENAI_API_KEY")
        if not api_key:
            return None

        return cls(
            api_key=api_key,
            base_url=os.environ.get("OPENAI_BASE_URL") or None,
            model=os.environ.get("LITDEDUPE_JUDGMENT_MODEL", DEFAULT_MODEL),
            timeout=float(os.environ.get("LITDEDUPE_JUDGMENT_TIMEOUT", DEFAULT_TIMEOUT_SECONDS)),
        )

    def classify(self, summaries: Sequence[RecordSummary]) -> JudgmentResult:
        """Ask the model which summaries describe the same work.

        Parameters
        ----------
        summaries : Sequence[RecordSummary]
            Batch of record summaries.

        Returns
        -------
        JudgmentResult
            Verdicts, ``JudgmentUnavailable`` on API errors, or
            ``JudgmentMalformed`` when the answer cannot be parsed.
        """
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_INSTRUCTION},
                    {"role": "user", "content": build_user_message(summaries)},
                ],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                timeout=self.timeout,
            )
        except openai.APIError as e:
            return JudgmentUnavailable(reason=f"{type(e).__name__}: {e}")

        if not response.choices:
            return JudgmentMalformed(reason="response has no choices")

        content = response.choices[0].message.content
        return parse_verdict_response(content, batch_size=len(summaries))
