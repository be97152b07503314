"""Narrative adapters for report prose generation.

Provides a base interface and concrete adapters for OpenAI-compatible
APIs and a deterministic mock for testing.
"""

import re
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from netops.config import NarrativeSettings


class BaseNarrativeAdapter(ABC):
    """Abstract base for all narrative adapters."""

    @abstractmethod
    def generate(self, prompt: str) -> str:
        """Send a prompt to the model and return the raw response text.

        Args:
            prompt: The fully formatted prompt string.

        Returns:
            Narrative prose produced by the model.
        """


_SYSTEM_MESSAGE = (
    "You write short operational summaries of network monitoring reports. "
    "Use only the findings you are given and keep site and device names exact."
)


class OpenAINarrativeAdapter(BaseNarrativeAdapter):
    """Adapter for OpenAI-compatible chat completion APIs.

    Sends a fixed system message ahead of each prompt. Temperature stays low
    so repeated runs over the same findings read the same way.
    """

    def __init__(
        self,
        model: str = "gpt-4o",
        max_tokens: int = 2048,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        temperature: float = 0.2,
    ) -> None:
        """Create the OpenAI client.

        Args:
            model: Chat model identifier.
            max_tokens: Completion token limit per chunk.
            api_key: Key for the endpoint. Resolved by ``NarrativeSettings``.
            base_url: Optional base URL of an OpenAI-compatible endpoint.
            temperature: Sampling temperature.
        """
        from openai import OpenAI  # type: ignore[import-untyped]

        client_kwargs: Dict[str, Any] = {"api_key": api_key}
        if base_url:
            client_kwargs["base_url"] = base_url

        self._client = OpenAI(**client_kwargs)
        self._model = model
        self._max_tokens = max_tokens
        self._temperature = temperature

    @classmethod
    def from_settings(cls, settings: NarrativeSettings) -> "OpenAINarrativeAdapter":
        return cls(
            model=settings.model,
            max_tokens=settings.max_tokens,
            api_key=settings.api_key,
            base_url=settings.base_url,
        )

    def generate(self, prompt: str) -> str:
        """Request one completion for a chunk prompt.

        Args:
            prompt: Prompt built by ``NarrativePromptBuilder``.

        Returns:
            Message content of the first choice; empty string when absent.
        """
        completion = self._client.chat.completions.create(
            model=self._model,
            messages=[
                {"role": "system", "content": _SYSTEM_MESSAGE},
                {"role": "user", "content": prompt},
            ],
            temperature=self._temperature,
            max_tokens=self._max_tokens,
            stream=False,
        )
        if not completion.choices:
            return ""
        return completion.choices[0].message.content or ""


_CATEGORY_LINE_RE = re.compile(r"^### (?P<name>.+?) \((?P<total>\d+) findings?\)$", re.MULTILINE)


class MockNarrativeAdapter(BaseNarrativeAdapter):
    """Deterministic adapter that summarises the category headings it sees.

    Used for local testing and CI pipelines where no model API
    is available.
    """

    def generate(self, prompt: str) -> str:
        """Return one sentence per category heading found in the prompt.

        Args:
            prompt: Prompt built by NarrativePromptBuilder.

        Returns:
            Plain-text narrative; a generic sentence when no headings exist.
        """
        sentences = [
            f"{match.group('name')}: {match.group('total')} findings require review."
            for match in _CATEGORY_LINE_RE.finditer(prompt)
        ]
        if not sentences:
            return "No network findings were provided for this section."
        return " ".join(sentences)


def build_narrative_adapter(settings: NarrativeSettings) -> BaseNarrativeAdapter:
    """Create the adapter named by settings.

    Args:
        settings: Narrative settings (``LLM_ADAPTER`` selects the adapter).

    Returns:
        A mock adapter for ``mock``; the OpenAI-compatible adapter otherwise.
    """
    if settings.adapter == "mock":
        return MockNarrativeAdapter()
    return OpenAINarrativeAdapter.from_settings(settings)
