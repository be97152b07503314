"""Narrative generation over report categories.

Categories are rendered to text, split into line-preserving chunks and sent
to the adapter one chunk at a time. The result carries the joined prose or an
error string; ``generate`` does not raise.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from narrative_synthesis.adapter import BaseNarrativeAdapter, build_narrative_adapter
from narrative_synthesis.chunking import DEFAULT_MAX_CHUNK_CHARS, chunk_text
from narrative_synthesis.prompt_builder import NarrativePromptBuilder, format_categories
from narrative_synthesis.retry import NarrativeRetryExhaustedError, generate_with_retry
from narrative_synthesis.schema import NarrativeResult
from netops.config import get_narrative_settings

logger = logging.getLogger(__name__)


class NarrativeService:
    """Sequential per-chunk narrative generation."""

    def __init__(
        self,
        adapter: BaseNarrativeAdapter,
        max_chunk_chars: int = DEFAULT_MAX_CHUNK_CHARS,
        max_retries: int = 2,
        prompt_builder: Optional[NarrativePromptBuilder] = None,
    ) -> None:
        self._adapter = adapter
        self._max_chunk_chars = max_chunk_chars
        self._max_retries = max_retries
        self._prompt_builder = prompt_builder or NarrativePromptBuilder()

    def generate(self, categories: Sequence[Dict[str, Any]], document_id: str) -> NarrativeResult:
        """Write the narrative for one document.

        Args:
            categories: Category dicts (``CategoryResponse.model_dump()``).
            document_id: Identifier of the analyzed report.

        Returns:
            ``NarrativeResult`` with prose, or with an error string when the
            adapter failed or kept returning empty text.
        """
        chunks = chunk_text(format_categories(categories), self._max_chunk_chars)
        if not chunks:
            return NarrativeResult.failure(document_id, "No findings to narrate.")

        parts: List[str] = []
        for index, chunk in enumerate(chunks, start=1):
            prompt = self._prompt_builder.build_prompt(chunk, document_id, index, len(chunks))
            try:
                parts.append(generate_with_retry(self._adapter, prompt, self._max_retries))
            except NarrativeRetryExhaustedError as exc:
                logger.warning("Narrative chunk failed document_id=%s chunk=%s error=%s", document_id, index, exc)
                return NarrativeResult.failure(document_id, str(exc), chunks=len(chunks))
            except Exception as exc:  # provider SDKs raise their own exception types
                logger.exception("Narrative adapter error document_id=%s chunk=%s", document_id, index)
                return NarrativeResult.failure(
                    document_id,
                    f"Narrative adapter error: {exc}",
                    chunks=len(chunks),
                )

        return NarrativeResult(document_id=document_id, narrative="\n\n".join(parts), chunks=len(chunks))


def get_narrative_service() -> NarrativeService:
    """Build a service from environment settings."""
    settings = get_narrative_settings()
    return NarrativeService(
        adapter=build_narrative_adapter(settings),
        max_chunk_chars=settings.max_chunk_chars,
        max_retries=settings.max_retries,
    )
