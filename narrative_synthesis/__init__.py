"""Narrative collaborator: adapters, prompts, chunking and retry."""

from narrative_synthesis.adapter import (
    BaseNarrativeAdapter,
    MockNarrativeAdapter,
    OpenAINarrativeAdapter,
    build_narrative_adapter,
)
from narrative_synthesis.chunking import chunk_text
from narrative_synthesis.retry import NarrativeRetryExhaustedError, generate_with_retry
from narrative_synthesis.schema import NarrativeResult
from narrative_synthesis.service import NarrativeService, get_narrative_service

__all__ = [
    "BaseNarrativeAdapter",
    "MockNarrativeAdapter",
    "NarrativeResult",
    "NarrativeRetryExhaustedError",
    "NarrativeService",
    "OpenAINarrativeAdapter",
    "build_narrative_adapter",
    "chunk_text",
    "generate_with_retry",
    "get_narrative_service",
]
