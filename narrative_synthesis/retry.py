"""Retry logic for empty narrative responses.

Retries only when the adapter returns blank text.
Does NOT retry on adapter transport errors; those propagate to the caller.
"""

import logging

from narrative_synthesis.adapter import BaseNarrativeAdapter

logger = logging.getLogger(__name__)


class NarrativeRetryExhaustedError(Exception):
    """Raised when every attempt returned empty text.

    Attributes:
        attempts: Total number of attempts made (initial + retries).
    """

    def __init__(self, attempts: int) -> None:
        self.attempts = attempts
        super().__init__(f"Narrative generation returned empty text after {attempts} attempt(s).")


def generate_with_retry(
    adapter: BaseNarrativeAdapter,
    prompt: str,
    max_retries: int = 2,
) -> str:
    """Generate narrative text, retrying on empty output.

    Args:
        adapter: A narrative adapter implementing ``generate(prompt) -> str``.
        prompt: The fully formatted prompt string.
        max_retries: Maximum number of *additional* attempts after the
            first empty response. Total attempts = 1 + max_retries.

    Returns:
        Stripped, non-empty narrative text.

    Raises:
        NarrativeRetryExhaustedError: If every attempt returned blank text.
    """
    total_attempts = 1 + max_retries

    for attempt in range(1, total_attempts + 1):
        text = (adapter.generate(prompt) or "").strip()
        if text:
            if attempt > 1:
                logger.info("Narrative generated on attempt %d/%d", attempt, total_attempts)
            return text
        logger.warning("Attempt %d/%d returned empty narrative", attempt, total_attempts)

    raise NarrativeRetryExhaustedError(attempts=total_attempts)
