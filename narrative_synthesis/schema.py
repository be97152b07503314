"""Result contract for narrative generation."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class NarrativeResult(BaseModel):
    """Narrative prose or an error, never both."""

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        str_strip_whitespace=True,
    )

    document_id: str = Field(min_length=1)
    narrative: Optional[str] = None
    error: Optional[str] = None
    chunks: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _one_of_narrative_or_error(self) -> "NarrativeResult":
        if bool(self.narrative) == bool(self.error):
            raise ValueError("Exactly one of narrative or error must be set.")
        return self

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, document_id: str, reason: str, chunks: int = 0) -> "NarrativeResult":
        return cls(document_id=document_id, error=reason, chunks=chunks)
