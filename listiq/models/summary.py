"""Pydantic models for the comparison summary."""

from pydantic import BaseModel, ConfigDict, Field


class SummaryPayload(BaseModel):
    """The JSON shape the model is asked to return. Anything else is rejected."""

    model_config = ConfigDict(strict=True)

    headline: str = Field(min_length=1)
    highlights: list[str] = Field(default_factory=list, max_length=8)


class ComparisonNarrative(BaseModel):
    text: str
    used_ai: bool  # False means the deterministic fallback was used
    property_count: int
