"""Data models for generation."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from .styles import StyleVariant


class PromptRequest(BaseModel):
    """A fully built prompt plus the parameters a backend needs."""

    kind: str = Field(..., description="Output kind or task name (blog, linkedin, twitter, search)")
    text: str = Field(..., description="Prompt text")
    style: Optional[StyleVariant] = Field(None, description="Style variant chosen for this call")
    temperature: Optional[float] = Field(None, description="Override backend temperature")
    max_tokens: Optional[int] = Field(None, description="Override backend max tokens")
    context: Dict[str, Any] = Field(
        default_factory=dict, description="Structured parameters the prompt was built from"
    )


class GenerationStats(BaseModel):
    """Statistics for generation calls."""

    api_calls: int = Field(0, description="Number of API calls made")
    failures: int = Field(0, description="Calls that raised GenerationError")
    tokens_used: int = Field(0, description="Total tokens used")
    model: str = Field("", description="Model name")
