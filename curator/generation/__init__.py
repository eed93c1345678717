"""Content generation for curated items."""

from .llm_provider import (
    AnthropicGenerator,
    MockGenerator,
    OpenAICompatibleGenerator,
    TextGenerator,
    build_generator,
)
from .models import GenerationStats, PromptRequest
from .prompts import DEFAULT_TONE, LINK_PLACEHOLDER, PromptBuilder
from .styles import STYLES_BY_KIND, FixedStylePicker, StylePicker, StyleVariant

__all__ = [
    "AnthropicGenerator",
    "DEFAULT_TONE",
    "FixedStylePicker",
    "GenerationStats",
    "LINK_PLACEHOLDER",
    "MockGenerator",
    "OpenAICompatibleGenerator",
    "PromptBuilder",
    "PromptRequest",
    "STYLES_BY_KIND",
    "StylePicker",
    "StyleVariant",
    "TextGenerator",
    "build_generator",
]
