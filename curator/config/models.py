"""Configuration models."""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

DEFAULT_TOPIC_KEYWORDS: Dict[str, List[str]] = {
    "seo": [
        "seo", "search engine", "ranking", "google", "indexing", "keywords",
        "backlinks", "serp", "organic traffic",
    ],
    "cro": [
        "conversion", "cro", "a/b test", "optimization", "checkout",
        "cart abandonment", "user experience", "bounce rate", "funnel",
    ],
    "speed": [
        "speed", "performance", "pagespeed", "core web vitals", "lcp", "fid",
        "cls", "lighthouse", "load time", "ttfb", "tti",
    ],
    "ai": [
        "ai", "artificial intelligence", "machine learning", "llm", "gpt",
        "claude", "automation", "chatbot", "langchain", "rag", "embeddings",
        "vector",
    ],
    "shopify": [
        "shopify", "liquid", "theme", "storefront", "checkout", "ecommerce",
        "e-commerce", "store", "merchant", "headless",
    ],
    "development": [
        "javascript", "typescript", "react", "next.js", "api", "code",
        "developer", "frontend", "backend", "node",
    ],
}

DEFAULT_BANNED_PHRASES: List[str] = [
    "leverage", "revolutionary", "cutting-edge", "synergy", "game-changer",
    "paradigm shift", "holistic approach", "seamlessly", "robust solution",
    "best-in-class",
]

DEFAULT_VOICE_RULES = """Use regular dashes (-), straight quotes and no emojis.
Write in the first person. Short sentences, short paragraphs, active voice.
Be specific with numbers and examples. No fluff and no corporate speak."""

OUTPUT_KINDS = ("blog", "linkedin", "twitter")


class RunDefaults(BaseModel):
    """Default run parameters."""

    articles: int = Field(2, description="Items to process per run", ge=1, le=100)
    days: int = Field(3, description="Recency window in days", ge=1, le=365)
    topics: List[str] = Field(default_factory=lambda: ["all"], description="Topic filter")
    outputs: List[str] = Field(
        default_factory=lambda: list(OUTPUT_KINDS),
        description="Output kinds to generate per item",
    )

    @field_validator("outputs")
    @classmethod
    def validate_outputs(cls, v: List[str]) -> List[str]:
        """Reject unknown output kinds."""
        unknown = [kind for kind in v if kind not in OUTPUT_KINDS]
        if unknown:
            raise ValueError(f"Unknown output kinds: {', '.join(unknown)}")
        if not v:
            raise ValueError("At least one output kind is required")
        return v


class LLMConfig(BaseModel):
    """Text generation backend configuration."""

    provider: str = Field("openai", description="Backend (openai, grok, anthropic, mock)")
    model: Optional[str] = Field(None, description="Model name (provider default when unset)")
    api_key_env: Optional[str] = Field(None, description="Environment variable for API key")
    api_key: Optional[str] = Field(None, description="API key (prefer api_key_env)")
    base_url: Optional[str] = Field(None, description="Base URL for OpenAI-compatible APIs")
    temperature: float = Field(0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(4096, ge=1, le=32000)
    max_retries: int = Field(3, ge=1, le=10)
    timeout: float = Field(120.0, gt=0.0)


class VoiceConfig(BaseModel):
    """Brand voice handed to the generation prompts."""

    persona: str = Field(
        "an independent e-commerce performance specialist",
        description="Who the posts are written as",
    )
    rules: str = Field(DEFAULT_VOICE_RULES, description="Voice rules inserted into every prompt")
    banned_phrases: List[str] = Field(default_factory=lambda: list(DEFAULT_BANNED_PHRASES))
    categories: List[str] = Field(
        default_factory=lambda: [
            "Speed Optimization", "CRO", "AI SEO", "Shopify Development", "Industry Insights",
        ]
    )


class ValidationRules(BaseModel):
    """Word and length bounds for one channel."""

    min_words: int = Field(100, ge=0)
    max_words: int = Field(2000, ge=1)
    max_title_chars: int = Field(60, ge=1)
    max_description_chars: int = Field(155, ge=1)

    @model_validator(mode="after")
    def check_bounds(self) -> "ValidationRules":
        """Validate that the word bounds are ordered."""
        if self.min_words > self.max_words:
            raise ValueError(
                f"min_words ({self.min_words}) must not exceed max_words ({self.max_words})"
            )
        return self


class ValidationConfig(BaseModel):
    """Validation rules per channel."""

    blog: ValidationRules = Field(default_factory=ValidationRules)
    social: ValidationRules = Field(
        default_factory=lambda: ValidationRules(min_words=5, max_words=300)
    )


class LedgerConfig(BaseModel):
    """Dedup ledger configuration."""

    filename: str = Field(".content-cache.json", description="Ledger file inside the workspace")
    max_entries: int = Field(500, ge=1, description="Most recent records kept")


class ConfigModel(BaseModel):
    """Main configuration model."""

    workspace_root: str = Field("~/content-curator", description="Root directory for outputs")
    run_defaults: RunDefaults = Field(default_factory=RunDefaults)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    voice: VoiceConfig = Field(default_factory=VoiceConfig)
    topics: Dict[str, List[str]] = Field(default_factory=lambda: dict(DEFAULT_TOPIC_KEYWORDS))
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    ledger: LedgerConfig = Field(default_factory=LedgerConfig)


class SourceConfig(BaseModel):
    """Source configuration from sources.yaml."""

    name: str = Field(..., description="Source name")
    url: str = Field(..., description="RSS feed URL")
    topics: List[str] = Field(default_factory=list, description="Topic tags")
    enabled: bool = Field(True, description="Whether source is enabled")

    model_config = {"frozen": True}

    @field_validator("topics")
    @classmethod
    def normalize_topics(cls, v: List[str]) -> List[str]:
        """Lowercase and strip topic tags."""
        return [t.strip().lower() for t in v if t.strip()]
