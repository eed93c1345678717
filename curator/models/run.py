"""Run configuration and summary models."""

from typing import Dict, List

from pydantic import BaseModel, Field, field_validator

from .enums import OutputKind


class RunOptions(BaseModel):
    """Parameters of one pipeline run."""

    item_cap: int = Field(2, description="Maximum items to process", ge=1)
    topic_filter: List[str] = Field(default_factory=lambda: ["all"], description="Topics or 'all'")
    recency_days: int = Field(3, description="Recency window in days", ge=1)
    dry_run: bool = Field(False, description="Report candidates without side effects")
    use_search: bool = Field(False, description="Use the text-search ingestion mode")
    output_kinds: List[OutputKind] = Field(
        default_factory=lambda: list(OutputKind), description="Kinds generated per item"
    )

    @field_validator("topic_filter")
    @classmethod
    def normalize_topics(cls, v: List[str]) -> List[str]:
        topics = [t.strip().lower() for t in v if t.strip()]
        return topics or ["all"]


class ItemOutcome(BaseModel):
    """Result of processing a single candidate item."""

    title: str
    source: str
    success: bool
    slugs: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    validation_errors: List[str] = Field(default_factory=list)
    error: str = ""
    error_category: str = ""


class RunSummary(BaseModel):
    """Outcome of a pipeline run."""

    success_count: int = 0
    error_count: int = 0
    candidates: int = Field(0, description="Items returned by ingestion")
    skipped_duplicates: int = 0
    selected: List[str] = Field(default_factory=list, description="Titles selected for processing")
    artifacts_written: List[str] = Field(default_factory=list, description="Slugs written")
    error_categories: Dict[str, int] = Field(default_factory=dict)
    errors: List[str] = Field(default_factory=list)
    source_failures: List[str] = Field(default_factory=list)
    items: List[ItemOutcome] = Field(default_factory=list)
    duration: float = 0.0
    dry_run: bool = False

    def record_error(self, category: str, message: str) -> None:
        """Count an error under its category."""
        self.error_categories[category] = self.error_categories.get(category, 0) + 1
        self.errors.append(message)
