"""Data models for ingestion."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class FeedItem(BaseModel):
    """Parsed RSS feed item."""

    title: str = Field(..., description="Article title")
    link: str = Field("", description="Article URL")
    published: Optional[datetime] = Field(None, description="Publication date")
    description: Optional[str] = Field(None, description="Article description/summary")
    content: Optional[str] = Field(None, description="Full item content if the feed carries it")
    source_name: str = Field(..., description="Source name")


class FeedResult(BaseModel):
    """Result of fetching an RSS feed."""

    source_name: str = Field(..., description="Source name")
    source_url: str = Field(..., description="RSS feed URL")
    success: bool = Field(..., description="Whether fetch was successful")
    items: List[FeedItem] = Field(default_factory=list, description="Parsed feed items")
    error: Optional[str] = Field(None, description="Error message if failed")
    item_count: int = Field(0, description="Number of items fetched")


class CandidateItem(BaseModel):
    """Normalized item eligible for curation during one run."""

    title: str = Field(..., description="Article title")
    link: str = Field("", description="Article URL")
    published_at: datetime = Field(..., description="Publication time")
    raw_body: str = Field("", description="Full content or best available text")
    summary: str = Field("", description="Plain-text summary")
    source_name: str = Field(..., description="Source name")
    topics: List[str] = Field(default_factory=list, description="Detected topics")

    @property
    def text_blob(self) -> str:
        """Title, summary and body as one string for topic matching."""
        parts = [self.title, self.summary]
        if self.raw_body != self.summary:
            parts.append(self.raw_body)
        return " ".join(parts)


class IngestionResult(BaseModel):
    """Candidates plus per-source fetch outcomes."""

    items: List[CandidateItem] = Field(default_factory=list)
    feed_results: List[FeedResult] = Field(default_factory=list)

    @property
    def failed_sources(self) -> List[FeedResult]:
        return [r for r in self.feed_results if not r.success]


class ArticleContent(BaseModel):
    """Extracted article content."""

    url: str = Field(..., description="Article URL")
    canonical_url: str = Field(..., description="Canonical URL")
    title: str = Field(..., description="Article title")
    text: str = Field(..., description="Extracted main text")
    outlet: Optional[str] = Field(None, description="Publishing outlet/domain")
    published_at: Optional[datetime] = Field(None, description="Publication date")
    fetch_success: bool = Field(True, description="Whether fetch was successful")
    error: Optional[str] = Field(None, description="Error message if failed")
