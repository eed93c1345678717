from email.utils import format_datetime
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

import pendulum
import pytest

from curator.config import Config, ConfigModel, LLMConfig
from curator.errors import GenerationError
from curator.generation import MockGenerator
from curator.generation.models import PromptRequest
from curator.ingestion import CandidateItem, IngestionResult
from curator.models import ContentArtifact, LifecycleState

NOW = pendulum.datetime(2026, 10, 19, 12, 0, 0, tz="UTC")


def fixed_clock():
    return NOW


def rss_document(entries: Iterable[Tuple[str, str, Optional[pendulum.DateTime], str]]) -> str:
    """RSS 2.0 document from (title, link, published, description) tuples."""
    items = []
    for title, link, published, description in entries:
        pub = f"<pubDate>{format_datetime(published)}</pubDate>" if published else ""
        items.append(
            f"<item><title>{title}</title><link>{link}</link>{pub}"
            f"<description>{description}</description></item>"
        )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<rss version="2.0"><channel><title>Test feed</title>'
        "<link>https://example.com</link><description>Test</description>"
        f"{''.join(items)}</channel></rss>"
    )


def long_body(words: int = 150) -> str:
    return " ".join(["word"] * words)


def make_artifact(
    slug: str,
    status: LifecycleState = LifecycleState.DRAFT,
    date: str = "2026-10-19",
    body: Optional[str] = None,
    title: str = "Faster checkout pages",
) -> ContentArtifact:
    return ContentArtifact(
        slug=slug,
        title=title,
        date=date,
        description="How one store cut checkout load time in half",
        tags=["speed", "cro"],
        read_time="1 min read",
        status=status,
        body=body if body is not None else long_body(),
    )


def make_item(
    title: str = "Core Web Vitals update for Shopify stores",
    source: str = "web.dev",
    published: Optional[pendulum.DateTime] = None,
    summary: str = "Google changes how LCP is measured.",
) -> CandidateItem:
    return CandidateItem(
        title=title,
        link=f"https://example.com/{title.lower().replace(' ', '-')}",
        published_at=published or NOW,
        raw_body=summary,
        summary=summary,
        source_name=source,
        topics=["speed", "shopify"],
    )


class StaticIngestion:
    """Ingestion double returning a fixed candidate list."""

    def __init__(self, items: List[CandidateItem]) -> None:
        self.items = items
        self.calls = 0

    def collect(self, topic_filter, recency_days, item_cap) -> IngestionResult:
        self.calls += 1
        return IngestionResult(items=self.items[:item_cap])


class FlakyGenerator(MockGenerator):
    """Mock backend that fails for selected titles."""

    def __init__(self, failing_titles: Iterable[str]) -> None:
        super().__init__()
        self.failing_titles = set(failing_titles)

    def _complete(self, request: PromptRequest) -> str:
        if request.context.get("title") in self.failing_titles:
            raise GenerationError("backend unavailable", backend=self.name)
        return super()._complete(request)


@pytest.fixture
def config_model(tmp_path: Path) -> ConfigModel:
    return ConfigModel(
        workspace_root=str(tmp_path / "workspace"),
        llm=LLMConfig(provider="mock"),
    )


@pytest.fixture
def config(tmp_path: Path, config_model: ConfigModel) -> Config:
    return Config.from_model(config_model, tmp_path / "config" / "config.yaml")
