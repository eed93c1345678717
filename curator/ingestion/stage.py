"""Candidate ingestion: fetch, window, filter, classify, sort, cap."""

from datetime import datetime
from typing import Callable, Iterable, List, Optional

import pendulum
from rich.console import Console

from .models import CandidateItem, FeedItem, IngestionResult
from .registry import SourceRegistry
from .rss_fetcher import RSSFetcher
from .topics import TopicClassifier

console = Console()

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return pendulum.now("UTC")


def _as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return pendulum.instance(value, tz="UTC")
    return value


def finalize_candidates(items: List[CandidateItem], item_cap: int) -> List[CandidateItem]:
    """Sort newest first and truncate to the cap."""
    ordered = sorted(items, key=lambda item: _as_utc(item.published_at), reverse=True)
    return ordered[: max(0, item_cap)]


class IngestionStage:
    """Collect candidate items from the RSS source registry."""

    def __init__(
        self,
        registry: SourceRegistry,
        classifier: TopicClassifier,
        fetcher: Optional[RSSFetcher] = None,
        clock: Clock = utc_now,
    ) -> None:
        self.registry = registry
        self.classifier = classifier
        self.fetcher = fetcher or RSSFetcher()
        self.clock = clock

    def _to_candidate(
        self,
        item: FeedItem,
        topic_filter: List[str],
        cutoff: datetime,
        now: datetime,
    ) -> Optional[CandidateItem]:
        """Normalize a feed item, or None if it falls outside the window or topics."""
        published = _as_utc(item.published) if item.published else now
        if published < cutoff:
            return None

        summary = item.description or ""
        candidate = CandidateItem(
            title=item.title,
            link=item.link,
            published_at=published,
            raw_body=item.content or summary,
            summary=summary,
            source_name=item.source_name,
        )

        if not self.classifier.matches(candidate.text_blob, topic_filter):
            return None
        return candidate.model_copy(update={"topics": self.classifier.classify(candidate.text_blob)})

    def collect(
        self,
        topic_filter: Iterable[str],
        recency_days: int,
        item_cap: int,
    ) -> IngestionResult:
        """
        Fetch candidates from all sources matching the topic filter.

        A failing source is reported in the result and contributes no items.

        Args:
            topic_filter: Requested topics or ['all']
            recency_days: Maximum item age in days
            item_cap: Maximum number of candidates returned

        Returns:
            Candidates sorted newest first plus per-source outcomes
        """
        topics = [t.lower() for t in topic_filter] or ["all"]
        sources = self.registry.select(topics)

        if not sources:
            console.print("[yellow]No sources match the requested topics.[/yellow]")
            return IngestionResult()

        now = _as_utc(self.clock())
        cutoff = now - pendulum.duration(days=recency_days)

        feed_results = self.fetcher.fetch_feeds_sync(sources)

        candidates: List[CandidateItem] = []
        for result in feed_results:
            if not result.success:
                console.print(f"  [yellow]Skipping {result.source_name}: {result.error}[/yellow]")
                continue

            for item in result.items:
                candidate = self._to_candidate(item, topics, cutoff, now)
                if candidate is not None:
                    candidates.append(candidate)

        return IngestionResult(
            items=finalize_candidates(candidates, item_cap),
            feed_results=feed_results,
        )
