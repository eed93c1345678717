"""Candidate discovery through a search-capable text generation service."""

import json
import re
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

import pendulum
from rich.console import Console

from ..errors import GenerationError
from ..generation.llm_provider import TextGenerator
from ..generation.prompts import PromptBuilder
from .models import CandidateItem, FeedResult, IngestionResult
from .stage import Clock, _as_utc, finalize_candidates, utc_now
from .topics import ALL_TOPICS, TopicClassifier

console = Console()

SEARCH_SOURCE_NAME = "search"

_JSON_ARRAY_RE = re.compile(r"\[[\s\S]*\]")


def parse_search_response(text: str) -> List[Dict[str, Any]]:
    """Pull the JSON array of article dicts out of a free-text response."""
    match = _JSON_ARRAY_RE.search(text or "")
    if not match:
        console.print("[yellow]Could not find search results in response[/yellow]")
        return []

    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        console.print(f"[yellow]Failed to parse search response: {e}[/yellow]")
        return []

    if not isinstance(data, list):
        return []
    return [entry for entry in data if isinstance(entry, dict) and entry.get("title")]


def _parse_date(value: Any) -> Optional[datetime]:
    if not value:
        return None
    try:
        parsed = pendulum.parse(str(value), tz="UTC")
    except (TypeError, ValueError):
        return None
    return parsed if isinstance(parsed, datetime) else None


class SearchIngestion:
    """Collect candidates by asking the text generator for recent news."""

    def __init__(
        self,
        generator: TextGenerator,
        prompt_builder: PromptBuilder,
        classifier: TopicClassifier,
        clock: Clock = utc_now,
    ) -> None:
        self.generator = generator
        self.prompt_builder = prompt_builder
        self.classifier = classifier
        self.clock = clock

    def _query(self, topics: List[str]) -> str:
        if ALL_TOPICS in topics:
            return " OR ".join(self.classifier.keywords) or "industry news"
        return " OR ".join(topics)

    def collect(
        self,
        topic_filter: Iterable[str],
        recency_days: int,
        item_cap: int,
    ) -> IngestionResult:
        """
        Search for candidates matching the topic filter.

        Same recency, topic and cap rules as feed ingestion. A generator
        failure is reported as a failed 'search' source.
        """
        topics = [t.lower() for t in topic_filter] or [ALL_TOPICS]
        request = self.prompt_builder.search(self._query(topics), recency_days, max(item_cap, 1))

        try:
            response = self.generator.generate(request)
        except GenerationError as e:
            console.print(f"  [yellow]Search failed: {e}[/yellow]")
            return IngestionResult(
                feed_results=[
                    FeedResult(
                        source_name=SEARCH_SOURCE_NAME,
                        source_url=self.generator.name,
                        success=False,
                        error=str(e),
                    )
                ]
            )

        entries = parse_search_response(response)
        now = _as_utc(self.clock())
        cutoff = now - pendulum.duration(days=recency_days)

        candidates: List[CandidateItem] = []
        for entry in entries:
            published = _parse_date(entry.get("date")) or now
            if published < cutoff:
                continue

            summary = str(entry.get("summary") or "").strip()
            candidate = CandidateItem(
                title=str(entry["title"]).strip(),
                link=str(entry.get("url") or ""),
                published_at=published,
                raw_body=summary,
                summary=summary,
                source_name=str(entry.get("source") or SEARCH_SOURCE_NAME),
            )
            if not self.classifier.matches(candidate.text_blob, topics):
                continue
            candidates.append(
                candidate.model_copy(update={"topics": self.classifier.classify(candidate.text_blob)})
            )

        return IngestionResult(
            items=finalize_candidates(candidates, item_cap),
            feed_results=[
                FeedResult(
                    source_name=SEARCH_SOURCE_NAME,
                    source_url=self.generator.name,
                    success=True,
                    item_count=len(entries),
                )
            ],
        )
