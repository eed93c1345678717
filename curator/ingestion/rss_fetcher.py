"""RSS feed fetcher with concurrent processing."""

import asyncio
import calendar
from datetime import datetime
from typing import Any, List, Optional

import feedparser
import httpx
import pendulum
from bs4 import BeautifulSoup
from rich.console import Console

from ..config import SourceConfig
from ..errors import SourceFetchError
from .models import FeedItem, FeedResult

console = Console()


def strip_html(text: str) -> str:
    """Reduce an HTML fragment to plain text."""
    if not text:
        return ""
    plain = BeautifulSoup(text, "html.parser").get_text(" ", strip=True)
    return " ".join(plain.split())


def _entry_published(entry: Any) -> Optional[datetime]:
    """Publication time of a feed entry, in UTC."""
    for field in ("published_parsed", "updated_parsed"):
        parsed = entry.get(field)
        if parsed:
            # feedparser normalizes struct_time values to UTC
            return pendulum.from_timestamp(calendar.timegm(parsed), tz="UTC")
    return None


def _entry_content(entry: Any) -> Optional[str]:
    """Full content of a feed entry, if present."""
    contents = entry.get("content") or []
    for block in contents:
        value = block.get("value")
        if value:
            return value
    return None


def parse_feed(source: SourceConfig, payload: str) -> List[FeedItem]:
    """
    Parse an RSS/Atom document into feed items.

    Raises:
        SourceFetchError: if the document is not a usable feed
    """
    feed = feedparser.parse(payload)

    if feed.bozo and not feed.entries:
        raise SourceFetchError(source.name, f"Invalid RSS feed: {feed.bozo_exception}")

    items = []
    for entry in feed.entries:
        description = entry.get("summary") or entry.get("description")
        items.append(
            FeedItem(
                title=strip_html(entry.get("title") or "") or "Untitled",
                link=entry.get("link") or "",
                published=_entry_published(entry),
                description=strip_html(description) if description else None,
                content=_entry_content(entry),
                source_name=source.name,
            )
        )
    return items


class RSSFetcher:
    """Fetch and parse RSS feeds."""

    def __init__(
        self,
        timeout: float = 30.0,
        max_concurrent: int = 5,
        user_agent: str = "ContentCurator/1.0 (+rss)",
    ) -> None:
        """Initialize RSS fetcher."""
        self.timeout = timeout
        self.max_concurrent = max_concurrent
        self.user_agent = user_agent

    async def fetch_feed(self, source: SourceConfig) -> FeedResult:
        """Fetch and parse a single RSS feed."""
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                headers={"User-Agent": self.user_agent},
            ) as client:
                response = await client.get(source.url)
                response.raise_for_status()

            items = parse_feed(source, response.text)

            return FeedResult(
                source_name=source.name,
                source_url=source.url,
                success=True,
                items=items,
                item_count=len(items),
            )

        except SourceFetchError as e:
            return FeedResult(
                source_name=source.name,
                source_url=source.url,
                success=False,
                error=e.reason,
            )
        except httpx.HTTPStatusError as e:
            return FeedResult(
                source_name=source.name,
                source_url=source.url,
                success=False,
                error=f"HTTP {e.response.status_code}",
            )
        except httpx.TimeoutException:
            return FeedResult(
                source_name=source.name,
                source_url=source.url,
                success=False,
                error="Request timed out",
            )
        except httpx.HTTPError as e:
            return FeedResult(
                source_name=source.name,
                source_url=source.url,
                success=False,
                error=f"HTTP error: {e}",
            )
        except Exception as e:
            return FeedResult(
                source_name=source.name,
                source_url=source.url,
                success=False,
                error=f"Unexpected error: {e}",
            )

    async def fetch_all_feeds(self, sources: List[SourceConfig]) -> List[FeedResult]:
        """Fetch all RSS feeds concurrently."""
        enabled_sources = [s for s in sources if s.enabled]

        if not enabled_sources:
            return []

        # Create semaphore for concurrency control
        semaphore = asyncio.Semaphore(self.max_concurrent)

        async def fetch_with_semaphore(source: SourceConfig) -> FeedResult:
            async with semaphore:
                return await self.fetch_feed(source)

        tasks = [fetch_with_semaphore(source) for source in enabled_sources]
        return list(await asyncio.gather(*tasks))

    def fetch_feeds_sync(self, sources: List[SourceConfig]) -> List[FeedResult]:
        """Synchronous wrapper for fetch_all_feeds."""
        return asyncio.run(self.fetch_all_feeds(sources))


def print_feed_summary(results: List[FeedResult]) -> None:
    """Print summary of feed fetch results."""
    total_items = sum(r.item_count for r in results)
    successful = sum(1 for r in results if r.success)
    failed = len(results) - successful

    console.print(f"\n[bold]RSS Feed Summary:[/bold]")
    console.print(f"  Sources fetched: {len(results)}")
    console.print(f"  Successful: [green]{successful}[/green]")
    console.print(f"  Failed: [red]{failed}[/red]")
    console.print(f"  Total items: {total_items}")

    if failed > 0:
        console.print(f"\n[bold red]Failed feeds:[/bold red]")
        for result in results:
            if not result.success:
                console.print(f"  - {result.source_name}: {result.error}")
