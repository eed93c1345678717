"""Article fetcher and text extractor."""

import asyncio
from typing import Optional
from urllib.parse import urlparse

import httpx
import pendulum
import trafilatura
from rich.console import Console

from .models import ArticleContent

console = Console()

PAYWALL_INDICATORS = ("paywall", "subscribe to read", "members only")


class ArticleFetcher:
    """Fetch HTML and extract article text."""

    def __init__(
        self,
        timeout: float = 30.0,
        user_agent: str = "Mozilla/5.0 (compatible; ContentCurator/1.0)",
    ) -> None:
        """Initialize article fetcher."""
        self.timeout = timeout
        self.user_agent = user_agent

    def _extract_outlet(self, url: str) -> str:
        """Extract outlet/domain from URL."""
        parsed = urlparse(url)
        domain = parsed.hostname or "unknown"
        if domain.startswith("www."):
            domain = domain[4:]
        return domain

    def _failed(self, url: str, title: Optional[str], error: str) -> ArticleContent:
        return ArticleContent(
            url=url,
            canonical_url=url,
            title=title or url,
            text="",
            outlet=self._extract_outlet(url),
            fetch_success=False,
            error=error,
        )

    async def fetch_article(self, url: str, title: Optional[str] = None) -> ArticleContent:
        """
        Fetch a page and extract its main text.

        Args:
            url: Article URL
            title: Title override; otherwise taken from page metadata

        Returns:
            Extracted content, with fetch_success False and an error on failure
        """
        headers = {
            "User-Agent": self.user_agent,
            "Accept": "text/html,application/xhtml+xml",
        }

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                headers=headers,
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == 404:
                error_msg = "Article not found (404)"
            elif status == 403:
                error_msg = "Access forbidden (403)"
            elif status >= 500:
                error_msg = f"Server error ({status})"
            else:
                error_msg = f"HTTP {status}"
            return self._failed(url, title, error_msg)
        except httpx.TimeoutException:
            return self._failed(url, title, "Request timed out")
        except httpx.HTTPError as e:
            return self._failed(url, title, f"HTTP error: {e}")

        page = response.text
        final_url = str(response.url)

        if any(indicator in page.lower() for indicator in PAYWALL_INDICATORS):
            return self._failed(url, title, "Paywall detected")

        extracted = trafilatura.extract(
            page,
            include_comments=False,
            include_tables=False,
            deduplicate=True,
            favor_precision=True,
            url=final_url,
        )
        if not extracted:
            return self._failed(url, title, "Failed to extract article content")

        metadata = trafilatura.extract_metadata(page)
        published_at = None
        if metadata and metadata.date:
            try:
                published_at = pendulum.parse(metadata.date, tz="UTC")
            except (TypeError, ValueError):
                published_at = None

        page_title = metadata.title if metadata and metadata.title else None

        return ArticleContent(
            url=url,
            canonical_url=final_url,
            title=title or page_title or self._extract_outlet(final_url),
            text=extracted,
            outlet=self._extract_outlet(final_url),
            published_at=published_at,
            fetch_success=True,
        )

    def fetch_sync(self, url: str, title: Optional[str] = None) -> ArticleContent:
        """Synchronous wrapper for fetch_article."""
        return asyncio.run(self.fetch_article(url, title))
