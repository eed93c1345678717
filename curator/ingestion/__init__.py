"""Candidate ingestion from RSS sources."""

from .models import ArticleContent, CandidateItem, FeedItem, FeedResult, IngestionResult
from .registry import SourceRegistry
from .rss_fetcher import RSSFetcher, parse_feed
from .stage import IngestionStage, finalize_candidates
from .topics import ALL_TOPICS, GENERAL_TOPIC, TopicClassifier

__all__ = [
    "ALL_TOPICS",
    "ArticleContent",
    "CandidateItem",
    "FeedItem",
    "FeedResult",
    "GENERAL_TOPIC",
    "IngestionResult",
    "IngestionStage",
    "RSSFetcher",
    "SourceRegistry",
    "TopicClassifier",
    "finalize_candidates",
    "parse_feed",
]
