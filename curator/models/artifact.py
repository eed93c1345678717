"""Content artifact model and its front-matter file format."""

import math
import re
import unicodedata
from datetime import date, datetime
from typing import Any, Dict, List, Optional

import frontmatter
import yaml
from pydantic import BaseModel, Field, field_validator

from .enums import LifecycleState, OutputKind

SLUG_MAX_LENGTH = 60
WORDS_PER_MINUTE = 200

# Front-matter keys in the order the site renderer expects them
FRONTMATTER_KEYS = ("title", "date", "description", "category", "tags", "readTime", "status")

# PyYAML raises plain ValueError for impossible timestamps such as 2026-02-30
FRONTMATTER_ERRORS = (yaml.YAMLError, ValueError)

SLUG_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def make_slug(text: str, prefix: str = "", max_length: int = SLUG_MAX_LENGTH) -> str:
    """Derive a filesystem-safe slug from a title."""
    ascii_text = (
        unicodedata.normalize("NFKD", f"{prefix}{text}")
        .encode("ascii", "ignore")
        .decode("ascii")
    )
    slug = re.sub(r"[^a-z0-9]+", "-", ascii_text.lower()).strip("-")
    slug = slug[:max_length].rstrip("-")
    return slug or "untitled"


def is_valid_slug(slug: str) -> bool:
    """True for slugs produced by make_slug: lowercase ascii words joined by hyphens."""
    return bool(SLUG_RE.match(slug))


def count_words(text: str) -> int:
    """Count whitespace-separated words."""
    return len(text.split())


def _optional_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def estimate_read_time(text: str) -> str:
    """Format an estimated read time, e.g. '3 min read'."""
    minutes = max(1, math.ceil(count_words(text) / WORDS_PER_MINUTE))
    return f"{minutes} min read"


class ContentArtifact(BaseModel):
    """A generated piece of content filed in the review queue."""

    slug: str = Field(..., description="Filesystem-safe identifier")
    title: str = Field(..., description="Post title")
    date: str = Field(..., description="Publication date (YYYY-MM-DD)")
    description: str = Field("", description="Search-result description")
    category: str = Field("Industry Insights", description="Site category")
    tags: List[str] = Field(default_factory=list, description="Ordered tags")
    read_time: str = Field("1 min read", description="Display read time")
    status: LifecycleState = Field(LifecycleState.DRAFT, description="Lifecycle state")
    body: str = Field("", description="Markdown body")
    kind: OutputKind = Field(OutputKind.BLOG, description="Output kind")
    source_name: Optional[str] = Field(None, description="Originating source")
    source_link: Optional[str] = Field(None, description="Originating article URL")

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date(cls, v: Any) -> str:
        """YAML may hand back date objects for unquoted dates."""
        if isinstance(v, datetime):
            return v.date().isoformat()
        if isinstance(v, date):
            return v.isoformat()
        return str(v) if v is not None else ""

    @field_validator("tags", mode="before")
    @classmethod
    def coerce_tags(cls, v: Any) -> List[str]:
        if v is None:
            return []
        if isinstance(v, str):
            return [t.strip() for t in v.split(",") if t.strip()]
        if isinstance(v, (list, tuple, set)):
            return [str(t) for t in v]
        return [str(v)]

    def to_metadata(self) -> Dict[str, Any]:
        """Front-matter mapping for this artifact."""
        metadata: Dict[str, Any] = {
            "title": self.title,
            "date": self.date,
            "description": self.description,
            "category": self.category,
            "tags": list(self.tags),
            "readTime": self.read_time,
            "status": self.status.value,
            "kind": self.kind.value,
        }
        if self.source_name:
            metadata["originalSource"] = self.source_name
        if self.source_link:
            metadata["originalLink"] = self.source_link
        return metadata

    def to_text(self) -> str:
        """Render as front-matter + body text."""
        post = frontmatter.Post(self.body.strip() + "\n", **self.to_metadata())
        return frontmatter.dumps(post, sort_keys=False) + "\n"

    @classmethod
    def from_text(cls, slug: str, text: str) -> "ContentArtifact":
        """
        Parse a stored artifact.

        Raises:
            yaml.YAMLError: if the front-matter block is not valid YAML
            ValueError: if a front-matter value cannot be converted
        """
        post = frontmatter.loads(text)
        return cls.from_metadata(slug, post.metadata, post.content)

    @classmethod
    def from_metadata(cls, slug: str, metadata: Dict[str, Any], body: str) -> "ContentArtifact":
        """Build an artifact from parsed front-matter, tolerating gaps."""
        kind = metadata.get("kind", OutputKind.BLOG.value)
        try:
            kind = OutputKind(str(kind))
        except ValueError:
            kind = OutputKind.BLOG

        return cls(
            slug=slug,
            title=str(metadata.get("title") or slug),
            date=metadata.get("date") or "",
            description=str(metadata.get("description") or ""),
            category=str(metadata.get("category") or "Uncategorized"),
            tags=metadata.get("tags") or [],
            read_time=str(metadata.get("readTime") or estimate_read_time(body)),
            status=LifecycleState.parse(metadata.get("status", LifecycleState.DRAFT.value)),
            body=body,
            kind=kind,
            source_name=_optional_str(metadata.get("originalSource")),
            source_link=_optional_str(metadata.get("originalLink")),
        )
