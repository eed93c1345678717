"""Enumerations shared across the pipeline."""

from enum import Enum


class LifecycleState(str, Enum):
    """Review lifecycle of a content artifact."""

    DRAFT = "draft"
    REVIEW = "review"
    PUBLISHED = "published"
    REJECTED = "rejected"

    @classmethod
    def parse(cls, value: object) -> "LifecycleState":
        """Parse a front-matter status value, defaulting to draft."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().strip("\"'").lower())
        except ValueError:
            return cls.DRAFT


class OutputKind(str, Enum):
    """Kinds of content generated per accepted item."""

    BLOG = "blog"
    LINKEDIN = "linkedin"
    TWITTER = "twitter"

    @property
    def channel(self) -> str:
        """Storage channel (directory) for this kind."""
        return "blog" if self is OutputKind.BLOG else "social"
