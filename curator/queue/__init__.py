"""File-backed review queue."""

from .review_queue import (
    PublishReport,
    QueueEntry,
    ReviewQueue,
    TransitionResult,
    print_publish_report,
    print_queue,
)
from .storage import ArtifactStore

__all__ = [
    "ArtifactStore",
    "PublishReport",
    "QueueEntry",
    "ReviewQueue",
    "TransitionResult",
    "print_publish_report",
    "print_queue",
]
