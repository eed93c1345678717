"""Data models for the content curator."""

from .artifact import (
    FRONTMATTER_ERRORS,
    ContentArtifact,
    count_words,
    estimate_read_time,
    is_valid_slug,
    make_slug,
)
from .enums import LifecycleState, OutputKind
from .ledger import FingerprintRecord, LedgerStats, LedgerStore
from .run import ItemOutcome, RunOptions, RunSummary

__all__ = [
    "FRONTMATTER_ERRORS",
    "ContentArtifact",
    "FingerprintRecord",
    "ItemOutcome",
    "LedgerStats",
    "LedgerStore",
    "LifecycleState",
    "OutputKind",
    "RunOptions",
    "RunSummary",
    "count_words",
    "estimate_read_time",
    "is_valid_slug",
    "make_slug",
]
