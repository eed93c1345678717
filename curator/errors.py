"""Error types raised by the curation pipeline."""

from typing import List, Optional


class CuratorError(Exception):
    """Base class for all pipeline errors."""

    category = "error"


class ConfigurationError(CuratorError):
    """Pipeline cannot start (missing config file or credential)."""

    category = "configuration"


class SourceFetchError(CuratorError):
    """A single source could not be fetched or parsed."""

    category = "source_fetch"

    def __init__(self, source_name: str, reason: str) -> None:
        super().__init__(f"{source_name}: {reason}")
        self.source_name = source_name
        self.reason = reason


class GenerationError(CuratorError):
    """The text generation backend failed or returned nothing usable."""

    category = "generation"

    def __init__(self, message: str, backend: Optional[str] = None) -> None:
        super().__init__(message)
        self.backend = backend


class ArtifactValidationError(CuratorError):
    """Generated content has hard validation errors."""

    category = "validation"

    def __init__(self, slug: str, errors: List[str]) -> None:
        super().__init__(f"{slug}: {'; '.join(errors)}")
        self.slug = slug
        self.errors = errors


class LedgerCorruptionError(CuratorError):
    """The ledger store is unreadable or has an unexpected version."""

    category = "ledger"
