"""Static registry of content sources."""

from typing import Iterable, Iterator, List

from ..config import SourceConfig
from .topics import ALL_TOPICS


class SourceRegistry:
    """Read-only list of configured sources."""

    def __init__(self, sources: Iterable[SourceConfig]) -> None:
        self._sources: List[SourceConfig] = list(sources)

    def __iter__(self) -> Iterator[SourceConfig]:
        return iter(self._sources)

    def __len__(self) -> int:
        return len(self._sources)

    def names(self) -> List[str]:
        return [s.name for s in self._sources]

    def select(self, topic_filter: Iterable[str]) -> List[SourceConfig]:
        """
        Get enabled sources matching a topic filter.

        Args:
            topic_filter: Requested topics; 'all' selects every enabled source

        Returns:
            Sources whose topic set intersects the filter
        """
        requested = {t.strip().lower() for t in topic_filter}
        enabled = [s for s in self._sources if s.enabled]

        if not requested or ALL_TOPICS in requested:
            return enabled

        return [s for s in enabled if requested.intersection(s.topics)]
