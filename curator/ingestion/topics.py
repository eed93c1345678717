"""Keyword-based topic classification."""

from typing import Dict, Iterable, List, Mapping

GENERAL_TOPIC = "general"
ALL_TOPICS = "all"


class TopicClassifier:
    """Map free text to topic tags by case-insensitive keyword matching."""

    def __init__(self, keywords: Mapping[str, Iterable[str]]) -> None:
        """
        Initialize classifier.

        Args:
            keywords: Topic -> keyword list, tried in the given order
        """
        self.keywords: Dict[str, List[str]] = {
            topic.lower(): [k.lower() for k in words if k]
            for topic, words in keywords.items()
        }

    def classify(self, text: str) -> List[str]:
        """Return matching topics in configured order, or ['general']."""
        lower_text = text.lower()
        detected: List[str] = []

        for topic, words in self.keywords.items():
            if any(word in lower_text for word in words):
                detected.append(topic)

        return detected or [GENERAL_TOPIC]

    def matches(self, text: str, topics: Iterable[str]) -> bool:
        """Check whether text matches any of the requested topics."""
        requested = [t.lower() for t in topics]
        if ALL_TOPICS in requested:
            return True

        lower_text = text.lower()
        for topic in requested:
            words = self.keywords.get(topic) or [topic]
            if any(word in lower_text for word in words):
                return True
        return False
