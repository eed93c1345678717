from curator.config import SourceConfig
from curator.config.models import DEFAULT_TOPIC_KEYWORDS
from curator.ingestion import SourceRegistry, TopicClassifier


def classifier():
    return TopicClassifier(DEFAULT_TOPIC_KEYWORDS)


def test_classify_returns_topics_in_configured_order():
    topics = classifier().classify("New Lighthouse scores and SERP changes for your Shopify theme")
    assert topics == ["seo", "speed", "shopify"]


def test_classify_is_case_insensitive_and_deduplicated():
    assert classifier().classify("SEO seo Seo backlinks") == ["seo"]


def test_classify_falls_back_to_general():
    assert classifier().classify("Weather report for Tuesday") == ["general"]


def test_matches_all_accepts_anything():
    assert classifier().matches("Weather report", ["all"])


def test_matches_requested_topic_keywords():
    c = classifier()
    assert c.matches("Cart abandonment is up 4%", ["cro"])
    assert not c.matches("Cart abandonment is up 4%", ["seo"])


def test_matches_unknown_topic_by_name():
    c = TopicClassifier({"seo": ["serp"]})
    assert c.matches("Notes on UX writing", ["ux"])
    assert not c.matches("Notes on copywriting", ["ux"])


def test_custom_keyword_table():
    c = TopicClassifier({"Python": ["Django", "pandas"], "go": ["goroutine"]})
    assert c.classify("Django 5.1 released") == ["python"]
    assert c.classify("Goroutine leaks and pandas") == ["python", "go"]


def sources():
    return [
        SourceConfig(name="Moz", url="https://moz.com/feed", topics=["SEO"]),
        SourceConfig(name="CXL", url="https://cxl.com/feed", topics=["cro"]),
        SourceConfig(name="web.dev", url="https://web.dev/feed.xml", topics=["speed", "development"]),
        SourceConfig(name="Off", url="https://off.example/feed", topics=["seo"], enabled=False),
    ]


def test_select_all_returns_enabled_sources():
    registry = SourceRegistry(sources())
    assert [s.name for s in registry.select(["all"])] == ["Moz", "CXL", "web.dev"]
    assert len(registry) == 4


def test_select_by_topic_intersection():
    registry = SourceRegistry(sources())
    assert [s.name for s in registry.select(["seo"])] == ["Moz"]
    assert [s.name for s in registry.select(["cro", "development"])] == ["CXL", "web.dev"]
    assert registry.select(["ai"]) == []


def test_select_empty_filter_means_all():
    registry = SourceRegistry(sources())
    assert len(registry.select([])) == 3


def test_registry_iteration_and_names():
    registry = SourceRegistry(sources())
    assert registry.names() == ["Moz", "CXL", "web.dev", "Off"]
    assert [s.name for s in registry] == registry.names()
