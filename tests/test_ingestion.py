import httpx
import pendulum
import respx

from conftest import NOW, fixed_clock, make_item, rss_document
from curator.config import SourceConfig, VoiceConfig
from curator.config.models import DEFAULT_TOPIC_KEYWORDS
from curator.errors import GenerationError
from curator.generation import MockGenerator, PromptBuilder
from curator.ingestion import (
    IngestionStage,
    RSSFetcher,
    SourceRegistry,
    TopicClassifier,
    finalize_candidates,
    parse_feed,
)
from curator.ingestion.rss_fetcher import strip_html
from curator.ingestion.search import SearchIngestion, parse_search_response

HEALTHY_URL = "https://healthy.example/feed"
BROKEN_URL = "https://broken.example/feed"


def make_stage(sources):
    return IngestionStage(
        SourceRegistry(sources),
        TopicClassifier(DEFAULT_TOPIC_KEYWORDS),
        fetcher=RSSFetcher(timeout=5.0),
        clock=fixed_clock,
    )


def test_failing_source_contributes_nothing_and_window_applies():
    sources = [
        SourceConfig(name="Healthy", url=HEALTHY_URL, topics=["seo"]),
        SourceConfig(name="Broken", url=BROKEN_URL, topics=["ai"]),
    ]
    feed = rss_document([
        ("Older SERP study", "https://healthy.example/a", NOW.subtract(days=2), "Rankings moved."),
        ("Stale backlink post", "https://healthy.example/b", NOW.subtract(days=10), "Old news."),
        ("Newest Google update", "https://healthy.example/c", NOW.subtract(hours=1), "Indexing change."),
    ])

    with respx.mock:
        respx.get(HEALTHY_URL).mock(return_value=httpx.Response(200, text=feed))
        respx.get(BROKEN_URL).mock(return_value=httpx.Response(500))
        result = make_stage(sources).collect(["all"], recency_days=3, item_cap=5)

    assert [item.title for item in result.items] == ["Newest Google update", "Older SERP study"]
    assert all(item.source_name == "Healthy" for item in result.items)

    failed = result.failed_sources
    assert [r.source_name for r in failed] == ["Broken"]
    assert failed[0].error == "HTTP 500"


def test_timeout_and_invalid_feed_are_source_failures():
    sources = [
        SourceConfig(name="Slow", url="https://slow.example/feed", topics=[]),
        SourceConfig(name="Garbage", url="https://garbage.example/feed", topics=[]),
    ]
    with respx.mock:
        respx.get("https://slow.example/feed").mock(side_effect=httpx.ReadTimeout("slow"))
        respx.get("https://garbage.example/feed").mock(
            return_value=httpx.Response(200, text="this is not xml at all <<<")
        )
        result = make_stage(sources).collect(["all"], recency_days=3, item_cap=5)

    assert result.items == []
    errors = {r.source_name: r.error for r in result.failed_sources}
    assert errors["Slow"] == "Request timed out"
    assert errors["Garbage"].startswith("Invalid RSS feed")


def test_malformed_source_url_is_a_source_failure():
    sources = [
        SourceConfig(name="Healthy", url=HEALTHY_URL, topics=[]),
        SourceConfig(name="Mangled", url="https://feeds.example.com/rss\x00", topics=[]),
    ]
    feed = rss_document([("Fresh post", "https://healthy.example/a", NOW, "Body.")])

    with respx.mock:
        respx.get(HEALTHY_URL).mock(return_value=httpx.Response(200, text=feed))
        result = make_stage(sources).collect(["all"], recency_days=3, item_cap=5)

    assert [item.title for item in result.items] == ["Fresh post"]
    assert [r.source_name for r in result.failed_sources] == ["Mangled"]
    assert result.failed_sources[0].error.startswith("Unexpected error")


def test_topic_filter_and_classification():
    sources = [SourceConfig(name="Mixed", url=HEALTHY_URL, topics=["seo", "cro"])]
    feed = rss_document([
        ("Checkout funnel teardown", "https://x/1", NOW.subtract(hours=2), "Conversion lessons."),
        ("SERP features explained", "https://x/2", NOW.subtract(hours=3), "Search engine results."),
    ])

    with respx.mock:
        respx.get(HEALTHY_URL).mock(return_value=httpx.Response(200, text=feed))
        result = make_stage(sources).collect(["cro"], recency_days=3, item_cap=5)

    assert [i.title for i in result.items] == ["Checkout funnel teardown"]
    assert "cro" in result.items[0].topics


def test_undated_entries_count_as_now_and_cap_truncates():
    sources = [SourceConfig(name="Feed", url=HEALTHY_URL, topics=[])]
    feed = rss_document([
        ("Undated post", "https://x/1", None, "No date."),
        ("Dated post", "https://x/2", NOW.subtract(hours=5), "Has a date."),
        ("Another dated post", "https://x/3", NOW.subtract(hours=6), "Also dated."),
    ])

    with respx.mock:
        respx.get(HEALTHY_URL).mock(return_value=httpx.Response(200, text=feed))
        result = make_stage(sources).collect(["all"], recency_days=1, item_cap=2)

    assert [i.title for i in result.items] == ["Undated post", "Dated post"]
    assert result.items[0].published_at == NOW


def test_no_matching_sources_returns_empty_result():
    stage = make_stage([SourceConfig(name="Moz", url=HEALTHY_URL, topics=["seo"])])
    result = stage.collect(["ai"], recency_days=3, item_cap=5)
    assert result.items == []
    assert result.feed_results == []


def test_parse_feed_strips_html_and_keeps_source():
    source = SourceConfig(name="Feed", url=HEALTHY_URL)
    feed = rss_document([
        ("Title &amp; more", "https://x/1", NOW, "&lt;p&gt;Hello &lt;b&gt;world&lt;/b&gt;&lt;/p&gt;"),
    ])

    items = parse_feed(source, feed)

    assert items[0].title == "Title & more"
    assert items[0].description == "Hello world"
    assert items[0].source_name == "Feed"
    assert items[0].published == NOW


def test_strip_html_keeps_text_and_collapses_whitespace():
    assert strip_html("<p>Faster\n   <em>checkout</em></p><p>pages</p>") == "Faster checkout pages"
    assert strip_html("Fish &amp; chips") == "Fish & chips"
    assert strip_html("") == ""


def test_finalize_candidates_sorts_newest_first():
    items = [
        make_item("Old", published=NOW.subtract(days=1)),
        make_item("New", published=NOW),
        make_item("Middle", published=NOW.subtract(hours=3)),
    ]
    assert [i.title for i in finalize_candidates(items, 2)] == ["New", "Middle"]
    assert finalize_candidates(items, 0) == []


class CannedGenerator(MockGenerator):
    def __init__(self, response=None, error=None):
        super().__init__()
        self.response = response
        self.error = error

    def _complete(self, request):
        self.calls.append(request)
        if self.error:
            raise self.error
        return self.response


def make_search(generator):
    return SearchIngestion(
        generator,
        PromptBuilder(VoiceConfig()),
        TopicClassifier(DEFAULT_TOPIC_KEYWORDS),
        clock=fixed_clock,
    )


def test_search_mode_applies_same_contract():
    response = """Here you go:
[
  {"title": "Shopify adds checkout extensibility", "summary": "New checkout APIs for stores.",
   "source": "Shopify", "url": "https://shopify.example/1", "date": "2026-10-18"},
  {"title": "Ancient SEO news", "summary": "Rankings changed.", "source": "Moz",
   "url": "https://moz.example/2", "date": "2026-09-01"},
  {"title": "Gardening tips", "summary": "Tomatoes.", "source": "Garden", "url": "https://g/3",
   "date": "2026-10-19"}
]
Hope this helps."""
    generator = CannedGenerator(response=response)

    result = make_search(generator).collect(["shopify"], recency_days=3, item_cap=5)

    assert [i.title for i in result.items] == ["Shopify adds checkout extensibility"]
    assert result.items[0].source_name == "Shopify"
    assert result.items[0].link == "https://shopify.example/1"
    assert result.feed_results[0].success
    assert generator.calls[0].kind == "search"


def test_search_unparsable_response_yields_no_items():
    result = make_search(CannedGenerator(response="Sorry, no results today.")).collect(
        ["all"], recency_days=3, item_cap=5
    )
    assert result.items == []
    assert result.failed_sources == []


def test_search_generator_failure_is_a_failed_search_source():
    generator = CannedGenerator(error=GenerationError("rate limited", backend="mock"))

    result = make_search(generator).collect(["all"], recency_days=3, item_cap=5)

    assert result.items == []
    assert [r.source_name for r in result.failed_sources] == ["search"]
    assert "rate limited" in result.failed_sources[0].error


def test_parse_search_response_skips_malformed_entries():
    text = '[{"title": "Kept"}, {"summary": "no title"}, "string", {"title": ""}]'
    assert parse_search_response(text) == [{"title": "Kept"}]
    assert parse_search_response("[not json]") == []
