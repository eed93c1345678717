import frontmatter
import httpx
import pytest
import respx
import yaml
from typer.testing import CliRunner

from conftest import long_body, make_artifact
from curator.cli.app import app
from curator.cli.run import parse_output_kinds, split_csv
from curator.config import Config
from curator.dedup import FingerprintLedger
from curator.models import LifecycleState, OutputKind
from curator.queue import ArtifactStore

runner = CliRunner()


def invoke(*args):
    return runner.invoke(app, list(args))


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    """Initialized config (mock backend, no sources) with CURATOR_CONFIG pointing at it."""
    config_dir = tmp_path / "config"
    workspace = tmp_path / "workspace"
    monkeypatch.setenv("CURATOR_CONFIG", str(config_dir / "config.yaml"))
    for name in ("OPENAI_API_KEY", "GROK_API_KEY", "XAI_API_KEY", "ANTHROPIC_API_KEY"):
        monkeypatch.delenv(name, raising=False)

    result = invoke(
        "init",
        "--config-dir", str(config_dir),
        "--workspace", str(workspace),
        "--provider", "mock",
        "--no-seed-sources",
    )
    assert result.exit_code == 0, result.output
    return workspace


def blog_store(workspace):
    return ArtifactStore(workspace / "content" / "blog")


def test_split_csv_and_output_kinds():
    assert split_csv(" seo, cro ,,") == ["seo", "cro"]
    assert split_csv(None) is None
    assert parse_output_kinds(["Blog", "twitter"]) == [OutputKind.BLOG, OutputKind.TWITTER]
    with pytest.raises(ValueError, match="Unknown output kind"):
        parse_output_kinds(["podcast"])


def test_init_writes_config_sources_and_workspace(workspace, tmp_path):
    config = Config(tmp_path / "config" / "config.yaml")

    assert config.config.llm.provider == "mock"
    assert (workspace / "content" / "blog").is_dir()
    assert (workspace / "content" / "social").is_dir()
    assert yaml.safe_load(config.sources_path.read_text()) == {"sources": []}


def test_init_seeds_default_sources(tmp_path):
    config_dir = tmp_path / "seeded"
    result = invoke("init", "--config-dir", str(config_dir), "--workspace", str(tmp_path / "ws"))

    assert result.exit_code == 0
    sources = yaml.safe_load((config_dir / "sources.yaml").read_text())["sources"]
    assert len(sources) == 15
    assert all(s["topics"] for s in sources)


def test_run_dry_run_succeeds(workspace):
    result = invoke("run", "--dry-run", "--topics", "seo,cro")
    assert result.exit_code == 0, result.output
    assert "No new items" in result.output


def test_run_without_config_fails(tmp_path, monkeypatch):
    monkeypatch.setenv("CURATOR_CONFIG", str(tmp_path / "missing" / "config.yaml"))
    result = invoke("run", "--dry-run")
    assert result.exit_code == 1
    assert "Cannot start" in result.output


def test_run_without_credential_fails_before_ingestion(workspace, tmp_path):
    config_path = tmp_path / "config" / "config.yaml"
    data = yaml.safe_load(config_path.read_text())
    data["llm"]["provider"] = "openai"
    config_path.write_text(yaml.safe_dump(data))

    result = invoke("run")

    assert result.exit_code == 1
    assert "OPENAI_API_KEY" in result.output


def test_run_rejects_unknown_output_kind(workspace):
    result = invoke("run", "--dry-run", "--outputs", "blog,podcast")
    assert result.exit_code == 1
    assert "Invalid options" in result.output


def test_sources_add_list_remove(workspace):
    result = invoke("sources", "add", "--name", "Moz", "--url", "https://moz.com/feed", "--topics", "SEO")
    assert result.exit_code == 0

    duplicate = invoke("sources", "add", "--name", "Moz", "--url", "https://other.example/feed")
    assert duplicate.exit_code == 1

    listed = invoke("sources", "list")
    assert "Moz" in listed.output

    assert invoke("sources", "remove", "Moz").exit_code == 0
    assert invoke("sources", "remove", "Moz").exit_code == 1


def test_validate_command(workspace, tmp_path):
    store = blog_store(workspace)
    good = store.write(make_artifact("good"))
    bad = store.write(make_artifact("bad", body="short"))

    assert invoke("validate", str(good)).exit_code == 0
    assert invoke("validate", str(bad)).exit_code == 1
    assert invoke("validate", str(store.directory)).exit_code == 1
    assert invoke("validate", str(tmp_path / "nope.mdx")).exit_code == 1


def test_validate_works_without_config(tmp_path, monkeypatch):
    monkeypatch.setenv("CURATOR_CONFIG", str(tmp_path / "missing.yaml"))
    path = tmp_path / "post.mdx"
    path.write_text(make_artifact("post").to_text())

    assert invoke("validate", str(path)).exit_code == 0


def test_queue_commands(workspace, tmp_path):
    store = blog_store(workspace)
    store.write(make_artifact("first"))
    store.write(make_artifact("second"))

    listed = invoke("queue", "list")
    assert listed.exit_code == 0
    assert "first" in listed.output

    assert invoke("queue", "approve", "first").exit_code == 0
    assert frontmatter.loads(store.read_text("first"))["status"] == "published"

    missing = invoke("queue", "approve", "missing")
    assert missing.exit_code == 1
    assert "not found" in missing.output

    escaping = invoke("queue", "approve", "../first")
    assert escaping.exit_code == 1
    assert "Invalid slug" in escaping.output

    body_file = tmp_path / "body.md"
    body_file.write_text(long_body(120))
    assert invoke("queue", "regenerate", "second", "--body-file", str(body_file)).exit_code == 0
    assert store.read("second").status is LifecycleState.DRAFT

    assert invoke("queue", "clean", "second").exit_code == 0
    published = invoke("queue", "publish-all")
    assert published.exit_code == 0
    assert store.read("second").status is LifecycleState.PUBLISHED

    assert invoke("queue", "reject", "first").exit_code == 0
    assert not store.exists("first")


def test_queue_rejects_unknown_channel(workspace):
    assert invoke("queue", "list", "--channel", "podcast").exit_code == 1


def test_ledger_stats_and_clear(workspace):
    ledger = FingerprintLedger(workspace / ".content-cache.json")
    ledger.mark_processed("Title", "Moz")

    stats = invoke("ledger", "stats")
    assert stats.exit_code == 0
    assert "Moz" in stats.output

    assert invoke("ledger", "clear", "--yes").exit_code == 0
    assert ledger.stats().total_processed == 0


def test_ledger_clear_can_be_declined(workspace):
    result = runner.invoke(app, ["ledger", "clear"], input="n\n")
    assert result.exit_code != 0


def test_from_url_fetch_failure_is_reported_not_fatal(workspace):
    with respx.mock:
        respx.get("https://blog.example/gone").mock(return_value=httpx.Response(404))
        result = invoke("from-url", "https://blog.example/gone")

    assert result.exit_code == 0
    assert "404" in result.output
    assert blog_store(workspace).list_slugs() == []


def test_generate_from_topic_writes_a_draft(workspace):
    result = invoke("generate", "--topic", "Shopify page speed", "--type", "linkedin", "--tone", "conversational")

    assert result.exit_code == 0, result.output
    store = ArtifactStore(workspace / "content" / "social")
    assert store.list_slugs() == ["linkedin-shopify-page-speed"]
    assert store.read("linkedin-shopify-page-speed").status is LifecycleState.DRAFT


def test_generate_rejects_unknown_type(workspace):
    result = invoke("generate", "--topic", "Shopify page speed", "--type", "podcast")
    assert result.exit_code == 1
    assert "Unknown output kind" in result.output


def test_generate_requires_a_topic(workspace):
    assert invoke("generate").exit_code != 0
    assert invoke("generate", "--topic", "  ").exit_code == 1


def test_review_command(workspace):
    store = blog_store(workspace)
    store.write(make_artifact("first"))
    before = store.read_text("first")

    reviewed = invoke("review", "first")
    assert reviewed.exit_code == 0, reviewed.output
    assert "Copy review" in reviewed.output
    assert "82/100" in reviewed.output
    assert store.read_text("first") == before

    every_draft = invoke("review")
    assert every_draft.exit_code == 0
    assert "first" in every_draft.output

    missing = invoke("review", "missing")
    assert missing.exit_code == 1
    assert "Draft not found" in missing.output


def test_review_with_no_drafts(workspace):
    result = invoke("review", "--channel", "social")
    assert result.exit_code == 0
    assert "No social drafts" in result.output
