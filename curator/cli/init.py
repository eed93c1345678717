"""Init command implementation."""

from pathlib import Path
from typing import List

import typer
from rich.console import Console
from rich.panel import Panel

from ..config import ConfigModel, LLMConfig, SourceConfig, save_config, save_sources
from ..config.loader import DEFAULT_CONFIG_DIR

console = Console()


def create_default_sources() -> List[SourceConfig]:
    """Create default e-commerce, SEO, performance and AI news sources."""
    feeds = [
        ("Shopify Blog", "https://www.shopify.com/blog/feed", ["shopify", "ecommerce", "development"]),
        ("Shopify Engineering", "https://shopify.engineering/feed", ["shopify", "development", "speed"]),
        ("Practical Ecommerce", "https://www.practicalecommerce.com/feed", ["ecommerce", "shopify", "cro"]),
        ("Moz Blog", "https://moz.com/blog/feed", ["seo"]),
        ("Search Engine Journal", "https://www.searchenginejournal.com/feed/", ["seo"]),
        ("CXL", "https://cxl.com/blog/feed/", ["cro"]),
        ("Baymard Institute", "https://baymard.com/blog.rss", ["cro", "ecommerce"]),
        ("Ahrefs Blog", "https://ahrefs.com/blog/feed/", ["seo"]),
        ("web.dev", "https://web.dev/feed.xml", ["speed", "development"]),
        ("Smashing Magazine", "https://www.smashingmagazine.com/feed/", ["development", "speed"]),
        ("CSS-Tricks", "https://css-tricks.com/feed/", ["development", "speed"]),
        ("Hugging Face Blog", "https://huggingface.co/blog/feed.xml", ["ai", "development"]),
        ("LangChain Blog", "https://blog.langchain.dev/rss/", ["ai", "development"]),
        ("Vercel Blog", "https://vercel.com/blog/rss.xml", ["ai", "development", "speed"]),
        ("Google AI Blog", "https://blog.google/technology/ai/rss/", ["ai"]),
    ]
    return [SourceConfig(name=name, url=url, topics=topics, enabled=True) for name, url, topics in feeds]


def init_command(
    config_dir: Path = typer.Option(
        DEFAULT_CONFIG_DIR,
        "--config-dir",
        "-c",
        help="Configuration directory",
    ),
    workspace: Path = typer.Option(
        Path.home() / "content-curator",
        "--workspace",
        "-w",
        help="Workspace root directory (content/ and the ledger live here)",
    ),
    provider: str = typer.Option(
        "openai",
        "--provider",
        "-p",
        help="Text generation backend (openai, grok, anthropic, mock)",
    ),
    seed_sources: bool = typer.Option(
        True,
        "--seed-sources/--no-seed-sources",
        help="Seed default news sources",
    ),
) -> None:
    """Initialize Content Curator configuration and workspace."""
    console.print(Panel.fit("Content Curator - Initialization", style="bold blue"))

    config_dir.mkdir(parents=True, exist_ok=True)
    config_path = config_dir / "config.yaml"
    sources_path = config_dir / "sources.yaml"

    config = ConfigModel(workspace_root=str(workspace), llm=LLMConfig(provider=provider))

    save_config(config, config_path)
    console.print(f"[green]Created config:[/green] {config_path}")

    if seed_sources:
        sources = create_default_sources()
        save_sources(sources, sources_path)
        console.print(f"[green]Created sources:[/green] {sources_path} (seeded with {len(sources)} sources)")
    else:
        save_sources([], sources_path)
        console.print(f"[green]Created sources:[/green] {sources_path} (empty)")

    for channel in ("blog", "social"):
        (workspace / "content" / channel).mkdir(parents=True, exist_ok=True)
    console.print(f"[green]Created workspace:[/green] {workspace}")

    key_hint = {
        "grok": "export GROK_API_KEY=your_key",
        "xai": "export XAI_API_KEY=your_key",
        "anthropic": "export ANTHROPIC_API_KEY=your_key",
        "mock": "(none needed for the mock backend)",
    }.get(provider.lower(), "export OPENAI_API_KEY=your_key")

    console.print(
        Panel(
            f"[green]Content Curator initialized successfully![/green]\n\n"
            f"Configuration: {config_path}\n"
            f"Sources: {sources_path}\n"
            f"Workspace: {workspace}\n\n"
            f"Next steps:\n"
            f"1. Set LLM API key: [bold]{key_hint}[/bold]\n"
            f"2. Preview candidates: [bold]curator run --dry-run[/bold]\n"
            f"3. Run: [bold]curator run[/bold]",
            style="green",
        )
    )
