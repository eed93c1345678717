"""Review command implementation."""

from typing import Optional

import typer
from rich.console import Console

from ..config import Config
from ..errors import ConfigurationError
from ..generation import PromptBuilder, build_generator
from ..models import LifecycleState
from ..validation import CopyReviewer, print_review
from .queue import channel_option, open_queue

console = Console()


def review_command(
    slug: Optional[str] = typer.Argument(
        None,
        help="Draft slug (default: every draft in the channel)",
    ),
    channel: str = channel_option,
    rewrite: bool = typer.Option(
        False,
        "--rewrite",
        help="Replace failing drafts with the reviewer's rewrite",
    ),
) -> None:
    """Score drafts against the brand voice with the configured LLM."""
    config = Config()
    queue = open_queue(channel, config)

    try:
        generator = build_generator(config.get_llm_config())
    except ConfigurationError as e:
        console.print(f"[red]Cannot start: {e}[/red]")
        raise typer.Exit(1)
    reviewer = CopyReviewer(generator, PromptBuilder(config.config.voice))

    if slug is None:
        slugs = [e.slug for e in queue.pending() if e.status is LifecycleState.DRAFT]
        if not slugs:
            console.print(f"[green]No {channel} drafts to review.[/green]")
            return
    else:
        slugs = [slug]

    failed = 0
    for name in slugs:
        result, review = queue.copy_review(name, reviewer, rewrite=rewrite)
        if review is None:
            console.print(f"[red]{result.message}[/red]")
            failed += 1
            continue
        print_review(review, name)
        if rewrite and not review.passed and review.rewritten_content:
            style = "green" if result.success else "red"
            console.print(f"[{style}]{result.message}[/{style}]")

    if failed:
        raise typer.Exit(1)
