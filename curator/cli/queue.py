"""Review queue commands."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from ..config import Config
from ..errors import ConfigurationError
from ..queue import (
    ArtifactStore,
    ReviewQueue,
    TransitionResult,
    print_publish_report,
    print_queue,
)
from ..validation import Validator

console = Console()
queue_app = typer.Typer(help="Review generated drafts")

CHANNELS = ("blog", "social")

channel_option = typer.Option(
    "blog",
    "--channel",
    "-c",
    help="Artifact channel (blog or social)",
)


def open_queue(channel: str, config: Optional[Config] = None) -> ReviewQueue:
    """Review queue over a channel's content directory."""
    if channel not in CHANNELS:
        console.print(f"[red]Unknown channel '{channel}' (expected blog or social)[/red]")
        raise typer.Exit(1)

    config = config or Config()
    try:
        content_dir = config.get_content_dir(channel)
        validator = Validator.for_channel(config.config, channel)
    except ConfigurationError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    return ReviewQueue(ArtifactStore(content_dir), validator)


def _report(result: TransitionResult) -> None:
    if result.success:
        console.print(f"[green]{result.message}[/green]")
    else:
        console.print(f"[red]{result.message}[/red]")
        raise typer.Exit(1)


@queue_app.command("list")
def queue_list(channel: str = channel_option) -> None:
    """List drafts pending review with their validation results."""
    print_queue(open_queue(channel).pending(), channel)


@queue_app.command("approve")
def queue_approve(
    slug: str = typer.Argument(..., help="Draft slug"),
    channel: str = channel_option,
) -> None:
    """Publish a draft."""
    _report(open_queue(channel).approve(slug))


@queue_app.command("reject")
def queue_reject(
    slug: str = typer.Argument(..., help="Draft slug"),
    channel: str = channel_option,
) -> None:
    """Reject a draft and move it to the archive."""
    _report(open_queue(channel).reject(slug))


@queue_app.command("clean")
def queue_clean(
    slug: str = typer.Argument(..., help="Draft slug"),
    channel: str = channel_option,
) -> None:
    """Clean typographic artifacts and mark a draft for review."""
    _report(open_queue(channel).clean(slug))


@queue_app.command("regenerate")
def queue_regenerate(
    slug: str = typer.Argument(..., help="Draft slug"),
    body_file: Path = typer.Option(..., "--body-file", "-f", help="File with the replacement body"),
    channel: str = channel_option,
) -> None:
    """Replace a draft's body and reset it to draft."""
    if not body_file.is_file():
        console.print(f"[red]Body file not found: {body_file}[/red]")
        raise typer.Exit(1)
    _report(open_queue(channel).regenerate(slug, body_file.read_text(encoding="utf-8")))


@queue_app.command("publish-all")
def queue_publish_all(channel: str = channel_option) -> None:
    """Publish every reviewed draft that passes validation."""
    print_publish_report(open_queue(channel).publish_approved())
