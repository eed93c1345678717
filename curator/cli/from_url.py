"""From-url command implementation."""

from typing import Optional

import typer
from rich.console import Console

from ..config import Config
from ..errors import ConfigurationError
from ..pipeline import PipelineOrchestrator

console = Console()


def from_url_command(
    url: str = typer.Argument(..., help="Article URL to rewrite as a blog draft"),
    title: Optional[str] = typer.Option(
        None,
        "--title",
        "-t",
        help="Title override (default: taken from the page)",
    ),
) -> None:
    """Fetch an article and file a rewritten blog draft for review."""
    try:
        orchestrator = PipelineOrchestrator.from_config(Config())
        generator = orchestrator.generator
    except ConfigurationError as e:
        console.print(f"[red]Cannot start: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"[dim]Fetching {url} ({generator.name} backend)...[/dim]")
    outcome = orchestrator.process_url(url, title)

    if not outcome.success:
        console.print(f"[red]Failed ({outcome.error_category}): {outcome.error}[/red]")
        return

    for slug in outcome.slugs:
        console.print(f"[green]Draft written:[/green] {slug}")
    for error in outcome.validation_errors:
        console.print(f"  [red]error:[/red] {error}")
    for warning in outcome.warnings:
        console.print(f"  [yellow]warning:[/yellow] {warning}")
    console.print("\nReview with: [bold]curator queue list[/bold]")
