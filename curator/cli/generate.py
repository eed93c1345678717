"""Generate command implementation."""

import typer
from rich.console import Console

from ..config import Config
from ..errors import ConfigurationError
from ..generation import DEFAULT_TONE
from ..pipeline import PipelineOrchestrator
from .run import parse_output_kinds

console = Console()


def generate_command(
    topic: str = typer.Option(
        ...,
        "--topic",
        "-t",
        help="What the content should be about",
    ),
    kind: str = typer.Option(
        "blog",
        "--type",
        help="Output kind (blog, linkedin or twitter)",
    ),
    tone: str = typer.Option(
        DEFAULT_TONE,
        "--tone",
        help="Tone of voice, e.g. educational, conversational, technical",
    ),
) -> None:
    """Write one draft on a topic, without a source article."""
    if not topic.strip():
        console.print("[red]Topic must not be empty[/red]")
        raise typer.Exit(1)

    try:
        output_kind = parse_output_kinds([kind])[0]
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    try:
        orchestrator = PipelineOrchestrator.from_config(Config())
        generator = orchestrator.generator
    except ConfigurationError as e:
        console.print(f"[red]Cannot start: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"[dim]Writing {output_kind.value} on '{topic}' ({generator.name} backend)...[/dim]")
    outcome = orchestrator.process_topic(topic, output_kind, tone)

    if not outcome.success:
        console.print(f"[red]Failed ({outcome.error_category}): {outcome.error}[/red]")
        return

    for slug in outcome.slugs:
        console.print(f"[green]Draft written:[/green] {slug}")
    for error in outcome.validation_errors:
        console.print(f"  [red]error:[/red] {error}")
    for warning in outcome.warnings:
        console.print(f"  [yellow]warning:[/yellow] {warning}")
    console.print(f"\nReview with: [bold]curator queue list --channel {output_kind.channel}[/bold]")
