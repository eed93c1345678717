"""Run command implementation."""

from typing import List, Optional

import typer
from pydantic import ValidationError
from rich.console import Console

from ..config import Config
from ..errors import ConfigurationError
from ..models import OutputKind, RunOptions
from ..pipeline import PipelineOrchestrator

console = Console()


def split_csv(value: Optional[str]) -> Optional[List[str]]:
    """Split a comma-separated option value."""
    if value is None:
        return None
    return [part.strip() for part in value.split(",") if part.strip()]


def parse_output_kinds(values: List[str]) -> List[OutputKind]:
    """
    Parse output kind names.

    Raises:
        ValueError: unknown kind
    """
    kinds = []
    for value in values:
        try:
            kinds.append(OutputKind(value.lower()))
        except ValueError:
            valid = ", ".join(k.value for k in OutputKind)
            raise ValueError(f"Unknown output kind '{value}' (expected one of: {valid})")
    return kinds


def run_command(
    articles: Optional[int] = typer.Option(
        None,
        "--articles",
        "-a",
        help="Maximum items to process",
        min=1,
    ),
    topics: Optional[str] = typer.Option(
        None,
        "--topics",
        "-t",
        help="Comma-separated topics (seo,cro,speed,ai,shopify,development) or 'all'",
    ),
    days: Optional[int] = typer.Option(
        None,
        "--days",
        "-d",
        help="Only consider items published in the last N days",
        min=1,
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="List the items that would be processed without generating anything",
    ),
    use_search: bool = typer.Option(
        False,
        "--use-search",
        help="Discover items through the text generation backend instead of RSS",
    ),
    outputs: Optional[str] = typer.Option(
        None,
        "--outputs",
        "-o",
        help="Comma-separated output kinds (blog,linkedin,twitter)",
    ),
) -> None:
    """Run the curation pipeline and file drafts for review."""
    try:
        config = Config()
        defaults = config.config.run_defaults

        options = RunOptions(
            item_cap=articles if articles is not None else defaults.articles,
            topic_filter=split_csv(topics) or defaults.topics,
            recency_days=days if days is not None else defaults.days,
            dry_run=dry_run,
            use_search=use_search,
            output_kinds=parse_output_kinds(split_csv(outputs) or defaults.outputs),
        )

        orchestrator = PipelineOrchestrator.from_config(config)
        orchestrator.run(options)

    except ConfigurationError as e:
        console.print(f"[red]Cannot start pipeline: {e}[/red]")
        raise typer.Exit(1)
    except (ValueError, ValidationError) as e:
        console.print(f"[red]Invalid options: {e}[/red]")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Pipeline interrupted by user[/yellow]")
        raise typer.Exit(1)
