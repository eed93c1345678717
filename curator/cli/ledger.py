"""Ledger inspection commands."""

import typer
from rich.console import Console
from rich.table import Table

from ..config import Config
from ..dedup import FingerprintLedger
from ..errors import ConfigurationError

console = Console()
ledger_app = typer.Typer(help="Inspect the processed-items ledger")


def open_ledger() -> FingerprintLedger:
    config = Config()
    try:
        return FingerprintLedger(config.ledger_path, config.config.ledger.max_entries)
    except ConfigurationError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)


@ledger_app.command("stats")
def ledger_stats() -> None:
    """Show how many items have been processed, per source."""
    ledger = open_ledger()
    stats = ledger.stats()

    console.print(f"[bold]Ledger:[/bold] {ledger.path}")
    console.print(f"  Total processed: {stats.total_processed}")
    last = stats.last_processed_at.isoformat() if stats.last_processed_at else "never"
    console.print(f"  Last processed: {last}")

    if not stats.counts_by_source:
        return

    table = Table(title="Processed by source")
    table.add_column("Source", style="cyan")
    table.add_column("Items", justify="right", style="green")
    for source, count in sorted(stats.counts_by_source.items(), key=lambda kv: -kv[1]):
        table.add_row(source, str(count))
    console.print(table)


@ledger_app.command("clear")
def ledger_clear(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Forget every processed item so it can be curated again."""
    ledger = open_ledger()
    if not yes and not typer.confirm(f"Clear {ledger.stats().total_processed} ledger entries?"):
        raise typer.Abort()

    ledger.clear()
    console.print("[green]Ledger cleared.[/green]")
