"""Validate command implementation."""

from pathlib import Path

import typer
from rich.console import Console

from ..config import Config, ConfigModel
from ..errors import ConfigurationError
from ..validation import Validator, print_verdicts

console = Console()


def validate_command(
    path: Path = typer.Argument(..., help="A .md/.mdx file or a directory of them"),
    channel: str = typer.Option(
        "blog",
        "--channel",
        "-c",
        help="Apply blog or social word limits",
    ),
) -> None:
    """Validate content files against the brand-voice rules."""
    try:
        model = Config().config
    except ConfigurationError:
        # No config yet: fall back to the built-in rules
        model = ConfigModel()

    validator = Validator.for_channel(model, channel)

    if path.is_dir():
        verdicts = validator.validate_directory(path)
        if not verdicts:
            console.print(f"[yellow]No .md/.mdx files in {path}[/yellow]")
            return
    elif path.is_file():
        verdicts = [validator.validate_file(path)]
    else:
        console.print(f"[red]Path not found: {path}[/red]")
        raise typer.Exit(1)

    print_verdicts(verdicts)

    if not all(v.is_valid for v in verdicts):
        raise typer.Exit(1)
