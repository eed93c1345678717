"""Main CLI application."""

import typer
from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()

from .from_url import from_url_command
from .generate import generate_command
from .init import init_command
from .ledger import ledger_app
from .queue import queue_app
from .review import review_command
from .run import run_command
from .sources import sources_app
from .validate import validate_command

app = typer.Typer(
    name="curator",
    help="Content Curator - RSS curation, AI drafting and review queue",
    no_args_is_help=True,
)

# Register commands
app.command("init")(init_command)
app.command("run")(run_command)
app.command("validate")(validate_command)
app.command("from-url")(from_url_command)
app.command("generate")(generate_command)
app.command("review")(review_command)
app.add_typer(sources_app, name="sources", help="Manage RSS sources")
app.add_typer(queue_app, name="queue", help="Review generated drafts")
app.add_typer(ledger_app, name="ledger", help="Inspect the processed-items ledger")


if __name__ == "__main__":
    app()
