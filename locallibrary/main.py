import asyncio
import logging
from typing import Optional

import typer
import uvicorn

from .author import Author
from .config import settings
from .controllers import BookController
from .database import DocumentStore
from .populate import populate_sample_data
from .ui_helpers import print_author_list, print_stats_result, set_output_mode

logger = logging.getLogger(__name__)

app = typer.Typer(help="Local Library CLI")


def _store() -> DocumentStore:
    store = DocumentStore(settings.database_file)
    store.initialize()
    return store


@app.callback()
def _global_options(
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    )
):
    """Global CLI options (e.g. output mode)."""
    logging.basicConfig(level=settings.log_level)
    if output:
        set_output_mode(output)


@app.command("stats")
def cli_stats():
    """Show catalog record counts."""
    outcome = asyncio.run(BookController(_store()).index())
    print_stats_result(outcome.context)


@app.command("list-authors")
def cli_list_authors():
    """List all authors sorted by family name."""
    docs = asyncio.run(_store().find("authors", sort="family_name"))
    print_author_list([Author.from_dict(d) for d in docs])


@app.command("populate")
def cli_populate():
    """Fill the database with sample authors, genres, books and copies."""
    counts = asyncio.run(populate_sample_data(_store()))
    print(
        f"Added {counts['authors']} authors, {counts['genres']} genres, "
        f"{counts['books']} books and {counts['bookinstances']} copies."
    )


@app.command("serve")
def cli_serve(
    host: str = typer.Option(settings.api_host, "--host", help="Interface to bind"),
    port: int = typer.Option(settings.api_port, "--port", help="Port to listen on"),
    reload: bool = typer.Option(False, "--reload", help="Restart on code changes"),
):
    """Start the web interface with uvicorn."""
    print(f"Starting web UI on http://{host}:{port}/catalog/")
    uvicorn.run("locallibrary.api:create_app", factory=True, host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
