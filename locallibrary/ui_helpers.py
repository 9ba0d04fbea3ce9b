import json
import os
from typing import Any, Dict, List

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

# Environment variable that controls CLI output mode.
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "LIB_CLI_OUTPUT"

_console = Console()

STAT_LABELS = {
    "book_count": "Books",
    "book_instance_count": "Copies",
    "book_instance_available_count": "Copies available",
    "author_count": "Authors",
    "genre_count": "Genres",
}


def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in {"plain", "json", "rich"}:
        os.environ[OUTPUT_MODE_ENV] = mode


def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, "plain").lower()


def print_author_list(authors: List[Any]) -> None:
    """Print authors in the current output mode.
    - plain: 'id - Family, First (lifespan)' lines, or 'No authors in library.'
    - json: JSON array of id, name, lifespan
    - rich: Rich table
    """
    mode = get_output_mode()

    if not authors:
        print("No authors in library.")
        return

    if mode == "json":
        payload = [{"id": a.id, "name": a.name, "lifespan": a.lifespan} for a in authors]
        print(json.dumps(payload, ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="Authors", show_lines=True, header_style="bold cyan")
        table.add_column("Id", style="magenta", no_wrap=True)
        table.add_column("Name", style="white")
        table.add_column("Lifespan", style="white")
        for a in authors:
            table.add_row(a.id, a.name, a.lifespan)
        _console.print(table)
    else:
        for a in authors:
            print(f"{a.id} - {a.name} ({a.lifespan})")


def print_stats_result(stats: Dict[str, Any]) -> None:
    """Print catalog counts in the current output mode."""
    mode = get_output_mode()
    counts = {key: stats.get(key, 0) for key in STAT_LABELS}

    if mode == "json":
        print(json.dumps(counts, ensure_ascii=False))
    elif mode == "rich":
        content = "\n".join(f"[bold]{STAT_LABELS[k]}:[/] {v}" for k, v in counts.items())
        _console.print(Panel.fit(content, title="Catalog", border_style="blue"))
    else:
        for key, value in counts.items():
            print(f"{STAT_LABELS[key]}: {value}")
