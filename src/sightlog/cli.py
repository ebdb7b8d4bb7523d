"""CLI entry point."""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from pathlib import Path
from typing import Any, Optional, TypeVar

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from sightlog.core.config import get_settings
from sightlog.core.exceptions import StorageError
from sightlog.service import SightingService
from sightlog.storage.json_file import JsonFileStore

app = typer.Typer(
    name="sightlog",
    help="Sighting log kept in a single JSON document",
    no_args_is_help=True,
)
console = Console()

T = TypeVar("T")


def storage_option() -> Any:
    return typer.Option(None, "--storage", "-s", help="JSON document file")


def _store(storage: Optional[Path]) -> JsonFileStore:
    return JsonFileStore(storage or get_settings().storage_path, create=False)


def _run(coro: Coroutine[Any, Any, T]) -> T:
    try:
        return asyncio.run(coro)
    except StorageError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1) from e


@app.command()
def version() -> None:
    """Show version."""
    from sightlog import __version__

    console.print(f"sightlog {__version__}")


@app.command()
def info() -> None:
    """Show system information."""
    import sys

    from sightlog import __version__

    settings = get_settings()
    console.print(f"[bold]SightLog[/bold] {__version__}")
    console.print(f"Python {sys.version}")
    console.print(f"Storage: {settings.storage_path}")
    console.print(f"Listening on: {settings.host}:{settings.port}")


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, help="Interface to bind"),
    port: Optional[int] = typer.Option(None, help="TCP port"),
    storage: Optional[Path] = storage_option(),
) -> None:
    """Run the web application."""
    import uvicorn

    from sightlog.api.app import create_app

    overrides = {"host": host, "port": port, "storage_path": storage}
    settings = get_settings(**{k: v for k, v in overrides.items() if v is not None})
    uvicorn.run(create_app(settings=settings), host=settings.host, port=settings.port)


@app.command()
def init(storage: Optional[Path] = storage_option()) -> None:
    """Create an empty document if none exists."""
    store = JsonFileStore(storage or get_settings().storage_path)
    _run(store.initialize())
    console.print(f"Document ready at [bold]{store.path}[/bold]")


@app.command("list")
def list_sightings(storage: Optional[Path] = storage_option()) -> None:
    """Print all sightings with their index."""
    entries = _run(SightingService(_store(storage)).entries())

    table = Table(title=f"Sightings ({len(entries)})")
    table.add_column("#", justify="right")
    table.add_column("Date")
    table.add_column("Location")
    table.add_column("Shape")
    table.add_column("Posted")
    for entry in entries:
        s = entry.sighting if isinstance(entry.sighting, dict) else {}
        location = ", ".join(str(v) for v in (s.get("city"), s.get("state")) if v)
        table.add_row(
            str(entry.index),
            str(s.get("date", "")),
            location,
            str(s.get("shape", "")),
            str(s.get("post_create_date_time", "")),
        )
    console.print(table)


@app.command()
def shapes(storage: Optional[Path] = storage_option()) -> None:
    """Print the number of sightings per shape."""
    buckets = _run(SightingService(_store(storage)).shapes())

    table = Table(title="Shapes")
    table.add_column("Shape")
    table.add_column("Sightings", justify="right")
    for bucket in buckets:
        table.add_row(bucket.label, str(bucket.count))
    console.print(table)


if __name__ == "__main__":
    app()
