"""Typer CLI for ideastack."""

from __future__ import annotations

import json
import platform

import typer

from ideastack.config import load_settings
from ideastack.logging import configure_logging
from ideastack.notes.sink import StoreCaptureSink
from ideastack.notes.store import NoteStore
from ideastack.services.hotkeys import create_backend

app = typer.Typer(no_args_is_help=True)


def _open_store() -> tuple[NoteStore, str]:
    settings = load_settings()
    configure_logging(settings, level="WARNING")
    store = NoteStore(settings.paths.notes_file, settings.notes.default_categories)
    return store, settings.notes.default_category


@app.command()
def run() -> None:
    """Launch the background capture process and notes window."""

    from ideastack.main import main as launch

    launch()


@app.command()
def doctor() -> None:
    """Print environment diagnostics."""

    settings = load_settings()
    configure_logging(settings)
    backend = create_backend(settings.hotkeys)
    info = {
        "python": platform.python_version(),
        "platform": platform.platform(),
        "paths": {
            "home": str(settings.paths.base_dir),
            "logs": str(settings.paths.logs_dir),
            "notes": str(settings.paths.notes_file),
        },
        "hotkey": {
            "shortcut": settings.hotkeys.shortcut,
            "enabled": settings.hotkeys.enabled,
            "backend": backend.name,
            "permission": backend.has_permission(),
        },
    }
    typer.echo(json.dumps(info, indent=2))


@app.command()
def settings(key: str | None = typer.Argument(None)) -> None:
    """Display current settings or a specific section."""

    data = load_settings().model_dump()
    if key:
        data = data.get(key, {})
    typer.echo(json.dumps(data, indent=2, default=str))


@app.command()
def add(text: str = typer.Argument(..., help="Idea text, optionally ending in ':category'")) -> None:
    """Capture a note without opening the overlay."""

    store, default_category = _open_store()
    before = len(store.notes)
    StoreCaptureSink(store, default_category).commit(text)
    if len(store.notes) == before:
        typer.echo("nothing to capture", err=True)
        raise typer.Exit(code=1)
    note = store.notes[-1]
    typer.echo(f"saved [{note.category}] {note.text}")


@app.command("list")
def list_notes(category: str | None = typer.Option(None, "--category", "-c")) -> None:
    """Show captured notes grouped by day."""

    store, _ = _open_store()
    groups = store.grouped_by_day(category=category)
    if not groups:
        typer.echo("nothing captured yet")
        return
    for label, notes in groups:
        typer.echo(label)
        for note in notes:
            typer.echo(f"  {note.timestamp.astimezone():%H:%M}  {note.text}  :{note.category}")


if __name__ == "__main__":
    app()
