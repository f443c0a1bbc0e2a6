"""Command line interface for LinkFinder."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Tuple

import typer
from rich.console import Console
from rich.table import Table

from linkfinder.config import AppConfig
from linkfinder.index.storage import RecentNotesStore
from linkfinder.models import BlockSuggestion, HeadingSuggestion, LinkSuggestion, NoteInfo
from linkfinder.suggest.session import LinkSession
from linkfinder.web.app import app as web_app


console = Console()
app = typer.Typer(help="LinkFinder - morphological note search for wikilinks")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _open_session(vault: Path, data: Optional[Path], placeholders: bool) -> LinkSession:
    config = AppConfig(
        vault_path=vault,
        data_path=data if data is not None else AppConfig().data_path,
        search_non_existing_notes=placeholders,
    )
    try:
        return LinkSession.open(config, Path.cwd())
    except (FileNotFoundError, ValueError) as exc:
        raise typer.BadParameter(str(exc)) from exc


def _find_note(session: LinkSession, note_path: Optional[str]) -> Optional[NoteInfo]:
    if note_path is None:
        return None
    for note in session.core.collect_notes():
        if note.path == note_path:
            return note
    raise typer.BadParameter(f"Note not found: {note_path}")


def _describe(item: LinkSuggestion) -> Tuple[str, str, str]:
    if isinstance(item, HeadingSuggestion):
        return "heading", f"{item.note.title} > {'#' * item.level} {item.heading}", ""
    if isinstance(item, BlockSuggestion):
        detail = f"^{item.block_id}" if item.block_id else "new block id"
        return "block", item.block_text, detail
    if not item.note.exists:
        return "note", item.note.title, "not created yet"
    return "note", item.note.title, item.matched_alias or item.note.path


@app.command()
def search(
    query: str = typer.Argument(..., help="Query text"),
    vault: Path = typer.Option(..., "--vault", help="Vault directory with Markdown notes"),
    data: Path = typer.Option(None, "--data", help="Recent notes JSON path"),
    limit: int = typer.Option(10, help="Number of results to display"),
    placeholders: bool = typer.Option(
        True, "--placeholders/--no-placeholders", help="Include linked notes that do not exist yet"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Search note titles and aliases."""
    _setup_logging(verbose)
    session = _open_session(vault, data, placeholders)

    suggestions = session.core.get_note_suggestions(query)[:limit]
    if not suggestions:
        console.print("[yellow]No matches found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("#")
    table.add_column("Title")
    table.add_column("Matched alias")
    table.add_column("Path")

    for rank, item in enumerate(suggestions, start=1):
        alias = getattr(item, "matched_alias", None) or ""
        path = item.note.path if item.note.exists else "(not created)"
        table.add_row(str(rank), item.note.title, alias, path)

    console.print(table)


@app.command()
def suggest(
    query: str = typer.Argument(..., help="Wikilink query, e.g. 'note#heading|display'"),
    vault: Path = typer.Option(..., "--vault", help="Vault directory with Markdown notes"),
    data: Path = typer.Option(None, "--data", help="Recent notes JSON path"),
    limit: int = typer.Option(10, help="Number of suggestions to display"),
    note: Optional[str] = typer.Option(
        None, "--note", help="Vault-relative path of the note for heading and block queries"
    ),
    placeholders: bool = typer.Option(
        True, "--placeholders/--no-placeholders", help="Include linked notes that do not exist yet"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Show note, heading or block suggestions for a wikilink query."""
    _setup_logging(verbose)
    session = _open_session(vault, data, placeholders)

    selected = _find_note(session, note)
    suggestions = asyncio.run(session.core.get_suggestions(query, selected))[:limit]
    if not suggestions:
        console.print("[yellow]No matches found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("#")
    table.add_column("Kind")
    table.add_column("Suggestion")
    table.add_column("Detail")

    for rank, item in enumerate(suggestions, start=1):
        table.add_row(str(rank), *_describe(item))

    console.print(table)


@app.command()
def link(
    query: str = typer.Argument(..., help="Wikilink query"),
    vault: Path = typer.Option(..., "--vault", help="Vault directory with Markdown notes"),
    data: Path = typer.Option(None, "--data", help="Recent notes JSON path"),
    pick: int = typer.Option(1, help="1-based number of the suggestion to link"),
    as_typed: bool = typer.Option(False, "--as-typed", help="Insert the query as typed"),
    note: Optional[str] = typer.Option(
        None, "--note", help="Vault-relative path of the note for heading and block queries"
    ),
    placeholders: bool = typer.Option(
        True, "--placeholders/--no-placeholders", help="Include linked notes that do not exist yet"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Print the wikilink for a suggestion and remember the chosen note."""
    _setup_logging(verbose)
    session = _open_session(vault, data, placeholders)

    if as_typed:
        console.print(session.core.build_raw_link(query), markup=False)
        return

    selected = _find_note(session, note)

    async def _run() -> Optional[str]:
        suggestions = await session.core.get_suggestions(query, selected)
        if not suggestions:
            return None
        if not 1 <= pick <= len(suggestions):
            raise typer.BadParameter(f"--pick must be between 1 and {len(suggestions)}")
        return await session.select(suggestions[pick - 1], query)

    result = asyncio.run(_run())
    if result is None:
        console.print("[yellow]No matches found.[/yellow]")
        return
    console.print(result, markup=False)


@app.command()
def recent(
    data: Path = typer.Option(None, "--data", help="Recent notes JSON path"),
    limit: int = typer.Option(20, help="Number of entries to display"),
) -> None:
    """List recently selected notes."""
    config = AppConfig(data_path=data if data is not None else AppConfig().data_path)
    store = RecentNotesStore(config.resolve_data_path(Path.cwd()))
    try:
        recent_notes = store.load()
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    entries = recent_notes.entries()[:limit]
    if not entries:
        console.print("[yellow]No recent notes.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Title")
    table.add_column("Last used")
    for title, timestamp in entries:
        used = datetime.fromtimestamp(timestamp / 1000).strftime("%Y-%m-%d %H:%M:%S")
        table.add_row(title, used)
    console.print(table)


@app.command()
def web(
    host: str = typer.Option("127.0.0.1", help="Host interface"),
    port: int = typer.Option(8000, help="Server port"),
) -> None:
    """Start the web API."""
    try:
        import uvicorn
    except ImportError as exc:  # pragma: no cover
        raise typer.BadParameter(
            "uvicorn is not installed. Install the web extras with \"python -m pip install '.[web]'\""
        ) from exc

    console.print(f"Starting web API on http://{host}:{port}")
    uvicorn.run(
        web_app,
        host=host,
        port=port,
        reload=False,
        log_level="info",
    )
