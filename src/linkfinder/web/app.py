"""FastAPI application exposing LinkFinder suggestions over HTTP."""

from __future__ import annotations

import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any, List

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from linkfinder.config import AppConfig
from linkfinder.index.storage import RecentNotesStore
from linkfinder.models import NoteInfo
from linkfinder.suggest.session import LinkSession

LOGGER = logging.getLogger(__name__)

app = FastAPI(title="LinkFinder Web", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


class SearchPayload(BaseModel):
    query: str
    vault: Path
    data: Path | None = None
    limit: int = 10
    placeholders: bool = True


class SuggestPayload(BaseModel):
    query: str
    vault: Path
    data: Path | None = None
    selected_path: str | None = None
    limit: int = 20
    placeholders: bool = True


class SelectPayload(BaseModel):
    query: str
    vault: Path
    data: Path | None = None
    index: int = 0
    selected_path: str | None = None
    as_typed: bool = False
    placeholders: bool = True


def _resolve_data_path(data: Path | None) -> Path:
    config = AppConfig(data_path=data if data is not None else AppConfig().data_path)
    return config.resolve_data_path(Path.cwd())


def _open_session(vault: Path, data: Path | None, placeholders: bool) -> LinkSession:
    config = AppConfig(
        vault_path=vault.expanduser(),
        data_path=data if data is not None else AppConfig().data_path,
        search_non_existing_notes=placeholders,
    )
    try:
        return LinkSession.open(config, Path.cwd())
    except FileNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        LOGGER.error("Unable to open vault %s: %s", vault, exc)
        raise HTTPException(status_code=400, detail=str(exc)) from exc


def _find_note(session: LinkSession, note_path: str | None) -> NoteInfo | None:
    if note_path is None:
        return None
    for note in session.core.collect_notes():
        if note.path == note_path:
            return note
    raise HTTPException(status_code=404, detail=f"Note not found: {note_path}")


@app.on_event("startup")
async def startup_event() -> None:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")


@app.post("/search")
async def search_notes(payload: SearchPayload) -> dict[str, List[dict[str, Any]]]:
    query = payload.query.strip()
    if not query:
        raise HTTPException(status_code=400, detail="Empty query")

    limit = max(1, min(payload.limit, 50))
    session = _open_session(payload.vault, payload.data, payload.placeholders)
    suggestions = session.core.get_note_suggestions(query)[:limit]
    return {"results": [asdict(item) for item in suggestions]}


@app.post("/suggest")
async def suggest_links(payload: SuggestPayload) -> dict[str, List[dict[str, Any]]]:
    limit = max(1, min(payload.limit, 100))
    session = _open_session(payload.vault, payload.data, payload.placeholders)
    selected = _find_note(session, payload.selected_path)
    suggestions = await session.core.get_suggestions(payload.query, selected)
    return {"suggestions": [asdict(item) for item in suggestions[:limit]]}


@app.post("/select")
async def select_link(payload: SelectPayload) -> dict[str, Any]:
    session = _open_session(payload.vault, payload.data, payload.placeholders)
    if payload.as_typed:
        return {"link": session.core.build_raw_link(payload.query), "title": None}

    selected = _find_note(session, payload.selected_path)
    suggestions = await session.core.get_suggestions(payload.query, selected)
    if not 0 <= payload.index < len(suggestions):
        raise HTTPException(status_code=404, detail="Suggestion not found")

    item = suggestions[payload.index]
    link = await session.select(item, payload.query)
    return {"link": link, "title": session.core.get_note_title(item)}


@app.get("/recent")
async def list_recent(data: Path | None = None, limit: int = 20) -> dict[str, Any]:
    store = RecentNotesStore(_resolve_data_path(data))
    try:
        recent_notes = store.load()
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    entries = recent_notes.entries()[: max(0, limit)]
    return {"recent": [{"title": title, "timestamp": timestamp} for title, timestamp in entries]}
