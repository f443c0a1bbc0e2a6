"""Builds the in-memory notes index from a vault."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

from linkfinder.index.search import NotesIndex
from linkfinder.ingestion.vault import MarkdownVault
from linkfinder.models import NoteInfo
from linkfinder.stemming.stemmers import Stemmer

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class IndexStats:
    notes: int = 0
    placeholders: int = 0
    aliases: int = 0

    @property
    def total(self) -> int:
        return self.notes + self.placeholders


class Indexer:
    """Collects notes (and optionally link placeholders) for a NotesIndex."""

    def __init__(
        self,
        vault: MarkdownVault,
        stemmer: Stemmer,
        *,
        search_non_existing_notes: bool = True,
    ) -> None:
        self.vault = vault
        self.stemmer = stemmer
        self.search_non_existing_notes = search_non_existing_notes
        self.stats = IndexStats()

    def collect(self) -> List[NoteInfo]:
        notes = self.vault.collect_notes()
        placeholders: List[NoteInfo] = []
        if self.search_non_existing_notes:
            placeholders = self.vault.collect_unresolved_notes(notes)

        self.stats = IndexStats(
            notes=len(notes),
            placeholders=len(placeholders),
            aliases=sum(len(note.aliases) for note in notes),
        )
        return notes + placeholders

    def build(self) -> NotesIndex:
        notes = self.collect()
        LOGGER.debug(
            "Indexed %d notes, %d placeholders, %d aliases",
            self.stats.notes,
            self.stats.placeholders,
            self.stats.aliases,
        )
        return NotesIndex(notes, self.stemmer)
