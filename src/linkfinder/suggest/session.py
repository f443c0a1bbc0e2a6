"""Wiring of vault, index, ledger and suggestion core for one vault."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from linkfinder.config import AppConfig
from linkfinder.index.indexer import Indexer
from linkfinder.index.recent import RecentNotes
from linkfinder.index.storage import RecentNotesStore
from linkfinder.ingestion.vault import MarkdownVault
from linkfinder.models import LinkSuggestion
from linkfinder.stemming.stemmers import build_stemmer
from linkfinder.suggest.core import LinkSuggestCore

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class LinkSession:
    vault: MarkdownVault
    indexer: Indexer
    store: RecentNotesStore
    recent_notes: RecentNotes
    core: LinkSuggestCore

    @classmethod
    def open(cls, config: AppConfig, base_dir: Path | None = None) -> "LinkSession":
        """Build the index once and load the ledger for the configured vault."""
        vault_path = config.resolve_vault_path(base_dir)
        if not vault_path.is_dir():
            raise FileNotFoundError(f"Vault not found: {vault_path}")

        vault = MarkdownVault(vault_path)
        stemmer = build_stemmer(config.languages)
        indexer = Indexer(
            vault, stemmer, search_non_existing_notes=config.search_non_existing_notes
        )
        index = indexer.build()
        notes = index.notes

        store = RecentNotesStore(config.resolve_data_path(base_dir))
        recent_notes = store.load()
        core = LinkSuggestCore(
            source=vault,
            collect_notes=lambda: list(notes),
            stemmer=stemmer,
            recent_notes=recent_notes,
            prebuilt_index=index,
            boost_count=config.boost_count,
        )
        return cls(vault=vault, indexer=indexer, store=store, recent_notes=recent_notes, core=core)

    async def select(self, item: LinkSuggestion, raw_query: str, *, as_typed: bool = False) -> str:
        """Build the link for a chosen suggestion and remember the choice.

        Links inserted as typed are not recorded, since no note was chosen.
        """
        if as_typed:
            return self.core.build_raw_link(raw_query)

        self.core.prepare_block_id(item)
        link = self.core.build_link(item, raw_query)
        await self.core.write_block_id_if_needed(item)
        self.recent_notes.record(self.core.get_note_title(item))
        self.store.save(self.recent_notes)
        LOGGER.info("Selected %s", link)
        return link
