"""Vault of Markdown notes on disk.

Supplies the notes to index and the headings and blocks used for
sub-link suggestions, and writes generated block ids back.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import List, Sequence, Set

from linkfinder.ingestion.markdown import (
    extract_aliases,
    find_block_ids,
    iter_blocks,
    iter_headings,
    iter_wikilink_targets,
    parse_front_matter,
)
from linkfinder.models import BlockCandidate, Heading, NoteInfo
from linkfinder.utils.files import (
    MARKDOWN_SUFFIX,
    atomic_write_text,
    iter_markdown_paths,
    iter_vault_files,
)

LOGGER = logging.getLogger(__name__)


class MarkdownVault:
    """A directory tree of ``.md`` notes addressed by vault-relative paths."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def iter_note_paths(self) -> List[Path]:
        return list(iter_markdown_paths([self.root]))

    def relative_path(self, path: Path) -> str:
        return path.relative_to(self.root).as_posix()

    def resolve(self, note_path: str) -> Path:
        return self.root / note_path

    def read_text(self, note_path: str) -> str:
        return self.resolve(note_path).read_text(encoding="utf-8")

    async def read(self, note_path: str) -> str:
        return await asyncio.to_thread(self.read_text, note_path)

    def collect_notes(self) -> List[NoteInfo]:
        """One note per Markdown file; aliases come from front matter."""
        notes: List[NoteInfo] = []
        for path in self.iter_note_paths():
            note_path = self.relative_path(path)
            content = path.read_text(encoding="utf-8")
            metadata = parse_front_matter(content, source=note_path)
            notes.append(
                NoteInfo(path=note_path, title=path.stem, aliases=extract_aliases(metadata))
            )
        LOGGER.debug("Collected %d notes from %s", len(notes), self.root)
        return notes

    def collect_unresolved_notes(self, existing: Sequence[NoteInfo]) -> List[NoteInfo]:
        """Placeholder notes for link targets that have no file yet.

        Titles are compared case-insensitively against existing notes and
        against each other. Targets naming any other file in the vault,
        such as embedded images, are resolved by their full file name.
        """
        seen = {note.title.lower() for note in existing}
        attachments = {
            path.name.lower()
            for path in iter_vault_files(self.root)
            if path.suffix.lower() != MARKDOWN_SUFFIX
        }
        placeholders: List[NoteInfo] = []
        for path in self.iter_note_paths():
            for target in iter_wikilink_targets(path.read_text(encoding="utf-8")):
                title = target.rsplit("/", 1)[-1]
                if title.lower() in attachments:
                    continue
                if title.lower().endswith(MARKDOWN_SUFFIX):
                    title = title[: -len(MARKDOWN_SUFFIX)]
                key = title.lower()
                if not title or key in seen:
                    continue
                seen.add(key)
                placeholders.append(
                    NoteInfo(path=f"{title}{MARKDOWN_SUFFIX}", title=title, exists=False)
                )
        return placeholders

    async def get_headings(self, note_path: str) -> List[Heading]:
        content = await self.read(note_path)
        return list(iter_headings(content))

    async def get_block_candidates(self, note_path: str) -> List[BlockCandidate]:
        content = await self.read(note_path)
        return list(iter_blocks(content))

    def collect_block_ids(self) -> Set[str]:
        """Every ``^id`` in the vault; generated ids must be unique across it."""
        ids: Set[str] = set()
        for path in self.iter_note_paths():
            ids.update(find_block_ids(path.read_text(encoding="utf-8")))
        return ids

    async def append_block_id(self, note_path: str, line: int, block_id: str) -> None:
        await asyncio.to_thread(self._append_block_id, note_path, line, block_id)

    def _append_block_id(self, note_path: str, line: int, block_id: str) -> None:
        path = self.resolve(note_path)
        lines = path.read_text(encoding="utf-8").split("\n")
        if not 0 <= line < len(lines):
            LOGGER.warning("Line %d out of range in %s, block id not written", line, note_path)
            return
        lines[line] = f"{lines[line]} ^{block_id}"
        atomic_write_text(path, "\n".join(lines))
        LOGGER.info("Added block id ^%s to %s:%d", block_id, note_path, line + 1)
