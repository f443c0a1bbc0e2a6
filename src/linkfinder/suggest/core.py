"""Link suggestions shared by the CLI and the web app.

Turns a raw wikilink query into note, heading or block suggestions and
builds the final ``[[target|display]]`` text for a chosen suggestion.
"""

from __future__ import annotations

import logging
import random
from typing import Callable, List, Optional, Protocol, Sequence, Set

from linkfinder.index.recent import MAX_BOOST_COUNT, RecentNotes
from linkfinder.index.search import NotesIndex
from linkfinder.models import (
    BlockCandidate,
    BlockSuggestion,
    Heading,
    HeadingSuggestion,
    LinkSuggestion,
    NoteInfo,
    NoteSuggestion,
)
from linkfinder.query.parser import ParsedQuery, parse_query
from linkfinder.stemming.stemmers import Stemmer

BLOCK_ID_LENGTH = 6
BLOCK_ID_CHARS = "0123456789abcdef"

LOGGER = logging.getLogger(__name__)


class NoteSource(Protocol):
    async def get_headings(self, note_path: str) -> List[Heading]: ...

    async def get_block_candidates(self, note_path: str) -> List[BlockCandidate]: ...

    def collect_block_ids(self) -> Set[str]: ...

    async def append_block_id(self, note_path: str, line: int, block_id: str) -> None: ...


class LinkSuggestCore:
    """Query parsing, morphological search, sub-link resolution and link building.

    ``prebuilt_index`` is reused for every query when given; otherwise a
    fresh index is built from ``collect_notes`` on each call.
    """

    def __init__(
        self,
        *,
        source: NoteSource,
        collect_notes: Callable[[], List[NoteInfo]],
        stemmer: Stemmer,
        recent_notes: RecentNotes,
        prebuilt_index: Optional[NotesIndex] = None,
        boost_count: int = MAX_BOOST_COUNT,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.source = source
        self.collect_notes = collect_notes
        self.stemmer = stemmer
        self.recent_notes = recent_notes
        self.boost_count = boost_count
        self._cached_index = prebuilt_index
        self._rng = rng or random.Random()

    # ----- Suggestions -----

    async def get_suggestions(
        self, query: str, selected_note: Optional[NoteInfo] = None
    ) -> List[LinkSuggestion]:
        if not query.strip():
            return self.get_recent_suggestions()

        parsed = parse_query(query)
        if parsed.has_sub_link:
            return await self._get_sub_link_suggestions(parsed, selected_note)
        return self.get_note_suggestions(parsed.note_part)

    def get_note_suggestions(self, note_part: str) -> List[LinkSuggestion]:
        results = self._get_index().search(note_part)
        suggestions: List[LinkSuggestion] = [
            NoteSuggestion(note=result.note, matched_alias=result.matched_alias)
            for result in results
        ]
        return list(
            self.recent_notes.boost_recent(suggestions, self.get_note_title, self.boost_count)
        )

    def get_recent_suggestions(self) -> List[LinkSuggestion]:
        """Most recently selected notes that still exist in the corpus."""
        notes_by_title = {note.title: note for note in self.collect_notes()}
        suggestions: List[LinkSuggestion] = []
        for title, _ in self.recent_notes.entries():
            if len(suggestions) >= self.boost_count:
                break
            note = notes_by_title.get(title)
            if note is not None:
                suggestions.append(NoteSuggestion(note=note))
        return suggestions

    def search_texts(self, texts: Sequence[str], query: str) -> List[int]:
        """Morphological search over plain strings; returns matching indices by rank."""
        notes = [NoteInfo(path=str(index), title=text) for index, text in enumerate(texts)]
        results = NotesIndex(notes, self.stemmer).search(query)
        return [int(result.note.path) for result in results]

    # ----- Link building -----

    def build_link(
        self,
        item: LinkSuggestion,
        raw_query: str,
        as_typed: bool = False,
        explicit_display: Optional[str] = None,
    ) -> str:
        """Build ``[[target|display]]`` for a chosen suggestion.

        ``explicit_display`` overrides the display text derived from the
        query, e.g. to keep the display text of a link being edited.
        """
        if as_typed:
            return self.build_raw_link(raw_query)

        display = explicit_display if explicit_display is not None else self.get_display_text(raw_query)
        target = self.get_link_target(item)
        if not display:
            return f"[[{target}]]"
        return f"[[{target}|{display}]]"

    @staticmethod
    def build_raw_link(raw_query: str) -> str:
        raw = raw_query.strip()
        return f"[[{raw}|{raw}]]"

    @staticmethod
    def get_note_title(item: LinkSuggestion) -> str:
        return item.note.title

    @staticmethod
    def get_link_target(item: LinkSuggestion) -> str:
        if isinstance(item, HeadingSuggestion):
            return f"{item.note.title}#{item.heading}"
        if isinstance(item, BlockSuggestion):
            return f"{item.note.title}#^{item.block_id}"
        return item.note.title

    @staticmethod
    def get_display_text(raw_query: str) -> str:
        """What the user was saying: explicit ``|display``, else the note part.

        Heading and block filters are navigation, not display text, so
        ``note#heading`` displays as ``note``.
        """
        parsed = parse_query(raw_query)
        if parsed.display_part is not None and parsed.display_part.strip():
            return parsed.display_part.strip()
        return parsed.note_part.strip()

    # ----- Block ids -----

    def prepare_block_id(self, item: LinkSuggestion) -> None:
        """Assign a vault-unique id to a block suggestion that has none yet."""
        if not isinstance(item, BlockSuggestion) or item.block_id or item.needs_write_line is None:
            return
        item.block_id = self.generate_unique_block_id(self.source.collect_block_ids())

    async def write_block_id_if_needed(self, item: LinkSuggestion) -> None:
        """Append `` ^id`` to the block's line. Call ``prepare_block_id`` first."""
        if (
            not isinstance(item, BlockSuggestion)
            or item.needs_write_line is None
            or not item.block_id
            or not item.note.exists
        ):
            return
        await self.source.append_block_id(item.note.path, item.needs_write_line, item.block_id)

    def generate_unique_block_id(self, existing_ids: Set[str]) -> str:
        while True:
            block_id = "".join(self._rng.choice(BLOCK_ID_CHARS) for _ in range(BLOCK_ID_LENGTH))
            if block_id not in existing_ids:
                existing_ids.add(block_id)
                return block_id
            LOGGER.debug("Block id %s already taken, regenerating", block_id)

    # ----- Private helpers -----

    def _get_index(self) -> NotesIndex:
        if self._cached_index is not None:
            return self._cached_index
        return NotesIndex(self.collect_notes(), self.stemmer)

    async def _get_sub_link_suggestions(
        self, parsed: ParsedQuery, selected_note: Optional[NoteInfo]
    ) -> List[LinkSuggestion]:
        """Resolve the target note, then list its headings or blocks."""
        if parsed.note_part.strip():
            note_results = self.get_note_suggestions(parsed.note_part)
        else:
            note_results = self.get_recent_suggestions()

        best_note = selected_note or (note_results[0].note if note_results else None)
        if best_note is None:
            return []
        if not best_note.exists:
            return note_results

        if parsed.heading_part is not None:
            headings = await self.source.get_headings(best_note.path)
            return self._filter_headings(best_note, headings, parsed.heading_part)
        if parsed.block_part is not None:
            blocks = await self.source.get_block_candidates(best_note.path)
            return self._filter_blocks(best_note, blocks, parsed.block_part)
        return note_results

    def _filter_headings(
        self, note: NoteInfo, headings: List[Heading], query: str
    ) -> List[LinkSuggestion]:
        if not query.strip():
            order = list(range(len(headings)))
        else:
            order = self.search_texts([heading.text for heading in headings], query)
        return [
            HeadingSuggestion(note=note, heading=headings[i].text, level=headings[i].level)
            for i in order
        ]

    def _filter_blocks(
        self, note: NoteInfo, blocks: List[BlockCandidate], query: str
    ) -> List[LinkSuggestion]:
        if not query.strip():
            order = list(range(len(blocks)))
        else:
            # Existing ids are searchable too, so typing an id finds its block.
            texts = [
                f"{block.text} {block.existing_id}" if block.existing_id else block.text
                for block in blocks
            ]
            order = self.search_texts(texts, query)

        suggestions: List[LinkSuggestion] = []
        for i in order:
            block = blocks[i]
            if block.existing_id:
                suggestions.append(
                    BlockSuggestion(note=note, block_text=block.text, block_id=block.existing_id)
                )
            else:
                suggestions.append(
                    BlockSuggestion(note=note, block_text=block.text, needs_write_line=block.line)
                )
        return suggestions
