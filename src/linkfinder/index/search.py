"""Morphological search over note titles and aliases."""

from __future__ import annotations

import logging
from typing import List, Sequence, Set

from linkfinder.models import NoteInfo, SearchResult
from linkfinder.stemming.stemmers import Stemmer
from linkfinder.utils.text import tokenize

QUERY_RATIO_WEIGHT = 0.5
SOURCE_RATIO_WEIGHT = 0.4
TITLE_BONUS = 0.1

LOGGER = logging.getLogger(__name__)


class NotesIndex:
    """In-memory index of notes, queried on every keystroke.

    All query words except the last must match by stem. The last word may
    still be being typed, so it also matches as a prefix of a source word
    or of one of its stems.
    """

    def __init__(self, notes: Sequence[NoteInfo], stemmer: Stemmer) -> None:
        self.notes = list(notes)
        self.stemmer = stemmer

    def __len__(self) -> int:
        return len(self.notes)

    def search(self, query: str) -> List[SearchResult]:
        query_tokens = tokenize(query)
        if not query_tokens:
            return []

        trailing = query_tokens[-1]
        anchor_stems = [set(self.stemmer.stem(token)) for token in query_tokens[:-1]]

        scored: list[tuple[float, SearchResult]] = []
        for note in self.notes:
            score, matched_alias = self._score_note(note, anchor_stems, trailing)
            if score > 0:
                scored.append((score, SearchResult(note=note, matched_alias=matched_alias)))

        scored.sort(key=lambda item: item[0], reverse=True)
        LOGGER.debug("Query %r matched %d of %d notes", query, len(scored), len(self.notes))
        return [result for _, result in scored]

    def _score_note(
        self, note: NoteInfo, anchor_stems: List[Set[str]], trailing: str
    ) -> tuple[float, str | None]:
        """Best score over the title and every alias.

        The title is scored first and aliases must beat it strictly, so a
        tie always goes to the title.
        """
        best_score = self._score_source(note.title, anchor_stems, trailing, is_title=True)
        matched_alias = None
        for alias in note.aliases:
            score = self._score_source(alias, anchor_stems, trailing, is_title=False)
            if score > best_score:
                best_score = score
                matched_alias = alias
        return best_score, matched_alias

    def _score_source(
        self,
        text: str,
        anchor_stems: List[Set[str]],
        trailing: str,
        *,
        is_title: bool,
    ) -> float:
        source_tokens = tokenize(text)
        if not source_tokens:
            return 0.0

        source_stems = [self.stemmer.stem(token) for token in source_tokens]

        anchor_matches = 0
        for query_stems in anchor_stems:
            if any(stem in query_stems for stems in source_stems for stem in stems):
                anchor_matches += 1

        trailing_matched = self._match_trailing(trailing, source_tokens, source_stems)

        matched_words = anchor_matches + (1 if trailing_matched else 0)
        if matched_words == 0:
            return 0.0

        query_ratio = matched_words / (len(anchor_stems) + 1)
        source_ratio = min(matched_words, len(source_tokens)) / len(source_tokens)
        title_bonus = TITLE_BONUS if is_title else 0.0
        return QUERY_RATIO_WEIGHT * query_ratio + SOURCE_RATIO_WEIGHT * source_ratio + title_bonus

    def _match_trailing(
        self, trailing: str, source_tokens: List[str], source_stems: List[List[str]]
    ) -> bool:
        if any(token.startswith(trailing) for token in source_tokens):
            return True
        if any(stem.startswith(trailing) for stems in source_stems for stem in stems):
            return True
        # A fully typed last word matches by stem as well.
        trailing_stems = set(self.stemmer.stem(trailing))
        return any(stem in trailing_stems for stems in source_stems for stem in stems)
