"""Tests for the morphological notes index."""

from __future__ import annotations

from typing import List

import pytest

from linkfinder.index.search import NotesIndex
from linkfinder.models import NoteInfo, SearchResult
from linkfinder.stemming.stemmers import CompositeStemmer, EnglishStemmer, RussianStemmer


def make_note(title: str, aliases: List[str] | None = None) -> NoteInfo:
    return NoteInfo(path=f"{title}.md", title=title, aliases=aliases or [])


class IdentityStemmer:
    def stem(self, word: str) -> List[str]:
        return [word]


@pytest.fixture(scope="module")
def stemmer() -> CompositeStemmer:
    return CompositeStemmer([RussianStemmer(), EnglishStemmer()])


def titles(results: List[SearchResult]) -> List[str]:
    return [result.note.title for result in results]


class TestExactMatch:
    """Exact title matches."""

    def test_exact_title(self, stemmer: CompositeStemmer) -> None:
        """Should find a note by its exact title."""
        index = NotesIndex([make_note("Деревянная коробка")], stemmer)

        results = index.search("Деревянная коробка")

        assert titles(results) == ["Деревянная коробка"]

    def test_exact_title_case_insensitive(self, stemmer: CompositeStemmer) -> None:
        """Should ignore case."""
        index = NotesIndex([make_note("Wooden box")], stemmer)

        results = index.search("wooden BOX")

        assert titles(results) == ["Wooden box"]


class TestWordForms:
    """Stem-based matching."""

    def test_inflected_query(self, stemmer: CompositeStemmer) -> None:
        """Should match other grammatical forms of every word."""
        index = NotesIndex([make_note("Деревянная коробка")], stemmer)

        assert len(index.search("деревянную коробку")) == 1
        assert len(index.search("деревянной коробкой")) == 1

    def test_single_inflected_word(self, stemmer: CompositeStemmer) -> None:
        """Should match a single word in another form."""
        index = NotesIndex([make_note("Деревянная коробка")], stemmer)

        assert len(index.search("коробку")) == 1

    def test_english_word_forms(self, stemmer: CompositeStemmer) -> None:
        """Should match English word forms."""
        index = NotesIndex([make_note("Running shoes")], stemmer)

        assert len(index.search("run shoe")) == 1

    def test_word_order_independent(self, stemmer: CompositeStemmer) -> None:
        """Should match words in reversed order."""
        index = NotesIndex([make_note("Деревянная коробка")], stemmer)

        assert len(index.search("коробку деревянную")) == 1
        assert len(index.search("box wooden")) == 0
        assert len(NotesIndex([make_note("Wooden box")], stemmer).search("box wooden")) == 1


class TestPrefixMatch:
    """The last query word may be incomplete."""

    def test_last_word_prefix(self, stemmer: CompositeStemmer) -> None:
        """Should match when the last word is a prefix."""
        index = NotesIndex([make_note("Деревянная коробка")], stemmer)

        assert len(index.search("деревянную кор")) == 1

    def test_single_prefix(self, stemmer: CompositeStemmer) -> None:
        """Should match a lone prefix."""
        index = NotesIndex([make_note("Деревянная коробка")], stemmer)

        assert len(index.search("кор")) == 1

    def test_english_prefix(self, stemmer: CompositeStemmer) -> None:
        """Should match an English prefix."""
        index = NotesIndex([make_note("Running shoes")], stemmer)

        assert len(index.search("run sho")) == 1

    def test_prefix_without_match(self, stemmer: CompositeStemmer) -> None:
        """Should not match an unrelated prefix."""
        index = NotesIndex([make_note("Деревянная коробка")], stemmer)

        assert index.search("металл") == []

    def test_anchor_words_are_not_prefixes(self) -> None:
        """Should require full stem equality for all but the last word."""
        index = NotesIndex([make_note("wooden box")], IdentityStemmer())

        score, _ = index._score_note(index.notes[0], [{"woo"}], "box")

        # Only "box" matched: half of the query and half of the title.
        assert score == pytest.approx(0.5 * 1 / 2 + 0.4 * 1 / 2 + 0.1)


class TestAliases:
    """Alias matching."""

    def test_alias_match(self, stemmer: CompositeStemmer) -> None:
        """Should report the matching alias."""
        index = NotesIndex([make_note("Main title", ["Альтернативное название"])], stemmer)

        results = index.search("альтернативное название")

        assert titles(results) == ["Main title"]
        assert results[0].matched_alias == "Альтернативное название"

    def test_alias_word_forms(self, stemmer: CompositeStemmer) -> None:
        """Should match alias word forms."""
        index = NotesIndex([make_note("Main title", ["Деревянная коробка"])], stemmer)

        results = index.search("деревянную коробку")

        assert results[0].matched_alias == "Деревянная коробка"

    def test_title_match_has_no_alias(self, stemmer: CompositeStemmer) -> None:
        """Should not set matched_alias when the title matched."""
        index = NotesIndex([make_note("Деревянная коробка", ["Alias"])], stemmer)

        results = index.search("деревянную коробку")

        assert results[0].matched_alias is None

    def test_title_wins_tie_with_identical_alias(self, stemmer: CompositeStemmer) -> None:
        """Should prefer the title over an alias with the same text."""
        index = NotesIndex([make_note("Wooden box", ["Wooden box"])], stemmer)

        results = index.search("wooden box")

        assert results[0].matched_alias is None

    def test_best_alias_is_reported(self, stemmer: CompositeStemmer) -> None:
        """Should report the alias with the highest score."""
        index = NotesIndex(
            [make_note("Other", ["Wooden garden box", "Wooden box"])],
            stemmer,
        )

        results = index.search("wooden box")

        assert results[0].matched_alias == "Wooden box"


class TestNoMatches:
    """Degenerate input."""

    @pytest.mark.parametrize("query", ["", "   ", "\t", "--- ,,,"])
    def test_tokenless_query(self, stemmer: CompositeStemmer, query: str) -> None:
        """Should return nothing for queries without words."""
        index = NotesIndex([make_note("Деревянная коробка")], stemmer)

        assert index.search(query) == []

    def test_no_matching_notes(self, stemmer: CompositeStemmer) -> None:
        """Should return an empty list when nothing matches."""
        index = NotesIndex([make_note("Деревянная коробка")], stemmer)

        assert index.search("металлический стул") == []

    def test_empty_corpus(self, stemmer: CompositeStemmer) -> None:
        """Should handle an empty corpus."""
        assert NotesIndex([], stemmer).search("anything") == []

    def test_note_with_empty_title(self, stemmer: CompositeStemmer) -> None:
        """Should skip sources without words."""
        index = NotesIndex([make_note("", ["Wooden box"]), make_note("!!!")], stemmer)

        results = index.search("box")

        assert [result.note.path for result in results] == [".md"]
        assert results[0].matched_alias == "Wooden box"

    def test_zero_stemmers_still_match_literally(self) -> None:
        """Should fall back to literal prefix matching without stemmers."""
        index = NotesIndex([make_note("Wooden box")], CompositeStemmer([]))

        assert titles(index.search("woo")) == ["Wooden box"]
        assert titles(index.search("wooden bo")) == ["Wooden box"]
        assert index.search("boxes") == []


class TestRanking:
    """Relevance ordering."""

    def test_full_match_beats_partial(self, stemmer: CompositeStemmer) -> None:
        """Should rank a note matching every word first."""
        index = NotesIndex([make_note("Box"), make_note("Wooden box")], stemmer)

        results = index.search("wooden boxes")

        assert titles(results) == ["Wooden box", "Box"]

    def test_full_match_beats_partial_russian(self, stemmer: CompositeStemmer) -> None:
        """Should rank the two-word match above the one-word match."""
        index = NotesIndex([make_note("Деревянная коробка"), make_note("Коробка")], stemmer)

        results = index.search("деревянную коробку")

        assert titles(results)[0] == "Деревянная коробка"

    def test_title_beats_alias(self, stemmer: CompositeStemmer) -> None:
        """Should rank a title match above an identical alias match."""
        index = NotesIndex(
            [
                make_note("Другое название", ["Деревянная коробка"]),
                make_note("Деревянная коробка"),
            ],
            stemmer,
        )

        results = index.search("деревянную коробку")

        assert titles(results) == ["Деревянная коробка", "Другое название"]

    def test_shorter_source_ranks_higher(self, stemmer: CompositeStemmer) -> None:
        """Should prefer titles not diluted by extra words."""
        index = NotesIndex(
            [make_note("Box of old letters from grandmother"), make_note("Box")],
            stemmer,
        )

        results = index.search("box")

        assert titles(results) == ["Box", "Box of old letters from grandmother"]

    def test_ties_keep_input_order(self, stemmer: CompositeStemmer) -> None:
        """Should keep corpus order for equal scores."""
        index = NotesIndex(
            [make_note("Деревянная коробка"), make_note("Картонная коробка"), make_note("Деревянный стул")],
            stemmer,
        )

        results = index.search("коробку")

        assert titles(results) == ["Деревянная коробка", "Картонная коробка"]

    def test_score_weights(self) -> None:
        """Should combine query ratio, source ratio and title bonus."""
        index = NotesIndex([make_note("alpha beta gamma delta")], IdentityStemmer())

        score, alias = index._score_note(index.notes[0], [{"alpha"}, {"zeta"}], "bet")

        # 2 of 3 query words matched, 2 of 4 source words used, title bonus.
        assert score == pytest.approx(0.5 * 2 / 3 + 0.4 * 2 / 4 + 0.1)
        assert alias is None
