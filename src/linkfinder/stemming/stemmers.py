"""Stemmer implementations backed by the Snowball algorithms."""

from __future__ import annotations

import logging
from typing import Iterable, List, Protocol, Sequence

import snowballstemmer

DEFAULT_LANGUAGES = ("russian", "english")

LOGGER = logging.getLogger(__name__)


class Stemmer(Protocol):
    """Reduces a word to one or more stems."""

    def stem(self, word: str) -> List[str]: ...


class SnowballStemmer:
    """Single-language stemmer wrapping a ``snowballstemmer`` algorithm."""

    def __init__(self, language: str) -> None:
        if language not in snowballstemmer.algorithms():
            raise ValueError(f"Unsupported stemmer language: {language}")
        self.language = language
        self._algorithm = snowballstemmer.stemmer(language)

    def stem(self, word: str) -> List[str]:
        stemmed = self._algorithm.stemWord(self.normalize(word))
        # Never drop a non-empty word down to nothing.
        return [stemmed or word]

    def normalize(self, word: str) -> str:
        return word

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.language!r})"


class EnglishStemmer(SnowballStemmer):
    def __init__(self) -> None:
        super().__init__("english")


class RussianStemmer(SnowballStemmer):
    """Russian stemmer that folds ``ё`` into ``е`` first.

    The Snowball rules only know ``е``, so without folding ``костылём`` and
    ``костылем`` would stem differently.
    """

    def __init__(self) -> None:
        super().__init__("russian")

    def normalize(self, word: str) -> str:
        return word.replace("ё", "е").replace("Ё", "Е")


class CompositeStemmer:
    """Union of the stems produced by several stemmers, deduplicated."""

    def __init__(self, stemmers: Iterable[Stemmer]) -> None:
        self.stemmers: List[Stemmer] = list(stemmers)

    def stem(self, word: str) -> List[str]:
        stems: dict[str, None] = {}
        for stemmer in self.stemmers:
            for stem in stemmer.stem(word):
                stems.setdefault(stem)
        return list(stems)

    def __repr__(self) -> str:
        return f"CompositeStemmer({self.stemmers!r})"


_LANGUAGE_STEMMERS = {
    "english": EnglishStemmer,
    "russian": RussianStemmer,
}


def build_stemmer(languages: Sequence[str] = DEFAULT_LANGUAGES) -> CompositeStemmer:
    """Create the composite stemmer for the configured languages."""
    stemmers: List[Stemmer] = []
    for language in languages:
        factory = _LANGUAGE_STEMMERS.get(language.lower())
        if factory is None:
            raise ValueError(f"Unsupported stemmer language: {language}")
        stemmers.append(factory())
    LOGGER.debug("Stemmer languages: %s", ", ".join(languages) or "none")
    return CompositeStemmer(stemmers)
