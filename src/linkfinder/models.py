"""Core LinkFinder data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal, Optional, Union


@dataclass(slots=True)
class NoteInfo:
    """A searchable note: title plus front matter aliases."""

    path: str
    title: str
    aliases: List[str] = field(default_factory=list)
    exists: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.title, str):
            raise TypeError(f"Note title must be a string, got {type(self.title).__name__} for {self.path!r}")
        for alias in self.aliases:
            if not isinstance(alias, str):
                raise TypeError(f"Note alias must be a string, got {type(alias).__name__} for {self.path!r}")


@dataclass(slots=True)
class SearchResult:
    """Ranked note, with the alias that won the match when it was not the title."""

    note: NoteInfo
    matched_alias: Optional[str] = None


@dataclass(slots=True)
class Heading:
    text: str
    level: int
    line: int


@dataclass(slots=True)
class BlockCandidate:
    """A linkable block of a note.

    ``line`` is the last line of the block, where a generated ``^id`` goes.
    """

    text: str
    line: int
    existing_id: Optional[str] = None


@dataclass(slots=True)
class NoteSuggestion:
    note: NoteInfo
    matched_alias: Optional[str] = None
    kind: Literal["note"] = "note"


@dataclass(slots=True)
class HeadingSuggestion:
    note: NoteInfo
    heading: str
    level: int
    kind: Literal["heading"] = "heading"


@dataclass(slots=True)
class BlockSuggestion:
    """Block reference suggestion.

    ``needs_write_line`` is set when the block has no id yet; the id is
    generated on selection and appended to that line.
    """

    note: NoteInfo
    block_text: str
    block_id: Optional[str] = None
    needs_write_line: Optional[int] = None
    kind: Literal["block"] = "block"


LinkSuggestion = Union[NoteSuggestion, HeadingSuggestion, BlockSuggestion]
