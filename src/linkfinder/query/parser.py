"""Wikilink query parsing.

A raw query such as ``note#heading|display`` is split into the part used
for note search, an optional heading or block filter and an optional
display text.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(slots=True)
class ParsedQuery:
    """Parts of a wikilink query.

    ``heading_part`` and ``block_part`` are never both set. Optional parts
    are ``None`` when their delimiter is absent and ``""`` when it is present
    with nothing after it.
    """

    note_part: str
    heading_part: Optional[str] = None
    block_part: Optional[str] = None
    display_part: Optional[str] = None

    @property
    def has_sub_link(self) -> bool:
        return self.heading_part is not None or self.block_part is not None


def parse_query(raw: str) -> ParsedQuery:
    """Split ``raw`` on its delimiters.

    ``|`` is handled first and everything after it is display text. Within
    the link target, whichever of ``#`` and ``^`` comes first wins and the
    rest of the target is taken verbatim.
    """
    link_target, pipe, display = raw.partition("|")
    display_part = display if pipe else None

    hash_idx = link_target.find("#")
    caret_idx = link_target.find("^")

    if hash_idx != -1 and (caret_idx == -1 or hash_idx < caret_idx):
        return ParsedQuery(
            note_part=link_target[:hash_idx],
            heading_part=link_target[hash_idx + 1 :],
            display_part=display_part,
        )
    if caret_idx != -1:
        return ParsedQuery(
            note_part=link_target[:caret_idx],
            block_part=link_target[caret_idx + 1 :],
            display_part=display_part,
        )
    return ParsedQuery(note_part=link_target, display_part=display_part)
