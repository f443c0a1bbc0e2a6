"""Markdown scanning: front matter, headings, blocks and wikilinks.

Front matter is YAML between ``---`` lines at the very top of a note::

    ---
    aliases: [Wooden box, Crate]
    ---
    # Heading

    Paragraph text ^blockid
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple

import yaml

from linkfinder.models import BlockCandidate, Heading

FRONT_MATTER_DELIMITER = "---"
BLOCK_TEXT_MAX_LENGTH = 120

_HEADING_RE = re.compile(r"^(#{1,6})\s+(.+?)\s*$")
_FENCE_RE = re.compile(r"^\s*(```|~~~)")
_LIST_ITEM_RE = re.compile(r"^\s*(?:[-*+]|\d+[.)])\s+")
_BLOCK_ID_RE = re.compile(r"(?:^|\s)\^([A-Za-z0-9-]+)\s*$")
_WIKILINK_RE = re.compile(r"\[\[([^\[\]]+?)\]\]")

LOGGER = logging.getLogger(__name__)


def split_front_matter(lines: List[str]) -> Tuple[Optional[str], int]:
    """Return the raw front matter text and the index of the first body line."""
    if not lines or lines[0].strip() != FRONT_MATTER_DELIMITER:
        return None, 0
    for index in range(1, len(lines)):
        if lines[index].strip() == FRONT_MATTER_DELIMITER:
            return "\n".join(lines[1:index]), index + 1
    return None, 0


def parse_front_matter(content: str, *, source: str = "<note>") -> Dict[str, Any]:
    """Parse YAML front matter into a dict.

    Invalid YAML or a non-mapping document yields an empty dict.
    """
    yaml_text, _ = split_front_matter(content.split("\n"))
    if yaml_text is None:
        return {}
    try:
        metadata = yaml.safe_load(yaml_text) or {}
    except yaml.YAMLError as exc:
        LOGGER.warning("Invalid front matter in %s: %s", source, exc)
        return {}
    if not isinstance(metadata, dict):
        return {}
    return metadata


def extract_aliases(metadata: Dict[str, Any]) -> List[str]:
    """Aliases from front matter: a list of strings or a single string."""
    raw = metadata.get("aliases")
    if isinstance(raw, str):
        return [raw]
    if isinstance(raw, list):
        return [alias for alias in raw if isinstance(alias, str)]
    return []


def iter_headings(content: str) -> Iterator[Heading]:
    lines = content.split("\n")
    _, start = split_front_matter(lines)
    in_fence = False
    for index in range(start, len(lines)):
        line = lines[index]
        if _FENCE_RE.match(line):
            in_fence = not in_fence
            continue
        if in_fence:
            continue
        match = _HEADING_RE.match(line)
        if match and match.group(2):
            yield Heading(text=match.group(2), level=len(match.group(1)), line=index)


def iter_blocks(content: str) -> Iterator[BlockCandidate]:
    """Yield one candidate per paragraph, list item, heading and code block."""
    lines = content.split("\n")
    _, index = split_front_matter(lines)
    total = len(lines)

    while index < total:
        line = lines[index]
        if not line.strip():
            index += 1
            continue

        if _FENCE_RE.match(line):
            end = index + 1
            while end < total and not _FENCE_RE.match(lines[end]):
                end += 1
            end = min(end, total - 1)
        elif _HEADING_RE.match(line):
            end = index
        elif _LIST_ITEM_RE.match(line):
            end = index
            while end + 1 < total and _is_continuation(lines[end + 1], list_item=True):
                end += 1
        else:
            end = index
            while end + 1 < total and _is_continuation(lines[end + 1], list_item=False):
                end += 1

        yield _make_block(lines[index], lines[end], end)
        index = end + 1


def _is_continuation(line: str, *, list_item: bool) -> bool:
    if not line.strip() or _FENCE_RE.match(line) or _HEADING_RE.match(line):
        return False
    if _LIST_ITEM_RE.match(line):
        return False
    if list_item:
        return line[:1].isspace()
    return True


def _make_block(first_line: str, last_line: str, end: int) -> BlockCandidate:
    match = _BLOCK_ID_RE.search(last_line)
    existing_id = match.group(1) if match else None
    preview = first_line.strip()
    if existing_id:
        preview = re.sub(rf"\s*\^{re.escape(existing_id)}$", "", preview)
    return BlockCandidate(
        text=preview[:BLOCK_TEXT_MAX_LENGTH],
        line=end,
        existing_id=existing_id,
    )


def find_block_ids(content: str) -> Set[str]:
    ids: Set[str] = set()
    for line in content.split("\n"):
        match = _BLOCK_ID_RE.search(line)
        if match:
            ids.add(match.group(1))
    return ids


def iter_wikilink_targets(content: str) -> Iterator[str]:
    """Yield note targets of ``[[target#sub|display]]`` links outside code fences."""
    in_fence = False
    for line in content.split("\n"):
        if _FENCE_RE.match(line):
            in_fence = not in_fence
            continue
        if in_fence:
            continue
        for match in _WIKILINK_RE.finditer(line):
            target = re.split(r"[|#^]", match.group(1), maxsplit=1)[0].strip()
            if target:
                yield target
