"""Utility helpers for working with files."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Iterable, Iterator

MARKDOWN_SUFFIX = ".md"


def iter_markdown_paths(inputs: Iterable[Path]) -> Iterator[Path]:
    """Yield Markdown paths from input paths, descending into directories.

    Hidden directories (``.obsidian``, ``.git`` and the like) are skipped.
    """
    for item in inputs:
        if item.is_dir():
            children = sorted(
                child
                for child in item.rglob(f"*{MARKDOWN_SUFFIX}")
                if not any(part.startswith(".") for part in child.relative_to(item).parts)
            )
            yield from iter_markdown_paths(children)
        elif item.is_file() and item.suffix.lower() == MARKDOWN_SUFFIX:
            yield item


def iter_vault_files(root: Path) -> Iterator[Path]:
    """Yield every file under root outside hidden directories, attachments included."""
    for child in sorted(root.rglob("*")):
        if child.is_file() and not any(part.startswith(".") for part in child.relative_to(root).parts):
            yield child


def atomic_write_text(path: Path, text: str) -> None:
    """Write text through a temporary file so readers never see a partial file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            handle.write(text)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
