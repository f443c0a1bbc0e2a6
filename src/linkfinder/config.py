"""Application configuration defaults."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

from linkfinder.index.recent import MAX_BOOST_COUNT
from linkfinder.stemming.stemmers import DEFAULT_LANGUAGES


def _get_default_data_path() -> Path:
    """Get the default recent-notes ledger path based on execution context."""
    user_data = Path.home() / "Documents" / "LinkFinder" / "recent.json"

    if getattr(sys, "frozen", False):
        return user_data

    # When running from source, prefer local data/ if it exists
    local_data = Path("data/recent.json")
    if local_data.parent.exists():
        return local_data

    return user_data


@dataclass(slots=True)
class AppConfig:
    vault_path: Path | None = None
    data_path: Path | None = None
    search_non_existing_notes: bool = True
    languages: Tuple[str, ...] = DEFAULT_LANGUAGES
    boost_count: int = MAX_BOOST_COUNT

    def __post_init__(self) -> None:
        if self.data_path is None:
            self.data_path = _get_default_data_path()
        if self.boost_count < 0:
            raise ValueError("boost_count must not be negative")

    def resolve_data_path(self, base_dir: Path | None = None) -> Path:
        if self.data_path is None:
            self.data_path = _get_default_data_path()
        if Path(self.data_path).is_absolute() or base_dir is None:
            return Path(self.data_path)
        return base_dir / self.data_path

    def resolve_vault_path(self, base_dir: Path | None = None) -> Path:
        vault = Path(self.vault_path) if self.vault_path is not None else Path(".")
        if vault.is_absolute() or base_dir is None:
            return vault
        return base_dir / vault
