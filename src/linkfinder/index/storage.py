"""JSON persistence for the recent-notes ledger."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Callable, Dict

from linkfinder.index.recent import RecentNotes, now_millis
from linkfinder.utils.files import atomic_write_text

LOGGER = logging.getLogger(__name__)


class RecentNotesStore:
    """Loads and saves a ``title -> timestamp`` snapshot of the ledger."""

    def __init__(self, path: Path, *, clock: Callable[[], int] = now_millis) -> None:
        self.path = Path(path)
        self.clock = clock

    def load(self) -> RecentNotes:
        if not self.path.exists():
            return RecentNotes(clock=self.clock)

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except json.JSONDecodeError as exc:
            raise ValueError(f"Malformed recent notes file {self.path}: {exc}") from exc

        if not isinstance(raw, dict):
            raise ValueError(f"Recent notes file {self.path} must contain a JSON object")

        data: Dict[str, int] = {}
        for title, timestamp in raw.items():
            if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
                raise ValueError(f"Invalid timestamp for {title!r} in {self.path}")
            data[title] = int(timestamp)
        LOGGER.debug("Loaded %d recent notes from %s", len(data), self.path)
        return RecentNotes(data, clock=self.clock)

    def save(self, recent: RecentNotes) -> None:
        payload = json.dumps(recent.to_json(), ensure_ascii=False, indent=2)
        atomic_write_text(self.path, payload)
        LOGGER.debug("Saved %d recent notes to %s", len(recent), self.path)
