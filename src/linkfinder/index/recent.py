"""Recently selected notes, used to boost search results."""

from __future__ import annotations

import threading
import time
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple, TypeVar

MAX_RECENT_COUNT = 1000
MAX_BOOST_COUNT = 3

T = TypeVar("T")


def now_millis() -> int:
    return int(time.time() * 1000)


class RecentNotes:
    """Bounded ledger of note title -> last selection time in milliseconds."""

    def __init__(
        self,
        data: Optional[Mapping[str, int]] = None,
        *,
        clock: Callable[[], int] = now_millis,
    ) -> None:
        self._entries: Dict[str, int] = dict(data or {})
        self._clock = clock
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, title: object) -> bool:
        return title in self._entries

    def record(self, title: str) -> None:
        """Store the selection time of ``title`` and prune the oldest entries."""
        timestamp = self._clock()
        with self._lock:
            self._entries.pop(title, None)
            self._entries[title] = timestamp
            self._prune()

    def boost_recent(
        self,
        results: Sequence[T],
        get_title: Callable[[T], str],
        count: int = MAX_BOOST_COUNT,
    ) -> Sequence[T]:
        """Move up to ``count`` recently used items to the front.

        Boosted items come first, newest first. Everything else, including
        recent items beyond ``count``, keeps its original relative order.
        When nothing in ``results`` is recent, ``results`` is returned as is.
        """
        titles = [get_title(item) for item in results]
        with self._lock:
            hits = [
                (index, self._entries[title])
                for index, title in enumerate(titles)
                if title in self._entries
            ]

        if not hits:
            return results

        hits.sort(key=lambda hit: hit[1], reverse=True)
        boosted_indices = [index for index, _ in hits[:count]]
        boosted_set = set(boosted_indices)
        boosted = [results[index] for index in boosted_indices]
        rest = [item for index, item in enumerate(results) if index not in boosted_set]
        return boosted + rest

    def entries(self) -> List[Tuple[str, int]]:
        """Ledger entries, most recent first."""
        with self._lock:
            items = list(self._entries.items())
        return sorted(items, key=lambda entry: entry[1], reverse=True)

    def to_json(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._entries)

    def _prune(self) -> None:
        if len(self._entries) <= MAX_RECENT_COUNT:
            return
        newest = sorted(self._entries.items(), key=lambda entry: entry[1], reverse=True)
        self._entries = dict(newest[:MAX_RECENT_COUNT])
