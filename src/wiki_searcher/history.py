"""Search history: newest-first, de-duplicated, capped, persisted on every change."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

from wiki_searcher.config import PreferenceStore
from wiki_searcher.models import HISTORY_MAX_ENTRIES, SEARCH_HISTORY_KEY, HistoryEntry

logger = logging.getLogger(__name__)


def _now_millis() -> int:
    return int(time.time() * 1000)


def parse_history(raw: Any, max_entries: int = HISTORY_MAX_ENTRIES) -> list[HistoryEntry]:
    """Deserialize a stored history array, dropping anything invalid.

    Non-list input yields an empty list. Elements without a non-empty string
    ``term`` or an integer ``timestamp`` are skipped, later duplicates of a
    term are dropped, and the result is capped at ``max_entries``.
    """
    if not isinstance(raw, list):
        if raw is not None:
            logger.warning("Stored history is %s, not a list; starting empty", type(raw))
        return []
    entries: list[HistoryEntry] = []
    seen: set[str] = set()
    for item in raw:
        if not isinstance(item, dict):
            continue
        term = item.get("term")
        timestamp = item.get("timestamp")
        if not isinstance(term, str) or not term.strip():
            continue
        if not isinstance(timestamp, int) or isinstance(timestamp, bool):
            continue
        if term in seen:
            continue
        seen.add(term)
        entries.append(HistoryEntry(term=term, timestamp=timestamp))
        if len(entries) >= max_entries:
            break
    return entries


class HistoryManager:
    """Ordered list of past search terms backed by a PreferenceStore."""

    def __init__(
        self,
        store: PreferenceStore,
        *,
        max_entries: int = HISTORY_MAX_ENTRIES,
        clock: Callable[[], int] = _now_millis,
    ) -> None:
        self._store = store
        self._max_entries = max_entries
        self._clock = clock
        self._entries: list[HistoryEntry] = []

    @property
    def entries(self) -> tuple[HistoryEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, term: object) -> bool:
        return any(entry.term == term for entry in self._entries)

    def recent(self, count: int) -> list[HistoryEntry]:
        """Return the ``count`` most recent entries."""
        return self._entries[: max(count, 0)]

    def load(self) -> list[HistoryEntry]:
        """Replace the in-memory list with the persisted one."""
        self._entries = parse_history(self._store.get(SEARCH_HISTORY_KEY), self._max_entries)
        return list(self._entries)

    def save(self) -> bool:
        """Persist the current list. Failures are logged, never raised."""
        payload = [entry.to_dict() for entry in self._entries]
        if not self._store.set(SEARCH_HISTORY_KEY, payload):
            logger.warning("Search history not persisted; keeping %d entries in memory", len(self))
            return False
        return True

    def record(self, term: str) -> HistoryEntry:
        """Move the trimmed ``term`` to the front with a fresh timestamp."""
        term = term.strip()
        if not term:
            raise ValueError("history term must be non-empty")
        entry = HistoryEntry(term=term, timestamp=self._clock())
        remaining = [e for e in self._entries if e.term != term]
        self._entries = [entry, *remaining][: self._max_entries]
        self.save()
        return entry

    def remove(self, term: str) -> bool:
        """Delete the entry for ``term``. Returns False if it was not present."""
        remaining = [e for e in self._entries if e.term != term]
        if len(remaining) == len(self._entries):
            return False
        self._entries = remaining
        self.save()
        return True

    def clear(self) -> None:
        self._entries = []
        self.save()


__all__ = [
    "HistoryManager",
    "parse_history",
]
