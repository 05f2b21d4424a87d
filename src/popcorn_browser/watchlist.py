"""Watched-list store with derived aggregate statistics."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

from popcorn_browser.models import WATCHED_STORAGE_KEY, WatchedEntry, WatchedSummary
from popcorn_browser.persistence import PersistedList

logger = logging.getLogger(__name__)


def _require_str(data: dict[str, Any], key: str) -> str:
    value = data[key]
    if not isinstance(value, str):
        raise TypeError(f"{key} must be a string")
    return value


def _require_number(data: dict[str, Any], key: str) -> float:
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"{key} must be a number")
    return value


def encode_watched_entry(entry: WatchedEntry) -> dict[str, Any]:
    """Serialize a watched entry using the stored field names."""
    return {
        "imdbID": entry.imdb_id,
        "title": entry.title,
        "year": entry.year,
        "poster": entry.poster,
        "imdbRating": entry.imdb_rating,
        "runtime": entry.runtime,
        "userRating": entry.user_rating,
        "countRatingDecision": entry.count_rating_decisions,
    }


def decode_watched_entry(data: dict[str, Any]) -> WatchedEntry:
    """Deserialize a stored entry.

    Raises:
        KeyError: A required field is missing.
        TypeError: A field has the wrong type.
        ValueError: The identifier is empty.
    """
    imdb_id = _require_str(data, "imdbID").strip()
    if not imdb_id:
        raise ValueError("imdbID must not be empty")
    decisions = data.get("countRatingDecision", 0)
    if isinstance(decisions, bool) or not isinstance(decisions, int):
        decisions = 0
    return WatchedEntry(
        imdb_id=imdb_id,
        title=_require_str(data, "title"),
        year=str(data.get("year", "")),
        poster=str(data.get("poster", "")),
        imdb_rating=float(_require_number(data, "imdbRating")),
        runtime=int(_require_number(data, "runtime")),
        user_rating=int(_require_number(data, "userRating")),
        count_rating_decisions=decisions,
    )


def _mean(values: Sequence[float]) -> float:
    """Arithmetic mean; an empty sequence averages to 0."""
    if not values:
        return 0.0
    return sum(values) / len(values)


def summarize(entries: Sequence[WatchedEntry]) -> WatchedSummary:
    """Compute watched-list aggregates from the canonical entries."""
    return WatchedSummary(
        count=len(entries),
        mean_imdb_rating=_mean([e.imdb_rating for e in entries]),
        mean_user_rating=_mean([e.user_rating for e in entries]),
        mean_runtime=_mean([e.runtime for e in entries]),
    )


class WatchlistStore:
    """Sole owner and mutator of the watched-entry collection.

    Every mutation is written through to storage before returning, so a read
    immediately after a write reflects it. Duplicate identifiers are
    rejected: the first stored entry (and its rating) wins.
    """

    def __init__(
        self,
        storage: PersistedList[WatchedEntry] | None = None,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self._storage = storage if storage is not None else build_watched_storage()
        self._on_change = on_change
        self._entries: list[WatchedEntry] = self._dedupe(self._storage.load())
        logger.debug("Watched list loaded: %d entries", len(self._entries))

    @staticmethod
    def _dedupe(entries: list[WatchedEntry]) -> list[WatchedEntry]:
        seen: set[str] = set()
        unique: list[WatchedEntry] = []
        for entry in entries:
            if entry.imdb_id in seen:
                logger.warning("Dropping duplicate stored watched entry %s", entry.imdb_id)
                continue
            seen.add(entry.imdb_id)
            unique.append(entry)
        return unique

    @property
    def persistent(self) -> bool:
        """False once storage has failed and the list lives in memory only."""
        return self._storage.available

    def set_on_change(self, callback: Callable[[], None] | None) -> None:
        self._on_change = callback

    def list(self) -> list[WatchedEntry]:
        """Return the entries in insertion order (a copy)."""
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def contains(self, imdb_id: str) -> bool:
        return any(entry.imdb_id == imdb_id for entry in self._entries)

    def get(self, imdb_id: str) -> WatchedEntry | None:
        for entry in self._entries:
            if entry.imdb_id == imdb_id:
                return entry
        return None

    def add(self, entry: WatchedEntry) -> bool:
        """Append an entry. Returns False (state unchanged) for a duplicate id."""
        if self.contains(entry.imdb_id):
            logger.info("Ignoring duplicate watched entry %s", entry.imdb_id)
            return False
        self._entries.append(entry)
        self._commit()
        return True

    def remove(self, imdb_id: str) -> bool:
        """Remove the entry with ``imdb_id``. Absent ids are a no-op (returns False)."""
        remaining = [entry for entry in self._entries if entry.imdb_id != imdb_id]
        if len(remaining) == len(self._entries):
            return False
        self._entries = remaining
        self._commit()
        return True

    def summary(self) -> WatchedSummary:
        return summarize(self._entries)

    def _commit(self) -> None:
        self._storage.save(self._entries)
        if self._on_change is not None:
            self._on_change()


def build_watched_storage(storage_dir: Path | None = None) -> PersistedList[WatchedEntry]:
    """Create the PersistedList backing the watched list."""
    return PersistedList(
        WATCHED_STORAGE_KEY,
        encode=encode_watched_entry,
        decode=decode_watched_entry,
        storage_dir=storage_dir,
    )


__all__ = [
    "WatchlistStore",
    "build_watched_storage",
    "decode_watched_entry",
    "encode_watched_entry",
    "summarize",
]
