"""Durable JSON-backed list storage keyed by name."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any, Generic, TypeVar

from popcorn_browser.config import get_config_dir, write_json_atomic

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PersistedList(Generic[T]):
    """An ordered list stored under one logical key in ``<storage_dir>/<key>.json``.

    Reads tolerate a missing file (first run) and corrupt payloads, both of
    which yield an empty list. The first failed write switches the list to
    in-memory mode for the rest of the session; later saves are skipped so
    the UI never blocks on a broken disk.
    """

    def __init__(
        self,
        key: str,
        *,
        encode: Callable[[T], dict[str, Any]],
        decode: Callable[[dict[str, Any]], T],
        storage_dir: Path | None = None,
    ) -> None:
        self.key = key
        self._encode = encode
        self._decode = decode
        self._storage_dir = storage_dir
        self.available = True

    @property
    def path(self) -> Path:
        storage_dir = self._storage_dir if self._storage_dir is not None else get_config_dir()
        return storage_dir / f"{self.key}.json"

    def load(self) -> list[T]:
        """Return the persisted items, or an empty list if none can be read."""
        path = self.path
        if not path.exists():
            return []
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            logger.warning("Stored %r list has invalid JSON, starting empty: %s", self.key, e)
            return []
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read stored %r list, starting empty: %s", self.key, e)
            return []

        if not isinstance(raw, list):
            logger.warning("Stored %r list is not a JSON array, starting empty", self.key)
            return []

        items: list[T] = []
        for index, item in enumerate(raw):
            if not isinstance(item, dict):
                logger.warning("Skipping non-object %r entry at index %d", self.key, index)
                continue
            try:
                items.append(self._decode(item))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping malformed %r entry at index %d: %s", self.key, index, e)
        return items

    def save(self, items: list[T]) -> bool:
        """Persist the full ordered sequence.

        Returns True when the write reached disk, False when storage is
        unavailable (the caller keeps working from memory).
        """
        if not self.available:
            return False
        try:
            write_json_atomic(self.path, [self._encode(item) for item in items])
            return True
        except (OSError, TypeError, ValueError) as e:
            self.available = False
            logger.warning(
                "Failed to persist %r list, continuing in memory for this session: %s",
                self.key,
                e,
            )
            return False


__all__ = ["PersistedList"]
