"""Open-movie selection: detail loading, view title scope, rating, add-to-watched."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from popcorn_browser.fetching import DetailFetcher
from popcorn_browser.keys import KeyCommandListener, KeyCommandRegistry
from popcorn_browser.models import (
    DEFAULT_VIEW_TITLE,
    DETAIL_VIEW_TITLE_PREFIX,
    USER_RATING_MAX,
    USER_RATING_MIN,
    DetailRecord,
    DetailState,
    WatchedEntry,
)
from popcorn_browser.parsing import parse_catalog_rating, parse_runtime_minutes
from popcorn_browser.watchlist import WatchlistStore

logger = logging.getLogger(__name__)

CLOSE_DETAIL_KEY = "escape"


def build_watched_entry(
    detail: DetailRecord,
    user_rating: int,
    count_rating_decisions: int = 0,
    *,
    imdb_id: str | None = None,
) -> WatchedEntry:
    """Convert a detail record plus the user's rating into a watched entry.

    ``imdb_id`` keys the entry; it defaults to the record's own id.
    """
    return WatchedEntry(
        imdb_id=imdb_id or detail.imdb_id,
        title=detail.title,
        year=detail.year,
        poster=detail.poster,
        imdb_rating=parse_catalog_rating(detail.imdb_rating),
        runtime=parse_runtime_minutes(detail.runtime),
        user_rating=user_rating,
        count_rating_decisions=count_rating_decisions,
    )


def is_valid_user_rating(value: object) -> bool:
    return (
        isinstance(value, int)
        and not isinstance(value, bool)
        and USER_RATING_MIN <= value <= USER_RATING_MAX
    )


class TitleOverride:
    """Acquire/release bracket around the view title.

    ``release()`` is idempotent so every exit path can call it.
    """

    def __init__(
        self,
        apply_title: Callable[[str], None],
        default_title: str = DEFAULT_VIEW_TITLE,
    ) -> None:
        self._apply_title = apply_title
        self.default_title = default_title
        self.held = False

    def acquire(self, movie_title: str) -> None:
        if not movie_title:
            return
        self._apply_title(f"{DETAIL_VIEW_TITLE_PREFIX}{movie_title}")
        self.held = True

    def release(self) -> None:
        if not self.held:
            return
        self.held = False
        self._apply_title(self.default_title)


class SelectionController:
    """Owns the open-movie slot and everything scoped to it.

    Scoped to one selection: the loaded detail, the view title override,
    the "escape closes" key command, the pending user rating, and the
    rating decision counter. Changing or closing the selection ends the
    scope on every path.
    """

    def __init__(
        self,
        fetcher: DetailFetcher,
        store: WatchlistStore,
        title: TitleOverride,
        keys: KeyCommandRegistry | None = None,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self._fetcher = fetcher
        self._store = store
        self._title = title
        self._keys = keys
        self._on_change = on_change
        self._close_command: KeyCommandListener | None = None
        self.selected_id: str | None = None
        self.user_rating: int | None = None
        self.rating_decisions = 0
        fetcher.set_on_change(self._on_detail_state)

    def set_on_change(self, callback: Callable[[], None] | None) -> None:
        self._on_change = callback

    # -- read path ------------------------------------------------------

    @property
    def detail_state(self) -> DetailState:
        return self._fetcher.state

    @property
    def detail(self) -> DetailRecord | None:
        if self.selected_id is None or self._fetcher.imdb_id != self.selected_id:
            return None
        return self._fetcher.state.detail

    @property
    def is_watched(self) -> bool:
        return self.selected_id is not None and self._store.contains(self.selected_id)

    @property
    def watched_user_rating(self) -> int | None:
        if self.selected_id is None:
            return None
        entry = self._store.get(self.selected_id)
        return entry.user_rating if entry is not None else None

    @property
    def can_add(self) -> bool:
        return self.detail is not None and self.user_rating is not None and not self.is_watched

    # -- transitions ----------------------------------------------------

    def select(self, imdb_id: str) -> None:
        """Open ``imdb_id``; selecting the open movie again closes it."""
        if imdb_id == self.selected_id:
            self.close()
            return
        self._end_scope()
        self.selected_id = imdb_id
        self.user_rating = None
        self.rating_decisions = 0
        if self._keys is not None:
            self._close_command = self._keys.bind(
                CLOSE_DETAIL_KEY, self.close, description="Close movie"
            )
        logger.debug("Selected %s", imdb_id)
        self._fetcher.load(imdb_id)
        self._notify()

    def close(self) -> None:
        """Close the open movie, if any."""
        if self.selected_id is None:
            return
        self._end_scope()
        logger.debug("Closed %s", self.selected_id)
        self.selected_id = None
        self.user_rating = None
        self.rating_decisions = 0
        self._fetcher.load(None)
        self._notify()

    def set_user_rating(self, value: int) -> bool:
        """Record a committed rating from the star widget.

        Each distinct change counts as one rating decision.
        """
        if self.selected_id is None or not is_valid_user_rating(value):
            return False
        if value == self.user_rating:
            return False
        self.user_rating = value
        self.rating_decisions += 1
        self._notify()
        return True

    def handle_add(self) -> WatchedEntry | None:
        """Add the open movie to the watched list, then close it.

        Returns the stored entry, or None when nothing was added.
        """
        detail = self.detail
        if detail is None or self.user_rating is None:
            return None
        entry = build_watched_entry(
            detail, self.user_rating, self.rating_decisions, imdb_id=self.selected_id
        )
        added = self._store.add(entry)
        self.close()
        return entry if added else None

    def teardown(self) -> list[asyncio.Task[None]]:
        """Release everything scoped to the selection and stop fetching.

        Returns the detail lookups that were cancelled.
        """
        self._end_scope()
        return self._fetcher.close()

    # -- internals ------------------------------------------------------

    def _end_scope(self) -> None:
        self._title.release()
        command = self._close_command
        self._close_command = None
        if command is not None:
            command.release()

    def _on_detail_state(self, state: DetailState) -> None:
        if state.detail is not None and self._fetcher.imdb_id == self.selected_id:
            self._title.acquire(state.detail.title)
        elif not state.loading:
            self._title.release()
        self._notify()

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change()


__all__ = [
    "CLOSE_DETAIL_KEY",
    "SelectionController",
    "TitleOverride",
    "build_watched_entry",
    "is_valid_user_rating",
]
