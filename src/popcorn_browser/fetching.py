"""Query- and selection-driven catalog fetchers with stale-response suppression.

Both fetchers follow the same request-token discipline: every new request
bumps a generation counter before its lookup starts, and a completion only
commits state if its captured generation is still current. Superseded
lookups are left to finish on their own; their results are discarded.
``close()`` cancels everything still in flight and blocks later commits.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Coroutine
from typing import Any, Generic, TypeVar

import httpx

from popcorn_browser.models import CandidateRecord, DetailRecord, DetailState, SearchState
from popcorn_browser.services.omdb_service import NoResultsError

logger = logging.getLogger(__name__)

SEARCH_FAILED_MESSAGE = "Something went wrong with fetching movies"
DETAIL_FAILED_MESSAGE = "Something went wrong with fetching movie details"

# Failures the fetch boundary turns into display-only error state.
TRANSPORT_ERRORS: tuple[type[BaseException], ...] = (httpx.HTTPError, ValueError, OSError)

SearchLookup = Callable[[str], Awaitable[list[CandidateRecord]]]
DetailLookup = Callable[[str], Awaitable[DetailRecord]]

S = TypeVar("S", SearchState, DetailState)


def _log_task_failure(task: asyncio.Task[None]) -> None:
    """Log unhandled exceptions from lookup tasks."""
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("Unhandled exception in lookup task: %s", exc, exc_info=exc)


class _GenerationalFetcher(Generic[S]):
    """Shared generation counter, task tracking, and commit gating."""

    def __init__(self, initial: S, on_change: Callable[[S], None] | None) -> None:
        self.state: S = initial
        self._on_change = on_change
        self._generation = 0
        self._tasks: set[asyncio.Task[None]] = set()
        self._closed = False

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def closed(self) -> bool:
        return self._closed

    def set_on_change(self, callback: Callable[[S], None] | None) -> None:
        self._on_change = callback

    def _next_generation(self) -> int:
        self._generation += 1
        return self._generation

    def _is_current(self, generation: int) -> bool:
        return not self._closed and generation == self._generation

    def _commit(self, state: S) -> None:
        if self._closed:
            return
        self.state = state
        if self._on_change is not None:
            self._on_change(state)

    def _commit_if_current(self, generation: int, state: S) -> bool:
        if not self._is_current(generation):
            logger.debug(
                "%s dropped stale response (generation %d, current %d)",
                type(self).__name__,
                generation,
                self._generation,
            )
            return False
        self._commit(state)
        return True

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> asyncio.Task[None]:
        """Create a lookup task and track it to prevent garbage collection."""
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        task.add_done_callback(_log_task_failure)
        return task

    @property
    def pending(self) -> int:
        """Number of lookups still running (including superseded ones)."""
        return sum(1 for task in self._tasks if not task.done())

    def close(self) -> list[asyncio.Task[None]]:
        """Tear down: suppress every later commit and cancel in-flight lookups.

        Returns the cancelled tasks so the caller can wait for them to finish.
        """
        self._closed = True
        self._generation += 1
        cancelled = [task for task in self._tasks if not task.done()]
        for task in cancelled:
            task.cancel()
        return cancelled


class SearchResultsFetcher(_GenerationalFetcher[SearchState]):
    """Turns the current query string into candidate results.

    An empty or whitespace-only query resolves immediately to an empty,
    idle state without touching the network. A catalog "no results" answer
    becomes an error message; transport failures become a generic one.
    """

    def __init__(
        self,
        lookup: SearchLookup,
        on_change: Callable[[SearchState], None] | None = None,
    ) -> None:
        super().__init__(SearchState(), on_change)
        self._lookup = lookup
        self.query = ""

    def set_query(self, query: str) -> asyncio.Task[None] | None:
        """Start tracking ``query``. Returns the lookup task, if one was started."""
        if self._closed:
            return None
        self.query = query
        generation = self._next_generation()
        if not query.strip():
            self._commit(SearchState())
            return None
        self._commit(SearchState(results=self.state.results, loading=True, error=None))
        return self._spawn(self._run(query, generation))

    def invalidate(self, query: str) -> None:
        """Retire every in-flight lookup for a query that has just changed.

        Used while a debounced lookup for ``query`` is pending: a blank query
        settles to the idle state at once, anything else shows as loading.
        """
        if self._closed:
            return
        self.query = query
        self._next_generation()
        if not query.strip():
            self._commit(SearchState())
        else:
            self._commit(SearchState(results=self.state.results, loading=True, error=None))

    async def _run(self, query: str, generation: int) -> None:
        try:
            records = await self._lookup(query)
        except NoResultsError as exc:
            self._commit_if_current(generation, SearchState(error=exc.message))
            return
        except TRANSPORT_ERRORS as exc:
            logger.warning("Search for %r failed: %s", query, exc, exc_info=True)
            self._commit_if_current(generation, SearchState(error=SEARCH_FAILED_MESSAGE))
            return
        except Exception:
            # Unexpected errors still clear loading, then reach the task's done-callback.
            self._commit_if_current(generation, SearchState(error=SEARCH_FAILED_MESSAGE))
            raise

        self._commit_if_current(generation, SearchState(results=tuple(records)))


class DetailFetcher(_GenerationalFetcher[DetailState]):
    """Turns the selected identifier into a full detail record."""

    def __init__(
        self,
        lookup: DetailLookup,
        on_change: Callable[[DetailState], None] | None = None,
    ) -> None:
        super().__init__(DetailState(), on_change)
        self._lookup = lookup
        self.imdb_id: str | None = None

    def load(self, imdb_id: str | None) -> asyncio.Task[None] | None:
        """Switch to ``imdb_id`` (None clears). Returns the lookup task, if any."""
        if self._closed:
            return None
        self.imdb_id = imdb_id
        generation = self._next_generation()
        if imdb_id is None:
            self._commit(DetailState())
            return None
        self._commit(DetailState(loading=True))
        return self._spawn(self._run(imdb_id, generation))

    def _is_current_for(self, imdb_id: str, generation: int) -> bool:
        return self._is_current(generation) and self.imdb_id == imdb_id

    async def _run(self, imdb_id: str, generation: int) -> None:
        try:
            record = await self._lookup(imdb_id)
        except TRANSPORT_ERRORS as exc:
            logger.warning("Detail lookup for %s failed: %s", imdb_id, exc, exc_info=True)
            if self._is_current_for(imdb_id, generation):
                self._commit(DetailState(error=DETAIL_FAILED_MESSAGE))
            return
        except Exception:
            if self._is_current_for(imdb_id, generation):
                self._commit(DetailState(error=DETAIL_FAILED_MESSAGE))
            raise

        if self._is_current_for(imdb_id, generation):
            self._commit(DetailState(detail=record))
        else:
            logger.debug("Dropped stale detail for %s (now %s)", imdb_id, self.imdb_id)


__all__ = [
    "DETAIL_FAILED_MESSAGE",
    "SEARCH_FAILED_MESSAGE",
    "TRANSPORT_ERRORS",
    "DetailFetcher",
    "SearchResultsFetcher",
]
