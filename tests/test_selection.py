"""Tests for the open-movie selection controller."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from popcorn_browser.fetching import DetailFetcher
from popcorn_browser.keys import KeyCommandRegistry
from popcorn_browser.models import DEFAULT_VIEW_TITLE
from popcorn_browser.selection import (
    CLOSE_DETAIL_KEY,
    SelectionController,
    TitleOverride,
    build_watched_entry,
    is_valid_user_rating,
)


async def _settle() -> None:
    for _ in range(5):
        await asyncio.sleep(0)


class FakeCatalog:
    """Detail lookup answering immediately from a dict."""

    def __init__(self, details) -> None:
        self.details = {detail.imdb_id: detail for detail in details}
        self.calls: list[str] = []

    async def __call__(self, imdb_id: str):
        self.calls.append(imdb_id)
        if imdb_id not in self.details:
            raise httpx.ConnectError("offline")
        return self.details[imdb_id]


@pytest.fixture
def titles() -> list[str]:
    return []


@pytest.fixture
def build_controller(make_store, make_detail, titles):
    def _build(*details):
        catalog = FakeCatalog(details or (make_detail(),))
        keys = KeyCommandRegistry()
        store = make_store()
        controller = SelectionController(
            DetailFetcher(catalog),
            store,
            TitleOverride(titles.append, DEFAULT_VIEW_TITLE),
            keys=keys,
        )
        return controller, store, keys, catalog

    return _build


class TestBuildWatchedEntry:
    def test_explicit_id_overrides_record_id(self, make_detail):
        entry = build_watched_entry(make_detail("tt9999999"), 6, imdb_id="tt1375666")
        assert entry.imdb_id == "tt1375666"

    def test_inception_conversion(self, make_detail):
        entry = build_watched_entry(make_detail(), 8, 2)
        assert entry.imdb_id == "tt1375666"
        assert entry.runtime == 148
        assert entry.imdb_rating == pytest.approx(8.8)
        assert entry.user_rating == 8
        assert entry.count_rating_decisions == 2
        assert entry.year == "2010"

    def test_unknown_values_become_zero(self, make_detail):
        entry = build_watched_entry(make_detail(runtime="N/A", imdb_rating="N/A"), 5)
        assert entry.runtime == 0
        assert entry.imdb_rating == 0.0

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(1, True), (10, True), (0, False), (11, False), (True, False), (7.5, False)],
    )
    def test_is_valid_user_rating(self, value, expected):
        assert is_valid_user_rating(value) is expected


class TestTitleOverride:
    def test_acquire_and_release(self, titles):
        override = TitleOverride(titles.append)
        override.acquire("Inception")
        override.release()
        override.release()
        assert titles == ["Movie | Inception", DEFAULT_VIEW_TITLE]

    def test_empty_title_is_not_applied(self, titles):
        override = TitleOverride(titles.append)
        override.acquire("")
        override.release()
        assert titles == []
        assert override.held is False


class TestSelectionController:
    async def test_select_loads_detail_and_sets_title(self, build_controller, titles):
        controller, _, _, catalog = build_controller()

        controller.select("tt1375666")
        assert controller.detail_state.loading is True
        await _settle()

        assert catalog.calls == ["tt1375666"]
        assert controller.detail.title == "Inception"
        assert titles == ["Movie | Inception"]

    async def test_selecting_open_id_toggles_closed(self, build_controller, titles):
        controller, _, _, _ = build_controller()
        controller.select("tt1375666")
        await _settle()

        controller.select("tt1375666")

        assert controller.selected_id is None
        assert controller.detail is None
        assert titles[-1] == DEFAULT_VIEW_TITLE

    async def test_switching_selection_resets_scope(self, build_controller, make_detail, titles):
        controller, _, _, _ = build_controller(
            make_detail("tt1", title="One"), make_detail("tt2", title="Two")
        )
        controller.select("tt1")
        await _settle()
        controller.set_user_rating(6)

        controller.select("tt2")

        assert controller.user_rating is None
        assert controller.rating_decisions == 0
        assert titles[-1] == DEFAULT_VIEW_TITLE
        await _settle()
        assert titles[-1] == "Movie | Two"

    async def test_escape_command_is_scoped_to_selection(self, build_controller):
        controller, _, keys, _ = build_controller()
        assert keys.listeners_for(CLOSE_DETAIL_KEY) == []

        controller.select("tt1375666")
        await _settle()
        assert len(keys.listeners_for(CLOSE_DETAIL_KEY)) == 1

        assert keys.dispatch(CLOSE_DETAIL_KEY) is True
        assert controller.selected_id is None
        assert keys.listeners_for(CLOSE_DETAIL_KEY) == []

    async def test_switching_keeps_a_single_close_command(self, build_controller, make_detail):
        controller, _, keys, _ = build_controller(make_detail("tt1"), make_detail("tt2"))
        controller.select("tt1")
        controller.select("tt2")
        assert len(keys.listeners_for(CLOSE_DETAIL_KEY)) == 1

    async def test_rating_decisions_count_distinct_changes(self, build_controller):
        controller, _, _, _ = build_controller()
        controller.select("tt1375666")
        await _settle()

        assert controller.set_user_rating(5) is True
        assert controller.set_user_rating(5) is False
        assert controller.set_user_rating(8) is True
        assert controller.set_user_rating(0) is False

        assert controller.user_rating == 8
        assert controller.rating_decisions == 2

    async def test_rating_without_selection_is_ignored(self, build_controller):
        controller, _, _, _ = build_controller()
        assert controller.set_user_rating(7) is False
        assert controller.rating_decisions == 0

    async def test_handle_add_inception_scenario(self, build_controller, titles):
        controller, store, keys, _ = build_controller()
        controller.select("tt1375666")
        await _settle()
        controller.set_user_rating(8)
        assert controller.can_add is True

        entry = controller.handle_add()

        assert entry is not None
        stored = store.get("tt1375666")
        assert stored.runtime == 148
        assert stored.user_rating == 8
        assert stored.count_rating_decisions == 1
        assert controller.selected_id is None
        assert titles[-1] == DEFAULT_VIEW_TITLE
        assert keys.listeners_for(CLOSE_DETAIL_KEY) == []

    async def test_handle_add_requires_rating(self, build_controller):
        controller, store, _, _ = build_controller()
        controller.select("tt1375666")
        await _settle()

        assert controller.handle_add() is None
        assert len(store) == 0
        assert controller.selected_id == "tt1375666"

    async def test_watched_movie_exposes_stored_rating(self, build_controller, make_entry):
        controller, store, _, _ = build_controller()
        store.add(make_entry("tt1375666", user_rating=9))

        controller.select("tt1375666")
        await _settle()

        assert controller.is_watched is True
        assert controller.watched_user_rating == 9
        controller.set_user_rating(4)
        assert controller.can_add is False

    async def test_failed_detail_releases_title(self, build_controller, titles):
        controller, _, _, _ = build_controller()

        controller.select("tt404")
        await _settle()

        assert controller.detail is None
        assert controller.detail_state.error is not None
        assert titles == []

    async def test_teardown_releases_scope_and_stops_fetching(self, build_controller, titles):
        controller, _, keys, _ = build_controller()
        controller.select("tt1375666")
        await _settle()

        controller.teardown()

        assert titles[-1] == DEFAULT_VIEW_TITLE
        assert keys.listeners_for(CLOSE_DETAIL_KEY) == []

    async def test_added_entry_is_keyed_by_selected_id(self, make_store, make_detail, titles):
        store = make_store()

        async def _redirecting_lookup(imdb_id: str):
            return make_detail("tt9999999")

        controller = SelectionController(
            DetailFetcher(_redirecting_lookup), store, TitleOverride(titles.append)
        )
        controller.select("tt1375666")
        await _settle()
        controller.set_user_rating(7)

        controller.handle_add()

        assert store.contains("tt1375666")
        assert not store.contains("tt9999999")
        controller.select("tt1375666")
        assert controller.is_watched is True
        assert controller.watched_user_rating == 7
