"""Textual application: search pane, movie details, and the watched list."""

from __future__ import annotations

import asyncio
import logging
import sys

import httpx
from textual import on
from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.css.query import NoMatches
from textual.events import Key
from textual.timer import Timer
from textual.widgets import Header, Input, Label, OptionList
from textual.widgets.option_list import Option

from popcorn_browser.action_messages import (
    build_added_notification,
    build_duplicate_notification,
    build_removed_notification,
    build_storage_unavailable_warning,
)
from popcorn_browser.fetching import DetailFetcher, SearchResultsFetcher
from popcorn_browser.keys import KeyCommandListener, KeyCommandRegistry
from popcorn_browser.models import (
    DEFAULT_VIEW_TITLE,
    CandidateRecord,
    DetailRecord,
    SearchState,
    UserConfig,
)
from popcorn_browser.selection import SelectionController, TitleOverride
from popcorn_browser.services.interfaces import AppServices, build_default_app_services
from popcorn_browser.themes import TEXTUAL_THEME
from popcorn_browser.ui_constants import APP_BINDINGS, APP_CSS
from popcorn_browser.watchlist import WatchlistStore
from popcorn_browser.widgets import (
    ContextFooter,
    MovieDetails,
    StarRating,
    WatchedSummaryPanel,
    footer_bindings,
    render_candidate_option,
    render_watched_option,
)
from popcorn_browser.widgets.listing import escape_rich_text, format_result_count, set_ascii_icons

logger = logging.getLogger(__name__)

SEARCH_LOADING_TEXT = "Loading..."


class PopcornBrowser(App):
    """A TUI application to search movies and keep a rated watched list."""

    TITLE = DEFAULT_VIEW_TITLE

    CSS = APP_CSS

    BINDINGS = APP_BINDINGS

    def __init__(
        self,
        config: UserConfig | None = None,
        *,
        api_key: str = "",
        store: WatchlistStore | None = None,
        services: AppServices | None = None,
        initial_query: str = "",
        ascii_icons: bool = False,
    ) -> None:
        super().__init__()
        self._config = config or UserConfig()
        self._activate_theme()
        self._api_key = api_key or self._config.omdb_api_key
        self._services: AppServices = services or build_default_app_services()
        self._store = store if store is not None else WatchlistStore()
        self._initial_query = initial_query
        set_ascii_icons(ascii_icons)

        # Shared HTTP client for connection pooling (created in on_mount)
        self._http_client: httpx.AsyncClient | None = None
        self._search_timer: Timer | None = None
        self._pending_query = ""
        self._storage_warned = False

        self._keys = KeyCommandRegistry()
        self._focus_search_command: KeyCommandListener | None = None
        self._title_override = TitleOverride(self._apply_view_title, DEFAULT_VIEW_TITLE)
        self._search = SearchResultsFetcher(self._lookup_titles, self._on_search_state)
        self._details = DetailFetcher(self._lookup_detail)
        self._selection = SelectionController(
            self._details,
            self._store,
            self._title_override,
            keys=self._keys,
            on_change=self._on_selection_change,
        )

    # ========================================================================
    # Lifecycle
    # ========================================================================

    def _activate_theme(self) -> None:
        """Register and select the app theme so $th-* CSS variables resolve.

        Must run before the stylesheet is parsed, i.e. from ``__init__``.
        """
        self.register_theme(TEXTUAL_THEME)
        try:
            self.theme = TEXTUAL_THEME.name
        except Exception as e:
            logger.debug("Skipping theme activation in current context: %s", e, exc_info=True)

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-container"):
            with Vertical(id="left-pane"):
                yield Input(placeholder="Search movies...", id="search-input")
                yield Label("", id="results-count")
                yield Label("", id="search-status")
                yield OptionList(id="candidate-list")
            with Vertical(id="right-pane"):
                with VerticalScroll(id="detail-scroll"):
                    yield MovieDetails(id="movie-details")
                with Vertical(id="watched-container"):
                    yield WatchedSummaryPanel(id="watched-summary")
                    yield OptionList(id="watched-list")
        yield ContextFooter()

    def on_mount(self) -> None:
        """Create the HTTP client, register global keys, and render initial state."""
        self._http_client = httpx.AsyncClient()

        if self._config.config_defaulted:
            self.notify(
                "Config file was unreadable. Using defaults.",
                severity="warning",
                timeout=8,
            )

        self._focus_search_command = self._keys.bind(
            self._config.focus_search_key,
            self._focus_search,
            skip_when=self._search_input_focused,
            description="Focus search",
        )
        self._store.set_on_change(self._on_watchlist_change)

        self._render_search_state(self._search.state)
        self._refresh_watched_view()
        self._refresh_selection_view()

        if self._initial_query:
            # Input.Changed runs the (debounced) search
            self.query_one("#search-input", Input).value = self._initial_query

        logger.debug(
            "App mounted: %d watched, persistent=%s",
            len(self._store),
            self._store.persistent,
        )
        self.query_one("#search-input", Input).focus()

    async def on_unmount(self) -> None:
        """Stop timers, release scoped commands, cancel lookups, close the client.

        Uses atomic swap pattern to avoid race conditions with timer callbacks.
        """
        timer = self._search_timer
        self._search_timer = None
        if timer is not None:
            timer.stop()

        # Cancel in-flight lookups; nothing commits after this point.
        pending = self._selection.teardown() + self._search.close()
        self._keys.clear()
        self._focus_search_command = None
        self._store.set_on_change(None)
        if pending:
            _, still_pending = await asyncio.wait(pending, timeout=0.5)
            for task in still_pending:
                logger.debug("Lookup task did not cancel before shutdown: %r", task)

        client = self._http_client
        self._http_client = None
        if client is not None:
            try:
                await client.aclose()
            except Exception as e:
                logger.debug(
                    "Failed to close shared HTTP client during shutdown: %s", e, exc_info=True
                )

    # ========================================================================
    # Catalog lookups
    # ========================================================================

    async def _lookup_titles(self, query: str) -> list[CandidateRecord]:
        return await self._services.catalog.search_titles(
            client=self._http_client,
            query=query,
            api_key=self._api_key,
            timeout_seconds=self._config.request_timeout_seconds,
            base_url=self._config.omdb_base_url,
        )

    async def _lookup_detail(self, imdb_id: str) -> DetailRecord:
        return await self._services.catalog.fetch_title(
            client=self._http_client,
            imdb_id=imdb_id,
            api_key=self._api_key,
            timeout_seconds=self._config.request_timeout_seconds,
            base_url=self._config.omdb_base_url,
        )

    def _run_search(self, query: str) -> None:
        self._search.set_query(query)

    # ========================================================================
    # Search input
    # ========================================================================

    @on(Input.Changed, "#search-input")
    def on_search_changed(self, event: Input.Changed) -> None:
        """Handle search input change with debouncing.

        The previous query is invalidated immediately; only the lookup
        itself waits for the debounce. Uses atomic swap pattern to avoid
        race conditions with timer callbacks.
        """
        self._pending_query = event.value
        old_timer = self._search_timer
        self._search_timer = None
        if old_timer is not None:
            old_timer.stop()
        delay_ms = self._config.search_debounce_ms
        if delay_ms <= 0:
            self._run_search(self._pending_query)
            return
        self._search.invalidate(self._pending_query)
        if not self._pending_query.strip():
            return
        self._search_timer = self.set_timer(delay_ms / 1000, self._debounced_search)

    def _debounced_search(self) -> None:
        self._search_timer = None
        self._run_search(self._pending_query)

    @on(Input.Submitted, "#search-input")
    def on_search_submitted(self, event: Input.Submitted) -> None:
        """Move focus to the results once the user confirms the query."""
        candidate_list = self.query_one("#candidate-list", OptionList)
        if candidate_list.option_count > 0:
            candidate_list.focus()

    def _search_input_focused(self) -> bool:
        try:
            return self.query_one("#search-input", Input).has_focus
        except NoMatches:
            return False

    def _focus_search(self) -> None:
        """Focus the search input and start a fresh query."""
        search_input = self.query_one("#search-input", Input)
        search_input.focus()
        search_input.value = ""

    # ========================================================================
    # Key commands
    # ========================================================================

    def on_key(self, event: Key) -> None:
        """Route keys to scoped commands (focus search, close movie)."""
        if self._keys.dispatch(event.key):
            event.prevent_default()
            event.stop()

    def action_rate(self, value: int) -> None:
        """Rate the open movie (number keys; 0 means 10)."""
        if self._selection.detail is None or self._selection.is_watched:
            return
        self.query_one(MovieDetails).stars.rate(value)

    def action_add_watched(self) -> None:
        """Add the open, rated movie to the watched list."""
        selection = self._selection
        detail = selection.detail
        if detail is None:
            return
        if selection.is_watched:
            self.notify(build_duplicate_notification(detail.title), severity="warning")
            return
        if selection.user_rating is None:
            self.notify("Rate the movie first (1-9, 0 for 10)", severity="warning")
            return
        entry = selection.handle_add()
        if entry is None:
            self.notify(build_duplicate_notification(detail.title), severity="warning")
            return
        self.notify(build_added_notification(entry.title, entry.user_rating))
        self._warn_if_storage_unavailable()

    def action_remove_watched(self) -> None:
        """Remove the highlighted watched entry (watched list view only)."""
        if self._selection.selected_id is not None:
            return
        watched_list = self.query_one("#watched-list", OptionList)
        index = watched_list.highlighted
        entries = self._store.list()
        if index is None or not 0 <= index < len(entries):
            return
        entry = entries[index]
        if self._store.remove(entry.imdb_id):
            self.notify(build_removed_notification(entry.title))
            self._warn_if_storage_unavailable()

    def _warn_if_storage_unavailable(self) -> None:
        if self._store.persistent or self._storage_warned:
            return
        self._storage_warned = True
        self.notify(build_storage_unavailable_warning(), severity="warning", timeout=8)

    # ========================================================================
    # Selection
    # ========================================================================

    @on(OptionList.OptionSelected, "#candidate-list")
    def on_candidate_selected(self, event: OptionList.OptionSelected) -> None:
        imdb_id = event.option.id
        if imdb_id:
            self._selection.select(imdb_id)

    @on(StarRating.Rated)
    def on_star_rated(self, event: StarRating.Rated) -> None:
        self._selection.set_user_rating(event.value)

    def _apply_view_title(self, title: str) -> None:
        self.title = title

    # ========================================================================
    # Rendering
    # ========================================================================

    def _on_search_state(self, state: SearchState) -> None:
        self._render_search_state(state)

    def _render_search_state(self, state: SearchState) -> None:
        try:
            status = self.query_one("#search-status", Label)
            count = self.query_one("#results-count", Label)
            candidate_list = self.query_one("#candidate-list", OptionList)
        except NoMatches:
            return
        count.update(format_result_count(len(state.results)))
        status.remove_class("error")
        if state.loading:
            status.update(SEARCH_LOADING_TEXT)
            status.display = True
            candidate_list.display = False
        elif state.error:
            status.update(f"⛔ {escape_rich_text(state.error)}")
            status.add_class("error")
            status.display = True
            candidate_list.display = False
        else:
            status.display = False
            candidate_list.display = True
        self._refresh_candidate_list(state.results)

    def _refresh_candidate_list(self, results: tuple[CandidateRecord, ...] | None = None) -> None:
        try:
            candidate_list = self.query_one("#candidate-list", OptionList)
        except NoMatches:
            return
        if results is None:
            results = self._search.state.results
        highlighted = candidate_list.highlighted
        selected_id = self._selection.selected_id
        candidate_list.clear_options()
        candidate_list.add_options(
            [
                Option(
                    render_candidate_option(
                        candidate,
                        selected=candidate.imdb_id == selected_id,
                        watched=self._store.contains(candidate.imdb_id),
                    ),
                    id=candidate.imdb_id,
                )
                for candidate in results
            ]
        )
        if highlighted is not None and results:
            candidate_list.highlighted = min(highlighted, len(results) - 1)

    def _on_selection_change(self) -> None:
        self._refresh_selection_view()
        self._refresh_candidate_list()

    def _refresh_selection_view(self) -> None:
        try:
            detail_scroll = self.query_one("#detail-scroll", VerticalScroll)
            watched_container = self.query_one("#watched-container", Vertical)
            details = self.query_one(MovieDetails)
        except NoMatches:
            return
        selection = self._selection
        detail_open = selection.selected_id is not None
        detail_scroll.display = detail_open
        watched_container.display = not detail_open
        if detail_open:
            details.show(
                selection.detail_state,
                watched_rating=selection.watched_user_rating,
                user_rating=selection.user_rating,
            )
        self._refresh_footer()

    def _on_watchlist_change(self) -> None:
        self._refresh_watched_view()
        self._refresh_candidate_list()

    def _refresh_watched_view(self) -> None:
        try:
            summary = self.query_one(WatchedSummaryPanel)
            watched_list = self.query_one("#watched-list", OptionList)
        except NoMatches:
            return
        entries = self._store.list()
        summary.show(self._store.summary())
        highlighted = watched_list.highlighted
        watched_list.clear_options()
        watched_list.add_options(
            [Option(render_watched_option(entry), id=entry.imdb_id) for entry in entries]
        )
        if entries:
            watched_list.highlighted = min(highlighted or 0, len(entries) - 1)
        self._refresh_footer()

    def _refresh_footer(self) -> None:
        try:
            footer = self.query_one(ContextFooter)
        except NoMatches:
            return
        selection = self._selection
        footer.render_bindings(
            footer_bindings(
                detail_open=selection.selected_id is not None,
                can_add=selection.can_add,
                is_watched=selection.is_watched,
            )
        )


def main() -> int:
    """Main entry point wrapper for CLI/bootstrap logic."""
    from popcorn_browser.cli import main as _cli_main

    return _cli_main(app_factory=PopcornBrowser)


if __name__ == "__main__":
    sys.exit(main())
