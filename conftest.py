"""Shared test fixtures for popcorn-browser tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from popcorn_browser.models import CandidateRecord, DetailRecord, WatchedEntry
from popcorn_browser.watchlist import WatchlistStore, build_watched_storage
from popcorn_browser.widgets import listing as _listing

# ── Module-level state isolation ─────────────────────────────────────────────


@pytest.fixture(autouse=True)
def _reset_global_state():
    """Restore the icon set after each test.

    PopcornBrowser.__init__ switches it when ascii_icons is set.
    """
    yield
    _listing.set_ascii_icons(False)


@pytest.fixture(autouse=True)
def config_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point every platformdirs lookup at a per-test directory."""
    directory = tmp_path / "config"
    monkeypatch.setattr("popcorn_browser.config.user_config_dir", lambda _name: str(directory))
    monkeypatch.setattr("popcorn_browser.cli.user_config_dir", lambda _name: str(directory))
    monkeypatch.delenv("OMDB_API_KEY", raising=False)
    return directory


# ── Factories ────────────────────────────────────────────────────────────────


@pytest.fixture
def make_candidate():
    """Factory fixture for CandidateRecord instances with sensible defaults."""

    def _make(
        imdb_id: str = "tt1375666",
        title: str = "Inception",
        year: str = "2010",
        poster: str = "https://example.com/inception.jpg",
    ) -> CandidateRecord:
        return CandidateRecord(imdb_id=imdb_id, title=title, year=year, poster=poster)

    return _make


@pytest.fixture
def make_detail():
    """Factory fixture for DetailRecord instances (defaults describe Inception)."""

    def _make(imdb_id: str = "tt1375666", **overrides: Any) -> DetailRecord:
        values: dict[str, Any] = {
            "title": "Inception",
            "poster": "https://example.com/inception.jpg",
            "runtime": "148 min",
            "imdb_rating": "8.8",
            "plot": "A thief who steals corporate secrets through dream-sharing technology.",
            "released": "16 Jul 2010",
            "actors": "Leonardo DiCaprio, Joseph Gordon-Levitt, Elliot Page",
            "director": "Christopher Nolan",
            "writer": "Christopher Nolan",
            "genre": "Action, Adventure, Sci-Fi",
            "language": "English, Japanese, French",
            "year": "2010",
        }
        values.update(overrides)
        return DetailRecord(imdb_id=imdb_id, **values)

    return _make


@pytest.fixture
def make_entry():
    """Factory fixture for WatchedEntry instances."""

    def _make(
        imdb_id: str = "tt1375666",
        title: str = "Inception",
        *,
        year: str = "2010",
        poster: str = "",
        imdb_rating: float = 8.8,
        runtime: int = 148,
        user_rating: int = 8,
        count_rating_decisions: int = 1,
    ) -> WatchedEntry:
        return WatchedEntry(
            imdb_id=imdb_id,
            title=title,
            year=year,
            poster=poster,
            imdb_rating=imdb_rating,
            runtime=runtime,
            user_rating=user_rating,
            count_rating_decisions=count_rating_decisions,
        )

    return _make


@pytest.fixture
def make_store(tmp_path: Path):
    """Factory fixture for WatchlistStore instances backed by tmp_path."""

    def _make(storage_dir: Path | None = None) -> WatchlistStore:
        return WatchlistStore(build_watched_storage(storage_dir or tmp_path / "storage"))

    return _make
