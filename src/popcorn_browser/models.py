"""Data models and constants for the Popcorn movie browser."""

from __future__ import annotations

from dataclasses import dataclass, field

# Application identity: single source of truth for platformdirs config paths
CONFIG_APP_NAME = "popcorn-browser"

# View title shown when no movie is open
DEFAULT_VIEW_TITLE = "usePopcorn"
DETAIL_VIEW_TITLE_PREFIX = "Movie | "

# OMDb catalog constants
OMDB_DEFAULT_BASE_URL = "https://www.omdbapi.com/"
OMDB_NOT_FOUND_MESSAGE = "Movie not found!"
REQUEST_TIMEOUT_DEFAULT_SECONDS = 10
REQUEST_TIMEOUT_MAX_SECONDS = 120

# Search input debounce
SEARCH_DEBOUNCE_DEFAULT_MS = 300
SEARCH_DEBOUNCE_MAX_MS = 2000

# User rating bounds (star rating widget)
USER_RATING_MIN = 1
USER_RATING_MAX = 10

# Storage key for the watched list
WATCHED_STORAGE_KEY = "watched"


@dataclass(slots=True, frozen=True)
class CandidateRecord:
    """A lightweight search hit from the catalog."""

    imdb_id: str
    title: str
    year: str
    poster: str


@dataclass(slots=True, frozen=True)
class DetailRecord:
    """Full catalog entry for one title, fetched on selection."""

    imdb_id: str
    title: str
    poster: str = ""
    runtime: str = ""  # free text, e.g. "142 min"
    imdb_rating: str = ""  # numeric string, or "N/A"
    plot: str = ""
    released: str = ""
    actors: str = ""
    director: str = ""
    writer: str = ""
    genre: str = ""
    language: str = ""
    year: str = ""


@dataclass(slots=True)
class WatchedEntry:
    """A user-rated movie kept in the persisted watched list."""

    imdb_id: str
    title: str
    year: str
    poster: str
    imdb_rating: float
    runtime: int  # minutes
    user_rating: int
    count_rating_decisions: int = 0


@dataclass(slots=True, frozen=True)
class WatchedSummary:
    """Aggregate statistics over the watched list."""

    count: int = 0
    mean_imdb_rating: float = 0.0
    mean_user_rating: float = 0.0
    mean_runtime: float = 0.0


@dataclass(slots=True, frozen=True)
class SearchState:
    """Snapshot of the search lifecycle exposed to the UI."""

    results: tuple[CandidateRecord, ...] = ()
    loading: bool = False
    error: str | None = None


@dataclass(slots=True, frozen=True)
class DetailState:
    """Snapshot of the detail lifecycle for the open selection."""

    detail: DetailRecord | None = None
    loading: bool = False
    error: str | None = None


@dataclass(slots=True)
class UserConfig:
    """User preferences persisted in config.json."""

    omdb_api_key: str = ""
    omdb_base_url: str = OMDB_DEFAULT_BASE_URL
    request_timeout_seconds: int = REQUEST_TIMEOUT_DEFAULT_SECONDS
    search_debounce_ms: int = SEARCH_DEBOUNCE_DEFAULT_MS
    focus_search_key: str = "slash"
    version: int = 1
    config_defaulted: bool = field(default=False, compare=False)


__all__ = [
    "CONFIG_APP_NAME",
    "DEFAULT_VIEW_TITLE",
    "DETAIL_VIEW_TITLE_PREFIX",
    "OMDB_DEFAULT_BASE_URL",
    "OMDB_NOT_FOUND_MESSAGE",
    "REQUEST_TIMEOUT_DEFAULT_SECONDS",
    "REQUEST_TIMEOUT_MAX_SECONDS",
    "SEARCH_DEBOUNCE_DEFAULT_MS",
    "SEARCH_DEBOUNCE_MAX_MS",
    "USER_RATING_MAX",
    "USER_RATING_MIN",
    "WATCHED_STORAGE_KEY",
    "CandidateRecord",
    "DetailRecord",
    "DetailState",
    "SearchState",
    "UserConfig",
    "WatchedEntry",
    "WatchedSummary",
]
