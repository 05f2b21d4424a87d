"""Terminal movie browser: search the OMDb catalog and keep a rated watched list."""

from popcorn_browser.models import (
    CandidateRecord,
    DetailRecord,
    DetailState,
    SearchState,
    UserConfig,
    WatchedEntry,
    WatchedSummary,
)

__version__ = "1.0.0"

__all__ = [
    "CandidateRecord",
    "DetailRecord",
    "DetailState",
    "SearchState",
    "UserConfig",
    "WatchedEntry",
    "WatchedSummary",
    "__version__",
]
