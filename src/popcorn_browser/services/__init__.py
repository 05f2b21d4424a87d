"""Internal service layer for app orchestration extraction."""

from popcorn_browser.services.omdb_service import (
    NoResultsError,
    fetch_title,
    search_titles,
)

__all__ = [
    "NoResultsError",
    "fetch_title",
    "search_titles",
]
