"""Widget classes and render helpers for the movie browser UI."""

from popcorn_browser.widgets.chrome import ContextFooter, footer_bindings
from popcorn_browser.widgets.details import MovieDetails
from popcorn_browser.widgets.listing import (
    render_candidate_option,
    render_watched_option,
)
from popcorn_browser.widgets.rating import StarRating
from popcorn_browser.widgets.summary import WatchedSummaryPanel

__all__ = [
    "ContextFooter",
    "MovieDetails",
    "StarRating",
    "WatchedSummaryPanel",
    "footer_bindings",
    "render_candidate_option",
    "render_watched_option",
]
