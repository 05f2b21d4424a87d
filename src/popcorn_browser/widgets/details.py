"""Detail pane for the open movie."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Vertical
from textual.widgets import Static

from popcorn_browser.models import DetailRecord, DetailState
from popcorn_browser.themes import THEME_COLORS
from popcorn_browser.widgets.listing import escape_rich_text, icon
from popcorn_browser.widgets.rating import StarRating

LOADING_TEXT = "Loading..."
PREVIOUSLY_RATED_TEXT = "You've previously rated this movie"
RATED_MARK = "⭒"


def render_overview(detail: DetailRecord) -> str:
    """Title block: title, released • runtime, genre, languages, catalog rating."""
    accent = THEME_COLORS["accent"]
    lines = [
        f"[bold {THEME_COLORS['text']}]{escape_rich_text(detail.title)}[/]",
        f"{escape_rich_text(detail.released)} • {escape_rich_text(detail.runtime)}",
        escape_rich_text(detail.genre),
        f"[{accent}]Language(s):[/] {escape_rich_text(detail.language)}",
        f"{icon('catalog')} {escape_rich_text(detail.imdb_rating)} iMDb rating",
    ]
    return "\n".join(lines)


def render_body(detail: DetailRecord) -> str:
    """Plot and credits."""
    accent = THEME_COLORS["accent"]
    lines = [
        f"[italic {THEME_COLORS['text']}]{escape_rich_text(detail.plot)}[/]",
        "",
        f"[{accent}]Starring[/] {escape_rich_text(detail.actors)}",
        f"[{accent}]Directed by[/] {escape_rich_text(detail.director)}",
        f"[{accent}]Written by[/] {escape_rich_text(detail.writer)}",
        f"[{accent}]Year:[/] {escape_rich_text(detail.year)}",
    ]
    return "\n".join(lines)


def render_rating_note(
    *,
    watched_rating: int | None,
    user_rating: int | None,
) -> str:
    """Line under the stars: stored rating, add hint, or rating prompt."""
    if watched_rating is not None:
        return (
            f"{PREVIOUSLY_RATED_TEXT} "
            f"[bold {THEME_COLORS['yellow']}]{RATED_MARK} {watched_rating}[/]"
        )
    if user_rating:
        return f"[bold {THEME_COLORS['green']}]a[/] [{THEME_COLORS['muted']}]+ Add to list[/]"
    return f"[{THEME_COLORS['muted']}]Rate with 1-9, 0 for 10, or click a star[/]"


class MovieDetails(Vertical):
    """Overview, rating input, and credits for the open movie."""

    DEFAULT_CSS = """
    MovieDetails {
        height: auto;
        padding: 0 1;
    }

    MovieDetails #detail-rating-note {
        margin-bottom: 1;
    }

    MovieDetails #detail-overview {
        margin-bottom: 1;
    }
    """

    def __init__(self, *, id: str | None = None) -> None:
        super().__init__(id=id)
        self._detail: DetailRecord | None = None

    def compose(self) -> ComposeResult:
        yield Static(id="detail-overview")
        yield StarRating(id="star-rating")
        yield Static(id="detail-rating-note")
        yield Static(id="detail-body")

    @property
    def detail(self) -> DetailRecord | None:
        return self._detail

    @property
    def stars(self) -> StarRating:
        return self.query_one(StarRating)

    def show(
        self,
        state: DetailState,
        *,
        watched_rating: int | None = None,
        user_rating: int | None = None,
    ) -> None:
        """Render ``state`` for the open selection."""
        overview = self.query_one("#detail-overview", Static)
        note = self.query_one("#detail-rating-note", Static)
        body = self.query_one("#detail-body", Static)
        stars = self.stars
        detail = state.detail
        if detail is not self._detail:
            stars.reset()
        self._detail = detail

        if state.loading or detail is None:
            if state.error:
                overview.update(
                    f"[{THEME_COLORS['pink']}]⛔ {escape_rich_text(state.error)}[/]"
                )
            else:
                overview.update(f"[dim italic]{LOADING_TEXT}[/]")
            stars.display = False
            note.display = False
            body.update("")
            return

        overview.update(render_overview(detail))
        stars.display = watched_rating is None
        note.display = True
        note.update(render_rating_note(watched_rating=watched_rating, user_rating=user_rating))
        body.update(render_body(detail))


__all__ = [
    "LOADING_TEXT",
    "PREVIOUSLY_RATED_TEXT",
    "MovieDetails",
    "render_body",
    "render_overview",
    "render_rating_note",
]
