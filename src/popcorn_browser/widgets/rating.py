"""Star rating input widget."""

from __future__ import annotations

from textual.message import Message
from textual.widgets import Static

from popcorn_browser.models import USER_RATING_MAX
from popcorn_browser.themes import THEME_COLORS

FULL_STAR = "★"
EMPTY_STAR = "☆"
STAR_CELL_WIDTH = 2  # one glyph plus a space


class StarRating(Static):
    """Row of clickable stars that reports committed ratings.

    The widget only reports the chosen number through ``StarRating.Rated``;
    it never decides what the rating means.
    """

    class Rated(Message):
        """A rating was committed (click or number key)."""

        def __init__(self, value: int) -> None:
            super().__init__()
            self.value = value

    DEFAULT_CSS = """
    StarRating {
        height: 1;
        width: auto;
        padding: 0 1;
    }
    """

    def __init__(self, max_rating: int = USER_RATING_MAX, *, id: str | None = None) -> None:
        super().__init__(id=id)
        self.max_rating = max_rating
        self._rating = 0

    @property
    def rating(self) -> int:
        return self._rating

    def on_mount(self) -> None:
        self._refresh_stars()

    def rate(self, value: int) -> None:
        """Commit ``value`` and report it."""
        if not 1 <= value <= self.max_rating:
            return
        self._rating = value
        self._refresh_stars()
        self.post_message(self.Rated(value))

    def reset(self) -> None:
        self._rating = 0
        self._refresh_stars()

    def star_at(self, x: int) -> int | None:
        """Map a horizontal offset inside the widget to a 1-based star."""
        if x < 0:
            return None
        star = x // STAR_CELL_WIDTH + 1
        return star if star <= self.max_rating else None

    def on_click(self, event: object) -> None:
        """Commit the star under the pointer."""
        from textual.events import Click

        if not isinstance(event, Click):
            return
        star = self.star_at(event.x - self.styles.padding.left)
        if star is not None:
            self.rate(star)

    def render_stars(self) -> str:
        filled = THEME_COLORS["yellow"]
        muted = THEME_COLORS["muted"]
        stars = " ".join(
            FULL_STAR if index < self._rating else EMPTY_STAR for index in range(self.max_rating)
        )
        label = str(self._rating) if self._rating else ""
        return f"[{filled if self._rating else muted}]{stars}[/]  [bold {filled}]{label}[/]"

    def _refresh_stars(self) -> None:
        self.update(self.render_stars())


__all__ = [
    "EMPTY_STAR",
    "FULL_STAR",
    "StarRating",
]
