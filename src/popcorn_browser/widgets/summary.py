"""Watched-list summary panel."""

from __future__ import annotations

from textual.widgets import Static

from popcorn_browser.models import WatchedSummary
from popcorn_browser.themes import THEME_COLORS
from popcorn_browser.widgets.listing import icon


def format_mean(value: float) -> str:
    return f"{value:.2f}"


def render_summary(summary: WatchedSummary) -> str:
    """Rich markup for the aggregate line shown above the watched list."""
    header = f"[bold {THEME_COLORS['accent_alt']}]MOVIES YOU WATCHED[/]"
    parts = [
        f"#️⃣ {summary.count} movie{'s' if summary.count != 1 else ''}",
        f"{icon('catalog')} {format_mean(summary.mean_imdb_rating)}",
        f"{icon('user')} {format_mean(summary.mean_user_rating)}",
        f"{icon('runtime')} {format_mean(summary.mean_runtime)} min",
    ]
    return f"{header}\n{'   '.join(parts)}"


class WatchedSummaryPanel(Static):
    """Shows count and means of the watched list."""

    DEFAULT_CSS = """
    WatchedSummaryPanel {
        height: auto;
        padding: 0 1 1 1;
        background: $th-panel-alt;
        color: $th-text;
    }
    """

    def show(self, summary: WatchedSummary) -> None:
        self.update(render_summary(summary))


__all__ = [
    "WatchedSummaryPanel",
    "format_mean",
    "render_summary",
]
