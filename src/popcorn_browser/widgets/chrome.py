"""Footer hints for the currently available key commands."""

from __future__ import annotations

from textual.widgets import Static

from popcorn_browser.themes import THEME_COLORS
from popcorn_browser.widgets.listing import escape_rich_text

SEARCH_HINTS: list[tuple[str, str]] = [
    ("/", "search"),
    ("enter", "open"),
    ("x", "remove"),
    ("q", "quit"),
]

DETAIL_HINTS: list[tuple[str, str]] = [
    ("1-0", "rate"),
    ("a", "add"),
    ("esc", "close"),
    ("/", "search"),
    ("q", "quit"),
]


class ContextFooter(Static):
    """Context-sensitive footer showing relevant keybindings."""

    DEFAULT_CSS = """
    ContextFooter {
        dock: bottom;
        height: 1;
        background: $th-background;
        color: $th-muted;
        padding: 0 1;
    }
    """

    def render_bindings(self, bindings: list[tuple[str, str]], mode_badge: str = "") -> None:
        """Update the footer with a list of (key, label) binding hints."""
        accent = THEME_COLORS["accent"]
        muted = THEME_COLORS["muted"]
        parts = []
        if mode_badge:
            parts.append(mode_badge)
        for key, label in bindings:
            safe_key = escape_rich_text(key)
            if key and label:
                parts.append(f"[bold {accent}]{safe_key}[/] [{muted}]{label}[/]")
            elif label:
                parts.append(f"[italic {muted}]{label}[/]")
            else:
                parts.append(f"[italic {muted}]{safe_key}[/]")
        self.update("  ".join(parts))


def footer_bindings(*, detail_open: bool, can_add: bool, is_watched: bool) -> list[tuple[str, str]]:
    """Pick the footer hints for the current view."""
    if not detail_open:
        return list(SEARCH_HINTS)
    hints = list(DETAIL_HINTS)
    if is_watched:
        hints = [hint for hint in hints if hint[0] not in ("1-0", "a")]
    elif not can_add:
        hints = [hint for hint in hints if hint[0] != "a"]
    return hints


__all__ = [
    "DETAIL_HINTS",
    "SEARCH_HINTS",
    "ContextFooter",
    "footer_bindings",
]
