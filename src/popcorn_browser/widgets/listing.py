"""List rendering helpers for search candidates and watched entries."""

from __future__ import annotations

from rich.markup import escape as escape_markup

from popcorn_browser.models import CandidateRecord, WatchedEntry
from popcorn_browser.themes import THEME_COLORS

_ICON_SETS: dict[str, dict[str, str]] = {
    "unicode": {
        "year": "\U0001f4c5",  # 📅
        "catalog": "⭐",  # ⭐
        "user": "\U0001f31f",  # 🌟
        "runtime": "⏳",  # ⏳
        "watched": "✓",  # ✓
    },
    "ascii": {
        "year": "@",
        "catalog": "*",
        "user": "+",
        "runtime": "~",
        "watched": "v",
    },
}
_ACTIVE_ICON_SET = _ICON_SETS["unicode"]


def set_ascii_icons(enabled: bool) -> None:
    """Switch list indicators between Unicode and ASCII modes."""
    global _ACTIVE_ICON_SET
    _ACTIVE_ICON_SET = _ICON_SETS["ascii"] if enabled else _ICON_SETS["unicode"]


def icon(name: str) -> str:
    return _ACTIVE_ICON_SET[name]


def escape_rich_text(text: str) -> str:
    """Escape text for safe Rich markup rendering."""
    return escape_markup(text) if text else ""


def render_candidate_option(
    candidate: CandidateRecord,
    *,
    selected: bool = False,
    watched: bool = False,
) -> str:
    """Render a search hit as Rich markup for OptionList display."""
    prefix_parts: list[str] = []
    if watched:
        prefix_parts.append(f"[{THEME_COLORS['green']}]{icon('watched')}[/]")
    title = escape_rich_text(candidate.title)
    color = THEME_COLORS["accent_alt"] if selected else THEME_COLORS["text"]
    title_line = f"[bold {color}]{title}[/]"
    if prefix_parts:
        title_line = f"{' '.join(prefix_parts)} {title_line}"
    year_line = f"[{THEME_COLORS['muted']}]{icon('year')} {escape_rich_text(candidate.year)}[/]"
    return f"{title_line}\n{year_line}"


def render_watched_option(entry: WatchedEntry) -> str:
    """Render a watched entry with its catalog rating, user rating, and runtime."""
    title = escape_rich_text(entry.title)
    muted = THEME_COLORS["muted"]
    stats = "  ".join(
        [
            f"{icon('catalog')} {entry.imdb_rating:g}",
            f"{icon('user')} {entry.user_rating}",
            f"{icon('runtime')} {entry.runtime} min",
        ]
    )
    return f"[bold {THEME_COLORS['text']}]{title}[/]\n[{muted}]{stats}[/]"


def format_result_count(count: int) -> str:
    return f"Found {count} result{'s' if count != 1 else ''}"


__all__ = [
    "escape_rich_text",
    "format_result_count",
    "icon",
    "render_candidate_option",
    "render_watched_option",
    "set_ascii_icons",
]
