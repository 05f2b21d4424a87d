"""The app's color palette and the Textual theme built from it."""

from __future__ import annotations

from textual.theme import Theme as TextualTheme

THEME_NAME = "popcorn"

# Keys double as CSS variable names: "panel_alt" -> $th-panel-alt
POPCORN_PALETTE: dict[str, str] = {
    "background": "#1c1b22",
    "panel": "#15141a",
    "panel_alt": "#2a2833",
    "text": "#f2efe6",
    "muted": "#8a8598",
    "accent": "#f5c518",
    "accent_alt": "#ffb347",
    "green": "#7bd88f",
    "yellow": "#f5c518",
    "pink": "#ff6188",
    "highlight": "#34313d",
    "highlight_focus": "#46424f",
    "scrollbar_bg": "#2a2833",
    "scrollbar_thumb": "#8a8598",
    "scrollbar_active": "#f5c518",
    "scrollbar_hover": "#b3aec0",
}


def build_textual_theme(palette: dict[str, str], name: str = THEME_NAME) -> TextualTheme:
    """Wrap ``palette`` in a Textual theme exposing every key as a ``$th-*`` variable."""
    variables = {f"th-{key.replace('_', '-')}": color for key, color in palette.items()}
    return TextualTheme(
        name=name,
        primary=palette["accent"],
        secondary=palette["accent_alt"],
        accent=palette["green"],
        foreground=palette["text"],
        background=palette["background"],
        surface=palette["panel"],
        panel=palette["panel_alt"],
        warning=palette["accent_alt"],
        error=palette["pink"],
        success=palette["green"],
        dark=True,
        variables=variables,
    )


TEXTUAL_THEME = build_textual_theme(POPCORN_PALETTE)

# Rich markup colors used by the render helpers
THEME_COLORS: dict[str, str] = POPCORN_PALETTE.copy()


__all__ = [
    "POPCORN_PALETTE",
    "TEXTUAL_THEME",
    "THEME_COLORS",
    "THEME_NAME",
    "build_textual_theme",
]
