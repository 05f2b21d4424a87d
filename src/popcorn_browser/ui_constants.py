"""Internal UI constants for the PopcornBrowser app."""

from __future__ import annotations

from textual.binding import Binding, BindingType

APP_CSS = """
Screen {
    background: $th-background;
}

Header {
    background: $th-panel-alt;
    color: $th-text;
}

#main-container {
    height: 1fr;
}

#left-pane {
    width: 2fr;
    min-width: 40;
    height: 100%;
    border: tall $th-highlight;
    background: $th-panel;
}

#left-pane:focus-within {
    border: tall $th-accent;
}

#right-pane {
    width: 3fr;
    height: 100%;
    border: tall $th-highlight;
    background: $th-panel;
}

#right-pane:focus-within {
    border: tall $th-accent;
}

#search-input {
    width: 100%;
    border: tall $th-accent;
    background: $th-background;
}

#search-input:focus {
    border: tall $th-accent-alt;
}

#results-count {
    padding: 0 1;
    color: $th-accent;
    text-style: bold;
}

#search-status {
    padding: 0 1;
    color: $th-muted;
}

#search-status.error {
    color: $th-pink;
}

#candidate-list, #watched-list {
    height: 1fr;
    scrollbar-gutter: stable;
}

#candidate-list > .option-list--option-highlighted,
#watched-list > .option-list--option-highlighted {
    background: $th-highlight;
}

#candidate-list:focus > .option-list--option-highlighted,
#watched-list:focus > .option-list--option-highlighted {
    background: $th-highlight-focus;
}

#detail-scroll {
    height: 1fr;
}

#watched-container {
    height: 1fr;
}

VerticalScroll {
    scrollbar-background: $th-scrollbar-bg;
    scrollbar-color: $th-scrollbar-thumb;
    scrollbar-color-hover: $th-scrollbar-hover;
    scrollbar-color-active: $th-scrollbar-active;
}
"""

APP_BINDINGS: list[BindingType] = [
    Binding("q", "quit", "Quit", show=False),
    Binding("a", "add_watched", "Add to list", show=False),
    Binding("x", "remove_watched", "Remove", show=False),
    Binding("delete", "remove_watched", "Remove", show=False),
    # User rating: 1-9, 0 means 10
    Binding("1", "rate(1)", "Rate 1", show=False),
    Binding("2", "rate(2)", "Rate 2", show=False),
    Binding("3", "rate(3)", "Rate 3", show=False),
    Binding("4", "rate(4)", "Rate 4", show=False),
    Binding("5", "rate(5)", "Rate 5", show=False),
    Binding("6", "rate(6)", "Rate 6", show=False),
    Binding("7", "rate(7)", "Rate 7", show=False),
    Binding("8", "rate(8)", "Rate 8", show=False),
    Binding("9", "rate(9)", "Rate 9", show=False),
    Binding("0", "rate(10)", "Rate 10", show=False),
]

__all__ = [
    "APP_BINDINGS",
    "APP_CSS",
]
