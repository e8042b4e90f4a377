"""Internal UI constants for the WikiSearcher app."""

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
    padding: 0 1;
}

#search-row {
    height: auto;
    background: $th-panel;
    padding: 0 1;
}

#search-input {
    width: 1fr;
    border: tall $th-accent;
    background: $th-background;
}

#search-input:focus {
    border: tall $th-accent-alt;
}

#search-button {
    margin-left: 1;
}

#results-header {
    padding: 0 1;
    color: $th-accent;
    text-style: bold;
}

#results-list {
    height: 1fr;
    border: tall $th-highlight;
    background: $th-panel;
    scrollbar-gutter: stable;
    scrollbar-background: $th-scrollbar-bg;
    scrollbar-color: $th-scrollbar-thumb;
    scrollbar-color-hover: $th-scrollbar-hover;
    scrollbar-color-active: $th-scrollbar-active;
}

#results-list:focus {
    border: tall $th-accent;
}

#results-list > .option-list--option-highlighted {
    background: $th-highlight;
}

#results-list:focus > .option-list--option-highlighted {
    background: $th-highlight-focus;
}

#results-list > .option-list--option-hover {
    background: $th-panel-alt;
}

#results-list.hidden {
    display: none;
}

#loading-indicator {
    height: 3;
    display: none;
}

#loading-indicator.visible {
    display: block;
}

#empty-message {
    padding: 1 2;
    color: $th-muted;
    text-style: italic;
    display: none;
}

#empty-message.visible {
    display: block;
}

#status-bar {
    padding: 0 1;
    color: $th-muted;
}
"""

APP_BINDINGS: list[BindingType] = [
    Binding("q", "quit", "Quit", show=False),
    Binding("slash", "focus_search", "Search", show=False),
    Binding("escape", "focus_results", "Results", show=False),
    Binding("bracketleft", "prev_page", "Prev Page", show=False),
    Binding("bracketright", "next_page", "Next Page", show=False),
    Binding("h", "show_history", "History", show=False),
    Binding("d", "toggle_theme", "Theme", show=False),
    Binding("ctrl+y", "accept_suggestion", "Did you mean", show=False),
]

__all__ = [
    "APP_BINDINGS",
    "APP_CSS",
]
