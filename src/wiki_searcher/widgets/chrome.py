"""Widget chrome for pagination, history chips, suggestions, and footer hints."""

from __future__ import annotations

from rich.markup import escape
from rich.text import Text
from textual import on
from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.message import Message
from textual.widgets import Button, Label, Static

from wiki_searcher.models import RECENT_HISTORY_CHIPS, HistoryEntry
from wiki_searcher.pagination import ELLIPSIS, PageLabel
from wiki_searcher.themes import THEME_COLORS

# 1, ..., c-1, c, c+1, ..., last
PAGE_SLOT_COUNT = 7


class ContextFooter(Static):
    """Footer showing the active keybindings."""

    DEFAULT_CSS = """
    ContextFooter {
        dock: bottom;
        height: 1;
        background: $th-background;
        color: $th-muted;
        padding: 0 1;
        border-top: solid $th-panel-alt;
    }
    """

    def render_bindings(self, bindings: list[tuple[str, str]]) -> None:
        """Update the footer with a list of (key, label) binding hints."""
        accent = THEME_COLORS["accent"]
        muted = THEME_COLORS["muted"]
        parts = [
            f"[bold {accent}]{escape(key)}[/] [{muted}]{label}[/]" for key, label in bindings
        ]
        self.update("  ".join(parts))


class PaginationBar(Horizontal):
    """Prev / page numbers / Next strip with ellipses between distant pages.

    Page buttons live in fixed slots that are relabelled on every update,
    so refreshing never mounts or removes widgets.
    """

    class PageRequested(Message):
        """Request to show a specific page."""

        def __init__(self, page: int) -> None:
            super().__init__()
            self.page = page

    DEFAULT_CSS = """
    PaginationBar {
        height: auto;
        align: center middle;
        padding: 0 1;
        display: none;
    }

    PaginationBar.visible {
        display: block;
    }

    PaginationBar Button {
        height: 1;
        min-width: 5;
        border: none;
        margin: 0 1 0 0;
        background: $th-panel-alt;
        color: $th-text;
    }

    PaginationBar Button.current {
        background: $th-accent;
        text-style: bold;
    }

    PaginationBar Button.ellipsis {
        background: $th-background;
        color: $th-muted;
    }
    """

    def __init__(self, *, id: str | None = None) -> None:
        super().__init__(id=id)
        self._current = 1
        self._total = 0
        self._slot_pages: list[int | None] = [None] * PAGE_SLOT_COUNT

    @property
    def current_page(self) -> int:
        return self._current

    @property
    def total_pages(self) -> int:
        return self._total

    def compose(self) -> ComposeResult:
        yield Button("Prev", id="page-prev")
        for index in range(PAGE_SLOT_COUNT):
            yield Button("", id=f"page-slot-{index}")
        yield Button("Next", id="page-next")

    def update_pages(self, labels: list[PageLabel], current: int, total: int) -> None:
        """Relabel the page slots and toggle visibility."""
        self._current = current
        self._total = total
        self.query_one("#page-prev", Button).disabled = current <= 1
        self.query_one("#page-next", Button).disabled = current >= total
        for index in range(PAGE_SLOT_COUNT):
            button = self.query_one(f"#page-slot-{index}", Button)
            label = labels[index] if index < len(labels) else None
            button.remove_class("current", "ellipsis")
            if label is None:
                self._slot_pages[index] = None
                button.display = False
                continue
            button.display = True
            if label == ELLIPSIS:
                self._slot_pages[index] = None
                button.label = ELLIPSIS
                button.disabled = True
                button.add_class("ellipsis")
            else:
                page = int(label)
                self._slot_pages[index] = page
                button.label = str(page)
                button.disabled = False
                if page == current:
                    button.add_class("current")

    def page_for_slot(self, index: int) -> int | None:
        return self._slot_pages[index]

    @on(Button.Pressed)
    def _on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        button_id = event.button.id or ""
        if button_id == "page-prev":
            self.post_message(self.PageRequested(max(1, self._current - 1)))
        elif button_id == "page-next":
            self.post_message(self.PageRequested(min(self._total, self._current + 1)))
        elif button_id.startswith("page-slot-"):
            page = self.page_for_slot(int(button_id.rsplit("-", 1)[1]))
            if page is not None:
                self.post_message(self.PageRequested(page))


class RecentHistoryBar(Horizontal):
    """Chips for the most recent searches plus a "View all history" link."""

    class TermSelected(Message):
        """Re-run a search from a history chip."""

        def __init__(self, term: str) -> None:
            super().__init__()
            self.term = term

    class TermDeleted(Message):
        """Remove a term from history."""

        def __init__(self, term: str) -> None:
            super().__init__()
            self.term = term

    class ViewAll(Message):
        """Open the full history dialog."""

    DEFAULT_CSS = """
    RecentHistoryBar {
        height: auto;
        padding: 0 1;
        background: $th-panel;
    }

    RecentHistoryBar Button {
        height: 1;
        min-width: 3;
        border: none;
    }

    RecentHistoryBar .history-chip {
        width: auto;
        height: 1;
        margin-right: 2;
    }

    RecentHistoryBar .chip-term {
        background: $th-panel-alt;
        color: $th-text;
    }

    RecentHistoryBar .chip-delete {
        background: $th-panel-alt;
        color: $th-error;
        text-style: bold;
    }

    RecentHistoryBar #history-empty {
        color: $th-muted;
        text-style: italic;
    }

    RecentHistoryBar #history-view-all {
        dock: right;
        background: $th-panel;
        color: $th-accent;
    }
    """

    def __init__(self, *, id: str | None = None) -> None:
        super().__init__(id=id)
        self._terms: list[str] = []

    @property
    def terms(self) -> list[str]:
        """Terms currently shown as chips."""
        return list(self._terms)

    def compose(self) -> ComposeResult:
        for index in range(RECENT_HISTORY_CHIPS):
            with Horizontal(classes="history-chip", id=f"history-chip-{index}"):
                yield Button("", classes="chip-term", id=f"chip-term-{index}")
                yield Button("×", classes="chip-delete", id=f"chip-delete-{index}")
        yield Label("No history yet.", id="history-empty")
        yield Button("View all history", id="history-view-all")

    def update_history(self, entries: list[HistoryEntry]) -> None:
        """Show the first chips and the overflow link when there are more."""
        self._terms = [entry.term for entry in entries[:RECENT_HISTORY_CHIPS]]
        for index in range(RECENT_HISTORY_CHIPS):
            chip = self.query_one(f"#history-chip-{index}", Horizontal)
            if index < len(self._terms):
                self.query_one(f"#chip-term-{index}", Button).label = Text(self._terms[index])
                chip.display = True
            else:
                chip.display = False
        self.query_one("#history-empty", Label).display = not entries
        self.query_one("#history-view-all", Button).display = (
            len(entries) > RECENT_HISTORY_CHIPS
        )

    @on(Button.Pressed)
    def _on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        button_id = event.button.id or ""
        if button_id == "history-view-all":
            self.post_message(self.ViewAll())
            return
        prefix, _, index_text = button_id.rpartition("-")
        if not index_text.isdigit() or int(index_text) >= len(self._terms):
            return
        term = self._terms[int(index_text)]
        if prefix == "chip-term":
            self.post_message(self.TermSelected(term))
        elif prefix == "chip-delete":
            self.post_message(self.TermDeleted(term))


class SuggestionBar(Horizontal):
    """Row offering an alternative title for low-result searches."""

    class Accepted(Message):
        """Search for the suggested title."""

        def __init__(self, suggestion: str) -> None:
            super().__init__()
            self.suggestion = suggestion

    DEFAULT_CSS = """
    SuggestionBar {
        height: auto;
        align: center middle;
        display: none;
    }

    SuggestionBar.visible {
        display: block;
    }

    SuggestionBar #suggestion-prompt {
        color: $th-warning;
        margin-right: 1;
    }

    SuggestionBar #suggestion-button {
        height: 1;
        border: none;
        background: $th-background;
        color: $th-warning;
        text-style: underline;
    }
    """

    def __init__(self, *, id: str | None = None) -> None:
        super().__init__(id=id)
        self._suggestion: str | None = None

    @property
    def suggestion(self) -> str | None:
        return self._suggestion

    def compose(self) -> ComposeResult:
        yield Label("Did you mean?", id="suggestion-prompt")
        yield Button("", id="suggestion-button")

    def update_suggestion(self, suggestion: str | None) -> None:
        self._suggestion = suggestion
        if suggestion:
            self.query_one("#suggestion-button", Button).label = Text(suggestion)
            self.add_class("visible")
        else:
            self.remove_class("visible")

    @on(Button.Pressed, "#suggestion-button")
    def _on_suggestion_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        if self._suggestion:
            self.post_message(self.Accepted(self._suggestion))


__all__ = [
    "PAGE_SLOT_COUNT",
    "ContextFooter",
    "PaginationBar",
    "RecentHistoryBar",
    "SuggestionBar",
]
