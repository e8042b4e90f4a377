"""Search history dialog."""

from __future__ import annotations

import logging
from datetime import datetime

from rich.markup import escape
from textual import on
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.message import Message
from textual.screen import ModalScreen
from textual.widgets import Button, Label, ListItem, ListView, Static

from wiki_searcher.models import HistoryEntry
from wiki_searcher.themes import THEME_COLORS

logger = logging.getLogger(__name__)


def format_timestamp(timestamp_ms: int) -> str:
    """Render epoch milliseconds in the user's locale date/time format."""
    try:
        return datetime.fromtimestamp(timestamp_ms / 1000).strftime("%c")
    except (OverflowError, OSError, ValueError):
        logger.debug("Unrepresentable history timestamp %r", timestamp_ms)
        return str(timestamp_ms)


class HistoryListItem(ListItem):
    """A history row showing the term and when it was searched."""

    def __init__(self, entry: HistoryEntry) -> None:
        self.entry = entry
        muted = THEME_COLORS["muted"]
        super().__init__(
            Static(
                f"[bold]{escape(entry.term)}[/]\n"
                f"[{muted}]{escape(format_timestamp(entry.timestamp))}[/]"
            )
        )


class HistoryModal(ModalScreen[None]):
    """Full search history with re-search, delete and clear-all actions.

    The dialog never edits history itself; it posts requests that bubble
    to the app, which calls the controller and pushes the new entries
    back through :meth:`update_entries`.
    """

    class SearchRequested(Message):
        def __init__(self, term: str) -> None:
            super().__init__()
            self.term = term

    class DeleteRequested(Message):
        def __init__(self, term: str) -> None:
            super().__init__()
            self.term = term

    class ClearRequested(Message):
        pass

    BINDINGS = [
        Binding("escape", "close", "Back"),
        Binding("delete", "delete_selected", "Delete", show=False),
        Binding("x", "delete_selected", "Delete", show=False),
    ]

    CSS = """
    HistoryModal {
        align: center middle;
    }

    #history-dialog {
        width: 60%;
        height: 70%;
        min-width: 50;
        min-height: 16;
        background: $th-background;
        border: tall $th-accent;
        padding: 0 2;
    }

    #history-title {
        text-style: bold;
        color: $th-accent;
        margin-bottom: 1;
    }

    #history-list {
        height: 1fr;
        background: $th-panel;
        border: none;
    }

    #history-list > ListItem {
        padding: 0 1;
        margin-bottom: 1;
    }

    #history-modal-empty {
        color: $th-muted;
        padding: 0 1;
        display: none;
    }

    #history-modal-empty.visible {
        display: block;
    }

    #history-buttons {
        height: auto;
        margin-top: 1;
    }

    #history-buttons Button {
        margin-right: 1;
    }

    #history-footer {
        color: $th-muted;
    }
    """

    def __init__(self, entries: list[HistoryEntry]) -> None:
        super().__init__()
        self._entries = list(entries)

    @property
    def entries(self) -> list[HistoryEntry]:
        return list(self._entries)

    def compose(self) -> ComposeResult:
        with Vertical(id="history-dialog"):
            yield Label("Search History", id="history-title")
            yield ListView(id="history-list")
            yield Static("No history yet.", id="history-modal-empty")
            with Horizontal(id="history-buttons"):
                yield Button("Back to Search", variant="default", id="history-back")
                yield Button("Delete", variant="default", id="history-delete")
                yield Button("Clear All", variant="error", id="history-clear")
            yield Static("Enter: search  x/Del: delete  Esc: back", id="history-footer")

    async def on_mount(self) -> None:
        await self._refresh_list()
        self.query_one("#history-list", ListView).focus()

    def update_entries(self, entries: list[HistoryEntry]) -> None:
        """Replace the displayed entries, keeping the cursor in range."""
        self._entries = list(entries)
        if self.is_mounted:
            self.call_later(self._refresh_list)

    async def _refresh_list(self) -> None:
        list_view = self.query_one("#history-list", ListView)
        previous_index = list_view.index or 0
        await list_view.clear()
        await list_view.extend(HistoryListItem(entry) for entry in self._entries)
        empty_hint = self.query_one("#history-modal-empty", Static)
        if self._entries:
            list_view.index = min(previous_index, len(self._entries) - 1)
            empty_hint.remove_class("visible")
        else:
            empty_hint.add_class("visible")

    def _highlighted_entry(self) -> HistoryEntry | None:
        index = self.query_one("#history-list", ListView).index
        if index is None or not 0 <= index < len(self._entries):
            return None
        return self._entries[index]

    def action_close(self) -> None:
        self.dismiss(None)

    def action_delete_selected(self) -> None:
        entry = self._highlighted_entry()
        if entry is None:
            return
        self.post_message(self.DeleteRequested(entry.term))

    @on(ListView.Selected, "#history-list")
    def on_entry_selected(self, event: ListView.Selected) -> None:
        if isinstance(event.item, HistoryListItem):
            self.post_message(self.SearchRequested(event.item.entry.term))

    @on(Button.Pressed, "#history-back")
    def on_back_pressed(self) -> None:
        self.action_close()

    @on(Button.Pressed, "#history-delete")
    def on_delete_pressed(self) -> None:
        self.action_delete_selected()

    @on(Button.Pressed, "#history-clear")
    def on_clear_pressed(self) -> None:
        self.post_message(self.ClearRequested())


__all__ = [
    "HistoryListItem",
    "HistoryModal",
    "format_timestamp",
]
