"""Wikipedia Searcher TUI - search English Wikipedia from the terminal.

Usage:
    wiki-searcher                      # Opens with a search for "India"
    wiki-searcher --query "Ada Lovelace"
    wiki-searcher --no-initial-search

Key bindings:
    /       - Focus the search box
    Esc     - Focus the result list
    Enter   - Search (in the box) / open article in browser (in the list)
    [ / ]   - Previous / next page of results
    h       - Show full search history
    d       - Toggle dark / light theme
    Ctrl+y  - Search for the "Did you mean?" suggestion
    q       - Quit
"""

from __future__ import annotations

import asyncio
import logging
import sys
import webbrowser
from typing import Any

import httpx
from rich.markup import escape
from textual import on
from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.screen import Screen
from textual.widgets import Button, Header, Input, Label, LoadingIndicator, OptionList, Static
from textual.widgets.option_list import Option

from wiki_searcher.cli import (
    _configure_color_mode,
    _configure_logging,
    _validate_interactive_tty,
)
from wiki_searcher.cli import main as _cli_main
from wiki_searcher.config import PreferenceStore, detect_system_dark_mode, load_dark_mode
from wiki_searcher.controller import SearchController
from wiki_searcher.history import HistoryManager
from wiki_searcher.modals import HistoryModal
from wiki_searcher.models import DEFAULT_INITIAL_QUERY, RESULTS_PER_PAGE, AppState, SearchResult
from wiki_searcher.parsing import build_article_url
from wiki_searcher.services.interfaces import AppServices, build_default_app_services
from wiki_searcher.themes import TEXTUAL_THEMES, apply_palette, theme_name_for
from wiki_searcher.ui_constants import APP_BINDINGS, APP_CSS
from wiki_searcher.widgets import (
    ContextFooter,
    PaginationBar,
    RecentHistoryBar,
    SuggestionBar,
    render_result_option,
)

logger = logging.getLogger(__name__)

NO_RESULTS_MESSAGE = "No results found. Please check your spelling or try different terms."

FOOTER_BINDINGS: list[tuple[str, str]] = [
    ("/", "search"),
    ("enter", "open"),
    ("[ ]", "page"),
    ("h", "history"),
    ("d", "theme"),
    ("ctrl+y", "did you mean"),
    ("q", "quit"),
]


class WikiSearcher(App):
    """A TUI application to search Wikipedia."""

    TITLE = "Wikipedia Searcher"

    CSS = APP_CSS

    BINDINGS = APP_BINDINGS

    def __init__(
        self,
        store: PreferenceStore | None = None,
        *,
        initial_query: str | None = DEFAULT_INITIAL_QUERY,
        dark_mode: bool | None = None,
        services: AppServices | None = None,
        history: HistoryManager | None = None,
    ) -> None:
        super().__init__()
        # Register all Textual themes so $th-* CSS variables resolve before compose()
        for textual_theme in TEXTUAL_THEMES.values():
            self.register_theme(textual_theme)

        self._store = store if store is not None else PreferenceStore.load()
        self._http_client: httpx.AsyncClient | None = None
        self._services: AppServices = services or build_default_app_services(
            lambda: self._http_client
        )
        if history is None:
            history = HistoryManager(self._store)
            history.load()
        self._history = history

        # An explicit dark_mode is a session override and is not persisted
        if dark_mode is None:
            dark_mode = load_dark_mode(self._store, detect_system_dark_mode())
        # Activate a theme before the stylesheet resolves $th-* variables
        self._applied_dark_mode: bool | None = None
        self._apply_theme(dark_mode)
        self._controller = SearchController(
            self._services.wikipedia,
            self._history,
            self._store,
            dark_mode=dark_mode,
            on_change=self._on_state_change,
        )
        self._initial_query = initial_query
        self._visible_results: list[SearchResult] = []
        self._history_modal: HistoryModal | None = None
        self._background_tasks: set[asyncio.Task[None]] = set()

    @property
    def controller(self) -> SearchController:
        return self._controller

    @property
    def state(self) -> AppState:
        return self._controller.state

    @property
    def _search_screen(self) -> Screen[Any]:
        """The main screen, even while the history dialog is on top."""
        return self.screen_stack[0]

    # ========================================================================
    # Lifecycle
    # ========================================================================

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(id="main-container"):
            with Horizontal(id="search-row"):
                yield Input(placeholder=" Search Wikipedia...", id="search-input")
                yield Button("Search", variant="primary", id="search-button")
            yield SuggestionBar(id="suggestion-bar")
            yield RecentHistoryBar(id="history-bar")
            yield Label("", id="results-header")
            yield LoadingIndicator(id="loading-indicator")
            yield Static(NO_RESULTS_MESSAGE, id="empty-message")
            yield OptionList(id="results-list")
            yield PaginationBar(id="pagination-bar")
            yield Label("", id="status-bar")
        yield ContextFooter()

    def on_mount(self) -> None:
        """Create the shared HTTP client, render state, and run the first search."""
        # Create shared HTTP client for connection pooling
        self._http_client = httpx.AsyncClient()
        self._search_screen.query_one(ContextFooter).render_bindings(FOOTER_BINDINGS)
        self._render_state()
        logger.debug(
            "App mounted: %d history entries, dark_mode=%s",
            len(self.state.history),
            self.state.dark_mode,
        )
        if self._initial_query:
            self._submit(self._initial_query)
        self._search_screen.query_one("#search-input", Input).focus()

    async def on_unmount(self) -> None:
        """Cancel outstanding work and close the shared HTTP client."""
        await self._controller.shutdown()

        pending = [task for task in self._background_tasks if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            _, still_pending = await asyncio.wait(pending, timeout=0.5)
            for task in still_pending:
                logger.debug("Background task did not cancel before shutdown: %r", task)
        self._background_tasks.clear()

        # Close shared HTTP client
        client = self._http_client
        self._http_client = None
        if client is not None:
            try:
                await client.aclose()
            except Exception as e:
                logger.debug(
                    "Failed to close shared HTTP client during shutdown: %s", e, exc_info=True
                )

    def _track_task(self, coro: Any) -> asyncio.Task[None]:
        """Create an asyncio task and track it to prevent garbage collection."""
        task = asyncio.create_task(coro)
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)
        task.add_done_callback(self._on_task_done)
        return task

    @staticmethod
    def _on_task_done(task: asyncio.Task[None]) -> None:
        """Log unhandled exceptions from background tasks."""
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Unhandled exception in background task: %s", exc, exc_info=exc)

    def _submit(self, term: str) -> None:
        if term.strip():
            self._track_task(self._submit_and_wait(term))

    async def _submit_and_wait(self, term: str) -> None:
        await self._controller.submit(term)

    # ========================================================================
    # Rendering
    # ========================================================================

    def _on_state_change(self) -> None:
        if not self.is_running:
            return
        try:
            self._render_state()
        except NoMatches:
            # Screen is being torn down
            logger.debug("Skipped render: widgets not mounted")

    def _apply_theme(self, dark_mode: bool) -> None:
        if self._applied_dark_mode == dark_mode:
            return
        apply_palette(dark_mode)
        self.theme = theme_name_for(dark_mode)
        self._applied_dark_mode = dark_mode

    def _render_state(self) -> None:
        """Push the controller state into every widget."""
        state = self.state
        self._apply_theme(state.dark_mode)

        search_input = self._search_screen.query_one("#search-input", Input)
        if search_input.value != state.input_text:
            search_input.value = state.input_text

        self._render_results(state)
        self._search_screen.query_one(SuggestionBar).update_suggestion(state.suggestion)
        self._search_screen.query_one(RecentHistoryBar).update_history(state.history)
        self._render_pagination(state)
        self._render_status(state)
        self._sync_history_modal(state)

    def _render_results(self, state: AppState) -> None:
        screen = self._search_screen
        loading = state.loading
        screen.query_one("#loading-indicator", LoadingIndicator).set_class(loading, "visible")
        no_results = not loading and not state.results and bool(state.query.strip())
        screen.query_one("#empty-message", Static).set_class(no_results, "visible")

        option_list = screen.query_one("#results-list", OptionList)
        option_list.set_class(loading or not state.results, "hidden")
        self._visible_results = [] if loading else self._controller.visible_results()
        option_list.clear_options()
        option_list.add_options(
            [Option(render_result_option(result)) for result in self._visible_results]
        )
        if self._visible_results:
            option_list.highlighted = 0

        header = screen.query_one("#results-header", Label)
        if state.query and state.results and not loading:
            header.update(f" Results for {escape(state.query)} ({len(state.results)} found)")
        else:
            header.update("")

    def _render_pagination(self, state: AppState) -> None:
        bar = self._search_screen.query_one(PaginationBar)
        visible = not state.loading and len(state.results) > RESULTS_PER_PAGE
        bar.set_class(visible, "visible")
        if visible:
            bar.update_pages(
                self._controller.page_list(), state.page.current_page, state.page.total_pages
            )

    def _render_status(self, state: AppState) -> None:
        status = self._search_screen.query_one("#status-bar", Label)
        if state.loading:
            status.update("Loading...")
            self.sub_title = f"Searching for {state.query}"
        elif state.results:
            page = state.page
            status.update(f"Page {page.current_page} of {page.total_pages}")
            self.sub_title = state.query
        else:
            status.update("")
            self.sub_title = state.query

    def _sync_history_modal(self, state: AppState) -> None:
        modal = self._history_modal
        if state.history_modal_open:
            if modal is None:
                modal = HistoryModal(state.history)
                self._history_modal = modal
                self.push_screen(modal, self._on_history_modal_dismissed)
            else:
                modal.update_entries(state.history)
        elif modal is not None:
            self._history_modal = None
            if self.screen is modal:
                modal.dismiss(None)

    def _on_history_modal_dismissed(self, _result: None) -> None:
        # Closed by the user rather than by a successful search
        if self._history_modal is not None:
            self._history_modal = None
            self._controller.close_history()

    # ========================================================================
    # Event handlers
    # ========================================================================

    @on(Input.Changed, "#search-input")
    def on_search_changed(self, event: Input.Changed) -> None:
        self._controller.set_input(event.value)

    @on(Input.Submitted, "#search-input")
    def on_search_submitted(self, event: Input.Submitted) -> None:
        self._submit(event.value)

    @on(Button.Pressed, "#search-button")
    def on_search_pressed(self) -> None:
        self._submit(self._search_screen.query_one("#search-input", Input).value)

    @on(OptionList.OptionSelected, "#results-list")
    def on_result_selected(self, event: OptionList.OptionSelected) -> None:
        index = event.option_index
        if 0 <= index < len(self._visible_results):
            self._safe_browser_open(build_article_url(self._visible_results[index].title))

    def on_pagination_bar_page_requested(self, message: PaginationBar.PageRequested) -> None:
        self._controller.go_to_page(message.page)

    def on_recent_history_bar_term_selected(self, message: RecentHistoryBar.TermSelected) -> None:
        self._submit(message.term)

    def on_recent_history_bar_term_deleted(self, message: RecentHistoryBar.TermDeleted) -> None:
        self._controller.remove_history(message.term)

    def on_recent_history_bar_view_all(self, _message: RecentHistoryBar.ViewAll) -> None:
        self._controller.open_history()

    def on_suggestion_bar_accepted(self, message: SuggestionBar.Accepted) -> None:
        self._submit(message.suggestion)

    def on_history_modal_search_requested(self, message: HistoryModal.SearchRequested) -> None:
        self._submit(message.term)

    def on_history_modal_delete_requested(self, message: HistoryModal.DeleteRequested) -> None:
        self._controller.remove_history(message.term)

    def on_history_modal_clear_requested(self, _message: HistoryModal.ClearRequested) -> None:
        self._controller.clear_history()

    def _safe_browser_open(self, url: str) -> bool:
        """Open a URL in the browser with error handling. Returns True on success."""
        try:
            webbrowser.open(url)
            return True
        except (webbrowser.Error, OSError) as e:
            logger.warning("Failed to open browser for %s: %s", url, e)
            self.notify(
                f"Could not open your browser. Article URL: {url}",
                title="Browser",
                severity="error",
                timeout=8,
            )
            return False

    # ========================================================================
    # Actions
    # ========================================================================

    def action_focus_search(self) -> None:
        self._search_screen.query_one("#search-input", Input).focus()

    def action_focus_results(self) -> None:
        option_list = self._search_screen.query_one("#results-list", OptionList)
        if option_list.display and option_list.option_count:
            option_list.focus()
        else:
            # Leave the input so single-key bindings apply
            self.set_focus(None)

    def action_prev_page(self) -> None:
        if self.state.results:
            self._controller.previous_page()

    def action_next_page(self) -> None:
        if self.state.results:
            self._controller.next_page()

    def action_show_history(self) -> None:
        self._controller.open_history()

    def action_toggle_theme(self) -> None:
        dark_mode = self._controller.toggle_theme()
        self.notify("Dark mode" if dark_mode else "Light mode", title="Theme", timeout=2)

    def action_accept_suggestion(self) -> None:
        if self.state.suggestion:
            self._submit(self.state.suggestion)


def main() -> int:
    """Main entry point wrapper for CLI/bootstrap logic."""
    return _cli_main(
        configure_logging_fn=_configure_logging,
        configure_color_mode_fn=_configure_color_mode,
        validate_interactive_tty_fn=_validate_interactive_tty,
        app_factory=WikiSearcher,
    )


__all__ = [
    "FOOTER_BINDINGS",
    "NO_RESULTS_MESSAGE",
    "WikiSearcher",
    "main",
]


if __name__ == "__main__":
    sys.exit(main())
