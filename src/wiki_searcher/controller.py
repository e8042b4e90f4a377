"""Search workflow controller: owns AppState and drives the query lifecycle.

States run ``IDLE -> SEARCHING -> (SUCCESS | FAILURE) -> IDLE``. Each
submission takes a new sequence number; results and suggestions that
arrive for an older number are dropped, so the most recently submitted
query always wins regardless of response order.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Coroutine
from typing import Any

from wiki_searcher.config import PreferenceStore, save_dark_mode
from wiki_searcher.history import HistoryManager
from wiki_searcher.models import (
    RESULTS_PER_PAGE,
    SEARCH_TIMEOUT_SECONDS,
    SUGGESTION_THRESHOLD,
    AppState,
    SearchResult,
    SearchStatus,
)
from wiki_searcher.pagination import (
    PageLabel,
    go_to_page,
    next_page,
    page_state_for,
    paginate,
    previous_page,
    renderable_page_list,
)
from wiki_searcher.services.interfaces import SearchClient
from wiki_searcher.services.wikipedia_api_service import SearchRequestError

logger = logging.getLogger(__name__)


class SearchController:
    """UI-agnostic orchestration of search, history, pagination and theme."""

    def __init__(
        self,
        client: SearchClient,
        history: HistoryManager,
        store: PreferenceStore,
        *,
        dark_mode: bool = True,
        page_size: int = RESULTS_PER_PAGE,
        timeout_seconds: float = SEARCH_TIMEOUT_SECONDS,
        suggestion_threshold: int = SUGGESTION_THRESHOLD,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self._client = client
        self._history = history
        self._store = store
        self._page_size = page_size
        self._timeout_seconds = timeout_seconds
        self._suggestion_threshold = suggestion_threshold
        self.on_change = on_change

        self._request_seq = 0
        self._background_tasks: set[asyncio.Task[None]] = set()

        self.state = AppState(dark_mode=dark_mode, history=list(history.entries))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change()

    def _transition(self, status: SearchStatus) -> None:
        logger.debug("Search state %s -> %s", self.state.status.value, status.value)
        self.state.status = status

    def _sync_history(self) -> None:
        self.state.history = list(self._history.entries)

    def _track_task(self, coro: Coroutine[Any, Any, None]) -> asyncio.Task[None]:
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

    def _is_current(self, seq: int) -> bool:
        return seq == self._request_seq

    # ------------------------------------------------------------------
    # Search workflow
    # ------------------------------------------------------------------

    def set_input(self, text: str) -> None:
        """Mirror the live input box value (no re-render needed)."""
        self.state.input_text = text

    async def submit(self, term: str | None = None) -> bool:
        """Run a search for ``term`` (default: the live input value).

        Returns False when the trimmed term is empty and nothing happened.
        """
        query = (term if term is not None else self.state.input_text).strip()
        if not query:
            return False

        self._request_seq += 1
        seq = self._request_seq
        state = self.state
        state.query = query
        state.input_text = query
        state.suggestion = None
        state.page = page_state_for(len(state.results), self._page_size)
        self._transition(SearchStatus.SEARCHING)
        self._notify()

        try:
            results = await asyncio.wait_for(
                self._client.search_or_raise(query), timeout=self._timeout_seconds
            )
        except (SearchRequestError, TimeoutError) as exc:
            if self._is_current(seq):
                self._fail(query, exc)
            return True
        except BaseException:
            if self._is_current(seq):
                self._transition(SearchStatus.IDLE)
                self._notify()
            raise

        if not self._is_current(seq):
            logger.debug("Discarding stale results for %r (seq %d)", query, seq)
            return True
        self._succeed(query, seq, results)
        return True

    def _succeed(self, query: str, seq: int, results: list[SearchResult]) -> None:
        state = self.state
        self._transition(SearchStatus.SUCCESS)
        state.results = list(results)
        state.page = page_state_for(len(state.results), self._page_size)
        self._history.record(query)
        self._sync_history()
        if len(state.results) <= self._suggestion_threshold:
            self._track_task(self._refresh_suggestion(query, seq))
        state.history_modal_open = False
        state.last_outcome = SearchStatus.SUCCESS
        self._transition(SearchStatus.IDLE)
        logger.debug("Search %r returned %d results", query, len(state.results))
        self._notify()

    def _fail(self, query: str, exc: BaseException) -> None:
        state = self.state
        self._transition(SearchStatus.FAILURE)
        logger.warning(
            "Search for %r failed: %s",
            query,
            str(exc) or type(exc).__name__,
            exc_info=exc,
        )
        state.results = []
        state.suggestion = None
        state.page = page_state_for(0, self._page_size)
        state.last_outcome = SearchStatus.FAILURE
        self._transition(SearchStatus.IDLE)
        self._notify()

    async def _refresh_suggestion(self, query: str, seq: int) -> None:
        """Fetch a "did you mean" title for a low-result query."""
        try:
            suggestion = await asyncio.wait_for(
                self._client.suggest(query), timeout=self._timeout_seconds
            )
        except TimeoutError:
            logger.info("Suggestion request for %r timed out", query)
            suggestion = None
        if not self._is_current(seq):
            logger.debug("Discarding stale suggestion for %r (seq %d)", query, seq)
            return
        self.state.suggestion = suggestion
        self._notify()

    async def accept_suggestion(self) -> bool:
        """Search for the current suggestion, if any."""
        suggestion = self.state.suggestion
        if not suggestion:
            return False
        return await self.submit(suggestion)

    async def wait_idle(self) -> None:
        """Wait for outstanding background work (suggestion fetches)."""
        while self._background_tasks:
            await asyncio.gather(*list(self._background_tasks), return_exceptions=True)

    async def shutdown(self) -> None:
        """Cancel background work and invalidate in-flight responses."""
        self._request_seq += 1
        pending = [task for task in self._background_tasks if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            _, still_pending = await asyncio.wait(pending, timeout=0.5)
            for task in still_pending:
                logger.debug("Background task did not cancel before shutdown: %r", task)
        self._background_tasks.clear()

    # ------------------------------------------------------------------
    # Pagination
    # ------------------------------------------------------------------

    def visible_results(self) -> list[SearchResult]:
        return paginate(self.state.results, self.state.page.current_page, self._page_size)

    def page_list(self) -> list[PageLabel]:
        page = self.state.page
        return renderable_page_list(page.current_page, page.total_pages)

    def go_to_page(self, page: int) -> None:
        self.state.page = go_to_page(self.state.page, page)
        self._notify()

    def next_page(self) -> None:
        self.state.page = next_page(self.state.page)
        self._notify()

    def previous_page(self) -> None:
        self.state.page = previous_page(self.state.page)
        self._notify()

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def remove_history(self, term: str) -> None:
        if self._history.remove(term):
            self._sync_history()
            self._notify()

    def clear_history(self) -> None:
        self._history.clear()
        self._sync_history()
        self._notify()

    def open_history(self) -> None:
        self.state.history_modal_open = True
        self._notify()

    def close_history(self) -> None:
        self.state.history_modal_open = False
        self._notify()

    # ------------------------------------------------------------------
    # Theme
    # ------------------------------------------------------------------

    def toggle_theme(self) -> bool:
        """Flip dark/light mode, persist the choice, and return the new value."""
        self.state.dark_mode = not self.state.dark_mode
        if not save_dark_mode(self._store, self.state.dark_mode):
            logger.warning("Theme preference not persisted; using it for this session only")
        self._notify()
        return self.state.dark_mode


__all__ = [
    "SearchController",
]
