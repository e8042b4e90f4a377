"""Shared test fixtures for Wikipedia Searcher tests."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from wiki_searcher.config import PreferenceStore
from wiki_searcher.history import HistoryManager
from wiki_searcher.models import SearchResult
from wiki_searcher.services.wikipedia_api_service import SearchRequestError
from wiki_searcher.themes import DARK_THEME, THEME_COLORS

# ── Module-level dict isolation ──────────────────────────────────────────────


@pytest.fixture(autouse=True)
def _reset_theme_colors():
    """Restore THEME_COLORS after each test.

    WikiSearcher swaps the active palette in place when the theme changes.
    """
    yield
    THEME_COLORS.clear()
    THEME_COLORS.update(DARK_THEME)


# ── Factories ────────────────────────────────────────────────────────────────


@pytest.fixture
def make_result():
    """Factory fixture for creating SearchResult instances with sensible defaults."""

    def _make(
        page_id: int = 14533,
        title: str = "India",
        snippet: str = '<span class="searchmatch">India</span> is a country in South Asia',
    ) -> SearchResult:
        return SearchResult(page_id=page_id, title=title, snippet=snippet)

    return _make


@pytest.fixture
def make_results(make_result):
    """Build ``count`` distinct results titled "Article 1".."Article N"."""

    def _make(count: int) -> list[SearchResult]:
        return [
            make_result(page_id=i, title=f"Article {i}", snippet=f"Snippet {i}")
            for i in range(1, count + 1)
        ]

    return _make


@pytest.fixture
def preferences_path(tmp_path: Path) -> Path:
    return tmp_path / "wiki-searcher" / "preferences.json"


@pytest.fixture
def store(preferences_path: Path) -> PreferenceStore:
    """Empty preference store backed by a temp file."""
    return PreferenceStore.load(preferences_path)


@pytest.fixture
def clock():
    """Deterministic millisecond clock that advances by one second per call."""

    class _Clock:
        def __init__(self) -> None:
            self.now = 1_700_000_000_000

        def __call__(self) -> int:
            self.now += 1000
            return self.now

    return _Clock()


@pytest.fixture
def history(store: PreferenceStore, clock) -> HistoryManager:
    manager = HistoryManager(store, clock=clock)
    manager.load()
    return manager


# ── Fake search client ───────────────────────────────────────────────────────


class FakeSearchClient:
    """In-memory SearchClient double.

    ``results`` and ``suggestions`` map terms to canned responses; terms in
    ``failures`` raise SearchRequestError. ``gates`` holds an asyncio.Event
    per term that the search waits on before answering, so tests can
    control completion order.
    """

    def __init__(self) -> None:
        self.results: dict[str, list[SearchResult]] = {}
        self.suggestions: dict[str, str | None] = {}
        self.failures: set[str] = set()
        self.gates: dict[str, asyncio.Event] = {}
        self.search_calls: list[str] = []
        self.suggest_calls: list[str] = []

    async def search_or_raise(self, term: str) -> list[SearchResult]:
        self.search_calls.append(term)
        gate = self.gates.get(term)
        if gate is not None:
            await gate.wait()
        if term in self.failures:
            raise SearchRequestError(f"network down while searching {term!r}")
        return list(self.results.get(term, []))

    async def search(self, term: str) -> list[SearchResult]:
        try:
            return await self.search_or_raise(term)
        except SearchRequestError:
            return []

    async def suggest(self, term: str) -> str | None:
        self.suggest_calls.append(term)
        return self.suggestions.get(term)


@pytest.fixture
def fake_client() -> FakeSearchClient:
    return FakeSearchClient()
