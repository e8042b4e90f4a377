"""Service interfaces + default adapters for app-level dependency injection."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

import httpx

from wiki_searcher.models import SEARCH_RESULT_LIMIT, WIKIPEDIA_USER_AGENT, SearchResult
from wiki_searcher.services import wikipedia_api_service as _wikipedia_api
from wiki_searcher.services.wikipedia_api_service import WIKIPEDIA_API_TIMEOUT, SearchRequestError

logger = logging.getLogger(__name__)


@runtime_checkable
class SearchClient(Protocol):
    """Interface for the two read-only Wikipedia operations."""

    async def search(self, term: str) -> list[SearchResult]:
        """Full-text search; returns [] on any failure."""
        ...

    async def search_or_raise(self, term: str) -> list[SearchResult]:
        """Full-text search; raises SearchRequestError on failure."""
        ...

    async def suggest(self, term: str) -> str | None:
        """Top alternate title, or None when absent, redundant, or failed."""
        ...


class DefaultWikipediaApiService:
    """Default adapter that delegates to function-based Wikipedia API services.

    ``client_provider`` is called per request so the app can swap its shared
    ``httpx.AsyncClient`` in and out across mount/unmount.
    """

    def __init__(
        self,
        client_provider: Callable[[], httpx.AsyncClient | None] | None = None,
        *,
        limit: int = SEARCH_RESULT_LIMIT,
        timeout_seconds: float = WIKIPEDIA_API_TIMEOUT,
        user_agent: str = WIKIPEDIA_USER_AGENT,
    ) -> None:
        self._client_provider = client_provider or (lambda: None)
        self._limit = limit
        self._timeout_seconds = timeout_seconds
        self._user_agent = user_agent

    async def search_or_raise(self, term: str) -> list[SearchResult]:
        return await _wikipedia_api.fetch_search_results(
            client=self._client_provider(),
            term=term,
            limit=self._limit,
            timeout_seconds=self._timeout_seconds,
            user_agent=self._user_agent,
        )

    async def search(self, term: str) -> list[SearchResult]:
        try:
            return await self.search_or_raise(term)
        except SearchRequestError as exc:
            logger.warning("Wikipedia search for %r failed: %s", term, exc)
            return []

    async def suggest(self, term: str) -> str | None:
        try:
            return await _wikipedia_api.fetch_suggestion(
                client=self._client_provider(),
                term=term,
                timeout_seconds=self._timeout_seconds,
                user_agent=self._user_agent,
            )
        except SearchRequestError as exc:
            logger.info("Wikipedia suggestion for %r failed: %s", term, exc)
            return None


@dataclass(slots=True)
class AppServices:
    """Aggregated service interfaces consumed by the app layer."""

    wikipedia: SearchClient


def build_default_app_services(
    client_provider: Callable[[], httpx.AsyncClient | None] | None = None,
) -> AppServices:
    """Build default app services backed by existing function-based modules."""
    return AppServices(wikipedia=DefaultWikipediaApiService(client_provider))


__all__ = [
    "AppServices",
    "DefaultWikipediaApiService",
    "SearchClient",
    "build_default_app_services",
]
