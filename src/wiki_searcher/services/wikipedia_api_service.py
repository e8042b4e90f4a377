"""Internal Wikipedia API service helpers for full-text search and suggestions."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from wiki_searcher.models import (
    SEARCH_RESULT_LIMIT,
    WIKIPEDIA_API_URL,
    WIKIPEDIA_USER_AGENT,
    SearchResult,
)
from wiki_searcher.parsing import (
    MalformedResponseError,
    parse_opensearch_response,
    parse_search_response,
)

logger = logging.getLogger(__name__)

WIKIPEDIA_API_TIMEOUT = 10  # Seconds per request


class SearchRequestError(Exception):
    """A Wikipedia request failed in transport or returned an unusable payload."""


def build_search_params(term: str, limit: int = SEARCH_RESULT_LIMIT) -> dict[str, Any]:
    """Query parameters for a ``list=search`` full-text query."""
    return {
        "action": "query",
        "list": "search",
        "srsearch": term,
        "srlimit": limit,
        "utf8": "",
        "format": "json",
    }


def build_suggest_params(term: str) -> dict[str, Any]:
    """Query parameters for a single top ``opensearch`` candidate."""
    return {
        "action": "opensearch",
        "search": term,
        "limit": 1,
        "namespace": 0,
        "format": "json",
    }


async def _get_json(
    *,
    client: httpx.AsyncClient | None,
    params: dict[str, Any],
    timeout_seconds: float,
    user_agent: str,
) -> Any:
    """GET the API endpoint and decode JSON, raising SearchRequestError on failure."""
    headers = {"User-Agent": user_agent}
    try:
        if client is not None:
            response = await client.get(
                WIKIPEDIA_API_URL,
                params=params,
                headers=headers,
                timeout=timeout_seconds,
            )
        else:
            async with httpx.AsyncClient() as tmp_client:
                response = await tmp_client.get(
                    WIKIPEDIA_API_URL,
                    params=params,
                    headers=headers,
                    timeout=timeout_seconds,
                )
        response.raise_for_status()
        return response.json()
    except httpx.HTTPStatusError as exc:
        raise SearchRequestError(
            f"Wikipedia API returned HTTP {exc.response.status_code}"
        ) from exc
    except httpx.HTTPError as exc:
        raise SearchRequestError(f"Wikipedia API request failed: {exc}") from exc
    except ValueError as exc:
        raise SearchRequestError("Wikipedia API returned invalid JSON") from exc


async def fetch_search_results(
    *,
    client: httpx.AsyncClient | None,
    term: str,
    limit: int = SEARCH_RESULT_LIMIT,
    timeout_seconds: float = WIKIPEDIA_API_TIMEOUT,
    user_agent: str = WIKIPEDIA_USER_AGENT,
) -> list[SearchResult]:
    """Run a full-text search.

    Raises:
        SearchRequestError: On transport errors, HTTP errors, or a payload
            that is not shaped like a search response.
    """
    data = await _get_json(
        client=client,
        params=build_search_params(term, limit),
        timeout_seconds=timeout_seconds,
        user_agent=user_agent,
    )
    try:
        return parse_search_response(data)
    except MalformedResponseError as exc:
        raise SearchRequestError(str(exc)) from exc


async def fetch_suggestion(
    *,
    client: httpx.AsyncClient | None,
    term: str,
    timeout_seconds: float = WIKIPEDIA_API_TIMEOUT,
    user_agent: str = WIKIPEDIA_USER_AGENT,
) -> str | None:
    """Fetch the top opensearch title for ``term`` (None when it adds nothing).

    Raises:
        SearchRequestError: On transport errors or a malformed payload.
    """
    data = await _get_json(
        client=client,
        params=build_suggest_params(term),
        timeout_seconds=timeout_seconds,
        user_agent=user_agent,
    )
    try:
        return parse_opensearch_response(data, term)
    except MalformedResponseError as exc:
        raise SearchRequestError(str(exc)) from exc


__all__ = [
    "WIKIPEDIA_API_TIMEOUT",
    "SearchRequestError",
    "build_search_params",
    "build_suggest_params",
    "fetch_search_results",
    "fetch_suggestion",
]
