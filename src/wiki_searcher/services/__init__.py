"""Internal service layer for app orchestration extraction."""

from wiki_searcher.services.wikipedia_api_service import (
    SearchRequestError,
    fetch_search_results,
    fetch_suggestion,
)

__all__ = [
    "SearchRequestError",
    "fetch_search_results",
    "fetch_suggestion",
]
