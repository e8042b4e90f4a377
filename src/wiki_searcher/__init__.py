"""Wikipedia Searcher - search English Wikipedia from the terminal.

The public API is re-exported here; the Textual app lives in
:mod:`wiki_searcher.app` and is imported lazily by :func:`main`.
"""

from wiki_searcher.config import PreferenceStore, get_config_path
from wiki_searcher.controller import SearchController
from wiki_searcher.history import HistoryManager
from wiki_searcher.models import (
    AppState,
    HistoryEntry,
    PageState,
    SearchResult,
    SearchStatus,
)
from wiki_searcher.pagination import paginate, renderable_page_list
from wiki_searcher.parsing import build_article_url
from wiki_searcher.services.interfaces import (
    AppServices,
    DefaultWikipediaApiService,
    SearchClient,
    build_default_app_services,
)
from wiki_searcher.services.wikipedia_api_service import SearchRequestError

__version__ = "1.0.0"


def main() -> int:
    """Console entry point."""
    from wiki_searcher.app import main as _app_main

    return _app_main()


__all__ = [
    "AppServices",
    "AppState",
    "DefaultWikipediaApiService",
    "HistoryEntry",
    "HistoryManager",
    "PageState",
    "PreferenceStore",
    "SearchClient",
    "SearchController",
    "SearchRequestError",
    "SearchResult",
    "SearchStatus",
    "__version__",
    "build_article_url",
    "build_default_app_services",
    "get_config_path",
    "main",
    "paginate",
    "renderable_page_list",
]
