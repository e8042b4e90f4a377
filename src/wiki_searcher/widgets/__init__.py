"""Widget classes for the search screen."""

from wiki_searcher.widgets.chrome import (
    PAGE_SLOT_COUNT,
    ContextFooter,
    PaginationBar,
    RecentHistoryBar,
    SuggestionBar,
)
from wiki_searcher.widgets.listing import SNIPPET_SUFFIX, render_result_option

__all__ = [
    "PAGE_SLOT_COUNT",
    "SNIPPET_SUFFIX",
    "ContextFooter",
    "PaginationBar",
    "RecentHistoryBar",
    "SuggestionBar",
    "render_result_option",
]
