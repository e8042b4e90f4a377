"""Data models and constants for the Wikipedia Searcher application."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

# Directory name under the platform config root
CONFIG_APP_NAME = "wiki-searcher"

# Wikipedia endpoints
WIKIPEDIA_API_URL = "https://en.wikipedia.org/w/api.php"
WIKIPEDIA_ARTICLE_BASE_URL = "https://en.wikipedia.org/wiki/"
WIKIPEDIA_USER_AGENT = "wiki-searcher/1.0 (https://github.com/wiki-searcher/wiki-searcher)"

# Search workflow tuning
SEARCH_RESULT_LIMIT = 50
SEARCH_TIMEOUT_SECONDS = 10.0
SUGGESTION_THRESHOLD = 3  # Fetch a suggestion when results <= this count
DEFAULT_INITIAL_QUERY = "India"

# Presentation
RESULTS_PER_PAGE = 6
RECENT_HISTORY_CHIPS = 3

# History limits
HISTORY_MAX_ENTRIES = 50

# Preference store keys
DARK_MODE_KEY = "dark_mode"
SEARCH_HISTORY_KEY = "search_history"


@dataclass(frozen=True, slots=True)
class SearchResult:
    """A single full-text search hit."""

    page_id: int
    title: str
    snippet: str  # May contain HTML fragments from the API


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    """A past search term and when it was last searched (epoch milliseconds)."""

    term: str
    timestamp: int

    def to_dict(self) -> dict[str, Any]:
        return {"term": self.term, "timestamp": self.timestamp}


@dataclass(slots=True)
class PageState:
    """Current page within the result set."""

    current_page: int = 1
    total_pages: int = 0

    def __post_init__(self) -> None:
        """Clamp current_page into [1, max(total_pages, 1)]."""
        self.total_pages = max(0, self.total_pages)
        self.current_page = max(1, min(self.current_page, max(self.total_pages, 1)))


class SearchStatus(str, Enum):
    """Search workflow states."""

    IDLE = "idle"
    SEARCHING = "searching"
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(slots=True)
class AppState:
    """Everything the view renders, owned by the controller."""

    input_text: str = ""
    query: str = ""  # Query-of-record for the displayed results
    results: list[SearchResult] = field(default_factory=list)
    suggestion: str | None = None
    page: PageState = field(default_factory=PageState)
    history: list[HistoryEntry] = field(default_factory=list)
    status: SearchStatus = SearchStatus.IDLE
    last_outcome: SearchStatus | None = None  # SUCCESS or FAILURE of the latest search
    history_modal_open: bool = False
    dark_mode: bool = True

    @property
    def loading(self) -> bool:
        return self.status is SearchStatus.SEARCHING

    def to_dict(self) -> dict[str, Any]:
        """Serialize to JSON-compatible primitives."""
        data = asdict(self)
        data["status"] = self.status.value
        data["last_outcome"] = self.last_outcome.value if self.last_outcome else None
        return data


__all__ = [
    "CONFIG_APP_NAME",
    "DARK_MODE_KEY",
    "DEFAULT_INITIAL_QUERY",
    "HISTORY_MAX_ENTRIES",
    "RECENT_HISTORY_CHIPS",
    "RESULTS_PER_PAGE",
    "SEARCH_HISTORY_KEY",
    "SEARCH_RESULT_LIMIT",
    "SEARCH_TIMEOUT_SECONDS",
    "SUGGESTION_THRESHOLD",
    "WIKIPEDIA_API_URL",
    "WIKIPEDIA_ARTICLE_BASE_URL",
    "WIKIPEDIA_USER_AGENT",
    "AppState",
    "HistoryEntry",
    "PageState",
    "SearchResult",
    "SearchStatus",
]
