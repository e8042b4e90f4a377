"""Wikipedia API payload validation, article URLs, and snippet cleaning."""

from __future__ import annotations

from html.parser import HTMLParser
from typing import Any
from urllib.parse import quote

from rich.markup import escape as escape_markup

from wiki_searcher.models import WIKIPEDIA_ARTICLE_BASE_URL, SearchResult

# Characters encodeURIComponent leaves unescaped on top of quote()'s own safe set
_URI_COMPONENT_SAFE = "!*'()"


class MalformedResponseError(ValueError):
    """Raised when an API payload does not have the expected shape."""


def parse_search_response(data: Any) -> list[SearchResult]:
    """Normalize a ``list=search`` payload into SearchResult objects.

    A missing ``query`` or ``query.search`` yields an empty list. Items
    without an integer ``pageid`` or a string ``title`` are skipped.

    Raises:
        MalformedResponseError: If the root is not an object, or the
            ``query``/``search`` members have the wrong type.
    """
    if not isinstance(data, dict):
        raise MalformedResponseError("search response is not a JSON object")
    query = data.get("query")
    if query is None:
        return []
    if not isinstance(query, dict):
        raise MalformedResponseError("search response 'query' is not an object")
    hits = query.get("search")
    if hits is None:
        return []
    if not isinstance(hits, list):
        raise MalformedResponseError("search response 'query.search' is not a list")

    results: list[SearchResult] = []
    for item in hits:
        if not isinstance(item, dict):
            continue
        page_id = item.get("pageid")
        title = item.get("title")
        if not isinstance(page_id, int) or isinstance(page_id, bool):
            continue
        if not isinstance(title, str) or not title:
            continue
        snippet = item.get("snippet")
        results.append(
            SearchResult(
                page_id=page_id,
                title=title,
                snippet=snippet if isinstance(snippet, str) else "",
            )
        )
    return results


def parse_opensearch_response(data: Any, term: str) -> str | None:
    """Extract the top opensearch suggestion for ``term``.

    Returns None when there is no candidate, or when the candidate only
    differs from ``term`` by case.

    Raises:
        MalformedResponseError: If the payload is not the 4-element
            opensearch array.
    """
    if not isinstance(data, list) or len(data) < 2:
        raise MalformedResponseError("opensearch response is not a 4-element array")
    candidates = data[1]
    if not isinstance(candidates, list):
        raise MalformedResponseError("opensearch candidates are not a list")
    if not candidates:
        return None
    suggestion = candidates[0]
    if not isinstance(suggestion, str) or not suggestion:
        return None
    if suggestion.lower() == term.lower():
        return None
    return suggestion


def build_article_url(title: str) -> str:
    """Return the canonical article URL for a result title.

    >>> build_article_url("New Delhi")
    'https://en.wikipedia.org/wiki/New_Delhi'
    """
    return WIKIPEDIA_ARTICLE_BASE_URL + quote(title.replace(" ", "_"), safe=_URI_COMPONENT_SAFE)


class _SnippetMarkupBuilder(HTMLParser):
    """Convert snippet HTML to Rich markup, highlighting search matches."""

    def __init__(self, highlight_style: str | None) -> None:
        super().__init__(convert_charrefs=True)
        self._highlight_style = highlight_style
        self._pieces: list[str] = []
        self._match_depth = 0

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag != "span":
            return
        classes = dict(attrs).get("class") or ""
        if "searchmatch" in classes.split():
            self._match_depth += 1
            if self._match_depth == 1 and self._highlight_style:
                self._pieces.append(f"[{self._highlight_style}]")

    def handle_endtag(self, tag: str) -> None:
        if tag == "span" and self._match_depth > 0:
            self._match_depth -= 1
            if self._match_depth == 0 and self._highlight_style:
                self._pieces.append("[/]")

    def handle_data(self, data: str) -> None:
        self._pieces.append(escape_markup(data) if self._highlight_style else data)

    def get_markup(self) -> str:
        if self._match_depth > 0 and self._highlight_style:
            self._pieces.append("[/]")
        self._match_depth = 0
        return " ".join("".join(self._pieces).split())


def snippet_to_markup(snippet: str, highlight_style: str = "bold") -> str:
    """Render an API snippet as Rich markup with search matches highlighted."""
    if not snippet:
        return ""
    builder = _SnippetMarkupBuilder(highlight_style)
    builder.feed(snippet)
    builder.close()
    return builder.get_markup()


def snippet_to_text(snippet: str) -> str:
    """Strip all markup from an API snippet."""
    if not snippet:
        return ""
    builder = _SnippetMarkupBuilder(None)
    builder.feed(snippet)
    builder.close()
    return builder.get_markup()


__all__ = [
    "MalformedResponseError",
    "build_article_url",
    "parse_opensearch_response",
    "parse_search_response",
    "snippet_to_markup",
    "snippet_to_text",
]
