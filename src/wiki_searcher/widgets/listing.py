"""List rendering helpers for search result entries."""

from __future__ import annotations

from rich.markup import escape

from wiki_searcher.models import SearchResult
from wiki_searcher.parsing import build_article_url, snippet_to_markup
from wiki_searcher.themes import THEME_COLORS

SNIPPET_SUFFIX = "..."


def render_result_option(result: SearchResult) -> str:
    """Render a search result as Rich markup for OptionList display.

    Three lines: bold title, article URL, and the snippet with search
    matches highlighted and a trailing ellipsis.
    """
    match_style = f"bold {THEME_COLORS['match']}"
    snippet = snippet_to_markup(result.snippet, highlight_style=match_style)
    lines = [
        f"[bold {THEME_COLORS['accent']}]{escape(result.title)}[/]",
        f"[{THEME_COLORS['link']}]{escape(build_article_url(result.title))}[/]",
        f"[{THEME_COLORS['text']}]{snippet}{SNIPPET_SUFFIX}[/]",
    ]
    return "\n".join(lines)


__all__ = [
    "SNIPPET_SUFFIX",
    "render_result_option",
]
