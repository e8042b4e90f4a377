"""Property-based tests using Hypothesis.

Verifies invariants of pagination and history. Each test runs 50 examples
in CI, 200 in dev.

Run:
    pytest tests/test_properties.py -v
    pytest tests/test_properties.py -v --hypothesis-seed=0  # reproducible
"""

from __future__ import annotations

import hypothesis.strategies as st
from hypothesis import given, settings

from wiki_searcher.config import PreferenceStore
from wiki_searcher.history import HistoryManager, parse_history
from wiki_searcher.models import HISTORY_MAX_ENTRIES
from wiki_searcher.pagination import (
    ELLIPSIS,
    page_count,
    paginate,
    renderable_page_list,
)
from wiki_searcher.parsing import build_article_url

# ── Hypothesis profiles ─────────────────────────────────────────────
settings.register_profile("ci", max_examples=50, deadline=None)
settings.register_profile("dev", max_examples=200, deadline=None)
settings.load_profile("ci")

# ── Custom strategies ────────────────────────────────────────────────

_terms = st.text(min_size=1, max_size=12).filter(lambda s: s.strip() != "")


class _MemoryStore(PreferenceStore):
    """PreferenceStore that never touches disk."""

    def _flush(self) -> bool:
        return True


# ── Pagination ───────────────────────────────────────────────────────


@given(
    items=st.lists(st.integers(), max_size=120),
    page_size=st.integers(min_value=1, max_value=20),
)
def test_pages_concatenate_to_input(items, page_size):
    total = page_count(len(items), page_size)
    rebuilt: list[int] = []
    for page in range(1, total + 1):
        chunk = paginate(items, page, page_size)
        assert 1 <= len(chunk) <= page_size
        rebuilt.extend(chunk)
    assert rebuilt == items
    assert paginate(items, total + 1, page_size) == []


@given(total=st.integers(min_value=1, max_value=500), data=st.data())
def test_page_list_shape(total, data):
    current = data.draw(st.integers(min_value=1, max_value=total))
    labels = renderable_page_list(current, total)
    numbers = [label for label in labels if label != ELLIPSIS]

    assert labels[0] == 1
    assert labels[-1] == total
    assert current in numbers
    assert numbers == sorted(set(numbers))
    assert len(labels) <= 7
    for left, right in zip(labels, labels[1:], strict=False):
        assert not (left == ELLIPSIS and right == ELLIPSIS)
        if left != ELLIPSIS and right != ELLIPSIS:
            assert right == left + 1


# ── History ──────────────────────────────────────────────────────────


@given(terms=st.lists(_terms, max_size=80))
def test_history_is_unique_capped_and_newest_first(terms):
    ticks = iter(range(1, 10_000))
    manager = HistoryManager(_MemoryStore(), clock=lambda: next(ticks))
    for term in terms:
        manager.record(term)

    recorded = [entry.term for entry in manager.entries]
    assert len(recorded) == len(set(recorded))
    assert len(recorded) <= HISTORY_MAX_ENTRIES
    expected: list[str] = []
    for term in reversed(terms):
        if term not in expected:
            expected.append(term)
    assert recorded == expected[:HISTORY_MAX_ENTRIES]
    timestamps = [entry.timestamp for entry in manager.entries]
    assert timestamps == sorted(timestamps, reverse=True)


@given(terms=st.lists(_terms, max_size=60))
def test_history_serialization_round_trip(terms):
    ticks = iter(range(1, 10_000))
    manager = HistoryManager(_MemoryStore(), clock=lambda: next(ticks))
    for term in terms:
        manager.record(term)
    payload = [entry.to_dict() for entry in manager.entries]
    assert parse_history(payload) == list(manager.entries)


# ── URLs ─────────────────────────────────────────────────────────────


@given(title=st.text(min_size=1, max_size=40))
def test_article_url_has_no_spaces(title):
    url = build_article_url(title)
    assert url.startswith("https://en.wikipedia.org/wiki/")
    assert " " not in url
