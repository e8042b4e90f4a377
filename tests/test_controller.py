"""Tests for the search workflow controller."""

from __future__ import annotations

import asyncio
import logging
from unittest.mock import patch

import pytest

from wiki_searcher.controller import SearchController
from wiki_searcher.models import DARK_MODE_KEY, PageState, SearchStatus
from wiki_searcher.pagination import ELLIPSIS


@pytest.fixture
def changes() -> list[SearchStatus]:
    return []


@pytest.fixture
def controller(fake_client, history, store, changes) -> SearchController:
    ctrl = SearchController(fake_client, history, store, dark_mode=True)
    ctrl.on_change = lambda: changes.append(ctrl.state.status)
    return ctrl


# ============================================================================
# Search workflow
# ============================================================================


class TestSubmit:
    @pytest.mark.asyncio
    async def test_india_search_end_to_end(self, controller, fake_client, make_results):
        fake_client.results["India"] = make_results(13)

        assert await controller.submit("India") is True

        state = controller.state
        assert state.query == "India"
        assert len(state.results) == 13
        assert state.page == PageState(current_page=1, total_pages=3)
        assert [e.term for e in state.history] == ["India"]
        assert state.status is SearchStatus.IDLE
        assert state.last_outcome is SearchStatus.SUCCESS
        assert state.suggestion is None
        assert [r.title for r in controller.visible_results()] == [
            f"Article {i}" for i in range(1, 7)
        ]
        await controller.wait_idle()
        assert fake_client.suggest_calls == []

    @pytest.mark.asyncio
    async def test_uses_input_text_and_trims(self, controller, fake_client):
        controller.set_input("  Delhi  ")
        await controller.submit()
        assert fake_client.search_calls == ["Delhi"]
        assert controller.state.query == "Delhi"
        assert controller.state.input_text == "Delhi"

    @pytest.mark.asyncio
    async def test_blank_term_is_noop(self, controller, fake_client, changes):
        assert await controller.submit("   ") is False
        assert fake_client.search_calls == []
        assert changes == []
        assert controller.state.history == []

    @pytest.mark.asyncio
    async def test_loading_is_observable(self, controller, fake_client, changes):
        fake_client.results["India"] = []
        await controller.submit("India")
        assert changes[0] is SearchStatus.SEARCHING
        assert changes[-1] is SearchStatus.IDLE
        assert controller.state.loading is False

    @pytest.mark.asyncio
    async def test_zero_results_is_success_and_recorded(self, controller, fake_client):
        await controller.submit("xqzv")
        await controller.wait_idle()
        state = controller.state
        assert state.results == []
        assert state.last_outcome is SearchStatus.SUCCESS
        assert [e.term for e in state.history] == ["xqzv"]
        assert fake_client.suggest_calls == ["xqzv"]
        assert state.suggestion is None

    @pytest.mark.asyncio
    async def test_failure_clears_results_and_skips_history(
        self, controller, fake_client, make_results, caplog
    ):
        fake_client.results["India"] = make_results(13)
        await controller.submit("India")
        fake_client.failures.add("Delhi")

        with caplog.at_level(logging.WARNING, logger="wiki_searcher.controller"):
            await controller.submit("Delhi")

        state = controller.state
        assert state.results == []
        assert state.page == PageState(current_page=1, total_pages=0)
        assert state.last_outcome is SearchStatus.FAILURE
        assert state.status is SearchStatus.IDLE
        assert [e.term for e in state.history] == ["India"]
        assert "network down" in caplog.text

    @pytest.mark.asyncio
    async def test_timeout_is_failure(self, fake_client, history, store):
        fake_client.gates["slow"] = asyncio.Event()
        ctrl = SearchController(fake_client, history, store, timeout_seconds=0.01)

        await ctrl.submit("slow")

        assert ctrl.state.last_outcome is SearchStatus.FAILURE
        assert ctrl.state.status is SearchStatus.IDLE
        assert ctrl.state.history == []

    @pytest.mark.asyncio
    async def test_new_search_resets_page(self, controller, fake_client, make_results):
        fake_client.results["India"] = make_results(13)
        fake_client.results["Delhi"] = make_results(20)
        await controller.submit("India")
        controller.go_to_page(3)
        await controller.submit("Delhi")
        assert controller.state.page == PageState(current_page=1, total_pages=4)

    @pytest.mark.asyncio
    async def test_success_closes_history_modal(self, controller, fake_client):
        controller.open_history()
        assert controller.state.history_modal_open is True
        await controller.submit("India")
        assert controller.state.history_modal_open is False

    @pytest.mark.asyncio
    async def test_failure_keeps_history_modal_open(self, controller, fake_client):
        fake_client.failures.add("India")
        controller.open_history()
        await controller.submit("India")
        assert controller.state.history_modal_open is True


class TestStaleResponses:
    @pytest.mark.asyncio
    async def test_latest_submission_wins(self, controller, fake_client, make_results):
        fake_client.gates["slow"] = asyncio.Event()
        fake_client.results["slow"] = make_results(2)
        fake_client.results["fast"] = make_results(9)

        slow_task = asyncio.create_task(controller.submit("slow"))
        await asyncio.sleep(0)
        await controller.submit("fast")
        fake_client.gates["slow"].set()
        await slow_task

        state = controller.state
        assert state.query == "fast"
        assert len(state.results) == 9
        assert [e.term for e in state.history] == ["fast"]
        assert state.status is SearchStatus.IDLE

    @pytest.mark.asyncio
    async def test_stale_failure_is_ignored(self, controller, fake_client, make_results):
        fake_client.gates["broken"] = asyncio.Event()
        fake_client.failures.add("broken")
        fake_client.results["good"] = make_results(4)

        broken_task = asyncio.create_task(controller.submit("broken"))
        await asyncio.sleep(0)
        await controller.submit("good")
        fake_client.gates["broken"].set()
        await broken_task

        assert controller.state.last_outcome is SearchStatus.SUCCESS
        assert len(controller.state.results) == 4

    @pytest.mark.asyncio
    async def test_stale_suggestion_is_dropped(self, controller, fake_client, make_results):
        fake_client.results["Idnia"] = make_results(2)
        fake_client.suggestions["Idnia"] = "India"
        fake_client.results["India"] = make_results(13)

        await controller.submit("Idnia")
        await controller.submit("India")
        await controller.wait_idle()

        assert controller.state.suggestion is None


class TestSuggestion:
    @pytest.mark.asyncio
    async def test_misspelling_offers_suggestion(self, controller, fake_client, make_results):
        fake_client.results["Idnia"] = make_results(2)
        fake_client.suggestions["Idnia"] = "India"
        fake_client.results["India"] = make_results(13)

        await controller.submit("Idnia")
        await controller.wait_idle()
        assert controller.state.suggestion == "India"

        assert await controller.accept_suggestion() is True
        state = controller.state
        assert state.query == "India"
        assert state.input_text == "India"
        assert state.suggestion is None
        assert [e.term for e in state.history] == ["India", "Idnia"]

    @pytest.mark.asyncio
    async def test_threshold_boundary(self, controller, fake_client, make_results):
        fake_client.results["three"] = make_results(3)
        fake_client.results["four"] = make_results(4)
        await controller.submit("three")
        await controller.submit("four")
        await controller.wait_idle()
        assert fake_client.suggest_calls == ["three"]

    @pytest.mark.asyncio
    async def test_accept_without_suggestion(self, controller, fake_client):
        assert await controller.accept_suggestion() is False
        assert fake_client.search_calls == []

    @pytest.mark.asyncio
    async def test_suggestion_timeout_leaves_none(self, fake_client, history, store):
        class SlowSuggest(type(fake_client)):
            async def suggest(self, term):
                await asyncio.sleep(1)
                return "never"

        ctrl = SearchController(SlowSuggest(), history, store, timeout_seconds=0.01)
        await ctrl.submit("Idnia")
        await ctrl.wait_idle()
        assert ctrl.state.suggestion is None

    @pytest.mark.asyncio
    async def test_shutdown_cancels_pending_suggestion(self, fake_client, history, store):
        started = asyncio.Event()

        class HangingSuggest(type(fake_client)):
            async def suggest(self, term):
                started.set()
                await asyncio.Event().wait()

        ctrl = SearchController(HangingSuggest(), history, store)
        await ctrl.submit("Idnia")
        await started.wait()
        await ctrl.shutdown()
        assert ctrl.state.suggestion is None
        await ctrl.wait_idle()


# ============================================================================
# Pagination, history, theme
# ============================================================================


class TestPagination:
    @pytest.mark.asyncio
    async def test_page_navigation(self, controller, fake_client, make_results):
        fake_client.results["many"] = make_results(50)
        await controller.submit("many")

        assert controller.page_list() == [1, 2, ELLIPSIS, 9]
        controller.go_to_page(5)
        assert controller.page_list() == [1, ELLIPSIS, 4, 5, 6, ELLIPSIS, 9]
        assert controller.visible_results()[0].title == "Article 25"

        controller.go_to_page(9)
        assert [r.title for r in controller.visible_results()] == ["Article 49", "Article 50"]
        controller.next_page()
        assert controller.state.page.current_page == 9

        controller.previous_page()
        assert controller.state.page.current_page == 8

    def test_navigation_without_results_stays_on_page_one(self, controller):
        controller.next_page()
        controller.previous_page()
        assert controller.state.page.current_page == 1
        assert controller.visible_results() == []
        assert controller.page_list() == []


class TestHistoryActions:
    @pytest.mark.asyncio
    async def test_remove_and_clear(self, controller, fake_client, changes):
        for term in ["A", "B", "C", "D"]:
            await controller.submit(term)
        await controller.wait_idle()
        changes.clear()

        controller.remove_history("B")
        assert [e.term for e in controller.state.history] == ["D", "C", "A"]
        assert changes

        controller.clear_history()
        assert controller.state.history == []

    def test_remove_unknown_does_not_notify(self, controller, changes):
        controller.remove_history("missing")
        assert changes == []

    def test_open_close_history(self, controller):
        controller.open_history()
        assert controller.state.history_modal_open is True
        controller.close_history()
        assert controller.state.history_modal_open is False


class TestTheme:
    def test_toggle_persists(self, controller, store):
        assert controller.toggle_theme() is False
        assert store.get(DARK_MODE_KEY) is False
        assert controller.toggle_theme() is True
        assert store.get(DARK_MODE_KEY) is True

    def test_toggle_survives_write_failure(self, controller, caplog):
        with (
            patch("wiki_searcher.config._write_atomically", side_effect=OSError("ro")),
            caplog.at_level(logging.WARNING, logger="wiki_searcher.controller"),
        ):
            assert controller.toggle_theme() is False
        assert controller.state.dark_mode is False
        assert "not persisted" in caplog.text


def test_state_to_dict_is_json_friendly(controller):
    data = controller.state.to_dict()
    assert data["status"] == "idle"
    assert data["last_outcome"] is None
    assert data["page"] == {"current_page": 1, "total_pages": 0}
