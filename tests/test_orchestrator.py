"""Tests for search orchestration (debounce, paging, details, favorites)."""

import asyncio
from collections import defaultdict

import pytest
import requests

from movie_search import omdb, orchestrator
from movie_search.omdb import NETWORK_ERROR
from movie_search.orchestrator import SHORT_TERM_ERROR, SearchOrchestrator
from movie_search.storage import FAVORITES_KEY

from conftest import (
    INCEPTION_DETAILS,
    INCEPTION_SEARCH,
    NOT_FOUND,
    RecordingGet,
    search_payload,
)


def _paged(total: int, per_page: int = 10):
    """Route that serves ``total`` numbered titles in pages of ``per_page``."""

    def route(params):
        page = int(params.get("page", "1"))
        start = (page - 1) * per_page
        count = max(0, min(per_page, total - start))
        titles = [(f"Batman {start + i}", str(1980 + start + i)) for i in range(count)]
        return search_payload(titles, total=total, start=start)

    return route


@pytest.fixture
def orch(store, client) -> SearchOrchestrator:
    return SearchOrchestrator(store, client, debounce_s=0.01)


@pytest.mark.asyncio
async def test_search_details_and_favorite_flow(monkeypatch, orch, storage) -> None:
    def route(params):
        return INCEPTION_DETAILS if "i" in params else INCEPTION_SEARCH

    monkeypatch.setattr(omdb.requests, "get", RecordingGet(route))

    await orch.search("inception")
    state = orch.state
    assert [item.title for item in state.results] == ["Inception"]
    assert state.total_results == 1
    assert state.has_more is False
    assert state.loading is False
    assert state.search_history == ("inception",)

    item = await orch.get_details("tt1375666")
    assert item is not None
    assert orch.state.selected_item.plot.startswith("A thief")
    assert orch.state.loading_details is False

    assert orch.toggle_favorite(item) is True
    assert orch.is_favorite("tt1375666")
    assert [entry["imdbID"] for entry in storage.get(FAVORITES_KEY)] == ["tt1375666"]

    assert orch.toggle_favorite(item) is False
    assert orch.state.favorites == ()
    assert storage.get(FAVORITES_KEY) == []


@pytest.mark.asyncio
async def test_rapid_edits_issue_single_query(monkeypatch, orch) -> None:
    fake = RecordingGet(lambda _p: INCEPTION_SEARCH)
    monkeypatch.setattr(omdb.requests, "get", fake)

    for term in ("in", "inc", "incep", "inception"):
        orch.set_search_term(term)
    await orch.wait_idle()

    assert [call["s"] for call in fake.calls] == ["inception"]
    assert orch.state.search_term == "inception"
    assert orch.state.search_history == ("inception",)


@pytest.mark.asyncio
async def test_short_term_is_never_queried(monkeypatch, orch) -> None:
    fake = RecordingGet(lambda _p: INCEPTION_SEARCH)
    monkeypatch.setattr(omdb.requests, "get", fake)

    assert orch.set_search_term("a") is None
    await orch.wait_idle()
    assert fake.calls == []
    assert orch.state.search_term == "a"

    await orch.search(" x ")
    assert fake.calls == []
    assert orch.state.error == SHORT_TERM_ERROR


@pytest.mark.asyncio
async def test_load_more_appends_and_stops(monkeypatch, orch) -> None:
    fake = RecordingGet(_paged(total=25))
    monkeypatch.setattr(omdb.requests, "get", fake)

    await orch.search("batman")
    assert len(orch.state.results) == 10
    assert orch.state.has_more is True

    assert await orch.load_more() is True
    assert await orch.load_more() is True
    state = orch.state
    assert len(state.results) == 25
    assert state.current_page == 3
    assert state.has_more is False

    assert await orch.load_more() is False
    assert [call["page"] for call in fake.calls] == ["1", "2", "3"]
    # Pagination does not add history entries.
    assert state.search_history == ("batman",)


@pytest.mark.asyncio
async def test_concurrent_load_more_is_suppressed(monkeypatch, orch) -> None:
    fake = RecordingGet(_paged(total=25))
    monkeypatch.setattr(omdb.requests, "get", fake)
    await orch.search("batman")

    results = await asyncio.gather(orch.load_more(), orch.load_more())

    assert sorted(results) == [False, True]
    assert [call["page"] for call in fake.calls] == ["1", "2"]
    assert len(orch.state.results) == 20


@pytest.mark.asyncio
async def test_stale_response_is_discarded(monkeypatch, orch) -> None:
    gates: dict[str, asyncio.Event] = defaultdict(asyncio.Event)

    async def gated_to_thread(fn, *args):
        await gates[args[0]].wait()
        return fn(*args)

    def route(params):
        return search_payload([(params["s"].title(), "2000")], total=1)

    monkeypatch.setattr(omdb.requests, "get", RecordingGet(route))
    monkeypatch.setattr(orchestrator.asyncio, "to_thread", gated_to_thread)

    first = asyncio.create_task(orch.search("alien"))
    await asyncio.sleep(0)
    second = asyncio.create_task(orch.search("batman"))
    await asyncio.sleep(0)

    gates["batman"].set()
    await second
    gates["alien"].set()
    await first

    assert [item.title for item in orch.state.results] == ["Batman"]
    assert orch.state.loading is False


@pytest.mark.asyncio
async def test_upstream_error_is_surfaced_verbatim(monkeypatch, orch) -> None:
    monkeypatch.setattr(
        omdb.requests,
        "get",
        RecordingGet(lambda _p: {"Response": "False", "Error": "Too many results."}),
    )

    await orch.search("th")

    assert orch.state.error == "Too many results."
    assert orch.state.loading is False
    assert orch.state.search_history == ()


@pytest.mark.asyncio
async def test_network_error_message(monkeypatch, orch) -> None:
    monkeypatch.setattr(
        omdb.requests,
        "get",
        RecordingGet(lambda _p: requests.exceptions.ConnectionError("down")),
    )

    await orch.search("batman")

    assert orch.state.error == NETWORK_ERROR


@pytest.mark.asyncio
async def test_zero_matches_is_not_an_error(monkeypatch, orch) -> None:
    monkeypatch.setattr(omdb.requests, "get", RecordingGet(lambda _p: NOT_FOUND))

    await orch.search("zzzzqqq")

    assert orch.state.error is None
    assert orch.state.results == ()
    assert orch.state.has_more is False


@pytest.mark.asyncio
async def test_new_search_clears_previous_error(monkeypatch, orch) -> None:
    responses = [{"Response": "False", "Error": "Too many results."}, INCEPTION_SEARCH]
    monkeypatch.setattr(omdb.requests, "get", RecordingGet(lambda _p: responses.pop(0)))

    await orch.search("th")
    await orch.search("inception")

    assert orch.state.error is None
    assert len(orch.state.results) == 1


@pytest.mark.asyncio
async def test_set_filters_reruns_and_sorts(monkeypatch, orch) -> None:
    payload = search_payload(
        [("Batman", "1989"), ("Batman Begins", "2005"), ("The Batman", "2022")],
        total=3,
    )
    fake = RecordingGet(lambda _p: payload)
    monkeypatch.setattr(omdb.requests, "get", fake)
    await orch.search("batman")

    await orch.set_filters(sort_by="year_desc")

    assert [item.year for item in orch.state.results] == ["2022", "2005", "1989"]
    # Same upstream query, so the second run is a cache hit.
    assert len(fake.calls) == 1

    await orch.set_filters(type="series")
    assert fake.calls[-1]["type"] == "series"
    assert len(fake.calls) == 2


@pytest.mark.asyncio
async def test_details_error(monkeypatch, orch) -> None:
    monkeypatch.setattr(
        omdb.requests,
        "get",
        RecordingGet(lambda _p: {"Response": "False", "Error": "Incorrect IMDb ID."}),
    )

    assert await orch.get_details("tt-bad") is None
    assert orch.state.details_error == "Incorrect IMDb ID."
    assert orch.state.loading_details is False
    assert orch.state.selected_item is None


@pytest.mark.asyncio
async def test_toggle_favorite_by_id_fetches_unknown_title(monkeypatch, orch) -> None:
    fake = RecordingGet(lambda _p: INCEPTION_DETAILS)
    monkeypatch.setattr(omdb.requests, "get", fake)

    item, added = await orch.toggle_favorite_by_id("tt1375666")

    assert added is True
    assert item.title == "Inception"
    assert fake.calls[0]["i"] == "tt1375666"


@pytest.mark.asyncio
async def test_home_feeds_report_errors_separately(monkeypatch, orch) -> None:
    def route(params):
        if params["s"] == "avengers":
            return INCEPTION_SEARCH
        return {"Response": "False", "Error": "Request limit reached!"}

    monkeypatch.setattr(omdb.requests, "get", RecordingGet(route))

    await orch.load_home_feeds()

    state = orch.state
    assert [item.title for item in state.trending] == ["Inception"]
    assert state.trending_error is None
    assert state.popular == ()
    assert state.popular_error == "Request limit reached!"
    assert state.loading_trending is False
    assert state.loading_popular is False


@pytest.mark.asyncio
async def test_reset_keeps_favorites_and_filters(monkeypatch, orch) -> None:
    monkeypatch.setattr(
        omdb.requests,
        "get",
        RecordingGet(lambda p: INCEPTION_DETAILS if "i" in p else INCEPTION_SEARCH),
    )
    await orch.set_filters(type="movie")
    await orch.search("inception")
    orch.toggle_favorite(orch.state.results[0])

    orch.reset()

    state = orch.state
    assert state.results == ()
    assert state.search_term == ""
    assert state.filters.type == "movie"
    assert len(state.favorites) == 1
    assert state.search_history == ("inception",)


@pytest.mark.asyncio
async def test_close_details_supersedes_pending_request(monkeypatch, orch) -> None:
    gate = asyncio.Event()

    async def gated_to_thread(fn, *args):
        await gate.wait()
        return fn(*args)

    monkeypatch.setattr(omdb.requests, "get", RecordingGet(lambda _p: INCEPTION_DETAILS))
    monkeypatch.setattr(orchestrator.asyncio, "to_thread", gated_to_thread)

    pending = asyncio.create_task(orch.fetch_details("tt1375666"))
    await asyncio.sleep(0)
    orch.close_details()
    gate.set()

    assert await pending == (None, False)
    assert orch.state.selected_item is None
    assert orch.state.details_error is None
