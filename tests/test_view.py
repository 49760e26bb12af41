from movie_search import view
from movie_search.models.app_state import AppState, Filters
from movie_search.models.catalog import CatalogItem

from conftest import INCEPTION_DETAILS

FALLBACK = "/api/placeholder/300/445"


def _inception() -> CatalogItem:
    return CatalogItem.from_omdb(INCEPTION_DETAILS, FALLBACK)


def test_chunk_splits_long_messages() -> None:
    text = "\n".join(["x" * 50] * 200)
    parts = view.chunk(text, size=1000)
    assert len(parts) > 1
    assert all(len(part) <= 1000 for part in parts)
    assert "\n".join(parts) == text


def test_render_results_lists_titles_and_more_hint() -> None:
    item = _inception()
    state = AppState(
        search_term="inception",
        results=(item,),
        total_results=12,
        has_more=True,
        favorites=(item,),
    )
    msg = view.render_results(state)
    assert "Search: inception (1/12)" in msg
    assert "1. Inception (2010)" in msg
    assert "<code>tt1375666</code> ⭐" in msg
    assert "/more" in msg


def test_render_results_error_and_empty() -> None:
    assert view.render_results(AppState(error="Too many <results>")) == (
        "❌ Too many &lt;results&gt;"
    )
    assert "No movies found" in view.render_results(AppState(search_term="zzz"))


def test_render_details_formats_fields() -> None:
    msg = view.render_details(_inception(), favorite=True)
    assert "<b>Inception</b> (2010)" in msg
    assert "IMDb: 8.8" in msg
    assert "Runtime: 2h 28min" in msg
    assert "Director: Christopher Nolan" in msg
    assert "• Rotten Tomatoes: 87%" in msg
    assert "A thief who steals" in msg
    assert "⭐ In favorites" in msg


def test_render_details_truncates_plot() -> None:
    raw = dict(INCEPTION_DETAILS, Plot="word " * 300)
    msg = view.render_details(CatalogItem.from_omdb(raw, FALLBACK))
    assert "..." in msg
    assert "☆ Not in favorites" in msg


def test_render_history_and_filters() -> None:
    state = AppState(search_history=("batman", "alien"), filters=Filters(year="1999"))
    assert "1. batman\n2. alien" in view.render_history(state)
    assert view.render_history(AppState()) == "No search history."
    filters = view.render_filters(state)
    assert "type: <code>all</code>" in filters
    assert "year: <code>1999</code>" in filters
    assert "sort: <code>relevance</code>" in filters


def test_render_home_shows_feed_errors() -> None:
    state = AppState(trending=(_inception(),), popular_error="Request limit reached!")
    msg = view.render_home(state)
    assert "1. Inception (2010)" in msg
    assert "❌ Request limit reached!" in msg
