"""Action types and action creators for the state reducer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable

from .models.catalog import CatalogItem


class ActionType(str, Enum):
    SET_SEARCH_TERM = "SET_SEARCH_TERM"
    SET_LOADING = "SET_LOADING"
    SET_ERROR = "SET_ERROR"
    SET_RESULTS = "SET_RESULTS"
    APPEND_RESULTS = "APPEND_RESULTS"
    SET_CURRENT_PAGE = "SET_CURRENT_PAGE"
    SET_SELECTED_ITEM = "SET_SELECTED_ITEM"
    SET_LOADING_DETAILS = "SET_LOADING_DETAILS"
    SET_DETAILS_ERROR = "SET_DETAILS_ERROR"
    SET_FILTERS = "SET_FILTERS"
    TOGGLE_FILTERS = "TOGGLE_FILTERS"
    ADD_FAVORITE = "ADD_FAVORITE"
    REMOVE_FAVORITE = "REMOVE_FAVORITE"
    CLEAR_FAVORITES = "CLEAR_FAVORITES"
    ADD_SEARCH_HISTORY = "ADD_SEARCH_HISTORY"
    CLEAR_SEARCH_HISTORY = "CLEAR_SEARCH_HISTORY"
    SET_THEME = "SET_THEME"
    RESET_SEARCH = "RESET_SEARCH"
    SET_LOADING_TRENDING = "SET_LOADING_TRENDING"
    SET_TRENDING = "SET_TRENDING"
    SET_TRENDING_ERROR = "SET_TRENDING_ERROR"
    SET_LOADING_POPULAR = "SET_LOADING_POPULAR"
    SET_POPULAR = "SET_POPULAR"
    SET_POPULAR_ERROR = "SET_POPULAR_ERROR"


@dataclass(frozen=True)
class Action:
    type: ActionType
    payload: Any = None


def set_search_term(term: str) -> Action:
    return Action(ActionType.SET_SEARCH_TERM, term)


def set_loading(loading: bool) -> Action:
    return Action(ActionType.SET_LOADING, loading)


def set_error(error: str | None) -> Action:
    return Action(ActionType.SET_ERROR, error)


def set_results(
    items: Iterable[CatalogItem], total_results: int, page: int
) -> Action:
    return Action(
        ActionType.SET_RESULTS,
        {"items": tuple(items), "total_results": total_results, "page": page},
    )


def append_results(items: Iterable[CatalogItem], page: int) -> Action:
    return Action(ActionType.APPEND_RESULTS, {"items": tuple(items), "page": page})


def set_current_page(page: int) -> Action:
    return Action(ActionType.SET_CURRENT_PAGE, page)


def set_selected_item(item: CatalogItem | None) -> Action:
    return Action(ActionType.SET_SELECTED_ITEM, item)


def set_loading_details(loading: bool) -> Action:
    return Action(ActionType.SET_LOADING_DETAILS, loading)


def set_details_error(error: str | None) -> Action:
    return Action(ActionType.SET_DETAILS_ERROR, error)


def set_filters(**partial: str) -> Action:
    return Action(ActionType.SET_FILTERS, dict(partial))


def toggle_filters() -> Action:
    return Action(ActionType.TOGGLE_FILTERS)


def add_favorite(item: CatalogItem) -> Action:
    return Action(ActionType.ADD_FAVORITE, item)


def remove_favorite(imdb_id: str) -> Action:
    return Action(ActionType.REMOVE_FAVORITE, imdb_id)


def clear_favorites() -> Action:
    return Action(ActionType.CLEAR_FAVORITES)


def add_search_history(term: str) -> Action:
    return Action(ActionType.ADD_SEARCH_HISTORY, term)


def clear_search_history() -> Action:
    return Action(ActionType.CLEAR_SEARCH_HISTORY)


def set_theme(theme: str) -> Action:
    return Action(ActionType.SET_THEME, theme)


def reset_search() -> Action:
    return Action(ActionType.RESET_SEARCH)


def set_loading_trending(loading: bool) -> Action:
    return Action(ActionType.SET_LOADING_TRENDING, loading)


def set_trending(items: Iterable[CatalogItem]) -> Action:
    return Action(ActionType.SET_TRENDING, tuple(items))


def set_trending_error(error: str | None) -> Action:
    return Action(ActionType.SET_TRENDING_ERROR, error)


def set_loading_popular(loading: bool) -> Action:
    return Action(ActionType.SET_LOADING_POPULAR, loading)


def set_popular(items: Iterable[CatalogItem]) -> Action:
    return Action(ActionType.SET_POPULAR, tuple(items))


def set_popular_error(error: str | None) -> Action:
    return Action(ActionType.SET_POPULAR_ERROR, error)
