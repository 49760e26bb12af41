"""Pure state transitions.

``reduce`` maps (state, action) to the next state. It performs no I/O and
never raises: unknown actions and malformed payloads leave the state
unchanged. Persistence of favorites, history and theme is handled by
:class:`movie_search.store.StateStore` after the transition.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Callable

from .actions import Action, ActionType
from .config import MAX_SEARCH_HISTORY
from .models.app_state import AppState, Filters
from .models.catalog import CatalogItem

logger = logging.getLogger(__name__)

_FILTER_FIELDS = frozenset(f.name for f in dataclasses.fields(Filters))

Handler = Callable[[AppState, object, int], AppState]


def _set_results(state: AppState, payload, _max_history: int) -> AppState:
    items = tuple(payload["items"])
    total = max(int(payload["total_results"] or 0), len(items))
    return dataclasses.replace(
        state,
        results=items,
        total_results=total,
        current_page=payload["page"],
        has_more=len(items) < total,
        loading=False,
        error=None,
    )


def _append_results(state: AppState, payload, _max_history: int) -> AppState:
    results = state.results + tuple(payload["items"])
    total = max(state.total_results, len(results))
    return dataclasses.replace(
        state,
        results=results,
        total_results=total,
        current_page=payload["page"],
        has_more=len(results) < total,
        loading=False,
    )


def _set_filters(state: AppState, payload, _max_history: int) -> AppState:
    partial = {
        k: "" if v is None else str(v)
        for k, v in dict(payload or {}).items()
        if k in _FILTER_FIELDS
    }
    if not partial:
        return state
    return dataclasses.replace(
        state, filters=dataclasses.replace(state.filters, **partial)
    )


def _add_favorite(state: AppState, item, _max_history: int) -> AppState:
    if not isinstance(item, CatalogItem) or state.is_favorite(item.imdb_id):
        return state
    return dataclasses.replace(state, favorites=state.favorites + (item,))


def _remove_favorite(state: AppState, imdb_id, _max_history: int) -> AppState:
    kept = tuple(item for item in state.favorites if item.imdb_id != imdb_id)
    if len(kept) == len(state.favorites):
        return state
    return dataclasses.replace(state, favorites=kept)


def _add_search_history(state: AppState, term, max_history: int) -> AppState:
    term = str(term or "").strip()
    if not term:
        return state
    history = (term,) + tuple(t for t in state.search_history if t != term)
    return dataclasses.replace(state, search_history=history[:max_history])


def _reset_search(state: AppState, _payload, _max_history: int) -> AppState:
    return dataclasses.replace(
        state,
        search_term="",
        results=(),
        error=None,
        loading=False,
        current_page=1,
        total_results=0,
        has_more=False,
    )


def _setter(name: str, **extra) -> Handler:
    def handler(state: AppState, payload, _max_history: int) -> AppState:
        return dataclasses.replace(state, **{name: payload}, **extra)

    return handler


_HANDLERS: dict[ActionType, Handler] = {
    ActionType.SET_SEARCH_TERM: _setter("search_term"),
    ActionType.SET_LOADING: _setter("loading"),
    ActionType.SET_ERROR: _setter("error", loading=False),
    ActionType.SET_RESULTS: _set_results,
    ActionType.APPEND_RESULTS: _append_results,
    ActionType.SET_CURRENT_PAGE: _setter("current_page"),
    ActionType.SET_SELECTED_ITEM: _setter("selected_item"),
    ActionType.SET_LOADING_DETAILS: _setter("loading_details"),
    ActionType.SET_DETAILS_ERROR: _setter("details_error", loading_details=False),
    ActionType.SET_FILTERS: _set_filters,
    ActionType.TOGGLE_FILTERS: lambda s, _p, _m: dataclasses.replace(
        s, show_filters=not s.show_filters
    ),
    ActionType.ADD_FAVORITE: _add_favorite,
    ActionType.REMOVE_FAVORITE: _remove_favorite,
    ActionType.CLEAR_FAVORITES: lambda s, _p, _m: dataclasses.replace(s, favorites=()),
    ActionType.ADD_SEARCH_HISTORY: _add_search_history,
    ActionType.CLEAR_SEARCH_HISTORY: lambda s, _p, _m: dataclasses.replace(
        s, search_history=()
    ),
    ActionType.SET_THEME: _setter("theme"),
    ActionType.RESET_SEARCH: _reset_search,
    ActionType.SET_LOADING_TRENDING: _setter("loading_trending"),
    ActionType.SET_TRENDING: _setter(
        "trending", loading_trending=False, trending_error=None
    ),
    ActionType.SET_TRENDING_ERROR: _setter("trending_error", loading_trending=False),
    ActionType.SET_LOADING_POPULAR: _setter("loading_popular"),
    ActionType.SET_POPULAR: _setter(
        "popular", loading_popular=False, popular_error=None
    ),
    ActionType.SET_POPULAR_ERROR: _setter("popular_error", loading_popular=False),
}


def reduce(
    state: AppState, action: Action, max_history: int = MAX_SEARCH_HISTORY
) -> AppState:
    handler = _HANDLERS.get(action.type)
    if handler is None:
        return state
    try:
        return handler(state, action.payload, max_history)
    except (AttributeError, KeyError, TypeError, ValueError):
        logger.warning("Ignoring malformed %s action: %r", action.type, action.payload)
        return state
