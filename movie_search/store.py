"""State container: applies reducer transitions, persists slices, notifies."""

from __future__ import annotations

import logging
from typing import Any, Callable

from . import reducer
from .actions import Action
from .config import DEFAULT_POSTER_FALLBACK, MAX_SEARCH_HISTORY
from .errors import StorageError
from .models.app_state import DEFAULT_THEME, AppState
from .models.catalog import CatalogItem
from .storage import FAVORITES_KEY, SEARCH_HISTORY_KEY, THEME_KEY, JsonFileStorage

logger = logging.getLogger(__name__)

Subscriber = Callable[[AppState], Any]
ErrorSink = Callable[[str, Exception], Any]


def _load_favorites(raw: object, poster_fallback: str) -> tuple[CatalogItem, ...]:
    if not isinstance(raw, list):
        return ()
    items: list[CatalogItem] = []
    seen: set[str] = set()
    for entry in raw:
        if not isinstance(entry, dict) or not entry.get("imdbID"):
            continue
        item = CatalogItem.from_dict(entry, poster_fallback)
        if item.imdb_id in seen:
            continue
        seen.add(item.imdb_id)
        items.append(item)
    return tuple(items)


def _load_history(raw: object, max_history: int) -> tuple[str, ...]:
    if not isinstance(raw, list):
        return ()
    out: list[str] = []
    for term in raw:
        if isinstance(term, str) and term and term not in out:
            out.append(term)
    return tuple(out[:max_history])


class StateStore:
    """Holds one :class:`AppState` and applies actions to it synchronously.

    After each transition the favorites, search history and theme slices
    are written to storage when they changed. Storage failures are logged and
    passed to ``error_sink``; the in-memory transition is kept regardless.
    """

    def __init__(
        self,
        storage: JsonFileStorage,
        error_sink: ErrorSink | None = None,
        max_history: int = MAX_SEARCH_HISTORY,
        poster_fallback: str = DEFAULT_POSTER_FALLBACK,
    ) -> None:
        self._storage = storage
        self._error_sink = error_sink
        self._max_history = max_history
        self._poster_fallback = poster_fallback
        self._state = AppState()
        self._subscribers: list[Subscriber] = []

    @property
    def state(self) -> AppState:
        return self._state

    def initialize(self) -> AppState:
        """Seed favorites, history and theme from storage."""
        theme = self._storage.get(THEME_KEY, DEFAULT_THEME)
        self._state = AppState(
            favorites=_load_favorites(
                self._storage.get(FAVORITES_KEY, []), self._poster_fallback
            ),
            search_history=_load_history(
                self._storage.get(SEARCH_HISTORY_KEY, []), self._max_history
            ),
            theme=theme if isinstance(theme, str) and theme else DEFAULT_THEME,
        )
        logger.debug(
            "Initialized state: %d favorites, %d history entries, theme=%s",
            len(self._state.favorites),
            len(self._state.search_history),
            self._state.theme,
        )
        return self._state

    def close(self) -> None:
        self._subscribers.clear()

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    def dispatch(self, action: Action) -> AppState:
        previous = self._state
        self._state = reducer.reduce(previous, action, self._max_history)
        if self._state is previous:
            return self._state
        self._persist(previous, self._state)
        self._notify(self._state)
        return self._state

    def _persist(self, previous: AppState, current: AppState) -> None:
        if current.favorites != previous.favorites:
            self._write(
                FAVORITES_KEY, [item.to_dict() for item in current.favorites]
            )
        if current.search_history != previous.search_history:
            if current.search_history:
                self._write(SEARCH_HISTORY_KEY, list(current.search_history))
            else:
                self._remove(SEARCH_HISTORY_KEY)
        if current.theme != previous.theme:
            self._write(THEME_KEY, current.theme)

    def _write(self, key: str, value: object) -> None:
        try:
            self._storage.set(key, value)
        except StorageError as exc:
            self._report(key, exc)

    def _remove(self, key: str) -> None:
        try:
            self._storage.remove(key)
        except StorageError as exc:
            self._report(key, exc)

    def _report(self, key: str, exc: Exception) -> None:
        logger.exception("Failed to persist %s", key)
        if self._error_sink is None:
            return
        try:
            self._error_sink(key, exc)
        except Exception:
            logger.exception("Error sink failed for %s", key)

    def _notify(self, state: AppState) -> None:
        for callback in list(self._subscribers):
            try:
                callback(state)
            except Exception:
                logger.exception("State subscriber %r failed", callback)
