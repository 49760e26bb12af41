"""Search orchestration: debounce, pagination, details and favorites.

The orchestrator is the only component that talks to both the catalog client
and the state store. Blocking client calls run in worker threads; every
state change goes through :meth:`StateStore.dispatch` on the event loop.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from . import actions
from .actions import Action
from .errors import CatalogError
from .models.app_state import AppState, Filters
from .models.catalog import CatalogItem
from .omdb import API_ERROR, MIN_TERM_LENGTH, OmdbClient
from .store import StateStore
from .utils import sort_items

logger = logging.getLogger(__name__)

DEBOUNCE_S = 0.3
SHORT_TERM_ERROR = "Please enter at least 2 characters"


class SearchOrchestrator:
    def __init__(
        self,
        store: StateStore,
        client: OmdbClient,
        debounce_s: float = DEBOUNCE_S,
        min_term_length: int = MIN_TERM_LENGTH,
    ) -> None:
        self._store = store
        self._client = client
        self._debounce_s = debounce_s
        self._min_term_length = min_term_length
        self._debounce_task: asyncio.Task | None = None
        self._tasks: set[asyncio.Task] = set()
        # Monotonic request counters; a response is applied only if its
        # number is still the latest issued one.
        self._search_seq = 0
        self._details_seq = 0
        self._load_more_pending = False
        self._query: tuple[str, Filters] | None = None

    @property
    def state(self) -> AppState:
        return self._store.state

    def _dispatch(self, action: Action) -> AppState:
        return self._store.dispatch(action)

    def is_valid_term(self, term: str | None) -> bool:
        return bool(term) and len(term.strip()) >= self._min_term_length

    # Debounced input

    def set_search_term(self, term: str) -> asyncio.Task | None:
        """Record a search-term edit and (re)start the quiescence timer.

        Must be called from a running event loop. Returns the debounce task,
        or None when the term is too short to be queried automatically.
        """
        self._dispatch(actions.set_search_term(term))
        self._cancel_debounce()
        if not self.is_valid_term(term):
            return None
        task = asyncio.get_running_loop().create_task(self._debounced_search(term))
        self._debounce_task = task
        self._track(task)
        return task

    async def _debounced_search(self, term: str) -> None:
        await asyncio.sleep(self._debounce_s)
        # Past the quiet period: later edits no longer cancel this request.
        if self._debounce_task is asyncio.current_task():
            self._debounce_task = None
        await self._run_search(term, self.state.filters, page=1, append=False)

    def _cancel_debounce(self) -> None:
        task = self._debounce_task
        self._debounce_task = None
        if task is not None and not task.done():
            task.cancel()

    def _track(self, task: asyncio.Task) -> None:
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    # Search

    async def search(self, term: str) -> None:
        """Run a fresh search immediately (search button / enter)."""
        self._cancel_debounce()
        if not self.is_valid_term(term):
            self._dispatch(actions.set_error(SHORT_TERM_ERROR))
            return
        self._dispatch(actions.set_search_term(term))
        await self._run_search(term, self.state.filters, page=1, append=False)

    async def load_more(self) -> bool:
        """Fetch the next page. Returns False when the request was suppressed."""
        state = self.state
        if not state.has_more or state.loading or self._load_more_pending:
            return False
        term, filters = self._query or (state.search_term, state.filters)
        self._load_more_pending = True
        try:
            await self._run_search(
                term, filters, page=state.current_page + 1, append=True
            )
        finally:
            self._load_more_pending = False
        return True

    async def _run_search(
        self, term: str, filters: Filters, page: int, append: bool
    ) -> None:
        self._search_seq += 1
        seq = self._search_seq
        self._dispatch(actions.set_error(None))
        self._dispatch(actions.set_loading(True))
        try:
            result = await asyncio.to_thread(self._client.search, term, filters, page)
        except CatalogError as exc:
            if seq == self._search_seq:
                self._dispatch(actions.set_error(str(exc)))
            return
        except Exception:
            logger.exception("Search failed for %r page %d", term, page)
            if seq == self._search_seq:
                self._dispatch(actions.set_error(API_ERROR))
            return

        if seq != self._search_seq:
            logger.debug("Discarding stale results for %r page %d", term, page)
            return

        items = sort_items(result.items, filters.sort_by)
        if append:
            self._dispatch(actions.append_results(items, page))
            return
        self._query = (term, filters)
        self._dispatch(actions.set_results(items, result.total_results, page))
        self._dispatch(actions.add_search_history(term.strip()))

    async def set_filters(self, **partial: str) -> None:
        """Merge filters and re-run the current search with them."""
        self._dispatch(actions.set_filters(**partial))
        term = self.state.search_term
        if self.is_valid_term(term):
            self._cancel_debounce()
            await self._run_search(term, self.state.filters, page=1, append=False)

    def toggle_filter_panel(self) -> bool:
        return self._dispatch(actions.toggle_filters()).show_filters

    def reset(self) -> None:
        self._cancel_debounce()
        self._search_seq += 1
        self._query = None
        self._dispatch(actions.reset_search())

    # Details

    async def get_details(self, imdb_id: str) -> CatalogItem | None:
        item, _current = await self.fetch_details(imdb_id)
        return item

    async def fetch_details(self, imdb_id: str) -> tuple[CatalogItem | None, bool]:
        """Load details; the flag is False when a newer request or
        :meth:`close_details` superseded this one before it finished.

        A current request that failed returns ``(None, True)`` with the
        message in ``details_error``.
        """
        self._details_seq += 1
        seq = self._details_seq
        self._dispatch(actions.set_details_error(None))
        self._dispatch(actions.set_loading_details(True))
        try:
            item = await asyncio.to_thread(self._client.get_details, imdb_id)
        except CatalogError as exc:
            current = seq == self._details_seq
            if current:
                self._dispatch(actions.set_details_error(str(exc)))
            return None, current
        except Exception:
            logger.exception("Details failed for %r", imdb_id)
            current = seq == self._details_seq
            if current:
                self._dispatch(actions.set_details_error(API_ERROR))
            return None, current
        if seq != self._details_seq:
            logger.debug("Discarding stale details for %r", imdb_id)
            return None, False
        self._dispatch(actions.set_selected_item(item))
        self._dispatch(actions.set_loading_details(False))
        return item, True

    def close_details(self) -> None:
        self._details_seq += 1
        self._dispatch(actions.set_selected_item(None))
        self._dispatch(actions.set_details_error(None))

    async def suggestions(self, item: CatalogItem) -> list[CatalogItem]:
        return await asyncio.to_thread(
            self._client.suggestions, item.title, item.imdb_id
        )

    # Favorites

    def is_favorite(self, imdb_id: str) -> bool:
        return self.state.is_favorite(imdb_id)

    def toggle_favorite(self, item: CatalogItem) -> bool:
        """Add or remove ``item``. Returns True if it is now a favorite."""
        if self.is_favorite(item.imdb_id):
            self._dispatch(actions.remove_favorite(item.imdb_id))
            return False
        self._dispatch(actions.add_favorite(item))
        return True

    def remove_favorite(self, imdb_id: str) -> None:
        self._dispatch(actions.remove_favorite(imdb_id))

    def clear_favorites(self) -> None:
        self._dispatch(actions.clear_favorites())

    def find_item(self, imdb_id: str) -> CatalogItem | None:
        """Look an id up among the titles this session already holds."""
        state = self.state
        candidates = [state.selected_item, *state.results, *state.favorites]
        candidates += [*state.trending, *state.popular]
        for item in candidates:
            if item is not None and item.imdb_id == imdb_id:
                return item
        return None

    async def toggle_favorite_by_id(self, imdb_id: str) -> tuple[CatalogItem, bool]:
        item = self.find_item(imdb_id)
        if item is None:
            item = await asyncio.to_thread(self._client.get_details, imdb_id)
        return item, self.toggle_favorite(item)

    # History / theme

    def clear_history(self) -> None:
        self._dispatch(actions.clear_search_history())

    def set_theme(self, theme: str) -> None:
        self._dispatch(actions.set_theme(theme))

    # Home feeds

    async def load_home_feeds(self, force: bool = False) -> None:
        state = self.state
        if not force and (state.trending or state.popular):
            return
        await asyncio.gather(
            self._load_feed(
                self._client.trending,
                actions.set_loading_trending,
                actions.set_trending,
                actions.set_trending_error,
            ),
            self._load_feed(
                self._client.new_releases,
                actions.set_loading_popular,
                actions.set_popular,
                actions.set_popular_error,
            ),
        )

    async def _load_feed(
        self,
        fetch: Callable[[], list[CatalogItem]],
        set_loading: Callable[[bool], Action],
        set_items: Callable[[list[CatalogItem]], Action],
        set_error: Callable[[str | None], Action],
    ) -> None:
        self._dispatch(set_loading(True))
        try:
            items = await asyncio.to_thread(fetch)
        except CatalogError as exc:
            self._dispatch(set_error(str(exc)))
            return
        except Exception:
            logger.exception("Home feed %s failed", getattr(fetch, "__name__", fetch))
            self._dispatch(set_error(API_ERROR))
            return
        self._dispatch(set_items(items))

    # Lifecycle

    async def wait_idle(self) -> None:
        """Wait for pending debounce/search tasks (used on shutdown and in tests)."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def close(self) -> None:
        self._cancel_debounce()
