"""Application state dataclasses (one value per search session)."""

from __future__ import annotations

from dataclasses import dataclass

from .catalog import CatalogItem

DEFAULT_THEME = "dark"

SORT_RELEVANCE = "relevance"
SORT_YEAR_DESC = "year_desc"
SORT_YEAR_ASC = "year_asc"
SORT_TITLE = "title"
SORT_OPTIONS = (SORT_RELEVANCE, SORT_YEAR_DESC, SORT_YEAR_ASC, SORT_TITLE)

TYPE_OPTIONS = ("", "movie", "series", "episode")


@dataclass(frozen=True)
class Filters:
    type: str = ""
    year: str = ""
    sort_by: str = SORT_RELEVANCE

    def to_params(self) -> dict[str, str]:
        """Upstream query parameters; sorting is applied client-side only."""
        params = {"type": self.type, "y": self.year}
        return {k: v for k, v in params.items() if v}


@dataclass(frozen=True)
class AppState:
    """Snapshot of a search session.

    Never mutated in place: every transition in :mod:`movie_search.reducer`
    returns a new value.
    """

    # Search
    search_term: str = ""
    results: tuple[CatalogItem, ...] = ()
    loading: bool = False
    error: str | None = None
    current_page: int = 1
    total_results: int = 0
    has_more: bool = False

    # Details
    selected_item: CatalogItem | None = None
    loading_details: bool = False
    details_error: str | None = None

    filters: Filters = Filters()

    # User data
    favorites: tuple[CatalogItem, ...] = ()
    search_history: tuple[str, ...] = ()

    # UI
    show_filters: bool = False
    theme: str = DEFAULT_THEME

    # Home feeds
    trending: tuple[CatalogItem, ...] = ()
    loading_trending: bool = False
    trending_error: str | None = None
    popular: tuple[CatalogItem, ...] = ()
    loading_popular: bool = False
    popular_error: str | None = None

    def is_favorite(self, imdb_id: str) -> bool:
        return any(item.imdb_id == imdb_id for item in self.favorites)
