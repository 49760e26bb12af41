"""OMDb API client with a TTL response cache."""

from __future__ import annotations

import datetime
import json
import logging
import re
import threading
import time
from collections import OrderedDict
from typing import Any

import requests

from .config import DEFAULT_OMDB_BASE_URL, DEFAULT_POSTER_FALLBACK, Settings
from .errors import NetworkError, NotFoundError, UpstreamError, ValidationError
from .models.app_state import Filters
from .models.cache import CacheEntry
from .models.catalog import CatalogItem, MediaType, SearchResultPage

logger = logging.getLogger(__name__)

NETWORK_ERROR = "Network error. Please check your connection."
API_ERROR = "Something went wrong. Please try again later."
NO_RESULTS = "No movies found. Try a different search term."

MIN_TERM_LENGTH = 2
SUGGESTION_LIMIT = 6

OMDB_USER_AGENT = "movie_search/1.0 (+https://www.omdbapi.com/)"

_NOT_FOUND_RE = re.compile(r"not found|incorrect imdb id", re.IGNORECASE)


def is_valid_search_term(term: str | None) -> bool:
    return bool(term) and len(term.strip()) >= MIN_TERM_LENGTH


def search_fingerprint(term: str, filters: Filters | None, page: int) -> str:
    params: dict[str, Any] = {"s": term.strip(), "page": page}
    params.update((filters or Filters()).to_params())
    return "search:" + json.dumps(params, sort_keys=True)


def details_fingerprint(imdb_id: str) -> str:
    return f"movie:{imdb_id}"


class OmdbClient:
    """Blocking OMDb client; run its calls through ``asyncio.to_thread``.

    Responses are cached per request fingerprint for ``cache_ttl_s``
    seconds. Expired entries are dropped when looked up; the oldest entries
    are dropped once the cache holds more than ``cache_max`` entries.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_OMDB_BASE_URL,
        timeout_s: float = 12.0,
        cache_ttl_s: float = 5 * 60.0,
        cache_max: int = 200,
        poster_fallback: str = DEFAULT_POSTER_FALLBACK,
        trending_query: str = "avengers",
        new_releases_query: str = "love",
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url
        self.timeout_s = timeout_s
        self.cache_ttl_s = cache_ttl_s
        self.cache_max = cache_max
        self.poster_fallback = poster_fallback
        self.trending_query = trending_query
        self.new_releases_query = new_releases_query
        self._cache: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> "OmdbClient":
        return cls(
            api_key=settings.OMDB_API_KEY,
            base_url=settings.OMDB_BASE_URL,
            timeout_s=settings.OMDB_TIMEOUT_S,
            cache_ttl_s=settings.CACHE_TTL_S,
            cache_max=settings.CACHE_MAX,
            poster_fallback=settings.POSTER_FALLBACK,
            trending_query=settings.TRENDING_QUERY,
            new_releases_query=settings.NEW_RELEASES_QUERY,
        )

    # Cache

    def _cache_get(self, key: str) -> object | None:
        with self._lock:
            entry = self._cache.get(key)
            if not entry:
                return None
            if (time.monotonic() - entry.updated_at) >= self.cache_ttl_s:
                self._cache.pop(key, None)
                return None
            return entry.data

    def _cache_put(self, key: str, data: object) -> None:
        with self._lock:
            self._cache[key] = CacheEntry(updated_at=time.monotonic(), data=data)
            self._cache.move_to_end(key)
            while len(self._cache) > self.cache_max:
                self._cache.popitem(last=False)

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()

    def cache_stats(self) -> dict[str, Any]:
        with self._lock:
            return {"size": len(self._cache), "keys": list(self._cache.keys())}

    # HTTP

    def _fetch(self, params: dict[str, Any]) -> dict[str, Any]:
        if not self.api_key:
            raise RuntimeError("OMDB_API_KEY is not configured")
        payload = {"apikey": self.api_key}
        payload.update({k: v for k, v in params.items() if v not in (None, "")})
        headers = {"User-Agent": OMDB_USER_AGENT, "Accept": "application/json"}
        try:
            resp = requests.get(
                self.base_url, params=payload, headers=headers, timeout=self.timeout_s
            )
        except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
            logger.warning("OMDb unreachable: %s", e)
            raise NetworkError(NETWORK_ERROR) from e
        except requests.exceptions.RequestException as e:
            logger.warning("OMDb request failed: %s", e)
            raise NetworkError(NETWORK_ERROR) from e

        try:
            data = resp.json()
        except ValueError:
            data = None

        if isinstance(data, dict) and data.get("Error"):
            message = str(data["Error"])
            logger.info("OMDb error for %s: %s", params, message)
            if _NOT_FOUND_RE.search(message):
                raise NotFoundError(message)
            raise UpstreamError(message)
        if not resp.ok:
            snippet = (resp.text or "")[:200].replace("\n", " ").strip()
            message = f"OMDb HTTP {resp.status_code}"
            raise UpstreamError(f"{message}: {snippet}" if snippet else message)
        if not isinstance(data, dict):
            raise UpstreamError(API_ERROR)
        return data

    # Queries

    def search(
        self, term: str, filters: Filters | None = None, page: int = 1
    ) -> SearchResultPage:
        if not is_valid_search_term(term):
            raise ValidationError("Search term must be at least 2 characters long")
        key = search_fingerprint(term, filters, page)
        cached = self._cache_get(key)
        if isinstance(cached, SearchResultPage):
            logger.debug("Cache hit for %s", key)
            return cached

        params: dict[str, Any] = {"s": term.strip(), "page": str(page)}
        params.update((filters or Filters()).to_params())
        try:
            data = self._fetch(params)
        except NotFoundError:
            # OMDb answers "Movie not found!" when a search has zero matches.
            result = SearchResultPage.empty(page)
        else:
            raw_items = data.get("Search") or []
            if not raw_items:
                result = SearchResultPage.empty(page)
            else:
                try:
                    total = int(data.get("totalResults") or 0)
                except (TypeError, ValueError):
                    total = 0
                result = SearchResultPage(
                    items=tuple(
                        CatalogItem.from_omdb(raw, self.poster_fallback)
                        for raw in raw_items
                        if isinstance(raw, dict)
                    ),
                    total_results=total,
                    page=page,
                )
        self._cache_put(key, result)
        return result

    def get_details(self, imdb_id: str) -> CatalogItem:
        imdb_id = (imdb_id or "").strip()
        if not imdb_id:
            raise ValidationError("Movie ID is required")
        key = details_fingerprint(imdb_id)
        cached = self._cache_get(key)
        if isinstance(cached, CatalogItem):
            logger.debug("Cache hit for %s", key)
            return cached
        data = self._fetch({"i": imdb_id, "plot": "full"})
        item = CatalogItem.from_omdb(data, self.poster_fallback)
        self._cache_put(key, item)
        return item

    def suggestions(
        self, title: str, exclude_id: str | None = None, limit: int = SUGGESTION_LIMIT
    ) -> list[CatalogItem]:
        """Titles related to ``title`` (search on its first two words)."""
        keywords = " ".join((title or "").split()[:2])
        try:
            page = self.search(keywords)
        except Exception as e:
            logger.warning("Failed to get suggestions for %r: %s", title, e)
            return []
        return [item for item in page.items if item.imdb_id != exclude_id][:limit]

    def trending(self) -> list[CatalogItem]:
        page = self.search(self.trending_query, Filters(type=MediaType.MOVIE.value))
        return list(page.items)

    def new_releases(self) -> list[CatalogItem]:
        year = str(datetime.date.today().year)
        page = self.search(
            self.new_releases_query, Filters(type=MediaType.MOVIE.value, year=year)
        )
        return [item for item in page.items if item.media_type is MediaType.MOVIE]
