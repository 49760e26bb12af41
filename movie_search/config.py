"""Central configuration for movie_search."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Set

logger = logging.getLogger(__name__)

DEFAULT_OMDB_BASE_URL = "https://www.omdbapi.com/"
DEFAULT_POSTER_FALLBACK = "/api/placeholder/300/445"


def _split_ints(s: str) -> Set[int]:
    """Parse comma-separated string into a set of integers.

    Args:
        s: Comma-separated string of integers (e.g., "123,456,789")

    Returns:
        Set of parsed integers. Invalid entries are silently skipped.

    Example:
        >>> _split_ints("123,456,invalid,789")
        {123, 456, 789}
    """
    out = set()
    for part in (s or "").split(","):
        p = part.strip()
        if p.isdigit():
            out.add(int(p))
    return out


def _float_env(name: str, default: float) -> float:
    raw = (os.environ.get(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Invalid %s=%r; using %s", name, raw, default)
        return default


def _int_env(name: str, default: int) -> int:
    raw = (os.environ.get(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Invalid %s=%r; using %s", name, raw, default)
        return default


@dataclass
class Settings:
    """Configuration settings for movie_search.

    All settings are loaded from environment variables with sensible defaults.
    """

    BOT_TOKEN: str | None
    ALLOWED_CHAT_IDS: Set[int]
    RATE_LIMIT_S: float
    OMDB_API_KEY: str
    OMDB_BASE_URL: str
    OMDB_TIMEOUT_S: float
    CACHE_TTL_S: float
    CACHE_MAX: int
    DEBOUNCE_S: float
    MAX_SEARCH_HISTORY: int
    POSTER_FALLBACK: str
    STATE_DIR: str
    TRENDING_QUERY: str
    NEW_RELEASES_QUERY: str


def _read_settings() -> Settings:
    """Read all configuration from environment variables.

    Returns:
        Settings object with all configuration values.

    Note:
        Invalid numeric values fall back to sensible defaults.
    """
    token = os.environ.get("BOT_TOKEN") or None
    allowed = _split_ints(os.environ.get("ALLOWED_CHAT_IDS", ""))
    rate_limit = _float_env("RATE_LIMIT_S", 1.0)

    # OMDb
    api_key = os.environ.get("OMDB_API_KEY") or ""
    base_url = os.environ.get("OMDB_BASE_URL") or DEFAULT_OMDB_BASE_URL
    timeout = _float_env("OMDB_TIMEOUT_S", 12.0)
    cache_ttl = _float_env("CACHE_TTL_S", 5 * 60.0)
    cache_max = _int_env("CACHE_MAX", 200)

    # Search behaviour
    debounce = _float_env("DEBOUNCE_S", 0.3)
    max_history = _int_env("MAX_SEARCH_HISTORY", 10)
    poster_fallback = os.environ.get("POSTER_FALLBACK") or DEFAULT_POSTER_FALLBACK
    state_dir = os.environ.get("STATE_DIR") or "/app/data/sessions"
    trending_query = os.environ.get("TRENDING_QUERY") or "avengers"
    new_releases_query = os.environ.get("NEW_RELEASES_QUERY") or "love"

    return Settings(
        BOT_TOKEN=token,
        ALLOWED_CHAT_IDS=allowed,
        RATE_LIMIT_S=rate_limit,
        OMDB_API_KEY=api_key,
        OMDB_BASE_URL=base_url,
        OMDB_TIMEOUT_S=timeout,
        CACHE_TTL_S=cache_ttl,
        CACHE_MAX=max(1, cache_max),
        DEBOUNCE_S=max(0.0, debounce),
        MAX_SEARCH_HISTORY=max(1, max_history),
        POSTER_FALLBACK=poster_fallback,
        STATE_DIR=state_dir,
        TRENDING_QUERY=trending_query,
        NEW_RELEASES_QUERY=new_releases_query,
    )


settings = _read_settings()


def validate_settings() -> None:
    """Validate critical configuration and log warnings for issues."""
    if settings.BOT_TOKEN is None:
        logger.error("BOT_TOKEN environment variable is not set")
    if not settings.ALLOWED_CHAT_IDS:
        logger.warning("ALLOWED_CHAT_IDS is empty; every chat will be refused.")
    if not settings.OMDB_API_KEY:
        logger.warning("OMDB_API_KEY is not set; catalog queries will fail.")


# Exported constants
TOKEN: str | None = settings.BOT_TOKEN
ALLOWED: set[int] = settings.ALLOWED_CHAT_IDS
RATE_LIMIT_S: float = settings.RATE_LIMIT_S
MAX_SEARCH_HISTORY: int = settings.MAX_SEARCH_HISTORY

validate_settings()
