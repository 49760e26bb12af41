"""Dispatch layer: applies rate limiting then calls the real handlers."""

from __future__ import annotations

from .common import rate_limit
from . import meta, search


# Meta
cmd_start = rate_limit(meta.cmd_start, name="start")
cmd_help = rate_limit(meta.cmd_help, name="help")

# Search
cmd_search = rate_limit(search.cmd_search, name="search")
cmd_more = rate_limit(search.cmd_more, name="more")
cmd_details = rate_limit(search.cmd_details, name="details")
cmd_filters = rate_limit(search.cmd_filters, name="filters")
cmd_home = rate_limit(search.cmd_home, name="home")
cmd_reset = rate_limit(search.cmd_reset, name="reset")

# Favorites
cmd_fav = rate_limit(search.cmd_fav, name="fav")
cmd_favorites = rate_limit(search.cmd_favorites, name="favorites")
cmd_clearfavorites = rate_limit(search.cmd_clearfavorites, name="clearfavorites")

# Settings
cmd_history = rate_limit(search.cmd_history, name="history")
cmd_clearhistory = rate_limit(search.cmd_clearhistory, name="clearhistory")
cmd_theme = rate_limit(search.cmd_theme, name="theme")

# Plain text is debounced by the orchestrator, not rate limited.
on_text = search.on_text
