"""Command registry (single source of truth for help + wiring)."""

from __future__ import annotations

from .models.command_spec import CommandSpec, Group


_INFO_COMMANDS = (
    CommandSpec("start", "Info", "/start", "show help", "cmd_start"),
    CommandSpec("help", "Info", "/help", "this menu", "cmd_help"),
)

_SEARCH_COMMANDS = (
    CommandSpec(
        "search",
        "Search",
        "/search <title>",
        "search movies and shows (or just type a title)",
        "cmd_search",
        aliases=("s",),
    ),
    CommandSpec("more", "Search", "/more", "load the next page of results", "cmd_more"),
    CommandSpec(
        "details",
        "Search",
        "/details <imdb id>",
        "full plot, cast and ratings",
        "cmd_details",
        aliases=("info",),
    ),
    CommandSpec(
        "filters",
        "Search",
        "/filters [type=movie|series|episode] [year=2010] [sort=relevance|year_desc|year_asc|title]",
        "show or change search filters",
        "cmd_filters",
    ),
    CommandSpec("home", "Search", "/home", "trending titles and new releases", "cmd_home"),
    CommandSpec("reset", "Search", "/reset", "clear the current search", "cmd_reset"),
)

_FAVORITES_COMMANDS = (
    CommandSpec(
        "fav",
        "Favorites",
        "/fav <imdb id>",
        "add or remove a favorite",
        "cmd_fav",
    ),
    CommandSpec("favorites", "Favorites", "/favorites", "list favorites", "cmd_favorites"),
    CommandSpec(
        "clearfavorites",
        "Favorites",
        "/clearfavorites",
        "remove all favorites",
        "cmd_clearfavorites",
    ),
)

_SETTINGS_COMMANDS = (
    CommandSpec("history", "Settings", "/history", "recent searches", "cmd_history"),
    CommandSpec(
        "clearhistory",
        "Settings",
        "/clearhistory",
        "forget recent searches",
        "cmd_clearhistory",
    ),
    CommandSpec(
        "theme", "Settings", "/theme [dark|light]", "show or set the theme", "cmd_theme"
    ),
)


COMMANDS: tuple[CommandSpec, ...] = (
    *_INFO_COMMANDS,
    *_SEARCH_COMMANDS,
    *_FAVORITES_COMMANDS,
    *_SETTINGS_COMMANDS,
)


GROUP_ORDER: tuple[Group, ...] = (
    "Search",
    "Favorites",
    "Settings",
    "Info",
)
