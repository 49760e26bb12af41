"""Search, details, favorites and settings command handlers."""

from __future__ import annotations

import asyncio
import html
import logging
import re

from .. import view
from ..errors import CatalogError
from ..models.app_state import SORT_OPTIONS, TYPE_OPTIONS
from .callbacks import build_results_keyboard, send_details
from .common import get_session, guard, record_error, reply_html

logger = logging.getLogger(__name__)

THEMES = ("dark", "light")
_YEAR_RE = re.compile(r"^\d{4}$")
_FILTER_KEYS = {"type": "type", "year": "year", "sort": "sort_by"}


def parse_filter_args(args: list[str]) -> dict[str, str] | None:
    """Parse ``key=value`` filter arguments; None if any argument is invalid."""
    out: dict[str, str] = {}
    for arg in args:
        key, sep, value = arg.partition("=")
        key = key.strip().lower()
        value = value.strip().lower()
        if not sep or key not in _FILTER_KEYS:
            return None
        if key == "type":
            value = "" if value in {"all", "any"} else value
            if value not in TYPE_OPTIONS:
                return None
        elif key == "year":
            value = "" if value in {"all", "any"} else value
            if value and not _YEAR_RE.match(value):
                return None
        elif value not in SORT_OPTIONS:
            return None
        out[_FILTER_KEYS[key]] = value
    return out


async def _reply_results(update, session) -> None:
    state = session.orchestrator.state
    keyboard = None if state.error else build_results_keyboard(state)
    await reply_html(
        update.message.reply_text,
        session,
        view.render_results(state),
        reply_markup=keyboard,
    )


async def cmd_search(update, context) -> None:
    if not await guard(update, context):
        return
    term = " ".join(context.args or []).strip()
    if not term:
        await update.message.reply_text("Usage: /search <title>")
        return
    session = get_session(update, context)
    await session.orchestrator.search(term)
    await _reply_results(update, session)


async def on_text(update, context) -> None:
    """Plain messages are search-term edits; rapid edits are coalesced."""
    if not await guard(update, context):
        return
    text = (update.message.text or "").strip()
    session = get_session(update, context)
    task = session.orchestrator.set_search_term(text)
    if task is None:
        await update.message.reply_text("Please enter at least 2 characters.")
        return
    await asyncio.wait({task})
    if task.cancelled():
        return
    state = session.orchestrator.state
    if state.search_term.strip() != text or state.loading:
        return
    await _reply_results(update, session)


async def cmd_more(update, context) -> None:
    if not await guard(update, context):
        return
    session = get_session(update, context)
    state = session.orchestrator.state
    if state.loading:
        await update.message.reply_text("⏳ Still loading, please wait.")
        return
    if not state.has_more:
        await update.message.reply_text("No more results.")
        return
    if not await session.orchestrator.load_more():
        return
    await _reply_results(update, session)


async def cmd_details(update, context) -> None:
    if not await guard(update, context):
        return
    if not context.args:
        await update.message.reply_text("Usage: /details <imdb id>")
        return
    session = get_session(update, context)
    item, current = await session.orchestrator.fetch_details(context.args[0].strip())
    if not current:
        return
    if item is None:
        error = session.orchestrator.state.details_error or "Failed to load details."
        await update.message.reply_text(f"❌ {error}")
        return
    await send_details(
        update.message.reply_text, update.message.reply_photo, session, item
    )


async def cmd_fav(update, context) -> None:
    if not await guard(update, context):
        return
    if not context.args:
        await update.message.reply_text("Usage: /fav <imdb id>")
        return
    imdb_id = context.args[0].strip()
    session = get_session(update, context)
    try:
        item, added = await session.orchestrator.toggle_favorite_by_id(imdb_id)
    except CatalogError as e:
        await record_error(
            "fav",
            f"toggle favorite failed for {imdb_id}",
            e,
            update.message.reply_text,
        )
        return
    verb = "Added to" if added else "Removed from"
    await reply_html(
        update.message.reply_text,
        session,
        f"{verb} favorites: <b>{html.escape(item.title)}</b> ({html.escape(item.year)})",
    )


async def cmd_favorites(update, context) -> None:
    if not await guard(update, context):
        return
    session = get_session(update, context)
    await reply_html(
        update.message.reply_text,
        session,
        view.render_favorites(session.orchestrator.state),
    )


async def cmd_clearfavorites(update, context) -> None:
    if not await guard(update, context):
        return
    session = get_session(update, context)
    session.orchestrator.clear_favorites()
    await reply_html(update.message.reply_text, session, "Favorites cleared.")


async def cmd_history(update, context) -> None:
    if not await guard(update, context):
        return
    session = get_session(update, context)
    await reply_html(
        update.message.reply_text, session, view.render_history(session.orchestrator.state)
    )


async def cmd_clearhistory(update, context) -> None:
    if not await guard(update, context):
        return
    session = get_session(update, context)
    session.orchestrator.clear_history()
    await reply_html(update.message.reply_text, session, "Search history cleared.")


async def cmd_theme(update, context) -> None:
    if not await guard(update, context):
        return
    session = get_session(update, context)
    if not context.args:
        await update.message.reply_text(f"Theme: {session.orchestrator.state.theme}")
        return
    theme = context.args[0].strip().lower()
    if theme not in THEMES:
        await update.message.reply_text("Usage: /theme [dark|light]")
        return
    session.orchestrator.set_theme(theme)
    await reply_html(update.message.reply_text, session, f"Theme set to {theme}.")


async def cmd_filters(update, context) -> None:
    if not await guard(update, context):
        return
    session = get_session(update, context)
    if not context.args:
        await reply_html(
            update.message.reply_text,
            session,
            view.render_filters(session.orchestrator.state),
        )
        return
    partial = parse_filter_args(list(context.args))
    if partial is None:
        await update.message.reply_text(
            "Usage: /filters [type=movie|series|episode|all] [year=2010|any] "
            "[sort=relevance|year_desc|year_asc|title]"
        )
        return
    await session.orchestrator.set_filters(**partial)
    state = session.orchestrator.state
    msg = view.render_filters(state)
    await reply_html(update.message.reply_text, session, msg)
    if state.search_term.strip() and (state.results or state.error):
        await _reply_results(update, session)


async def cmd_home(update, context) -> None:
    if not await guard(update, context):
        return
    session = get_session(update, context)
    await session.orchestrator.load_home_feeds()
    await reply_html(
        update.message.reply_text, session, view.render_home(session.orchestrator.state)
    )


async def cmd_reset(update, context) -> None:
    if not await guard(update, context):
        return
    session = get_session(update, context)
    session.orchestrator.reset()
    session.orchestrator.close_details()
    await update.message.reply_text("Search cleared.")
