"""View layer for formatting Telegram messages (HTML)."""

from __future__ import annotations

import html
from typing import Iterable

from .models.app_state import AppState
from .models.catalog import CatalogItem
from .utils import format_runtime, truncate_text

PLOT_MAX = 600


def bold(text: str) -> str:
    return f"<b>{html.escape(str(text))}</b>"


def code(text: str) -> str:
    return f"<code>{html.escape(str(text))}</code>"


def chunk(msg: str, size: int = 4000) -> list[str]:
    """Split message into chunks ensuring no chunk exceeds size limit."""
    if len(msg) <= size:
        return [msg]

    lines = msg.splitlines()
    chunks: list[str] = []
    current = ""
    for line in lines:
        if len(line) > size:
            if current:
                chunks.append(current)
                current = ""
            start = 0
            while start < len(line):
                chunks.append(line[start : start + size])
                start += size
            continue
        added_length = len(line) + (1 if current else 0)
        if len(current) + added_length > size and current:
            chunks.append(current)
            current = line
        else:
            current = f"{current}\n{line}" if current else line
    if current:
        chunks.append(current)
    return chunks


def _item_line(idx: int, item: CatalogItem, favorite: bool = False) -> str:
    star = " ⭐" if favorite else ""
    return (
        f"{idx}. {html.escape(item.title)} ({html.escape(item.year)}) "
        f"<i>{item.media_type.value}</i> {code(item.imdb_id)}{star}"
    )


def render_item_list(
    title: str, items: Iterable[CatalogItem], favorites: set[str] | None = None
) -> str:
    items = list(items)
    if not items:
        return f"{bold(title)}\nNo results found."
    favorites = favorites or set()
    lines = [bold(title)]
    for idx, item in enumerate(items, start=1):
        lines.append(_item_line(idx, item, item.imdb_id in favorites))
    return "\n".join(lines)


def render_results(state: AppState) -> str:
    if state.error:
        return f"❌ {html.escape(state.error)}"
    if not state.results:
        return f"No movies found for {code(state.search_term.strip())}."
    favorites = {item.imdb_id for item in state.favorites}
    header = (
        f"Search: {state.search_term.strip()} "
        f"({len(state.results)}/{state.total_results})"
    )
    msg = render_item_list(header, state.results, favorites)
    if state.has_more:
        msg += "\n\n<i>More results available: /more</i>"
    return msg


def render_details(item: CatalogItem, favorite: bool = False) -> str:
    details = item.details
    lines = [f"<b>{html.escape(item.title)}</b> ({html.escape(item.year)})"]
    lines.append(f"IMDb: {html.escape(item.rating)}")
    runtime = details.get("Runtime")
    if runtime:
        lines.append(f"Runtime: {html.escape(format_runtime(str(runtime)))}")
    for label, key in (
        ("Genre", "Genre"),
        ("Director", "Director"),
        ("Cast", "Actors"),
        ("Rated", "Rated"),
    ):
        value = details.get(key)
        if value and value != "N/A":
            lines.append(f"{label}: {html.escape(str(value))}")
    ratings = details.get("Ratings") or []
    for rating in ratings:
        if isinstance(rating, dict) and rating.get("Source"):
            lines.append(
                f"• {html.escape(str(rating['Source']))}: "
                f"{html.escape(str(rating.get('Value', '-')))}"
            )
    if item.plot:
        lines.append("")
        lines.append(html.escape(truncate_text(item.plot, PLOT_MAX)))
    lines.append("")
    lines.append("⭐ In favorites" if favorite else "☆ Not in favorites")
    lines.append(f'<a href="https://www.imdb.com/title/{item.imdb_id}/">IMDb</a>')
    return "\n".join(lines)


def render_favorites(state: AppState) -> str:
    if not state.favorites:
        return "No favorites yet. Use /fav &lt;imdb id&gt; to add one."
    return render_item_list(f"Favorites ({len(state.favorites)})", state.favorites)


def render_history(state: AppState) -> str:
    if not state.search_history:
        return "No search history."
    lines = [bold("Recent searches")]
    lines.extend(
        f"{idx}. {html.escape(term)}"
        for idx, term in enumerate(state.search_history, start=1)
    )
    return "\n".join(lines)


def render_filters(state: AppState) -> str:
    f = state.filters
    return "\n".join(
        [
            bold("Filters"),
            f"type: {code(f.type or 'all')}",
            f"year: {code(f.year or 'any')}",
            f"sort: {code(f.sort_by)}",
        ]
    )


def render_home(state: AppState) -> str:
    parts = []
    if state.trending_error:
        parts.append(f"{bold('Trending')}\n❌ {html.escape(state.trending_error)}")
    else:
        parts.append(render_item_list("Trending", state.trending[:10]))
    if state.popular_error:
        parts.append(f"{bold('New releases')}\n❌ {html.escape(state.popular_error)}")
    else:
        parts.append(render_item_list("New releases", state.popular[:10]))
    return "\n\n".join(parts)
