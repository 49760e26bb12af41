"""Callback query handlers for inline keyboard buttons."""

from __future__ import annotations

import html
import logging

from telegram import InlineKeyboardButton, InlineKeyboardMarkup
from telegram.constants import ParseMode
from telegram.error import BadRequest

from .. import view
from ..errors import CatalogError
from ..models.app_state import AppState
from ..models.catalog import CatalogItem
from .common import allowed, get_registry, reply_html

logger = logging.getLogger(__name__)

RESULT_BUTTONS_MAX = 10
LABEL_MAX = 60


async def _safe_edit_message_text(query, text: str, **kwargs) -> None:
    try:
        await query.edit_message_text(text, **kwargs)
    except BadRequest as exc:
        if "Message is not modified" in str(exc):
            return
        raise


def _label(idx: int, item: CatalogItem) -> str:
    label = f"{idx}. {item.title} ({item.year})"
    if len(label) > LABEL_MAX:
        label = f"{label[: LABEL_MAX - 3]}..."
    return label


def build_results_keyboard(state: AppState) -> InlineKeyboardMarkup | None:
    """One details button per result of the last page, plus "Load more"."""
    if not state.results:
        return None
    start = max(0, len(state.results) - RESULT_BUTTONS_MAX)
    buttons: list[list[InlineKeyboardButton]] = []
    for idx, item in enumerate(state.results[start:], start=start + 1):
        if not item.imdb_id:
            continue
        buttons.append(
            [InlineKeyboardButton(_label(idx, item), callback_data=f"info:{item.imdb_id}")]
        )
    if state.has_more:
        buttons.append(
            [
                InlineKeyboardButton(
                    f"Load more ({len(state.results)}/{state.total_results})",
                    callback_data="more",
                )
            ]
        )
    return InlineKeyboardMarkup(buttons) if buttons else None


def build_details_keyboard(item: CatalogItem, favorite: bool) -> InlineKeyboardMarkup:
    fav_label = "💔 Remove favorite" if favorite else "⭐ Add favorite"
    return InlineKeyboardMarkup(
        [
            [
                InlineKeyboardButton(fav_label, callback_data=f"fav:{item.imdb_id}"),
                InlineKeyboardButton("✖️ Close", callback_data="close"),
            ]
        ]
    )


async def send_details(reply, reply_photo, session, item: CatalogItem) -> None:
    favorite = session.orchestrator.is_favorite(item.imdb_id)
    caption = view.render_details(item, favorite)
    keyboard = build_details_keyboard(item, favorite)

    # Try to send with poster image, fall back to text on failure
    # (Telegram caps photo captions at 1024 chars).
    if item.poster.startswith("http") and len(caption) <= 1024:
        try:
            await reply_photo(
                photo=item.poster,
                caption=caption,
                parse_mode=ParseMode.HTML,
                reply_markup=keyboard,
            )
            return
        except Exception as img_err:
            logger.debug("Failed to send poster image: %s", img_err)

    await reply_html(reply, session, caption, reply_markup=keyboard)


async def handle_callback_query(update, context) -> None:
    query = update.callback_query
    await query.answer()

    data = query.data or ""

    if not allowed(update):
        await _safe_edit_message_text(query, "⛔ Not authorized")
        return

    session = get_registry(context.application).get(update.effective_chat.id)
    try:
        if data.startswith("info:"):
            await _handle_info(query, session, data[len("info:") :])
        elif data.startswith("fav:"):
            await _handle_fav(query, session, data[len("fav:") :])
        elif data == "more":
            await _handle_more(query, session)
        elif data == "close":
            session.orchestrator.close_details()
            await query.edit_message_reply_markup(reply_markup=None)
        else:
            await _safe_edit_message_text(query, "❓ Unknown action")
    except Exception as e:
        logger.exception("Callback query error")
        try:
            await query.message.reply_text(f"❌ Error: {html.escape(str(e))}")
        except Exception as notify_error:
            logger.error("Failed to send error notification: %s", notify_error)


async def _handle_info(query, session, imdb_id: str) -> None:
    item, current = await session.orchestrator.fetch_details(imdb_id)
    if not current:
        return
    if item is None:
        error = session.orchestrator.state.details_error or "Failed to load details."
        await query.message.reply_text(f"❌ {error}")
        return
    await send_details(query.message.reply_text, query.message.reply_photo, session, item)


async def _handle_fav(query, session, imdb_id: str) -> None:
    try:
        item, added = await session.orchestrator.toggle_favorite_by_id(imdb_id)
    except CatalogError as exc:
        await query.message.reply_text(f"❌ {html.escape(str(exc))}")
        return
    await query.edit_message_reply_markup(
        reply_markup=build_details_keyboard(item, added)
    )
    warning = session.take_storage_warning()
    if warning:
        await query.message.reply_text(warning)


async def _handle_more(query, session) -> None:
    state = session.orchestrator.state
    if state.loading:
        await query.message.reply_text("⏳ Still loading, please wait.")
        return
    if not await session.orchestrator.load_more():
        await query.message.reply_text("No more results.")
        return
    state = session.orchestrator.state
    await reply_html(
        query.message.reply_text,
        session,
        view.render_results(state),
        reply_markup=None if state.error else build_results_keyboard(state),
    )
