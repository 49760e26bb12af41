"""Shared handler helpers: auth guard, rate limit, sessions, replies."""

from __future__ import annotations

import functools
import html
import logging
import time
from typing import TYPE_CHECKING, Callable

from telegram.constants import ParseMode

from .. import config, view
from ..session import SESSIONS_KEY, Session, SessionRegistry

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from telegram import Update
    from telegram.ext import ContextTypes


# Global rate limit (seconds) for all commands.
_last_command_ts = 0.0


def get_registry(app) -> SessionRegistry:
    """Retrieve or initialize the session registry from application data."""
    registry = app.bot_data.get(SESSIONS_KEY)
    if registry is None:
        registry = SessionRegistry.from_settings(config.settings)
        app.bot_data[SESSIONS_KEY] = registry
    return registry


def get_session(update: "Update", context: "ContextTypes.DEFAULT_TYPE") -> Session:
    return get_registry(context.application).get(update.effective_chat.id)


async def record_error(
    command: str,
    message: str,
    exc: Exception,
    reply,
    log: logging.Logger | None = None,
):
    (log or logger).exception("%s: %s", command, message)
    await reply(f"❌ Error: {html.escape(str(exc))}", parse_mode=ParseMode.HTML)


async def reply_html(reply, session: Session | None, text: str, **kwargs) -> None:
    """Send ``text`` in Telegram-sized chunks; keyboards go on the last one."""
    if session is not None:
        warning = session.take_storage_warning()
        if warning:
            text = f"{text}\n\n{html.escape(warning)}"
    markup = kwargs.pop("reply_markup", None)
    parts = view.chunk(text)
    for idx, part in enumerate(parts):
        extra = dict(kwargs)
        if markup is not None and idx == len(parts) - 1:
            extra["reply_markup"] = markup
        await reply(
            part,
            parse_mode=ParseMode.HTML,
            disable_web_page_preview=True,
            **extra,
        )


def allowed(update: "Update") -> bool:
    """Check if the update sender is authorized to use the bot.

    Returns False if ALLOWED_CHAT_IDS is empty or the update has no chat.
    """
    if not config.ALLOWED:
        return False
    if not update.effective_chat:
        return False
    return update.effective_chat.id in config.ALLOWED


async def guard(update: "Update", context: "ContextTypes.DEFAULT_TYPE") -> bool:
    if allowed(update):
        return True
    if update and update.effective_chat:
        await update.effective_chat.send_message("⛔ Not authorized")
    return False


def rate_limit(func: Callable, name: str | None = None) -> Callable:
    """Decorator to enforce global rate limiting on command handlers.

    Uses a global timestamp check. If the limit is exceeded the user gets a
    short notice with the remaining wait time and the command is skipped.
    """

    command_name = name or func.__name__.removeprefix("cmd_")

    @functools.wraps(func)
    async def wrapper(
        update: "Update", context: "ContextTypes.DEFAULT_TYPE", *args, **kwargs
    ):
        global _last_command_ts
        now = time.monotonic()
        elapsed = now - _last_command_ts

        if elapsed < config.RATE_LIMIT_S:
            logger.debug("rate limited: %s", command_name)
            try:
                if update and getattr(update, "effective_message", None):
                    await update.effective_message.reply_text(
                        f"⏱ Rate limit: please wait {config.RATE_LIMIT_S - elapsed:.1f}s",
                    )
            except Exception as e:
                logger.debug("rate-limit notice failed to send: %s", e)
            return

        _last_command_ts = now
        return await func(update, context, *args, **kwargs)

    return wrapper
