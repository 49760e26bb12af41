"""Entrypoint for running the movie search bot from the package.

This module wires up the Application, registers handlers and runs polling.
"""

from __future__ import annotations

import locale
import logging

from telegram import BotCommand
from telegram.ext import (
    Application,
    CallbackQueryHandler,
    CommandHandler,
    MessageHandler,
    filters,
)

from .logger import setup_logging
from . import config
from .commands import COMMANDS
from .handlers import dispatch
from .handlers.callbacks import handle_callback_query
from .session import SESSIONS_KEY, SessionRegistry

logger = logging.getLogger(__name__)


def build_application() -> Application:
    if config.TOKEN is None:
        raise RuntimeError("BOT_TOKEN environment variable is not set")

    # Concurrent updates let a newer message supersede a pending debounce.
    app = Application.builder().token(config.TOKEN).concurrent_updates(True).build()

    app.bot_data.setdefault(SESSIONS_KEY, SessionRegistry.from_settings(config.settings))

    for spec in COMMANDS:
        fn = getattr(dispatch, spec.handler)
        triggers = [spec.name, *spec.aliases]
        app.add_handler(CommandHandler(triggers, fn))

    app.add_handler(CallbackQueryHandler(handle_callback_query))
    app.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, dispatch.on_text))

    return app


async def register_bot_commands(app: Application) -> None:
    """Register bot commands for Telegram autocomplete."""
    try:
        bot_commands = [BotCommand(spec.name, spec.description) for spec in COMMANDS]
        await app.bot.set_my_commands(bot_commands)
        logger.info("Registered %d commands for autocomplete", len(bot_commands))
    except Exception as e:
        logger.warning("Failed to register bot commands: %s", e)


async def close_sessions(app: Application) -> None:
    registry = app.bot_data.get(SESSIONS_KEY)
    if isinstance(registry, SessionRegistry):
        registry.close()
        logger.info("Closed search sessions")


def init_locale() -> None:
    """Use the environment's collation so title sorting follows LANG/LC_ALL."""
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as e:
        logger.warning("Could not set collation locale, using C: %s", e)


def run() -> None:
    setup_logging()
    init_locale()
    logger.info("Starting movie_search")
    app = build_application()

    app.post_init = register_bot_commands
    app.post_shutdown = close_sessions

    # run polling; keep the stop_signals None so container shutdown behaves normally
    app.run_polling(stop_signals=None)


if __name__ == "__main__":
    run()
