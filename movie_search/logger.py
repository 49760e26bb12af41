"""Logging setup for the movie search bot."""

from __future__ import annotations

import logging
import os

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Per-request logs from the HTTP stacks of requests and python-telegram-bot.
_NOISY_LOGGERS = ("httpx", "httpcore", "telegram", "urllib3")


def setup_logging(level: str | None = None) -> None:
    """Configure the root logger once; ``LOG_LEVEL`` picks the level (INFO)."""
    level_name = (level or os.environ.get("LOG_LEVEL") or "INFO").upper()
    resolved = getattr(logging, level_name, logging.INFO)
    if not isinstance(resolved, int):
        resolved = logging.INFO

    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT))
        root.addHandler(handler)
    root.setLevel(resolved)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


__all__ = ["setup_logging"]
