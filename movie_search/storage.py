"""Durable key-value storage backed by a JSON file."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from .errors import StorageError

logger = logging.getLogger(__name__)

FAVORITES_KEY = "movieFavorites"
SEARCH_HISTORY_KEY = "movieSearchHistory"
THEME_KEY = "movieAppTheme"


class JsonFileStorage:
    """Named slots persisted together in one JSON document.

    Reads never raise: a missing or corrupt file yields the default. Writes
    raise :class:`StorageError` so callers can decide how to report them.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def _read_all(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self.path.with_suffix(self.path.suffix + ".tmp")
            tmp.write_text(json.dumps(data, indent=2), encoding="utf-8")
            tmp.replace(self.path)
        except (OSError, TypeError, ValueError) as exc:
            raise StorageError(f"Failed to write {self.path}: {exc}") from exc

    def get(self, key: str, default: Any = None) -> Any:
        try:
            data = self._read_all()
        except (OSError, ValueError):
            logger.exception("Error reading storage from %s", self.path)
            return default
        return data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        try:
            data = self._read_all()
        except (OSError, ValueError):
            logger.warning("Storage at %s is unreadable; rewriting it", self.path)
            data = {}
        data[key] = value
        self._write_all(data)

    def remove(self, key: str) -> None:
        try:
            data = self._read_all()
        except (OSError, ValueError):
            data = {}
        if key not in data:
            return
        data.pop(key, None)
        self._write_all(data)
