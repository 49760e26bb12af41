"""Per-chat search sessions (store + orchestrator) kept in bot_data."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from .config import Settings
from .omdb import OmdbClient
from .orchestrator import SearchOrchestrator
from .storage import JsonFileStorage
from .store import StateStore

logger = logging.getLogger(__name__)

SESSIONS_KEY = "sessions"


@dataclass
class Session:
    chat_id: int
    store: StateStore
    orchestrator: SearchOrchestrator
    storage_warning: str | None = None

    def take_storage_warning(self) -> str | None:
        warning, self.storage_warning = self.storage_warning, None
        return warning

    def close(self) -> None:
        self.orchestrator.close()
        self.store.close()


@dataclass
class SessionRegistry:
    """Creates one session per chat, all sharing a single catalog client."""

    client: OmdbClient
    state_dir: Path
    debounce_s: float = 0.3
    max_history: int = 10
    sessions: dict[int, Session] = field(default_factory=dict)

    @classmethod
    def from_settings(cls, settings: Settings) -> "SessionRegistry":
        return cls(
            client=OmdbClient.from_settings(settings),
            state_dir=Path(settings.STATE_DIR),
            debounce_s=settings.DEBOUNCE_S,
            max_history=settings.MAX_SEARCH_HISTORY,
        )

    def get(self, chat_id: int) -> Session:
        session = self.sessions.get(chat_id)
        if session is not None:
            return session

        storage = JsonFileStorage(self.state_dir / f"{chat_id}.json")
        holder: list[Session] = []

        def _on_storage_error(key: str, exc: Exception) -> None:
            logger.warning("Chat %s: could not persist %s: %s", chat_id, key, exc)
            if holder:
                holder[0].storage_warning = "⚠️ Your changes could not be saved."

        store = StateStore(
            storage,
            error_sink=_on_storage_error,
            max_history=self.max_history,
            poster_fallback=self.client.poster_fallback,
        )
        store.initialize()
        orchestrator = SearchOrchestrator(store, self.client, debounce_s=self.debounce_s)
        session = Session(chat_id=chat_id, store=store, orchestrator=orchestrator)
        holder.append(session)
        self.sessions[chat_id] = session
        logger.info("Started search session for chat %s", chat_id)
        return session

    def close(self) -> None:
        for session in self.sessions.values():
            session.close()
        self.sessions.clear()
