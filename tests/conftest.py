"""Shared test fixtures and dummy classes."""

from __future__ import annotations

from typing import Any, Callable

import pytest

from movie_search.omdb import OmdbClient
from movie_search.storage import JsonFileStorage
from movie_search.store import StateStore

INCEPTION_SEARCH = {
    "Search": [
        {
            "Title": "Inception",
            "Year": "2010",
            "imdbID": "tt1375666",
            "Type": "movie",
            "Poster": "https://m.media-amazon.com/images/inception.jpg",
        }
    ],
    "totalResults": "1",
    "Response": "True",
}

INCEPTION_DETAILS = {
    "Title": "Inception",
    "Year": "2010",
    "Rated": "PG-13",
    "Runtime": "148 min",
    "Genre": "Action, Adventure, Sci-Fi",
    "Director": "Christopher Nolan",
    "Actors": "Leonardo DiCaprio, Joseph Gordon-Levitt, Elliot Page",
    "Plot": "A thief who steals corporate secrets through the use of "
    "dream-sharing technology is given the inverse task of planting an idea.",
    "Poster": "https://m.media-amazon.com/images/inception.jpg",
    "Ratings": [
        {"Source": "Internet Movie Database", "Value": "8.8/10"},
        {"Source": "Rotten Tomatoes", "Value": "87%"},
    ],
    "imdbRating": "8.8",
    "imdbID": "tt1375666",
    "Type": "movie",
    "Response": "True",
}

NOT_FOUND = {"Response": "False", "Error": "Movie not found!"}


def search_payload(titles: list[tuple[str, str]], total: int, start: int = 0) -> dict:
    return {
        "Search": [
            {
                "Title": title,
                "Year": year,
                "imdbID": f"tt{start + idx:07d}",
                "Type": "movie",
                "Poster": "N/A",
            }
            for idx, (title, year) in enumerate(titles)
        ],
        "totalResults": str(total),
        "Response": "True",
    }


class DummyResponse:
    """Dummy HTTP response for testing."""

    def __init__(self, data: object, status: int = 200, text: str = "") -> None:
        self._data = data
        self.status_code = status
        self.text = text or str(data)
        self.ok = 200 <= status < 300

    def json(self) -> object:
        if isinstance(self._data, Exception):
            raise self._data
        return self._data


class RecordingGet:
    """Stand-in for ``requests.get`` that records query params."""

    def __init__(self, route: Callable[[dict[str, Any]], object]) -> None:
        self.route = route
        self.calls: list[dict[str, Any]] = []

    def __call__(self, url: str, params=None, headers=None, timeout=None):
        params = dict(params or {})
        self.calls.append(params)
        result = self.route(params)
        if isinstance(result, BaseException):
            raise result
        if isinstance(result, DummyResponse):
            return result
        return DummyResponse(result)


class DummyChat:
    """Dummy Telegram chat for testing."""

    def __init__(self, chat_id: int) -> None:
        self.id = chat_id
        self.sent: list[str] = []

    async def send_message(self, text: str) -> None:
        self.sent.append(text)


class DummyMessage:
    """Dummy Telegram message for testing."""

    def __init__(self, text: str | None = None) -> None:
        self.text = text
        self.replies: list[str] = []
        self.markups: list[object] = []
        self.photos: list[tuple[str, str]] = []  # (photo_url, caption)

    async def reply_text(self, text: str, reply_markup=None, **_: Any) -> None:
        self.replies.append(text)
        self.markups.append(reply_markup)

    async def reply_photo(self, photo: str, caption: str = "", **_: Any) -> None:
        self.photos.append((photo, caption))


class DummyCallbackQuery:
    def __init__(self, message: DummyMessage, data: str = "") -> None:
        self.message = message
        self.data = data
        self.edited: list[str] = []
        self.reply_markup = None

    async def answer(self, text=None, **_: Any) -> None:
        pass

    async def edit_message_text(self, text: str, reply_markup=None, **_: Any) -> None:
        self.edited.append(text)
        self.reply_markup = reply_markup

    async def edit_message_reply_markup(self, reply_markup=None, **_: Any) -> None:
        self.reply_markup = reply_markup


class DummyUpdate:
    """Dummy Telegram update for testing."""

    def __init__(self, chat_id: int, text: str | None = None) -> None:
        self.effective_chat = DummyChat(chat_id)
        self.message = DummyMessage(text)
        self.effective_message = self.message
        self.callback_query = DummyCallbackQuery(self.message)


class DummyApplication:
    """Dummy Telegram application for testing."""

    def __init__(self) -> None:
        self.bot_data: dict[str, object] = {}


class DummyContext:
    """Dummy Telegram context for testing."""

    def __init__(
        self, args: list[str] | None = None, application: DummyApplication | None = None
    ) -> None:
        self.args = args or []
        self.application = application or DummyApplication()


@pytest.fixture
def client() -> OmdbClient:
    return OmdbClient(api_key="test-key", cache_ttl_s=300, cache_max=50)


@pytest.fixture
def storage(tmp_path) -> JsonFileStorage:
    return JsonFileStorage(tmp_path / "state.json")


@pytest.fixture
def store(storage) -> StateStore:
    s = StateStore(storage)
    s.initialize()
    return s
