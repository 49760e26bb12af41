"""Catalog dataclasses: normalized OMDb titles and result pages."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

from ..config import DEFAULT_POSTER_FALLBACK

NOT_AVAILABLE = "N/A"
UNKNOWN_YEAR = "Unknown"
NOT_RATED = "Not rated"
NO_PLOT = "No plot available."

# Keys that map onto CatalogItem attributes; everything else goes to details.
_CORE_KEYS = frozenset({"imdbID", "Title", "Year", "Type", "Poster", "imdbRating"})


class MediaType(str, Enum):
    MOVIE = "movie"
    SERIES = "series"
    EPISODE = "episode"

    @classmethod
    def parse(cls, raw: object) -> "MediaType":
        try:
            return cls(str(raw or "").strip().lower())
        except ValueError:
            return cls.MOVIE


def _is_missing(value: object) -> bool:
    return value is None or value == "" or value == NOT_AVAILABLE


@dataclass(frozen=True)
class CatalogItem:
    """A normalized movie/show record.

    ``details`` holds the optional fields returned by a detail query
    (plot, runtime, genre, cast, ratings by source, ...). It does not take
    part in equality, so a search hit and its detailed version compare equal.
    """

    imdb_id: str
    title: str
    year: str
    media_type: MediaType
    poster: str
    rating: str
    details: Mapping[str, Any] = field(
        default_factory=lambda: MappingProxyType({}), compare=False
    )

    @classmethod
    def from_omdb(cls, raw: Mapping[str, Any], poster_fallback: str) -> "CatalogItem":
        poster = raw.get("Poster")
        year = raw.get("Year")
        rating = raw.get("imdbRating")
        details = {k: v for k, v in raw.items() if k not in _CORE_KEYS}
        if details.get("Plot") == NOT_AVAILABLE:
            details["Plot"] = NO_PLOT
        return cls(
            imdb_id=str(raw.get("imdbID") or ""),
            title=str(raw.get("Title") or ""),
            year=UNKNOWN_YEAR if _is_missing(year) else str(year),
            media_type=MediaType.parse(raw.get("Type")),
            poster=poster_fallback if _is_missing(poster) else str(poster),
            rating=NOT_RATED if _is_missing(rating) else str(rating),
            details=MappingProxyType(details),
        )

    @classmethod
    def from_dict(
        cls, data: Mapping[str, Any], poster_fallback: str = DEFAULT_POSTER_FALLBACK
    ) -> "CatalogItem":
        """Rebuild an item persisted with :meth:`to_dict`.

        Records written by hand or by older versions may lack fields; they get
        the same placeholders as :meth:`from_omdb`.
        """
        poster = data.get("Poster")
        year = data.get("Year")
        rating = data.get("imdbRating")
        details = {k: v for k, v in data.items() if k not in _CORE_KEYS}
        return cls(
            imdb_id=str(data.get("imdbID") or ""),
            title=str(data.get("Title") or ""),
            year=UNKNOWN_YEAR if _is_missing(year) else str(year),
            media_type=MediaType.parse(data.get("Type")),
            poster=poster_fallback if _is_missing(poster) else str(poster),
            rating=NOT_RATED if _is_missing(rating) else str(rating),
            details=MappingProxyType(details),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = dict(self.details)
        out.update(
            {
                "imdbID": self.imdb_id,
                "Title": self.title,
                "Year": self.year,
                "Type": self.media_type.value,
                "Poster": self.poster,
                "imdbRating": self.rating,
            }
        )
        return out

    @property
    def plot(self) -> str | None:
        value = self.details.get("Plot")
        return str(value) if value else None


@dataclass(frozen=True)
class SearchResultPage:
    items: tuple[CatalogItem, ...]
    total_results: int
    page: int

    @classmethod
    def empty(cls, page: int) -> "SearchResultPage":
        return cls(items=(), total_results=0, page=page)
