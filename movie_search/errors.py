"""Exception types raised by the catalog client and storage layer."""

from __future__ import annotations


class CatalogError(Exception):
    """Base class for every failure surfaced by the catalog client."""


class ValidationError(CatalogError):
    """Caller passed malformed input (short search term, empty id)."""


class NetworkError(CatalogError):
    """The upstream service could not be reached."""


class NotFoundError(CatalogError):
    """Upstream reported that the requested title does not exist."""


class UpstreamError(CatalogError):
    """Upstream reported any other error; the message is kept verbatim."""


class StorageError(Exception):
    """Durable storage could not be written."""


__all__ = [
    "CatalogError",
    "ValidationError",
    "NetworkError",
    "NotFoundError",
    "UpstreamError",
    "StorageError",
]
