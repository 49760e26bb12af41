"""Cache-related dataclasses."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class CacheEntry:
    """Cached catalog response with the monotonic time it was fetched."""

    updated_at: float
    data: object
