"""Small helpers shared by the orchestrator and the view layer."""

from __future__ import annotations

import locale
import re
import unicodedata
from typing import Iterable

from .models.app_state import SORT_TITLE, SORT_YEAR_ASC, SORT_YEAR_DESC
from .models.catalog import CatalogItem

_YEAR_RE = re.compile(r"^\s*(\d{4})")
_RUNTIME_RE = re.compile(r"^\s*(\d+)")


def parse_year(year: str | None) -> int | None:
    """Leading four-digit year ("2010", "2008–2013") or None."""
    match = _YEAR_RE.match(year or "")
    return int(match.group(1)) if match else None


def fold_title(title: str) -> str:
    """Casefolded title with accents stripped ("Émile" -> "emile")."""
    decomposed = unicodedata.normalize("NFKD", title)
    return "".join(c for c in decomposed if not unicodedata.combining(c)).casefold()


def _title_key(item: CatalogItem) -> tuple[str, str]:
    folded = fold_title(item.title)
    try:
        primary = locale.strxfrm(folded)
    except (ValueError, OSError):
        primary = folded
    return primary, item.title.casefold()


def sort_items(items: Iterable[CatalogItem], sort_by: str) -> list[CatalogItem]:
    """Return a sorted copy of ``items``.

    Years that do not parse sort below every numeric year: last for
    ``year_desc`` and first for ``year_asc``. ``relevance`` and unknown keys
    keep upstream order. Sorting is stable.
    """
    out = list(items)
    if sort_by == SORT_YEAR_DESC:
        out.sort(
            key=lambda i: (parse_year(i.year) is None, -(parse_year(i.year) or 0))
        )
    elif sort_by == SORT_YEAR_ASC:
        out.sort(
            key=lambda i: (parse_year(i.year) is not None, parse_year(i.year) or 0)
        )
    elif sort_by == SORT_TITLE:
        out.sort(key=_title_key)
    return out


def truncate_text(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


def format_runtime(runtime: str | None) -> str:
    """Format an OMDb runtime such as "148 min" as "2h 28min"."""
    if not runtime or runtime == "N/A":
        return "Unknown"
    match = _RUNTIME_RE.match(runtime)
    if not match:
        return runtime
    minutes = int(match.group(1))
    hours, remaining = divmod(minutes, 60)
    if hours == 0:
        return f"{minutes} min"
    return f"{hours}h {remaining}min"
