"""Command specification dataclass and types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

Group = Literal["Search", "Favorites", "Settings", "Info"]


@dataclass(frozen=True)
class CommandSpec:
    name: str
    group: Group
    usage: str
    description: str
    handler: str
    aliases: tuple[str, ...] = ()
