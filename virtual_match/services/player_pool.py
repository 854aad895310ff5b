"""
Player pool providers. Ratings are computed elsewhere (historical match
results); this module only hands the scheduler a list of {name, rating}.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, Protocol

from pydantic import BaseModel, Field, ValidationError

from virtual_match.simulation.schemas import Player

logger = logging.getLogger(__name__)


class InvalidPlayerPoolError(ValueError):
    """Pool source is missing or malformed."""


class PlayerPoolProvider(Protocol):
    def players(self) -> list[Player]:
        ...


class PlayerEntry(BaseModel):
    name: str = Field(..., min_length=1)
    rating: int


class PlayerPoolFile(BaseModel):
    players: list[PlayerEntry] = Field(default_factory=list)


class StaticPlayerPool:
    """In-memory pool; order matters, since selection is by index."""

    def __init__(self, players: Iterable[Player]) -> None:
        self._players = list(players)

    def players(self) -> list[Player]:
        return list(self._players)


class JsonPlayerPool:
    """
    Reads {"players": [{"name": ..., "rating": ...}, ...]} on every call,
    so a rating refresh on disk is picked up at the next time block.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def players(self) -> list[Player]:
        if not self.path.exists():
            raise InvalidPlayerPoolError(f"Player pool file not found: {self.path}")
        try:
            data = PlayerPoolFile.model_validate(json.loads(self.path.read_text()))
        except (json.JSONDecodeError, ValidationError) as exc:
            raise InvalidPlayerPoolError(f"Malformed player pool file {self.path}: {exc}") from exc
        names = [p.name for p in data.players]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise InvalidPlayerPoolError(
                f"Duplicate player names in {self.path}: {', '.join(duplicates)}"
            )
        logger.debug("Loaded %d players from %s", len(data.players), self.path)
        return [Player(name=p.name, rating=p.rating) for p in data.players]
