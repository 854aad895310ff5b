"""
Service layer: who plays when (time blocks) and where players come from.
"""
from .player_pool import InvalidPlayerPoolError, JsonPlayerPool, PlayerPoolProvider, StaticPlayerPool
from .scheduling import (
    Assignment,
    InsufficientPlayersError,
    LiveMatch,
    TimeBlockScheduler,
    block_id_at,
    current_assignment,
)

__all__ = [
    "InvalidPlayerPoolError",
    "JsonPlayerPool",
    "PlayerPoolProvider",
    "StaticPlayerPool",
    "Assignment",
    "InsufficientPlayersError",
    "LiveMatch",
    "TimeBlockScheduler",
    "block_id_at",
    "current_assignment",
]
