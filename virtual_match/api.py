"""
REST API for the virtual match.
Thin wrappers around the scheduler and the pure simulation; every response
can be recomputed by any client from the same block id and pool.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import Any, AsyncGenerator

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from virtual_match.config import Settings
from virtual_match.services.player_pool import InvalidPlayerPoolError, JsonPlayerPool
from virtual_match.services.scheduling import InsufficientPlayersError, TimeBlockScheduler
from virtual_match.simulation.orchestrator import simulate
from virtual_match.simulation.playback import get_match_stats, get_state_at
from virtual_match.simulation.rng import InvalidSeedError
from virtual_match.simulation.schemas import Player

logger = logging.getLogger(__name__)

NOT_ENOUGH_PLAYERS = "Need at least 2 players for a virtual match"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()


@lru_cache(maxsize=1)
def _default_scheduler() -> TimeBlockScheduler:
    settings = get_settings()
    return TimeBlockScheduler(JsonPlayerPool(settings.players_path), block_seconds=settings.block_seconds)


def get_scheduler() -> TimeBlockScheduler:
    """Dependency; tests override it with a fixed pool and clock."""
    return _default_scheduler()


# ---------- Lifespan ----------
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings = get_settings()
    logger.info(
        "Virtual match API starting: block=%ds, players=%s",
        settings.block_seconds,
        settings.players_path,
    )
    yield


# ---------- FastAPI app ----------
app = FastAPI(
    title="Virtual Match API",
    description="Deterministic live virtual table-tennis match",
    version="0.1.0",
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ],
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


# ---------- Request models ----------


class PlayerIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    rating: int


class SimulateMatchRequest(BaseModel):
    seed: int = Field(..., ge=1, le=2**31 - 2)
    player_a: PlayerIn
    player_b: PlayerIn


def _pool_errors(exc: Exception) -> HTTPException:
    if isinstance(exc, InsufficientPlayersError):
        return HTTPException(status_code=409, detail=NOT_ENOUGH_PLAYERS)
    if isinstance(exc, InvalidSeedError):
        return HTTPException(status_code=400, detail=str(exc))
    return HTTPException(status_code=503, detail=str(exc))


@app.get("/players")
def list_players(scheduler: TimeBlockScheduler = Depends(get_scheduler)) -> dict[str, Any]:
    """Current pool, in selection order."""
    try:
        players = scheduler.pool_provider.players()
    except InvalidPlayerPoolError as exc:
        raise _pool_errors(exc) from exc
    return {"players": [p.to_dict() for p in players]}


@app.get("/virtual-match/current")
def current_virtual_match(scheduler: TimeBlockScheduler = Depends(get_scheduler)) -> dict[str, Any]:
    """
    The match everyone is watching right now: players, where we are in it,
    and the countdown to the next block.
    """
    now = scheduler.now()
    try:
        live = scheduler.current_match(now)
        upcoming = scheduler.next_assignment(now)
    except (InsufficientPlayersError, InvalidSeedError, InvalidPlayerPoolError) as exc:
        raise _pool_errors(exc) from exc
    return {
        **live.assignment.to_dict(),
        "elapsed_seconds": live.elapsed_seconds,
        "seconds_until_next_match": scheduler.seconds_until_next_block(now),
        "total_duration_seconds": live.timeline.total_duration_seconds,
        "state": live.state.to_dict(),
        "next_match": upcoming.to_dict(),
    }


@app.get("/virtual-match/blocks/{block_id}")
def virtual_match_for_block(
    block_id: int,
    scheduler: TimeBlockScheduler = Depends(get_scheduler),
) -> dict[str, Any]:
    """Full timeline for a block, for clients that replay locally."""
    try:
        assignment, timeline = scheduler.match_for_block(block_id)
    except (InsufficientPlayersError, InvalidSeedError, InvalidPlayerPoolError) as exc:
        raise _pool_errors(exc) from exc
    return {
        **assignment.to_dict(),
        "timeline": timeline.to_dict(),
        "stats": get_match_stats(timeline).to_dict(),
    }


@app.get("/virtual-match/blocks/{block_id}/state")
def virtual_match_state(
    block_id: int,
    elapsed: float = Query(..., ge=0),
    scheduler: TimeBlockScheduler = Depends(get_scheduler),
) -> dict[str, Any]:
    try:
        _, timeline = scheduler.match_for_block(block_id)
    except (InsufficientPlayersError, InvalidSeedError, InvalidPlayerPoolError) as exc:
        raise _pool_errors(exc) from exc
    return get_state_at(timeline, elapsed).to_dict()


@app.post("/simulate/match")
def simulate_match(req: SimulateMatchRequest) -> dict[str, Any]:
    """Simulate an arbitrary pairing with an explicit seed. Nothing is stored."""
    timeline = simulate(
        req.seed,
        Player(name=req.player_a.name, rating=req.player_a.rating),
        Player(name=req.player_b.name, rating=req.player_b.rating),
    )
    return {
        "timeline": timeline.to_dict(),
        "stats": get_match_stats(timeline).to_dict(),
    }
