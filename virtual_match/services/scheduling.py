"""
Deterministic time-block scheduling for the virtual match.

Wall-clock time is cut into fixed blocks (10 minutes by default). The block
id seeds both the player draw and the match itself, so every viewer who
evaluates this during the same block gets the same pairing and the same
match without talking to anyone.

Player selection is bounded: the second index is drawn from the remaining
n-1 slots and shifted past the first, so it always terminates and never
repeats a player.
"""
from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from typing import Any, Callable, Sequence

from virtual_match.services.player_pool import PlayerPoolProvider
from virtual_match.simulation.orchestrator import simulate
from virtual_match.simulation.playback import get_state_at
from virtual_match.simulation.rng import SeededGenerator
from virtual_match.simulation.schemas import MatchState, MatchTimeline, Player

logger = logging.getLogger(__name__)

DEFAULT_BLOCK_SECONDS = 600


class InsufficientPlayersError(ValueError):
    """Fewer than 2 players available; no match can be drawn."""


@dataclass(frozen=True)
class Assignment:
    """Who plays in a block, and with which seed."""
    block_id: int
    seed: int
    player_a: Player
    player_b: Player
    block_seconds: int

    @property
    def block_start(self) -> float:
        return float(self.block_id * self.block_seconds)

    def to_dict(self) -> dict[str, Any]:
        return {
            "block_id": self.block_id,
            "seed": self.seed,
            "block_start": self.block_start,
            "block_seconds": self.block_seconds,
            "player_a": self.player_a.to_dict(),
            "player_b": self.player_b.to_dict(),
        }


@dataclass(frozen=True)
class LiveMatch:
    """Assignment plus the match as seen at one instant."""
    assignment: Assignment
    timeline: MatchTimeline
    elapsed_seconds: float
    state: MatchState


def block_id_at(now: float, block_seconds: int = DEFAULT_BLOCK_SECONDS) -> int:
    if block_seconds <= 0:
        raise ValueError("block_seconds must be positive")
    return math.floor(now / block_seconds)


def distinct_players(player_pool: Sequence[Player]) -> list[Player]:
    """Pool order, keeping the first entry for each name."""
    seen: set[str] = set()
    distinct: list[Player] = []
    for player in player_pool:
        if player.name not in seen:
            seen.add(player.name)
            distinct.append(player)
    return distinct


def select_pair(block_id: int, player_pool: Sequence[Player]) -> tuple[Player, Player]:
    """
    Two distinct players drawn with a generator seeded by block_id.
    Repeated names count once (first entry wins), so nobody plays themselves.
    """
    distinct = distinct_players(player_pool)
    n = len(distinct)
    if n < 2:
        raise InsufficientPlayersError(f"Need at least 2 distinct players for a virtual match, got {n}")
    rng = SeededGenerator(block_id)
    first = rng.next_int(0, n - 1)
    second = rng.next_int(0, n - 2)
    if second >= first:
        second += 1
    return distinct[first], distinct[second]


def assignment_for_block(
    block_id: int,
    player_pool: Sequence[Player],
    block_seconds: int = DEFAULT_BLOCK_SECONDS,
) -> Assignment:
    player_a, player_b = select_pair(block_id, player_pool)
    return Assignment(
        block_id=block_id,
        seed=block_id,
        player_a=player_a,
        player_b=player_b,
        block_seconds=block_seconds,
    )


def current_assignment(
    now: float,
    player_pool: Sequence[Player],
    block_seconds: int = DEFAULT_BLOCK_SECONDS,
) -> Assignment:
    """Same block + same pool => same (seed, player_a, player_b), anywhere."""
    return assignment_for_block(block_id_at(now, block_seconds), player_pool, block_seconds)


class TimeBlockScheduler:
    """
    Binds a pool provider and a clock. Timelines are cached per block since
    a block's match never changes once drawn from the same pool.
    """

    def __init__(
        self,
        pool_provider: PlayerPoolProvider,
        block_seconds: int = DEFAULT_BLOCK_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if block_seconds <= 0:
            raise ValueError("block_seconds must be positive")
        self.pool_provider = pool_provider
        self.block_seconds = block_seconds
        self.clock = clock
        self._cached: tuple[Assignment, MatchTimeline] | None = None

    def now(self) -> float:
        return self.clock()

    def assignment_for_block(self, block_id: int) -> Assignment:
        return assignment_for_block(block_id, self.pool_provider.players(), self.block_seconds)

    def current_assignment(self, now: float | None = None) -> Assignment:
        now = self.now() if now is None else now
        return self.assignment_for_block(block_id_at(now, self.block_seconds))

    def next_assignment(self, now: float | None = None) -> Assignment:
        """Pairing for the block after now, announced once the current match is over."""
        now = self.now() if now is None else now
        return self.assignment_for_block(block_id_at(now, self.block_seconds) + 1)

    def timeline_for(self, assignment: Assignment) -> MatchTimeline:
        if self._cached is not None and self._cached[0] == assignment:
            return self._cached[1]
        timeline = simulate(assignment.seed, assignment.player_a, assignment.player_b)
        logger.info(
            "Virtual match for block %d: %s (%d) vs %s (%d), %d points",
            assignment.block_id,
            assignment.player_a.name,
            assignment.player_a.rating,
            assignment.player_b.name,
            assignment.player_b.rating,
            timeline.point_count,
        )
        self._cached = (assignment, timeline)
        return timeline

    def match_for_block(self, block_id: int) -> tuple[Assignment, MatchTimeline]:
        assignment = self.assignment_for_block(block_id)
        return assignment, self.timeline_for(assignment)

    def current_match(self, now: float | None = None) -> LiveMatch:
        now = self.now() if now is None else now
        assignment = self.current_assignment(now)
        timeline = self.timeline_for(assignment)
        elapsed = now - assignment.block_start
        return LiveMatch(
            assignment=assignment,
            timeline=timeline,
            elapsed_seconds=elapsed,
            state=get_state_at(timeline, elapsed),
        )

    def seconds_until_next_block(self, now: float | None = None) -> float:
        """Countdown shown once the current match has finished."""
        now = self.now() if now is None else now
        next_start = (block_id_at(now, self.block_seconds) + 1) * self.block_seconds
        return max(0.0, next_start - now)
