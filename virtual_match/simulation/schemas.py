"""
Shared types for the virtual match engine.
Immutable match timeline plus the transient playback states derived from it.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

# Players reset between points
POINT_BREAK_SECONDS = 3
MIN_POINT_SECONDS = 3
MAX_POINT_SECONDS = 15


class Side(str, Enum):
    """Side of the table. A serves first."""
    A = "A"
    B = "B"

    @property
    def opponent(self) -> Side:
        return Side.B if self is Side.A else Side.A


class MatchStatus(str, Enum):
    PLAYING = "PLAYING"
    BETWEEN_POINTS = "BETWEEN_POINTS"
    FINISHED = "FINISHED"


@dataclass(frozen=True)
class Player:
    """A competitor and their externally computed rating."""
    name: str
    rating: int

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "rating": self.rating}


@dataclass(frozen=True)
class PointRecord:
    """One simulated point. Times are seconds from match start."""
    winner: Side
    start_time: int
    end_time: int
    score_before_a: int
    score_before_b: int
    score_after_a: int
    score_after_b: int
    server: Side
    duration_seconds: int

    @property
    def score_before(self) -> tuple[int, int]:
        return (self.score_before_a, self.score_before_b)

    @property
    def score_after(self) -> tuple[int, int]:
        return (self.score_after_a, self.score_after_b)

    def to_dict(self) -> dict[str, Any]:
        return {
            "winner": self.winner.value,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "score_before": list(self.score_before),
            "score_after": list(self.score_after),
            "server": self.server.value,
            "duration_seconds": self.duration_seconds,
        }


@dataclass(frozen=True)
class MatchTimeline:
    """
    Complete, precomputed match. Built once by simulate(); every later
    query (state at time T, stats) is a pure read of this value.
    """
    seed: int
    player_a: Player
    player_b: Player
    points: tuple[PointRecord, ...]
    final_score_a: int
    final_score_b: int
    total_duration_seconds: int

    @property
    def final_score(self) -> tuple[int, int]:
        return (self.final_score_a, self.final_score_b)

    @property
    def winner(self) -> Side:
        return Side.A if self.final_score_a > self.final_score_b else Side.B

    @property
    def point_count(self) -> int:
        return len(self.points)

    def player(self, side: Side) -> Player:
        return self.player_a if side is Side.A else self.player_b

    def to_dict(self) -> dict[str, Any]:
        return {
            "seed": self.seed,
            "player_a": self.player_a.to_dict(),
            "player_b": self.player_b.to_dict(),
            "points": [p.to_dict() for p in self.points],
            "final_score": list(self.final_score),
            "winner": self.winner.value,
            "total_duration_seconds": self.total_duration_seconds,
        }


# ---------- Playback states (derived from timeline + elapsed time) ----------


@dataclass(frozen=True)
class PlayingState:
    """A point is in progress; current_score is the score before it."""
    point_number: int  # 1-based
    current_score: tuple[int, int]
    target_winner: Side
    server: Side
    seconds_left: float
    duration_seconds: int
    progress: float  # 0..1 within the point

    @property
    def status(self) -> MatchStatus:
        return MatchStatus.PLAYING

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "point_number": self.point_number,
            "current_score": list(self.current_score),
            "target_winner": self.target_winner.value,
            "server": self.server.value,
            "seconds_left": self.seconds_left,
            "duration_seconds": self.duration_seconds,
            "progress": self.progress,
        }


@dataclass(frozen=True)
class BetweenPointsState:
    """Break after point_number; current_score already includes it."""
    point_number: int
    current_score: tuple[int, int]
    last_winner: Side
    next_server: Side
    seconds_until_next: float

    @property
    def status(self) -> MatchStatus:
        return MatchStatus.BETWEEN_POINTS

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "point_number": self.point_number,
            "current_score": list(self.current_score),
            "last_winner": self.last_winner.value,
            "next_server": self.next_server.value,
            "seconds_until_next": self.seconds_until_next,
        }


@dataclass(frozen=True)
class FinishedState:
    final_score: tuple[int, int]
    winner: Side
    total_points: int
    match_duration_seconds: int

    @property
    def status(self) -> MatchStatus:
        return MatchStatus.FINISHED

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "final_score": list(self.final_score),
            "winner": self.winner.value,
            "total_points": self.total_points,
            "match_duration_seconds": self.match_duration_seconds,
        }


MatchState = Union[PlayingState, BetweenPointsState, FinishedState]


# ---------- Aggregates ----------


@dataclass(frozen=True)
class PlayerStats:
    name: str
    rating: int
    final_score: int
    points_won: int
    points_won_on_serve: int
    longest_run: int  # most consecutive points won

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "rating": self.rating,
            "final_score": self.final_score,
            "points_won": self.points_won,
            "points_won_on_serve": self.points_won_on_serve,
            "longest_run": self.longest_run,
        }


@dataclass(frozen=True)
class MatchStats:
    player_a: PlayerStats
    player_b: PlayerStats
    total_points: int
    match_duration_seconds: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "player_a": self.player_a.to_dict(),
            "player_b": self.player_b.to_dict(),
            "total_points": self.total_points,
            "match_duration_seconds": self.match_duration_seconds,
        }
