"""
Deterministic match simulation: seeded generator, calibrated point model,
point-by-point timeline and playback queries.
"""
from .schemas import (
    POINT_BREAK_SECONDS,
    Side,
    MatchStatus,
    Player,
    PointRecord,
    MatchTimeline,
    PlayingState,
    BetweenPointsState,
    FinishedState,
    MatchState,
    PlayerStats,
    MatchStats,
)
from .rng import SeededGenerator, InvalidSeedError
from .probability_engine import (
    CALIBRATION_TABLE,
    ProbabilityEngine,
    match_win_probability,
    match_to_point_probability,
)
from .point_simulator import PointSimulator
from .orchestrator import simulate, is_match_over, next_server
from .playback import get_state_at, get_match_stats
from .emitter import EmitterConfig, SyncEmitter, async_emit_frames, iter_frames

__all__ = [
    "POINT_BREAK_SECONDS",
    "Side",
    "MatchStatus",
    "Player",
    "PointRecord",
    "MatchTimeline",
    "PlayingState",
    "BetweenPointsState",
    "FinishedState",
    "MatchState",
    "PlayerStats",
    "MatchStats",
    "SeededGenerator",
    "InvalidSeedError",
    "CALIBRATION_TABLE",
    "ProbabilityEngine",
    "match_win_probability",
    "match_to_point_probability",
    "PointSimulator",
    "simulate",
    "is_match_over",
    "next_server",
    "get_state_at",
    "get_match_stats",
    "EmitterConfig",
    "SyncEmitter",
    "async_emit_frames",
    "iter_frames",
]
