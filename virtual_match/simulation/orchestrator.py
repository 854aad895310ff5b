"""
Match Orchestrator: plays a single game to 11 (win by 2) point by point and
returns the whole thing as an immutable MatchTimeline.
"""
from __future__ import annotations

from .point_simulator import PointSimulator
from .probability_engine import ProbabilityEngine
from .rng import SeededGenerator
from .schemas import POINT_BREAK_SECONDS, MatchTimeline, Player, PointRecord, Side

POINTS_TO_WIN = 11
WIN_BY = 2
DEUCE_AT = 10


def is_match_over(score_a: int, score_b: int) -> bool:
    """First to 11, win by 2."""
    return max(score_a, score_b) >= POINTS_TO_WIN and abs(score_a - score_b) >= WIN_BY


def next_server(server: Side, points_played: int, score_a: int, score_b: int) -> Side:
    """Serve changes every 2 points, every point once both sides reach 10."""
    interval = 1 if score_a >= DEUCE_AT and score_b >= DEUCE_AT else 2
    if points_played % interval == 0:
        return server.opponent
    return server


def simulate(
    seed: int,
    player_a: Player,
    player_b: Player,
    prob_engine: ProbabilityEngine | None = None,
) -> MatchTimeline:
    """
    Run the match to completion. Same (seed, players) => same timeline.
    The generator lives only for this call.
    """
    point_sim = PointSimulator(prob_engine or ProbabilityEngine(), SeededGenerator(seed))
    score_a = score_b = 0
    server = Side.A
    current_time = 0
    points: list[PointRecord] = []

    while not is_match_over(score_a, score_b):
        winner, duration, _ = point_sim.sample_point(player_a, player_b, server)
        before_a, before_b = score_a, score_b
        if winner is Side.A:
            score_a += 1
        else:
            score_b += 1
        points.append(PointRecord(
            winner=winner,
            start_time=current_time,
            end_time=current_time + duration,
            score_before_a=before_a,
            score_before_b=before_b,
            score_after_a=score_a,
            score_after_b=score_b,
            server=server,
            duration_seconds=duration,
        ))
        current_time += duration + POINT_BREAK_SECONDS
        server = next_server(server, len(points), score_a, score_b)

    return MatchTimeline(
        seed=seed,
        player_a=player_a,
        player_b=player_b,
        points=tuple(points),
        final_score_a=score_a,
        final_score_b=score_b,
        total_duration_seconds=points[-1].end_time,
    )
