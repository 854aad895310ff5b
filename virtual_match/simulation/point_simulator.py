"""
Point Simulator: uses the Probability Engine + seeded generator to sample one point.
Draw order is fixed (winner, then duration); changing it changes every replay.
"""
from __future__ import annotations

from .probability_engine import ProbabilityEngine
from .rng import SeededGenerator
from .schemas import MAX_POINT_SECONDS, MIN_POINT_SECONDS, Player, Side


class PointSimulator:
    """
    Samples who wins a point and how long it lasts.
    Caller (orchestrator) owns score, server rotation and timing.
    """

    def __init__(self, prob_engine: ProbabilityEngine, rng: SeededGenerator) -> None:
        self.prob_engine = prob_engine
        self.rng = rng

    def sample_point(self, player_a: Player, player_b: Player, server: Side) -> tuple[Side, int, float]:
        """Returns (winner, duration_seconds, p_a_wins)."""
        p_a = self.prob_engine.point_win_probability(
            player_a.rating, player_b.rating, a_serving=server is Side.A
        )
        winner = Side.A if self.rng.next_float() < p_a else Side.B
        # Short points are aces/errors, long ones extended rallies
        duration = self.rng.next_int(MIN_POINT_SECONDS, MAX_POINT_SECONDS)
        return winner, duration, p_a
