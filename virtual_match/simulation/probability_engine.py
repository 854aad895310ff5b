"""
Probability Engine: turns a rating gap into a per-point win probability.

The logistic rating formula gives the chance of winning a whole game. Using
that number for every single point would make rating gaps far too decisive,
so it is mapped through a calibration table for first-to-11, win-by-2 scoring.
"""
from __future__ import annotations

# (match win probability, per-point win probability), empirical for first-to-11
CALIBRATION_TABLE: tuple[tuple[float, float], ...] = (
    (0.50, 0.500),
    (0.55, 0.505),
    (0.60, 0.520),
    (0.64, 0.535),
    (0.70, 0.560),
    (0.75, 0.575),
    (0.80, 0.610),
    (0.85, 0.630),
    (0.90, 0.640),
    (0.95, 0.665),
)

MATCH_PROB_FLOOR = 0.01
MATCH_PROB_CEIL = 0.99
POINT_PROB_FLOOR = 0.05
POINT_PROB_CEIL = 0.95


def match_win_probability(rating_a: float, rating_b: float) -> float:
    """Expected score of A against B: 1 / (1 + 10^((Rb - Ra) / 400))."""
    return 1.0 / (1.0 + 10 ** ((rating_b - rating_a) / 400))


def _lookup(match_prob: float) -> float:
    for anchor_match, anchor_point in CALIBRATION_TABLE:
        if match_prob == anchor_match:
            return anchor_point
    for (m1, p1), (m2, p2) in zip(CALIBRATION_TABLE, CALIBRATION_TABLE[1:]):
        if m1 <= match_prob <= m2:
            t = (match_prob - m1) / (m2 - m1)
            return p1 + t * (p2 - p1)
    return CALIBRATION_TABLE[-1][1]


def match_to_point_probability(match_prob: float) -> float:
    """
    Per-point probability that reproduces match_prob over a game.
    Below 0.5 the table is mirrored, so the underdog gets the complement
    of what the favourite would get.
    """
    match_prob = max(MATCH_PROB_FLOOR, min(MATCH_PROB_CEIL, match_prob))
    if match_prob < CALIBRATION_TABLE[0][0]:
        return 1.0 - _lookup(1.0 - match_prob)
    return _lookup(match_prob)


class ProbabilityEngine:
    """
    Calibrated point model. serve_advantage is added for the serving side
    (and subtracted when the opponent serves); it is 0.0 by default.
    """

    def __init__(self, serve_advantage: float = 0.0) -> None:
        self.serve_advantage = serve_advantage

    def point_win_probability(self, rating_a: float, rating_b: float, a_serving: bool) -> float:
        """Probability that A wins the next point, clamped to [0.05, 0.95]."""
        p = match_to_point_probability(match_win_probability(rating_a, rating_b))
        p += self.serve_advantage if a_serving else -self.serve_advantage
        return max(POINT_PROB_FLOOR, min(POINT_PROB_CEIL, p))
