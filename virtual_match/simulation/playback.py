"""
Playback queries over a precomputed timeline: what is happening at elapsed
time T, and aggregate stats. Pure functions; no randomness.
"""
from __future__ import annotations

from .schemas import (
    POINT_BREAK_SECONDS,
    BetweenPointsState,
    FinishedState,
    MatchState,
    MatchStats,
    MatchTimeline,
    PlayerStats,
    PlayingState,
    Side,
)


def get_state_at(timeline: MatchTimeline, elapsed_seconds: float) -> MatchState:
    """
    PLAYING inside a point, BETWEEN_POINTS in the break that follows it,
    FINISHED from the last point's end onwards. Negative time reads as 0.
    """
    elapsed = max(0.0, float(elapsed_seconds))
    points = timeline.points
    if elapsed < timeline.total_duration_seconds:
        for i, point in enumerate(points):
            if point.start_time <= elapsed < point.end_time:
                return PlayingState(
                    point_number=i + 1,
                    current_score=point.score_before,
                    target_winner=point.winner,
                    server=point.server,
                    seconds_left=point.end_time - elapsed,
                    duration_seconds=point.duration_seconds,
                    progress=(elapsed - point.start_time) / point.duration_seconds,
                )
            break_end = point.end_time + POINT_BREAK_SECONDS
            if point.end_time <= elapsed < break_end:
                return BetweenPointsState(
                    point_number=i + 1,
                    current_score=point.score_after,
                    last_winner=point.winner,
                    next_server=points[i + 1].server,
                    seconds_until_next=break_end - elapsed,
                )
    return FinishedState(
        final_score=timeline.final_score,
        winner=timeline.winner,
        total_points=timeline.point_count,
        match_duration_seconds=timeline.total_duration_seconds,
    )


def _longest_run(timeline: MatchTimeline, side: Side) -> int:
    best = run = 0
    for point in timeline.points:
        run = run + 1 if point.winner is side else 0
        best = max(best, run)
    return best


def _player_stats(timeline: MatchTimeline, side: Side) -> PlayerStats:
    player = timeline.player(side)
    won = [p for p in timeline.points if p.winner is side]
    return PlayerStats(
        name=player.name,
        rating=player.rating,
        final_score=timeline.final_score_a if side is Side.A else timeline.final_score_b,
        points_won=len(won),
        points_won_on_serve=sum(1 for p in won if p.server is side),
        longest_run=_longest_run(timeline, side),
    )


def get_match_stats(timeline: MatchTimeline) -> MatchStats:
    """Per-side aggregates plus totals."""
    return MatchStats(
        player_a=_player_stats(timeline, Side.A),
        player_b=_player_stats(timeline, Side.B),
        total_points=timeline.point_count,
        match_duration_seconds=timeline.total_duration_seconds,
    )
