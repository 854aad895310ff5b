"""
Watch the current virtual match in the terminal.
Picks the block's players from the pool, replays the match against the wall
clock (or a simulated one with --fast) and prints the live score per point.
"""
from __future__ import annotations

import argparse
import dataclasses
import logging
from pathlib import Path

from virtual_match.animation.animator import RenderFrame, TrajectoryAnimator
from virtual_match.config import Settings
from virtual_match.services.player_pool import InvalidPlayerPoolError, JsonPlayerPool
from virtual_match.services.scheduling import Assignment, InsufficientPlayersError, TimeBlockScheduler
from virtual_match.simulation.emitter import EmitterConfig, SyncEmitter
from virtual_match.simulation.playback import get_match_stats
from virtual_match.simulation.rng import InvalidSeedError
from virtual_match.simulation.schemas import (
    BetweenPointsState,
    FinishedState,
    MatchState,
    MatchTimeline,
    PlayingState,
)

logger = logging.getLogger(__name__)


class SimulatedClock:
    """Clock that only moves when the emitter sleeps."""

    def __init__(self, start: float) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.now += seconds


def _print_header(timeline: MatchTimeline, block_id: int) -> None:
    a, b = timeline.player_a, timeline.player_b
    print(f"\n  {a.name} ({a.rating})  vs  {b.name} ({b.rating})  [block={block_id}, seed={timeline.seed}]")
    print("  " + "-" * 56)


def _print_point(state: BetweenPointsState, timeline: MatchTimeline) -> None:
    winner = timeline.player(state.last_winner).name
    sa, sb = state.current_score
    print(f"  P{state.point_number:<3} → {winner} wins   Score: {sa}-{sb}")


def _print_final(timeline: MatchTimeline, upcoming: Assignment | None = None) -> None:
    stats = get_match_stats(timeline)
    winner = timeline.player(timeline.winner)
    loser = timeline.player(timeline.winner.opponent)
    sa, sb = timeline.final_score
    print()
    print("=" * 60)
    print(f"  MATCH RESULT: {winner.name} def. {loser.name}  {sa}-{sb}")
    print("=" * 60)
    for ps in (stats.player_a, stats.player_b):
        print(
            f"  {ps.name}: {ps.points_won} points, {ps.points_won_on_serve} on serve, "
            f"longest run {ps.longest_run}"
        )
    print(f"  {stats.total_points} points in {stats.match_duration_seconds}s")
    if upcoming is not None:
        a, b = upcoming.player_a, upcoming.player_b
        print(f"  Next match (block {upcoming.block_id}): {a.name} ({a.rating}) vs {b.name} ({b.rating})")
    print()


def run(
    players_path: Path | None = None,
    block_id: int | None = None,
    fast: bool = False,
    settings: Settings | None = None,
) -> MatchTimeline:
    settings = settings or Settings.from_env()
    pool = JsonPlayerPool(players_path or settings.players_path)
    scheduler = TimeBlockScheduler(pool, block_seconds=settings.block_seconds)
    if block_id is None:
        block_id = scheduler.current_assignment().block_id
    assignment, timeline = scheduler.match_for_block(block_id)
    upcoming = scheduler.assignment_for_block(block_id + 1)
    _print_header(timeline, block_id)

    if fast or block_id != scheduler.current_assignment().block_id:
        # Replays start from the block's first second
        clock = SimulatedClock(assignment.block_start)
        emitter = SyncEmitter(
            EmitterConfig(frames_per_second=settings.frames_per_second),
            clock=clock,
            sleep=clock.sleep,
        )
    else:
        emitter = SyncEmitter(EmitterConfig(frames_per_second=settings.frames_per_second))

    printed: set[int] = set()

    def on_frame(elapsed: float, state: MatchState, frame: RenderFrame) -> None:
        if isinstance(state, BetweenPointsState) and state.point_number not in printed:
            printed.add(state.point_number)
            _print_point(state, timeline)
        elif isinstance(state, PlayingState):
            logger.debug(
                "t=%.2f ball=(%.1f, %.1f) paddles=(%.1f, %.1f)",
                elapsed, frame.ball_x, frame.ball_y, frame.paddle_a_y, frame.paddle_b_y,
            )
        elif isinstance(state, FinishedState):
            _print_final(timeline, upcoming)

    emitter.run(timeline, assignment.block_start, on_frame, animator=TrajectoryAnimator())
    return timeline


def main() -> None:
    parser = argparse.ArgumentParser(description="Watch the synchronized virtual match in the terminal.")
    parser.add_argument("--players", type=Path, default=None, help="Player pool JSON file")
    parser.add_argument("--block", type=int, default=None, help="Replay a specific time block")
    parser.add_argument("--block-seconds", type=int, default=None, help="Time block length in seconds")
    parser.add_argument("--fps", type=float, default=None, help="Frames per second")
    parser.add_argument("--fast", action="store_true", help="Simulated clock, no waiting")
    args = parser.parse_args()
    settings = Settings.from_env()
    if args.block_seconds is not None:
        settings = dataclasses.replace(settings, block_seconds=args.block_seconds)
    if args.fps is not None:
        settings = dataclasses.replace(settings, frames_per_second=args.fps)
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    try:
        run(players_path=args.players, block_id=args.block, fast=args.fast, settings=settings)
    except (InsufficientPlayersError, InvalidPlayerPoolError, InvalidSeedError) as exc:
        raise SystemExit(str(exc)) from exc


if __name__ == "__main__":
    main()
