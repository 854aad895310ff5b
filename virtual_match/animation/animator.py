"""
Trajectory Animator: turns the live MatchState into ball and paddle
coordinates. The ball hits a paddle once per second of point time; the last
segment ends in a miss or the net depending on who wins the point.

Everything visual is seeded from the point number, so two viewers feeding
the same states get the same frames.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from virtual_match.simulation.rng import SeededGenerator
from virtual_match.simulation.schemas import MatchState, PlayingState, Side

from .court import CourtGeometry
from .trajectory import (
    EndingType,
    Trajectory,
    ball_position,
    compute_trajectory,
    ending_type,
    hitter_for_segment,
)

POINT_SEED_FACTOR = 12345
SERVE_ANGLE_MIN_DEG = 15.0
SERVE_ANGLE_RANGE_DEG = 30.0
IMPERFECTION_COUNT = 20
IMPERFECTION_SPREAD = 20.0  # px, offsets fall in [-10, 10)

SNAP_HITTER_BEFORE = 0.1
REACTION_DELAY = 0.3
SNAP_RECEIVER_AFTER = 0.9
TRACKING_RATE = 0.25
MISS_TRACKING_RATE = 0.15


@dataclass(frozen=True)
class RenderFrame:
    ball_x: float
    ball_y: float
    paddle_a_y: float
    paddle_b_y: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "ball_x": self.ball_x,
            "ball_y": self.ball_y,
            "paddle_a_y": self.paddle_a_y,
            "paddle_b_y": self.paddle_b_y,
        }


class TrajectoryAnimator:
    """
    One instance per viewing session. Holds the per-point working state
    (current segment trajectory, paddle positions); nothing is shared.
    """

    def __init__(self, court: CourtGeometry | None = None) -> None:
        self.court = court or CourtGeometry()
        self._point_number: int | None = None
        self._base_angle = 0.0
        self._imperfections: dict[Side, list[float]] = {Side.A: [], Side.B: []}
        self._paddle_y: dict[Side, float] = {
            Side.A: self.court.center_y,
            Side.B: self.court.center_y,
        }
        self._segment = -1
        self._trajectory: Trajectory | None = None
        self._ending = EndingType.NORMAL
        self._frame: RenderFrame | None = None

    @property
    def trajectory(self) -> Trajectory | None:
        return self._trajectory

    @property
    def ending(self) -> EndingType:
        return self._ending

    @property
    def base_angle(self) -> float:
        return self._base_angle

    def imperfections(self, side: Side) -> list[float]:
        return list(self._imperfections[side])

    def observe(self, state: MatchState) -> RenderFrame:
        """Frame for this state. Breaks and the finished match hold the last frame."""
        if isinstance(state, PlayingState):
            if state.point_number != self._point_number:
                self._start_point(state.point_number)
            frame = self._animate_playing(state)
        else:
            frame = self._frame or self._resting_frame()
        self._frame = frame
        return frame

    # ---------- Per-point setup ----------

    def _start_point(self, point_number: int) -> None:
        rng = SeededGenerator(point_number * POINT_SEED_FACTOR)
        degrees = rng.next_float() * SERVE_ANGLE_RANGE_DEG + SERVE_ANGLE_MIN_DEG
        sign = 1 if rng.next_float() < 0.5 else -1
        self._base_angle = math.radians(degrees) * sign
        self._imperfections = {Side.A: [], Side.B: []}
        for _ in range(IMPERFECTION_COUNT):
            self._imperfections[Side.A].append((rng.next_float() - 0.5) * IMPERFECTION_SPREAD)
            self._imperfections[Side.B].append((rng.next_float() - 0.5) * IMPERFECTION_SPREAD)
        self._point_number = point_number
        self._paddle_y = {Side.A: self.court.center_y, Side.B: self.court.center_y}
        self._segment = -1
        self._trajectory = None
        self._ending = EndingType.NORMAL

    def _resting_frame(self) -> RenderFrame:
        c = self.court
        return RenderFrame(c.center_x, c.center_y, c.center_y, c.center_y)

    # ---------- Segments ----------

    def _receiver_target(self, receiver: Side, segment: int, trajectory: Trajectory) -> float:
        offset = self._imperfections[receiver][(segment + 1) % IMPERFECTION_COUNT]
        return self.court.clamp_paddle_y(trajectory.end_y + offset)

    def _enter_segment(self, state: PlayingState, segment: int) -> Trajectory:
        hitter = hitter_for_segment(state.server, segment)
        self._ending = ending_type(state.server, state.target_winner, state.duration_seconds, segment)
        start = None
        if segment > 0 and self._trajectory is not None:
            start = (self._trajectory.end_x, self._trajectory.end_y)
        trajectory = compute_trajectory(
            self.court, hitter, segment, self._base_angle, self._ending, start
        )
        self._trajectory = trajectory
        self._segment = segment
        return trajectory

    def _advance_to(self, state: PlayingState, segment: int) -> None:
        """
        Walk forward to segment. Skipped segments (late join, slow frames)
        are replayed so each start point is the previous end regardless of
        frame rate; their receivers are left where they would have snapped.
        """
        if segment < self._segment:
            self._start_point(state.point_number)
        for seg in range(self._segment + 1, segment + 1):
            trajectory = self._enter_segment(state, seg)
            if seg < segment:
                receiver = hitter_for_segment(state.server, seg).opponent
                self._paddle_y[receiver] = self._receiver_target(receiver, seg, trajectory)

    def _update_paddles(
        self, state: PlayingState, segment: int, progress: float, trajectory: Trajectory
    ) -> None:
        hitter = hitter_for_segment(state.server, segment)
        receiver = hitter.opponent
        if progress < SNAP_HITTER_BEFORE:
            self._paddle_y[hitter] = trajectory.start_y

        target = self._receiver_target(receiver, segment, trajectory)
        if progress >= REACTION_DELAY:
            if self._ending is EndingType.NORMAL:
                rate = TRACKING_RATE
            elif self._ending is EndingType.MISS:
                # Slower, so the paddle visibly arrives late
                rate = MISS_TRACKING_RATE
            else:
                rate = 0.0
            self._paddle_y[receiver] += (target - self._paddle_y[receiver]) * rate
        if progress > SNAP_RECEIVER_AFTER and self._ending is EndingType.NORMAL:
            self._paddle_y[receiver] = target

        for side in (Side.A, Side.B):
            self._paddle_y[side] = self.court.clamp_paddle_y(self._paddle_y[side])

    def _animate_playing(self, state: PlayingState) -> RenderFrame:
        elapsed = state.progress * state.duration_seconds
        segment = min(math.floor(elapsed), max(0, state.duration_seconds - 1))
        progress_in_segment = min(1.0, elapsed - segment)
        if segment != self._segment:
            self._advance_to(state, segment)
        trajectory = self._trajectory
        if trajectory is None:
            raise RuntimeError(f"Point {state.point_number} has no segment in flight")
        self._update_paddles(state, segment, progress_in_segment, trajectory)
        ball_x, ball_y = ball_position(trajectory, progress_in_segment, self._ending, self.court)
        return RenderFrame(
            ball_x=ball_x,
            ball_y=ball_y,
            paddle_a_y=self._paddle_y[Side.A],
            paddle_b_y=self._paddle_y[Side.B],
        )
