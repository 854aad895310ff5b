"""
Ball paths for hit segments. One segment = one second of point time,
ending at the next paddle contact (or at the miss / net on the last one).
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any

from virtual_match.simulation.schemas import Side

from .court import CourtGeometry

ANGLE_STEP_PER_HIT = 0.15  # radians added each hit
MAX_BOUNCES = 10
MISS_OVERSHOOT = 50.0  # px past the court edge
NET_DROP = 100.0  # px the ball falls after hitting the net


class EndingType(str, Enum):
    NORMAL = "NORMAL"
    MISS = "MISS"  # winner hit last, opponent fails to return
    NET = "NET"  # loser hit last, into the net


@dataclass(frozen=True)
class Trajectory:
    start_x: float
    start_y: float
    end_x: float
    end_y: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "start_x": self.start_x,
            "start_y": self.start_y,
            "end_x": self.end_x,
            "end_y": self.end_y,
        }


def hitter_for_segment(server: Side, segment: int) -> Side:
    """Server hits on even segments, receiver on odd ones."""
    return server if segment % 2 == 0 else server.opponent


def ending_type(server: Side, winner: Side, duration_seconds: int, segment: int) -> EndingType:
    """Only the last segment of a point ends in a miss or the net."""
    last_segment = max(0, math.floor(duration_seconds) - 1)
    if segment < last_segment:
        return EndingType.NORMAL
    if hitter_for_segment(server, last_segment) is winner:
        return EndingType.MISS
    return EndingType.NET


def reflect_into_court(y: float, court: CourtGeometry) -> float:
    """Mirror y off the top/bottom walls; clamp if still out after MAX_BOUNCES."""
    top = court.ball_radius
    bottom = court.height - court.ball_radius
    bounces = 0
    while bounces < MAX_BOUNCES and (y < top or y > bottom):
        if y < top:
            y = top + (top - y)
        else:
            y = bottom - (y - bottom)
        bounces += 1
    return court.clamp_ball_y(y)


def compute_trajectory(
    court: CourtGeometry,
    hitter: Side,
    segment: int,
    base_angle: float,
    ending: EndingType,
    start: tuple[float, float] | None,
) -> Trajectory:
    """
    Straight path for one segment. start is where the previous segment
    ended; None means the serve (serving paddle face, mid height).
    """
    receiver = hitter.opponent
    if start is None:
        start_x, start_y = court.paddle_face_x(hitter), court.center_y
    else:
        start_x, start_y = start

    if ending is EndingType.NET:
        return Trajectory(start_x, start_y, court.center_x, court.center_y)

    angle = base_angle + segment * ANGLE_STEP_PER_HIT
    if ending is EndingType.MISS:
        end_x = court.width + MISS_OVERSHOOT if receiver is Side.B else -MISS_OVERSHOOT
        distance = court.rally_distance
    else:
        end_x = court.paddle_face_x(receiver)
        distance = abs(end_x - start_x)
    end_y = reflect_into_court(start_y + math.tan(angle) * distance, court)
    return Trajectory(start_x, start_y, end_x, end_y)


def ball_position(
    trajectory: Trajectory, progress: float, ending: EndingType, court: CourtGeometry
) -> tuple[float, float]:
    """Linear interpolation along the segment; net balls drop after halfway."""
    x = trajectory.start_x + (trajectory.end_x - trajectory.start_x) * progress
    y = trajectory.start_y + (trajectory.end_y - trajectory.start_y) * progress
    if ending is EndingType.NET and progress > 0.5:
        y += (progress - 0.5) / 0.5 * NET_DROP
    return x, court.clamp_ball_y(y)
