"""
Pong-style animation that follows a playing match: ball paths per hit
segment and paddle tracking, as plain coordinates.
"""
from .court import CourtGeometry
from .trajectory import EndingType, Trajectory, compute_trajectory, ending_type, hitter_for_segment
from .animator import RenderFrame, TrajectoryAnimator

__all__ = [
    "CourtGeometry",
    "EndingType",
    "Trajectory",
    "compute_trajectory",
    "ending_type",
    "hitter_for_segment",
    "RenderFrame",
    "TrajectoryAnimator",
]
