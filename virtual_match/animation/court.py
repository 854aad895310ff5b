"""
Court geometry for the pong-style view. Pixel units, origin top-left,
player A on the left, B on the right.
"""
from __future__ import annotations

from dataclasses import dataclass

from virtual_match.simulation.schemas import Side


@dataclass(frozen=True)
class CourtGeometry:
    width: float = 600.0
    height: float = 300.0
    paddle_width: float = 15.0
    paddle_height: float = 80.0
    ball_radius: float = 8.0
    paddle_offset: float = 30.0  # distance from the side edge

    @property
    def center_x(self) -> float:
        return self.width / 2

    @property
    def center_y(self) -> float:
        return self.height / 2

    @property
    def rally_distance(self) -> float:
        """Horizontal distance between the two paddle faces."""
        return self.width - 2 * self.paddle_offset - 2 * self.paddle_width

    def paddle_face_x(self, side: Side) -> float:
        """x where the ball meets the paddle of side."""
        if side is Side.A:
            return self.paddle_offset + self.paddle_width
        return self.width - self.paddle_offset - self.paddle_width

    def clamp_ball_y(self, y: float) -> float:
        return max(self.ball_radius, min(self.height - self.ball_radius, y))

    def clamp_paddle_y(self, y: float) -> float:
        half = self.paddle_height / 2
        return max(half, min(self.height - half, y))
