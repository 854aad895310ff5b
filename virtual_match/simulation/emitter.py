"""
Render loop (Emitter): samples a precomputed timeline against the wall
clock and feeds each state to a TrajectoryAnimator.
Simulation never waits on the loop; stopping the loop is all cancellation means.
"""
from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, AsyncIterator, Callable, Iterator

from .playback import get_state_at
from .schemas import MatchState, MatchStatus, MatchTimeline

if TYPE_CHECKING:
    from virtual_match.animation.animator import RenderFrame, TrajectoryAnimator

FrameCallback = Callable[[float, MatchState, "RenderFrame"], None]


@dataclass
class EmitterConfig:
    """Frame pacing."""
    frames_per_second: float = 30.0
    fast_forward: bool = False  # if True, no sleeping between frames

    @property
    def frame_interval(self) -> float:
        if self.fast_forward:
            return 0.0
        return 1.0 / self.frames_per_second


def iter_frames(
    timeline: MatchTimeline,
    start_time: float,
    clock: Callable[[], float],
    animator: TrajectoryAnimator,
) -> Iterator[tuple[float, MatchState, RenderFrame]]:
    """Endless (elapsed, state, frame) stream; one clock read per item."""
    while True:
        elapsed = clock() - start_time
        state = get_state_at(timeline, elapsed)
        yield elapsed, state, animator.observe(state)


class SyncEmitter:
    """
    Blocking render loop. clock and sleep are injectable so a test (or the
    --fast runner) can drive it with a simulated clock.
    """

    def __init__(
        self,
        config: EmitterConfig | None = None,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config or EmitterConfig()
        self.clock = clock
        self.sleep = sleep

    def run(
        self,
        timeline: MatchTimeline,
        start_time: float,
        on_frame: FrameCallback,
        animator: TrajectoryAnimator | None = None,
        max_frames: int | None = None,
    ) -> int:
        """Emit frames until the first FINISHED state (or max_frames). Returns frames emitted."""
        if animator is None:
            from virtual_match.animation.animator import TrajectoryAnimator
            animator = TrajectoryAnimator()
        count = 0
        for elapsed, state, frame in iter_frames(timeline, start_time, self.clock, animator):
            on_frame(elapsed, state, frame)
            count += 1
            if state.status is MatchStatus.FINISHED:
                break
            if max_frames is not None and count >= max_frames:
                break
            interval = self.config.frame_interval
            if interval > 0:
                self.sleep(interval)
        return count


async def async_emit_frames(
    timeline: MatchTimeline,
    start_time: float,
    config: EmitterConfig | None = None,
    clock: Callable[[], float] = time.time,
    animator: TrajectoryAnimator | None = None,
) -> AsyncIterator[tuple[float, MatchState, RenderFrame]]:
    """
    Async generator: yields (elapsed, state, frame) at the configured rate
    until the match is finished. Suitable for WebSocket or async consumers.
    """
    cfg = config or EmitterConfig()
    if animator is None:
        from virtual_match.animation.animator import TrajectoryAnimator
        animator = TrajectoryAnimator()
    for elapsed, state, frame in iter_frames(timeline, start_time, clock, animator):
        yield elapsed, state, frame
        if state.status is MatchStatus.FINISHED:
            return
        await asyncio.sleep(cfg.frame_interval)
