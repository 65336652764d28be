# core/seek.py
from typing import Callable

from .models import NowPlayingState


CHECK_INTERVAL = 0.5
MAX_ATTEMPTS = 10
TOLERANCE_SECONDS = 1.0


class SeekTracker:
    """
    Keeps the progress display on the user's drag target.

    Spotify applies a seek with some delay, so after release the override is
    held until the polled position lands within tolerance of the target, or
    until MAX_ATTEMPTS checks have passed.
    """

    def __init__(
        self,
        state: NowPlayingState,
        seek: Callable[[float], object],
        schedule: Callable[[float, Callable[[], None]], None],
        check_interval: float = CHECK_INTERVAL,
        max_attempts: int = MAX_ATTEMPTS,
        tolerance: float = TOLERANCE_SECONDS,
    ):
        self.state = state
        self._seek = seek
        self._schedule = schedule
        self.check_interval = check_interval
        self.max_attempts = max_attempts
        self.tolerance = tolerance

        self.dragging = False
        self.manual_position = 0.0
        self.attempts = 0
        self._generation = 0

    def position_from_fraction(self, fraction: float) -> float:
        fraction = min(max(0.0, fraction), 1.0)
        return fraction * self.state.duration_seconds

    def display_position(self) -> float:
        if self.dragging:
            return self.manual_position
        return self.state.position_seconds

    def begin_drag(self, position: float) -> None:
        # Abandon any confirmation still running for an earlier release.
        self._generation += 1
        self.update_drag(position)

    def update_drag(self, position: float) -> None:
        self.dragging = True
        self.manual_position = max(0.0, position)

    def release(self, target: float) -> None:
        target = max(0.0, target)
        self._generation += 1
        self.dragging = True
        self.manual_position = target
        self.attempts = 0
        self._seek(target)
        self._check(target, 0, self._generation)

    def _check(self, target: float, attempts: int, generation: int) -> None:
        if generation != self._generation:
            return

        if attempts >= self.max_attempts:
            self.dragging = False
            return

        def _on_timer():
            if generation != self._generation:
                return
            self.attempts = attempts + 1
            if abs(self.state.position_seconds - target) < self.tolerance:
                self.dragging = False
            else:
                self._check(target, attempts + 1, generation)

        self._schedule(self.check_interval, _on_timer)
