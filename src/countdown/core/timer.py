"""Countdown core: a pure state machine tracking elapsed time."""

import time
from enum import Enum


class TimerState(Enum):
    """Possible states of the countdown."""

    RUNNING = "running"
    PAUSED = "paused"
    EXPIRED = "expired"


class Countdown:
    """Counts elapsed time towards a fixed total, with pausing.

    Uses ``time.monotonic()`` so the countdown is immune to system clock
    changes.  Time only accumulates when :meth:`tick` is called; the render
    loop calls it once per frame.  Contains no I/O and no threads.
    """

    def __init__(self, total: float) -> None:
        if total < 0:
            raise ValueError(f"total must be non-negative, got {total}")
        self._total: float = float(total)
        self._elapsed: float = 0.0
        self._paused: bool = False
        self._last_tick: float = time.monotonic()

    # -- public interface ----------------------------------------------------

    @property
    def total(self) -> float:
        return self._total

    @property
    def elapsed(self) -> float:
        return self._elapsed

    @property
    def paused(self) -> bool:
        return self._paused

    def tick(self) -> None:
        """Accumulate the time since the previous tick, unless paused.

        The tick timestamp is reset even while paused so that resuming never
        adds the paused interval retroactively.
        """
        now = time.monotonic()
        if not self._paused:
            self._elapsed += max(now - self._last_tick, 0.0)
        self._last_tick = now

    def toggle_pause(self) -> None:
        """Flip between paused and running."""
        self._paused = not self._paused

    def get_remaining(self) -> float:
        """Return the remaining seconds, clamped to 0.0 once expired."""
        return max(self._total - self._elapsed, 0.0)

    def is_expired(self) -> bool:
        """Return True once elapsed time has passed the total.

        Exact equality still counts as time remaining.
        """
        return self._elapsed > self._total

    def get_state(self) -> TimerState:
        """Return the current countdown state."""
        if self.is_expired():
            return TimerState.EXPIRED
        if self._paused:
            return TimerState.PAUSED
        return TimerState.RUNNING
