"""The render/input loop driving a countdown on screen."""

from __future__ import annotations

import time
from typing import Protocol

from countdown.core.banner import Banner, banner_lines
from countdown.core.duration import format_duration
from countdown.core.keys import KeyEvent
from countdown.core.timer import Countdown, TimerState

FRAME_INTERVAL = 0.016


class Screen(Protocol):
    """What the loop needs from a terminal session."""

    def size(self) -> tuple[int, int]: ...

    def read_keys(self) -> list[KeyEvent]: ...

    def draw(self, lines: list[str], column: int, row: int, *, paused: bool) -> None: ...


def centered_origin(width: int, height: int, lines: list[str]) -> tuple[int, int]:
    """Return the 1-based ``(column, row)`` that centers *lines* on screen.

    Clamped to 1 when the terminal is smaller than the text.
    """
    text_width = max((len(line) for line in lines), default=0)
    column = width // 2 - text_width // 2
    row = height // 2 - len(lines) // 2
    return max(column, 1), max(row, 1)


def run(countdown: float, screen: Screen, *, banner: Banner | None = None) -> bool:
    """Count down *countdown* seconds on *screen*.

    Returns True when the countdown ran out and False when the user quit.
    Space toggles pause; Ctrl-C or Escape quits.
    """
    state = Countdown(countdown)

    while True:
        state.tick()
        current = state.get_state()
        if current is TimerState.EXPIRED:
            return True

        remaining = format_duration(int(state.get_remaining()))
        lines = banner_lines(remaining, banner)
        width, height = screen.size()
        column, row = centered_origin(width, height, lines)
        screen.draw(lines, column, row, paused=current is TimerState.PAUSED)

        for key in screen.read_keys():
            if key is KeyEvent.QUIT:
                return False
            if key is KeyEvent.TOGGLE_PAUSE:
                state.toggle_pause()

        time.sleep(FRAME_INTERVAL)
