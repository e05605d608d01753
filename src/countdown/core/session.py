"""Terminal session: raw input, alternate screen and guaranteed restoration."""

from __future__ import annotations

import os
import select
import sys
import termios
import tty
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TextIO

from rich.console import Console
from rich.control import Control
from rich.theme import Theme

from countdown.core.errors import TerminalError
from countdown.core.keys import KeyEvent, decode_keys

COUNTDOWN_THEME = Theme(
    {
        "countdown.running": "none",
        "countdown.paused": "green",
    }
)

# Default foreground and background colors.
_RESET_COLORS = "\x1b[39m\x1b[49m"
_READ_CHUNK = 1024


def create_console(file: TextIO | None = None) -> Console:
    """Create the Console used to draw the countdown."""
    return Console(
        file=file if file is not None else sys.stdout,
        theme=COUNTDOWN_THEME,
        highlight=False,
    )


class TerminalSession:
    """Exclusive handle on the terminal while the countdown runs.

    :meth:`enter` switches stdin to raw mode and stdout to the alternate
    screen; :meth:`restore` undoes it.  Use :func:`terminal_session` rather
    than calling them directly so restoration happens on every exit path.
    """

    def __init__(self, stdin: TextIO | None = None, console: Console | None = None) -> None:
        self._stdin: TextIO = stdin if stdin is not None else sys.stdin
        self._console: Console = console if console is not None else create_console()
        self._saved_attrs: list | None = None
        self._cursor_hidden: bool = False

    # -- lifecycle -----------------------------------------------------------

    def enter(self) -> None:
        """Enter raw mode and the alternate screen, hiding the cursor."""
        fd = self._stdin_fd()
        if not os.isatty(fd):
            raise TerminalError("standard input is not a terminal")
        if not self._console.is_terminal:
            raise TerminalError("standard output is not a terminal")

        try:
            self._saved_attrs = termios.tcgetattr(fd)
            tty.setraw(fd)
        except termios.error as exc:
            raise TerminalError(f"unable to enter raw mode: {exc}") from exc

        self._console.set_alt_screen(True)
        self._cursor_hidden = self._console.show_cursor(False)
        self._console.file.flush()

    def restore(self) -> None:
        """Restore the terminal to its state before :meth:`enter`.

        Safe to call after a partial or failed :meth:`enter`.
        """
        try:
            if self._saved_attrs is not None:
                termios.tcsetattr(self._stdin_fd(), termios.TCSADRAIN, self._saved_attrs)
                self._saved_attrs = None
        finally:
            if self._console.is_alt_screen:
                self._console.set_alt_screen(False)
            if self._cursor_hidden:
                self._console.show_cursor(True)
                self._console.file.write(_RESET_COLORS)
                self._cursor_hidden = False
            self._console.file.flush()

    # -- per-frame operations ------------------------------------------------

    def size(self) -> tuple[int, int]:
        """Return the current ``(columns, rows)`` of the terminal."""
        try:
            size = os.get_terminal_size(self._console.file.fileno())
        except (OSError, ValueError) as exc:
            raise TerminalError(f"unable to query terminal size: {exc}") from exc
        return size.columns, size.lines

    def read_keys(self) -> list[KeyEvent]:
        """Return every key event currently buffered, without blocking."""
        fd = self._stdin_fd()
        data = b""
        while select.select([fd], [], [], 0)[0]:
            chunk = os.read(fd, _READ_CHUNK)
            if not chunk:
                break
            data += chunk
        return decode_keys(data)

    def draw(self, lines: list[str], column: int, row: int, *, paused: bool) -> None:
        """Clear the screen and draw *lines* starting at 1-based *column*, *row*.

        The frame is buffered and written in one flush.
        """
        style = "countdown.paused" if paused else "countdown.running"
        with self._console:
            self._console.control(Control.clear())
            for offset, line in enumerate(lines):
                self._console.control(Control.move_to(column - 1, row - 1 + offset))
                self._console.out(line, style=style, highlight=False, end="")
            self._console.show_cursor(False)

    def _stdin_fd(self) -> int:
        try:
            return self._stdin.fileno()
        except (OSError, ValueError) as exc:
            raise TerminalError(f"standard input has no file descriptor: {exc}") from exc


@contextmanager
def terminal_session(
    stdin: TextIO | None = None, console: Console | None = None
) -> Iterator[TerminalSession]:
    """Run the enclosed block inside a raw, alternate-screen terminal session.

    The terminal is restored however the block exits, including when entering
    the session itself fails halfway.
    """
    session = TerminalSession(stdin=stdin, console=console)
    try:
        session.enter()
        yield session
    finally:
        session.restore()
