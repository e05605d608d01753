"""Tests for the terminal session and its restoration guard."""

from __future__ import annotations

import os
import termios
from collections.abc import Iterator
from io import StringIO
from typing import TextIO
from unittest.mock import patch

import pytest
from rich.console import Console

from countdown.core.errors import TerminalError
from countdown.core.keys import KeyEvent
from countdown.core.session import COUNTDOWN_THEME, TerminalSession, terminal_session

ALT_SCREEN_ON = "\x1b[?1049h"
ALT_SCREEN_OFF = "\x1b[?1049l"
HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"
RESET_COLORS = "\x1b[39m\x1b[49m"


class _FilenoStringIO(StringIO):
    """StringIO that claims to be file descriptor 1."""

    def fileno(self) -> int:
        return 1


def _console(file: StringIO | None = None, *, terminal: bool = True) -> Console:
    return Console(
        file=file if file is not None else StringIO(),
        theme=COUNTDOWN_THEME,
        force_terminal=terminal,
        color_system="standard",
        no_color=False,
        width=80,
        highlight=False,
    )


def _output(console: Console) -> str:
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


@pytest.fixture()
def pipe() -> Iterator[tuple[TextIO, int]]:
    """Return ``(reader, write_fd)`` for an OS pipe standing in for stdin."""
    read_fd, write_fd = os.pipe()
    reader = os.fdopen(read_fd)
    yield reader, write_fd
    reader.close()
    os.close(write_fd)


@pytest.fixture()
def fake_tty() -> Iterator[dict]:
    """Pretend stdin is a terminal and record termios calls."""
    with (
        patch("countdown.core.session.os.isatty", return_value=True),
        patch("countdown.core.session.termios.tcgetattr", return_value=["saved"]) as tcgetattr,
        patch("countdown.core.session.termios.tcsetattr") as tcsetattr,
        patch("countdown.core.session.tty.setraw") as setraw,
    ):
        yield {"tcgetattr": tcgetattr, "tcsetattr": tcsetattr, "setraw": setraw}


# ---------------------------------------------------------------------------
# terminal_session() guard
# ---------------------------------------------------------------------------


class TestTerminalSessionGuard:
    """The guard enters raw mode and always restores the terminal."""

    def test_enter_switches_modes(self, pipe, fake_tty) -> None:
        reader, _ = pipe
        console = _console()
        with terminal_session(stdin=reader, console=console):
            fake_tty["setraw"].assert_called_once_with(reader.fileno())
            output = _output(console)
            assert ALT_SCREEN_ON in output
            assert HIDE_CURSOR in output
            assert SHOW_CURSOR not in output

    def test_normal_exit_restores(self, pipe, fake_tty) -> None:
        reader, _ = pipe
        console = _console()
        with terminal_session(stdin=reader, console=console):
            pass
        fake_tty["tcsetattr"].assert_called_once_with(
            reader.fileno(), termios.TCSADRAIN, ["saved"]
        )
        output = _output(console)
        assert output.rindex(ALT_SCREEN_OFF) > output.index(ALT_SCREEN_ON)
        assert output.rindex(SHOW_CURSOR) > output.index(HIDE_CURSOR)
        assert output.endswith(RESET_COLORS)

    def test_exception_restores_and_propagates(self, pipe, fake_tty) -> None:
        reader, _ = pipe
        console = _console()
        with pytest.raises(RuntimeError, match="boom"):
            with terminal_session(stdin=reader, console=console):
                raise RuntimeError("boom")
        fake_tty["tcsetattr"].assert_called_once()
        assert _output(console).endswith(RESET_COLORS)

    def test_restore_runs_only_once(self, pipe, fake_tty) -> None:
        reader, _ = pipe
        session = TerminalSession(stdin=reader, console=_console())
        session.enter()
        session.restore()
        session.restore()
        fake_tty["tcsetattr"].assert_called_once()

    def test_non_tty_stdin_leaves_terminal_untouched(self, pipe) -> None:
        reader, _ = pipe
        console = _console()
        with pytest.raises(TerminalError, match="standard input"):
            with terminal_session(stdin=reader, console=console):
                pytest.fail("body must not run")
        output = _output(console)
        assert ALT_SCREEN_OFF not in output
        assert SHOW_CURSOR not in output
        assert output == ""

    def test_restore_without_enter_writes_nothing(self) -> None:
        console = _console()
        TerminalSession(console=console).restore()
        assert _output(console) == ""

    def test_restore_after_enter_leaves_alt_screen_once(self, pipe, fake_tty) -> None:
        reader, _ = pipe
        console = _console()
        session = TerminalSession(stdin=reader, console=console)
        session.enter()
        session.restore()
        session.restore()
        output = _output(console)
        assert output.count(ALT_SCREEN_OFF) == 1
        assert output.count(SHOW_CURSOR) == 1
        assert not console.is_alt_screen

    def test_non_tty_stdout_raises(self, pipe, fake_tty) -> None:
        reader, _ = pipe
        console = _console(terminal=False)
        with pytest.raises(TerminalError, match="standard output"):
            with terminal_session(stdin=reader, console=console):
                pytest.fail("body must not run")
        fake_tty["setraw"].assert_not_called()
        assert _output(console) == ""

    def test_termios_failure_raises_terminal_error(self, pipe, fake_tty) -> None:
        reader, _ = pipe
        fake_tty["tcgetattr"].side_effect = termios.error(25, "Inappropriate ioctl")
        console = _console()
        with pytest.raises(TerminalError, match="raw mode"):
            with terminal_session(stdin=reader, console=console):
                pytest.fail("body must not run")
        fake_tty["tcsetattr"].assert_not_called()
        assert _output(console) == ""


# ---------------------------------------------------------------------------
# Per-frame operations
# ---------------------------------------------------------------------------


class TestTerminalSessionDraw:
    """draw() clears, positions and styles the frame."""

    def test_draw_single_line(self) -> None:
        console = _console()
        TerminalSession(console=console).draw(["10s"], 39, 12, paused=False)
        output = _output(console)
        assert output.startswith("\x1b[2J")
        assert "\x1b[12;39H10s" in output
        assert "\x1b[32m" not in output
        assert output.endswith(HIDE_CURSOR)

    def test_draw_paused_is_green(self) -> None:
        console = _console()
        TerminalSession(console=console).draw(["10s"], 39, 12, paused=True)
        assert "\x1b[32m10s" in _output(console)

    def test_draw_multiple_lines(self) -> None:
        console = _console()
        TerminalSession(console=console).draw(["ab", "cd"], 5, 3, paused=False)
        output = _output(console)
        assert "\x1b[3;5Hab" in output
        assert "\x1b[4;5Hcd" in output

    def test_draw_does_not_wrap_long_lines(self) -> None:
        console = _console()
        line = "x" * 200
        TerminalSession(console=console).draw([line], 1, 1, paused=False)
        assert line in _output(console)


class TestTerminalSessionSize:
    """size() reports the live terminal size or fails with TerminalError."""

    def test_size(self) -> None:
        console = _console(_FilenoStringIO())
        with patch(
            "countdown.core.session.os.get_terminal_size",
            return_value=os.terminal_size((100, 40)),
        ) as get_size:
            assert TerminalSession(console=console).size() == (100, 40)
        get_size.assert_called_once_with(1)

    def test_size_without_terminal_raises(self) -> None:
        with pytest.raises(TerminalError, match="terminal size"):
            TerminalSession(console=_console()).size()

    def test_size_os_error_raises(self) -> None:
        console = _console(_FilenoStringIO())
        with patch(
            "countdown.core.session.os.get_terminal_size",
            side_effect=OSError(25, "Inappropriate ioctl"),
        ):
            with pytest.raises(TerminalError):
                TerminalSession(console=console).size()


class TestTerminalSessionReadKeys:
    """read_keys() drains buffered input without blocking."""

    def test_no_input_returns_empty(self, pipe) -> None:
        reader, _ = pipe
        assert TerminalSession(stdin=reader, console=_console()).read_keys() == []

    def test_drains_all_buffered_keys(self, pipe) -> None:
        reader, write_fd = pipe
        os.write(write_fd, b" a\x1b[A\x03")
        session = TerminalSession(stdin=reader, console=_console())
        assert session.read_keys() == [
            KeyEvent.TOGGLE_PAUSE,
            KeyEvent.OTHER,
            KeyEvent.OTHER,
            KeyEvent.QUIT,
        ]
        assert session.read_keys() == []

