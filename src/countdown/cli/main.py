"""CLI entry point for countdown.

Uses Click to expose the ``countdown`` command, which parses the duration,
runs the countdown inside a terminal session and rings the bell at the end.
"""

from __future__ import annotations

import sys
from typing import Callable, TypeVar

import click
import structlog

import countdown
from countdown.config.logging import configure_logging
from countdown.core.banner import Banner, figlet_banner
from countdown.core.duration import parse
from countdown.core.errors import CountdownError
from countdown.core.loop import run
from countdown.core.session import terminal_session

T = TypeVar("T")

#: Escape sequence for ``BEL``.  Typically makes the terminal emulator play a
#: sound and/or flash the window; some window managers mark it as urgent.
BELL = "\x07"

# Added so that the requested duration is what is shown when the countdown starts.
STARTUP_PADDING = 1

log = structlog.get_logger("countdown.cli")


def _run(action: Callable[[], T]) -> T:
    """Execute *action*, converting ``CountdownError`` to a CLI error.

    On ``CountdownError`` the message is printed to stderr and the process
    exits with code 1.
    """
    try:
        return action()
    except CountdownError as exc:
        click.echo(f"countdown: {exc}", err=True)
        sys.exit(1)


@click.command()
@click.version_option(version=countdown.__version__, prog_name="countdown")
@click.argument("duration")
@click.option("-q", "--quiet", is_flag=True, help="Do not ring the bell when the countdown ends.")
@click.option("--big", is_flag=True, help="Render the time as large text (requires figlet).")
@click.option("--font", default=None, help="figlet font used with --big.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging to stderr.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
def cli(
    duration: str,
    quiet: bool,
    big: bool,
    font: str | None,
    verbose: bool,
    log_json: bool,
) -> None:
    """Count down from DURATION in the terminal.

    DURATION combines common units of time: '1d', '1h', '1m', '1s'.
    Examples: '3d4h', '1m30s', '10d3h21m10s'.

    Press space to pause or resume, Escape or Ctrl-C to quit.
    """
    configure_logging(verbose=verbose, log_json=log_json)

    seconds = _run(lambda: parse(duration))

    banner = None
    if big:
        banner = figlet_banner(font)
        if banner is None:
            log.warning("banner.unavailable", reason="figlet not found or font unusable", font=font)

    log.debug("countdown.start", seconds=seconds)
    finished = _run(lambda: _countdown(seconds + STARTUP_PADDING, banner))
    log.debug("countdown.finish", finished=finished)

    if finished and not quiet:
        click.echo(BELL, nl=False)


def _countdown(total: int, banner: Banner | None) -> bool:
    """Run the countdown loop inside a terminal session."""
    with terminal_session() as session:
        return run(total, session, banner=banner)
