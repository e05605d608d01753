"""Optional large-text rendering through the ``figlet`` program."""

from __future__ import annotations

import functools
import shutil
import subprocess
from typing import Callable

Banner = Callable[[str], str]

_FIGLET = "figlet"
# wide enough that figlet never wraps a countdown string
_FIGLET_WIDTH = 1000


def _run_figlet(command: list[str], text: str) -> str:
    result = subprocess.run(
        [*command, text],
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout


def figlet_banner(font: str | None = None) -> Banner | None:
    """Return a banner renderer backed by ``figlet``, or None if unusable.

    figlet is run once up front so that a missing program or an unknown
    *font* is detected here rather than on every frame.
    """
    executable = shutil.which(_FIGLET)
    if executable is None:
        return None

    command = [executable, "-w", str(_FIGLET_WIDTH)]
    if font is not None:
        command += ["-f", font]

    try:
        _run_figlet(command, "")
    except (OSError, subprocess.CalledProcessError):
        return None

    @functools.lru_cache(maxsize=64)
    def render(text: str) -> str:
        # failures render as empty text, cached like any other result
        try:
            return _run_figlet(command, text)
        except (OSError, subprocess.CalledProcessError):
            return ""

    return render


def banner_lines(text: str, banner: Banner | None) -> list[str]:
    """Expand *text* into the lines to draw.

    Without a banner, or when the banner renders nothing, the plain text is
    drawn as a single line.
    """
    if banner is None:
        return [text]
    lines = banner(text).rstrip("\n").splitlines()
    while lines and not lines[-1].strip():
        lines.pop()
    return lines or [text]
