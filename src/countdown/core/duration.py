"""Duration codec: compound strings such as ``1d2h3m4s`` <-> whole seconds."""

from __future__ import annotations

from typing import Final

from countdown.core.errors import ParseError

_UNIT_TO_SECONDS: Final[dict[str, int]] = {
    "d": 24 * 60 * 60,
    "h": 60 * 60,
    "m": 60,
    "s": 1,
}

_SECONDS_PER_DAY = _UNIT_TO_SECONDS["d"]
_SECONDS_PER_HOUR = _UNIT_TO_SECONDS["h"]
_SECONDS_PER_MINUTE = _UNIT_TO_SECONDS["m"]


def parse(duration: str) -> int:
    """Return the total seconds represented by a compound duration string.

    Each token is a run of digits followed by one of ``d``, ``h``, ``m`` or
    ``s``.  Spaces are ignored and units may repeat in any order; their
    contributions simply add up.

    Examples:
        >>> parse("1m30s")
        90
        >>> parse("1h1h1h")
        10800
        >>> parse("")
        0

    Raises:
        ParseError: on an unknown character, a unit with no digits before
            it, or trailing digits with no unit.
    """
    total_seconds = 0
    digits = ""

    for position, char in enumerate(duration):
        if char == " ":
            continue
        if char.isascii() and char.isdigit():
            digits += char
            continue
        if char in _UNIT_TO_SECONDS:
            if not digits:
                raise ParseError(
                    f"Invalid duration {duration!r}: unit {char!r} at position "
                    f"{position} has no number before it"
                )
            total_seconds += int(digits) * _UNIT_TO_SECONDS[char]
            digits = ""
            continue
        raise ParseError(
            f"Invalid duration {duration!r}: unexpected character {char!r} at "
            f"position {position} (expected digits followed by d, h, m or s)"
        )

    if digits:
        raise ParseError(f"Invalid duration {duration!r}: {digits!r} has no trailing unit")

    return total_seconds


def format_duration(seconds: int) -> str:
    """Format *seconds* in canonical compact form, e.g. ``1h0m5s``.

    Only units from the largest non-zero one downward are shown, but once a
    larger unit is present every smaller unit is printed too.
    """
    if seconds < 0:
        raise ValueError(f"seconds must be non-negative, got {seconds}")

    days = seconds // _SECONDS_PER_DAY
    hours = seconds // _SECONDS_PER_HOUR % 24
    minutes = seconds // _SECONDS_PER_MINUTE % 60
    secs = seconds % 60

    if days > 0:
        return f"{days}d{hours}h{minutes}m{secs}s"
    if hours > 0:
        return f"{hours}h{minutes}m{secs}s"
    if minutes > 0:
        return f"{minutes}m{secs}s"
    return f"{secs}s"
