"""Decoding of raw terminal input into key events."""

from __future__ import annotations

from enum import Enum


class KeyEvent(Enum):
    """Keys the render loop reacts to."""

    QUIT = "quit"
    TOGGLE_PAUSE = "toggle_pause"
    OTHER = "other"


_CTRL_C = 0x03
_ESC = 0x1B
_SPACE = 0x20
_CSI = ord("[")
_SS3 = ord("O")


def _utf8_length(lead: int) -> int:
    """Return the encoded length announced by a UTF-8 lead byte, or 0."""
    if 0xC2 <= lead <= 0xDF:
        return 2
    if 0xE0 <= lead <= 0xEF:
        return 3
    if 0xF0 <= lead <= 0xF4:
        return 4
    return 0


def _is_valid_utf8(chunk: bytes, width: int) -> bool:
    if width == 0 or len(chunk) != width:
        return False
    try:
        chunk.decode("utf-8")
    except UnicodeDecodeError:
        return False
    return True


def _csi_end(data: bytes, start: int) -> int | None:
    """Return the index just past a CSI sequence beginning at *start*.

    *start* points at the byte after ``ESC [``.  Returns None when the
    sequence is truncated.
    """
    for index in range(start, len(data)):
        if 0x40 <= data[index] <= 0x7E:
            return index + 1
    return None


def _sequence_end(data: bytes, introducer: int) -> int | None:
    """Return the index just past the sequence whose ``[`` or ``O`` is at *introducer*.

    Returns None when the sequence is truncated.
    """
    if data[introducer] == _CSI:
        return _csi_end(data, introducer + 1)
    if introducer + 1 < len(data):
        return introducer + 2
    return None


def decode_keys(data: bytes) -> list[KeyEvent]:
    """Decode a chunk of raw terminal input into key events.

    Ctrl-C and a lone escape quit, space toggles pause, and everything else
    (including arrow keys and Alt chords) is reported as ``OTHER``.
    Truncated escape sequences and invalid UTF-8 are skipped.
    """
    events: list[KeyEvent] = []
    index = 0
    length = len(data)

    while index < length:
        byte = data[index]

        if byte == _ESC:
            if index + 1 >= length:
                events.append(KeyEvent.QUIT)
                index += 1
                continue
            follower = data[index + 1]
            if follower in (_CSI, _SS3):
                introducer = index + 1
            elif follower == _ESC and index + 2 < length and data[index + 2] in (_CSI, _SS3):
                # Alt-modified special key
                introducer = index + 2
            else:
                introducer = None
            if introducer is not None:
                end = _sequence_end(data, introducer)
                if end is None:
                    break
                events.append(KeyEvent.OTHER)
                index = end
                continue
            if follower == _ESC:
                # a doubled escape is two presses of the escape key
                events.append(KeyEvent.QUIT)
                index += 1
                continue
            # Alt chord
            events.append(KeyEvent.OTHER)
            index += 2
            continue

        if byte == _CTRL_C:
            events.append(KeyEvent.QUIT)
        elif byte == _SPACE:
            events.append(KeyEvent.TOGGLE_PAUSE)
        elif byte >= 0x80:
            width = _utf8_length(byte)
            if _is_valid_utf8(data[index : index + width], width):
                events.append(KeyEvent.OTHER)
                index += width
            else:
                index += 1
            continue
        else:
            events.append(KeyEvent.OTHER)
        index += 1

    return events
