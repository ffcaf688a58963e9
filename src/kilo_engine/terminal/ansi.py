"""VT100/ANSI control sequences emitted by the editor, as raw bytes."""

from __future__ import annotations

HIDE_CURSOR = b"\x1b[?25l"
SHOW_CURSOR = b"\x1b[?25h"
CURSOR_HOME = b"\x1b[H"
ERASE_LINE = b"\x1b[K"
CLEAR_SCREEN = b"\x1b[2J"
INVERT_ON = b"\x1b[7m"
INVERT_OFF = b"\x1b[m"
CRLF = b"\r\n"

# Push the cursor to the bottom-right corner, then ask where it ended up.
CURSOR_FAR_CORNER = b"\x1b[999C\x1b[999B"
CURSOR_POSITION_QUERY = b"\x1b[6n"


def cursor_position(row: int, col: int) -> bytes:
    """``ESC [ row ; col H`` with 1-based coordinates."""

    return b"\x1b[%d;%dH" % (row, col)


__all__ = [
    "HIDE_CURSOR",
    "SHOW_CURSOR",
    "CURSOR_HOME",
    "ERASE_LINE",
    "CLEAR_SCREEN",
    "INVERT_ON",
    "INVERT_OFF",
    "CRLF",
    "CURSOR_FAR_CORNER",
    "CURSOR_POSITION_QUERY",
    "cursor_position",
]
