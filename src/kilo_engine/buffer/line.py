"""Single document row: stored bytes plus their tab-expanded rendering."""

from __future__ import annotations

TAB_STOP = 8
TAB = 0x09


def render_tabs(stored: bytes) -> bytes:
    """Expand every tab so the following byte starts on a ``TAB_STOP`` boundary."""

    if TAB not in stored:
        return bytes(stored)
    out = bytearray()
    for byte in stored:
        if byte == TAB:
            out.append(0x20)
            while len(out) % TAB_STOP:
                out.append(0x20)
        else:
            out.append(byte)
    return bytes(out)


class Line:
    """One logical row; ``rendered`` always mirrors ``stored``."""

    __slots__ = ("_stored", "_rendered")

    def __init__(self, stored: bytes = b"") -> None:
        self._stored = b""
        self._rendered = b""
        self.stored = stored

    @property
    def stored(self) -> bytes:
        return self._stored

    @stored.setter
    def stored(self, value: bytes) -> None:
        self._stored = bytes(value)
        self._rendered = render_tabs(self._stored)

    @property
    def rendered(self) -> bytes:
        return self._rendered

    def __len__(self) -> int:
        return len(self._stored)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Line):
            return NotImplemented
        return self._stored == other._stored

    def __repr__(self) -> str:
        return f"Line({self._stored!r})"


def stored_col_to_render_col(line: Line, col: int) -> int:
    render_col = 0
    for byte in line.stored[:col]:
        if byte == TAB:
            render_col += (TAB_STOP - 1) - (render_col % TAB_STOP)
        render_col += 1
    return render_col


def render_col_to_stored_col(line: Line, render_col: int) -> int:
    """Inverse of :func:`stored_col_to_render_col`.

    Returns the first stored column whose cumulative render width passes
    ``render_col``; ``len(line)`` when the target lies beyond the rendering.
    """

    current = 0
    for col, byte in enumerate(line.stored):
        if byte == TAB:
            current += (TAB_STOP - 1) - (current % TAB_STOP)
        current += 1
        if current > render_col:
            return col
    return len(line)


__all__ = [
    "TAB_STOP",
    "Line",
    "render_tabs",
    "stored_col_to_render_col",
    "render_col_to_stored_col",
]
