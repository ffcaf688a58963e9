"""Core document data structure: an ordered, exclusively owned list of lines."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Tuple

from .line import Line


@dataclass(slots=True)
class Document:
    """Mutable list-of-lines model addressed by row/column indices.

    Structural edits (``insert_line``, ``delete_line``, merges) shift the
    indices of every later row; callers holding a row index at or past the
    edit point must recompute it.
    """

    _lines: List[Line] = field(default_factory=list)
    dirty: bool = False

    @classmethod
    def from_lines(cls, lines: Iterable[bytes]) -> "Document":
        return cls(_lines=[Line(data) for data in lines], dirty=False)

    def __len__(self) -> int:
        return len(self._lines)

    def __getitem__(self, row: int) -> Line:
        return self._lines[row]

    def __iter__(self) -> Iterator[Line]:
        return iter(self._lines)

    def line_length(self, row: int) -> int:
        """Stored length of ``row``; 0 for the virtual row past the end."""

        if 0 <= row < len(self._lines):
            return len(self._lines[row])
        return 0

    def insert_line(self, at: int, data: bytes = b"") -> None:
        if at < 0 or at > len(self._lines):
            return
        self._lines.insert(at, Line(data))
        self.dirty = True

    def delete_line(self, at: int) -> None:
        if at < 0 or at >= len(self._lines):
            return
        del self._lines[at]
        self.dirty = True

    def insert_char(self, row: int, col: int, byte: int) -> None:
        if row == len(self._lines):
            self.insert_line(row)
        line = self._lines[row]
        stored = line.stored
        if col < 0 or col > len(stored):
            col = len(stored)
        line.stored = stored[:col] + bytes((byte,)) + stored[col:]
        self.dirty = True

    def delete_char(self, row: int, col: int) -> Tuple[int, int]:
        """Remove the byte before ``col`` and return the new cursor position.

        At column 0 the row is appended onto the previous one and removed;
        the returned column is the previous row's original length.
        """

        if row >= len(self._lines) or row < 0:
            return row, col
        if col == 0 and row == 0:
            return row, col
        line = self._lines[row]
        if col > 0:
            col = min(col, len(line))
            line.stored = line.stored[: col - 1] + line.stored[col:]
            self.dirty = True
            return row, col - 1

        previous = self._lines[row - 1]
        joined_at = len(previous)
        previous.stored = previous.stored + line.stored
        self.delete_line(row)
        return row - 1, joined_at

    def split_line(self, row: int, col: int) -> None:
        if row >= len(self._lines) or col == 0:
            self.insert_line(row)
            return
        line = self._lines[row]
        stored = line.stored
        self.insert_line(row + 1, stored[col:])
        line.stored = stored[:col]

    def to_bytes(self) -> bytes:
        return b"".join(line.stored + b"\n" for line in self._lines)

    def mark_clean(self) -> None:
        self.dirty = False
