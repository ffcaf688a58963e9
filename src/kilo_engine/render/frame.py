"""Frame composition: one complete terminal update per call."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from kilo_engine import __version__
from kilo_engine.buffer.document import Document
from kilo_engine.buffer.state import Cursor, ViewportOffsets
from kilo_engine.terminal import ansi

MESSAGE_TIMEOUT_S = 5.0
EMPTY_ROW_MARKER = b"~"
WELCOME = f"Kilo editor -- version {__version__}"
_TEXT_ENCODING = "latin-1"


def _encode(text: str) -> bytes:
    return text.encode(_TEXT_ENCODING, errors="replace")


class AppendBuffer:
    """Append-only byte accumulator; the frame is only emitted once complete."""

    __slots__ = ("_chunks", "_length")

    def __init__(self) -> None:
        self._chunks: list[bytes] = []
        self._length = 0

    def append(self, data: bytes) -> None:
        if data:
            self._chunks.append(data)
            self._length += len(data)

    def __len__(self) -> int:
        return self._length

    def getvalue(self) -> bytes:
        return b"".join(self._chunks)


@dataclass(slots=True)
class StatusMessage:
    """Message-bar text stamped with the time it was set."""

    clock: Callable[[], float] = time.monotonic
    text: str = ""
    set_at: float = field(default=0.0)

    def set(self, text: str) -> None:
        self.text = text
        self.set_at = self.clock()

    def visible(self) -> str:
        if not self.text:
            return ""
        if self.clock() - self.set_at >= MESSAGE_TIMEOUT_S:
            return ""
        return self.text


class FrameRenderer:
    """Builds the byte sequence for one full-screen refresh."""

    def render(
        self,
        document: Document,
        cursor: Cursor,
        offsets: ViewportOffsets,
        *,
        filename: Optional[str],
        message: str,
        screen_rows: int,
        screen_cols: int,
    ) -> bytes:
        out = AppendBuffer()
        out.append(ansi.HIDE_CURSOR)
        out.append(ansi.CURSOR_HOME)
        self._draw_rows(out, document, offsets, filename, screen_rows, screen_cols)
        self._draw_status_bar(out, document, cursor, filename, screen_cols)
        self._draw_message_bar(out, message, screen_cols)
        out.append(
            ansi.cursor_position(
                cursor.row - offsets.row_offset + 1,
                cursor.render_col - offsets.col_offset + 1,
            )
        )
        out.append(ansi.SHOW_CURSOR)
        return out.getvalue()

    def _draw_rows(
        self,
        out: AppendBuffer,
        document: Document,
        offsets: ViewportOffsets,
        filename: Optional[str],
        screen_rows: int,
        screen_cols: int,
    ) -> None:
        show_welcome = len(document) == 0 and not filename
        for y in range(screen_rows):
            file_row = y + offsets.row_offset
            if file_row < len(document):
                rendered = document[file_row].rendered
                out.append(
                    rendered[offsets.col_offset : offsets.col_offset + screen_cols]
                )
            elif show_welcome and y == screen_rows // 3:
                self._draw_welcome(out, screen_cols)
            else:
                out.append(EMPTY_ROW_MARKER)
            out.append(ansi.ERASE_LINE)
            out.append(ansi.CRLF)

    def _draw_welcome(self, out: AppendBuffer, screen_cols: int) -> None:
        welcome = _encode(WELCOME)[:screen_cols]
        padding = (screen_cols - len(welcome)) // 2
        if padding:
            out.append(EMPTY_ROW_MARKER)
            padding -= 1
        out.append(b" " * padding)
        out.append(welcome)

    def _draw_status_bar(
        self,
        out: AppendBuffer,
        document: Document,
        cursor: Cursor,
        filename: Optional[str],
        screen_cols: int,
    ) -> None:
        name = (filename or "[No Name]")[:20]
        modified = "(modified)" if document.dirty else ""
        left = _encode(f"{name} - {len(document)} lines {modified}")[:screen_cols]
        right = _encode(f"{cursor.row + 1}/{len(document)}")

        out.append(ansi.INVERT_ON)
        out.append(left)
        gap = screen_cols - len(left)
        if gap >= len(right):
            out.append(b" " * (gap - len(right)))
            out.append(right)
        else:
            out.append(b" " * gap)
        out.append(ansi.INVERT_OFF)
        out.append(ansi.CRLF)

    def _draw_message_bar(
        self, out: AppendBuffer, message: str, screen_cols: int
    ) -> None:
        out.append(ansi.ERASE_LINE)
        out.append(_encode(message)[:screen_cols])


__all__ = [
    "AppendBuffer",
    "FrameRenderer",
    "StatusMessage",
    "MESSAGE_TIMEOUT_S",
    "WELCOME",
]
