"""Incremental, bidirectional search driven by prompt keystrokes."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from kilo_engine.buffer.line import render_col_to_stored_col
from kilo_engine.buffer.state import ViewportOffsets
from kilo_engine.runtime import telemetry
from kilo_engine.terminal.decoder import ENTER, Key, KeyEvent

if TYPE_CHECKING:  # pragma: no cover
    from kilo_engine.session import EditSession

FORWARD = 1
BACKWARD = -1

_FORWARD_KEYS = {Key.ARROW_RIGHT, Key.ARROW_DOWN}
_BACKWARD_KEYS = {Key.ARROW_LEFT, Key.ARROW_UP}


class SearchEngine:
    """Prompt observer that moves the session cursor to each match.

    Arrow keys step to the next match in their direction, wrapping around
    the document; any other key edits the query and restarts the scan from
    the top.
    """

    def __init__(self, session: "EditSession") -> None:
        self.session = session
        self.last_match_row: Optional[int] = None
        self.direction = FORWARD

    def reset(self) -> None:
        self.last_match_row = None
        self.direction = FORWARD

    def on_keystroke(self, text: bytes, key: KeyEvent) -> None:
        if key.code == ENTER or key.key is Key.ESCAPE:
            self.reset()
            return
        if key.key in _FORWARD_KEYS:
            self.direction = FORWARD
        elif key.key in _BACKWARD_KEYS:
            self.direction = BACKWARD
        else:
            self.reset()

        if self.last_match_row is None:
            self.direction = FORWARD
        if text:
            self.search(text)

    def search(self, query: bytes) -> Optional[int]:
        """Scan at most one full pass for ``query``; return the matching row."""

        document = self.session.document
        total = len(document)
        current = self.last_match_row if self.last_match_row is not None else -1
        for _ in range(total):
            current += self.direction
            if current == -1:
                current = total - 1
            elif current == total:
                current = 0

            line = document[current]
            hit = line.rendered.find(query)
            if hit == -1:
                continue
            self.last_match_row = current
            self.session.set_cursor(current, render_col_to_stored_col(line, hit))
            # Push the window past the end so the next scroll puts the match on top.
            self.session.offsets = ViewportOffsets(
                row_offset=total, col_offset=self.session.offsets.col_offset
            )
            telemetry.record_event(
                "search.match", level="debug", data={"row": current, "col": hit}
            )
            return current
        return None


__all__ = ["SearchEngine", "FORWARD", "BACKWARD"]
