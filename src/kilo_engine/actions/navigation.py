"""Cursor movement actions bound in edit mode."""

from __future__ import annotations

from kilo_engine.modes.base_mode import ModeContext, ModeResult
from kilo_engine.terminal.decoder import Key


def _move(context: ModeContext, key: Key, times: int = 1) -> ModeResult:
    session = context.session
    for _ in range(times):
        session.move_cursor(key)
    return ModeResult(consumed=True, status="move")


def move_up(context: ModeContext, match) -> ModeResult:
    del match
    return _move(context, Key.ARROW_UP)


def move_down(context: ModeContext, match) -> ModeResult:
    del match
    return _move(context, Key.ARROW_DOWN)


def move_left(context: ModeContext, match) -> ModeResult:
    del match
    return _move(context, Key.ARROW_LEFT)


def move_right(context: ModeContext, match) -> ModeResult:
    del match
    return _move(context, Key.ARROW_RIGHT)


def line_start(context: ModeContext, match) -> ModeResult:
    del match
    context.session.set_cursor(context.session.cursor.row, 0)
    return ModeResult(consumed=True, status="move")


def line_end(context: ModeContext, match) -> ModeResult:
    del match
    session = context.session
    row = session.cursor.row
    session.set_cursor(row, session.document.line_length(row))
    return ModeResult(consumed=True, status="move")


def page_up(context: ModeContext, match) -> ModeResult:
    del match
    return _move(context, Key.ARROW_UP, context.session.screen_rows)


def page_down(context: ModeContext, match) -> ModeResult:
    del match
    return _move(context, Key.ARROW_DOWN, context.session.screen_rows)


__all__ = [
    "move_up",
    "move_down",
    "move_left",
    "move_right",
    "line_start",
    "line_end",
    "page_up",
    "page_down",
]
