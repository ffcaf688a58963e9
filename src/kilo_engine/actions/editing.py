"""Buffer-mutating actions bound in edit mode."""

from __future__ import annotations

from kilo_engine.modes.base_mode import ModeContext, ModeResult
from kilo_engine.terminal.decoder import TAB


def insert_newline(context: ModeContext, match) -> ModeResult:
    del match
    context.session.insert_newline()
    return ModeResult(consumed=True, status="edit")


def delete_backward(context: ModeContext, match) -> ModeResult:
    del match
    context.session.delete_char()
    return ModeResult(consumed=True, status="edit")


def delete_forward(context: ModeContext, match) -> ModeResult:
    del match
    context.session.delete_forward()
    return ModeResult(consumed=True, status="edit")


def insert_tab(context: ModeContext, match) -> ModeResult:
    del match
    context.session.insert_char(TAB)
    return ModeResult(consumed=True, status="edit")


def noop_action(context: ModeContext, match) -> ModeResult:
    del context, match
    return ModeResult(consumed=True, status="noop")


__all__ = [
    "insert_newline",
    "delete_backward",
    "delete_forward",
    "insert_tab",
    "noop_action",
]
