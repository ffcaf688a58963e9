"""Session-level commands: save, quit and find."""

from __future__ import annotations

from kilo_engine.modes.base_mode import ModeContext, ModeResult


def save_file(context: ModeContext, match) -> ModeResult:
    del match
    context.session.save()
    return ModeResult(consumed=True, status="save")


def quit_editor(context: ModeContext, match) -> ModeResult:
    del match
    if context.session.request_quit():
        return ModeResult(consumed=True, status="quit")
    return ModeResult(
        consumed=True,
        status="quit_pending",
        message=context.session.status.text,
    )


def find(context: ModeContext, match) -> ModeResult:
    del match
    context.session.find()
    return ModeResult(consumed=True, status="find")


__all__ = ["save_file", "quit_editor", "find"]
