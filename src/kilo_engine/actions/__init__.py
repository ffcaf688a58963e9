"""Editing verbs invoked through key bindings."""

from .commands import find, quit_editor, save_file
from .editing import (
    delete_backward,
    delete_forward,
    insert_newline,
    insert_tab,
    noop_action,
)
from .navigation import (
    line_end,
    line_start,
    move_down,
    move_left,
    move_right,
    move_up,
    page_down,
    page_up,
)

__all__ = [
    "find",
    "quit_editor",
    "save_file",
    "delete_backward",
    "delete_forward",
    "insert_newline",
    "insert_tab",
    "noop_action",
    "line_end",
    "line_start",
    "move_down",
    "move_left",
    "move_right",
    "move_up",
    "page_down",
    "page_up",
]
