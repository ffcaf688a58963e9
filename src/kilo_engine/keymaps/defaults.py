"""Built-in edit-mode bindings."""

from __future__ import annotations

from typing import Iterable, Sequence

from kilo_engine.actions import commands as command_actions
from kilo_engine.actions import editing as edit_actions
from kilo_engine.actions import navigation as nav_actions

from .models import ActionRef, Binding
from .registry import KeymapRegistry

EDIT_MODE = "edit"

DEFAULT_ACTIONS: tuple[ActionRef, ...] = (
    ActionRef(id="nav.up", handler=nav_actions.move_up, description="Cursor up"),
    ActionRef(id="nav.down", handler=nav_actions.move_down, description="Cursor down"),
    ActionRef(id="nav.left", handler=nav_actions.move_left, description="Cursor left"),
    ActionRef(
        id="nav.right", handler=nav_actions.move_right, description="Cursor right"
    ),
    ActionRef(
        id="nav.line_start",
        handler=nav_actions.line_start,
        description="Jump to start of line",
    ),
    ActionRef(
        id="nav.line_end", handler=nav_actions.line_end, description="Jump to end of line"
    ),
    ActionRef(id="nav.page_up", handler=nav_actions.page_up, description="Page up"),
    ActionRef(
        id="nav.page_down", handler=nav_actions.page_down, description="Page down"
    ),
    ActionRef(
        id="edit.newline",
        handler=edit_actions.insert_newline,
        description="Split the line at the cursor",
    ),
    ActionRef(
        id="edit.delete_backward",
        handler=edit_actions.delete_backward,
        description="Delete the character before the cursor",
    ),
    ActionRef(
        id="edit.delete_forward",
        handler=edit_actions.delete_forward,
        description="Delete the character under the cursor",
    ),
    ActionRef(
        id="edit.insert_tab", handler=edit_actions.insert_tab, description="Insert a tab"
    ),
    ActionRef(
        id="core.noop", handler=edit_actions.noop_action, description="Ignore the key"
    ),
    ActionRef(
        id="command.save", handler=command_actions.save_file, description="Save to disk"
    ),
    ActionRef(
        id="command.quit",
        handler=command_actions.quit_editor,
        description="Quit, confirming unsaved changes",
    ),
    ActionRef(
        id="command.find", handler=command_actions.find, description="Incremental search"
    ),
)

# (token, action id) pairs; binding ids are derived as ``edit.<token>``.
_EDIT_TOKENS: tuple[tuple[str, str], ...] = (
    ("ARROW_UP", "nav.up"),
    ("ARROW_DOWN", "nav.down"),
    ("ARROW_LEFT", "nav.left"),
    ("ARROW_RIGHT", "nav.right"),
    ("HOME", "nav.line_start"),
    ("END", "nav.line_end"),
    ("PAGE_UP", "nav.page_up"),
    ("PAGE_DOWN", "nav.page_down"),
    ("ENTER", "edit.newline"),
    ("BACKSPACE", "edit.delete_backward"),
    ("ctrl+h", "edit.delete_backward"),
    ("DELETE", "edit.delete_forward"),
    ("TAB", "edit.insert_tab"),
    ("ctrl+s", "command.save"),
    ("ctrl+q", "command.quit"),
    ("ctrl+f", "command.find"),
    ("ctrl+l", "core.noop"),
    ("ESC", "core.noop"),
)

DEFAULT_BINDINGS: tuple[Binding, ...] = tuple(
    Binding(
        id=f"{EDIT_MODE}.{token}",
        mode=EDIT_MODE,
        token=token,
        action_id=action_id,
    )
    for token, action_id in _EDIT_TOKENS
)


def load_default_keymaps(
    registry: KeymapRegistry,
    *,
    replace: bool = False,
    extra_bindings: Iterable[Binding] | None = None,
    exclude_bindings: Sequence[str] | None = None,
) -> None:
    """Register built-in actions and bindings, then any ``extra_bindings``."""

    excluded = set(exclude_bindings or ())
    for action in DEFAULT_ACTIONS:
        registry.register_action(action, replace=replace)

    for binding in DEFAULT_BINDINGS:
        if binding.id in excluded:
            continue
        registry.register_binding(binding, replace=replace)

    for binding in extra_bindings or ():
        registry.register_binding(binding, replace=True)


__all__ = ["load_default_keymaps", "DEFAULT_ACTIONS", "DEFAULT_BINDINGS", "EDIT_MODE"]
