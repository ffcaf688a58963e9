from __future__ import annotations

import pytest

from kilo_engine.keymaps import (
    ActionRef,
    Binding,
    KeymapConflictError,
    KeymapRegistry,
    KeymapResolver,
)
from kilo_engine.keymaps.defaults import (
    DEFAULT_BINDINGS,
    EDIT_MODE,
    load_default_keymaps,
)


def make_action(action_id: str = "core.test") -> ActionRef:
    return ActionRef(id=action_id, handler=lambda *args, **kwargs: None)


def make_binding(
    *,
    binding_id: str,
    mode: str = "edit",
    token: str = "ctrl+x",
    action_id: str = "core.test",
) -> Binding:
    return Binding(id=binding_id, mode=mode, token=token, action_id=action_id)


def test_register_binding_success() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    binding = make_binding(binding_id="edit.ctrl+x")

    registry.register_binding(binding)

    assert registry.stats().binding_count == 1
    assert list(registry.iter_bindings(mode="edit")) == [binding]
    assert registry.lookup("edit", "ctrl+x") == binding


def test_register_binding_conflict_detection() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    registry.register_binding(make_binding(binding_id="first"))

    with pytest.raises(KeymapConflictError) as excinfo:
        registry.register_binding(make_binding(binding_id="second"))

    assert excinfo.value.existing.id == "first"


def test_replace_evicts_conflicting_binding() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    registry.register_binding(make_binding(binding_id="first"))

    registry.register_binding(make_binding(binding_id="second"), replace=True)

    assert registry.lookup("edit", "ctrl+x").id == "second"
    assert registry.stats().binding_count == 1


def test_same_token_in_other_mode_is_not_a_conflict() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    registry.register_binding(make_binding(binding_id="edit.x"))

    registry.register_binding(make_binding(binding_id="prompt.x", mode="prompt"))

    assert registry.stats().binding_count == 2


def test_binding_requires_known_action() -> None:
    registry = KeymapRegistry()

    with pytest.raises(KeyError):
        registry.register_binding(make_binding(binding_id="orphan"))


def test_duplicate_action_rejected() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())

    with pytest.raises(ValueError):
        registry.register_action(make_action())


def test_unregister_binding_frees_token() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    registry.register_binding(make_binding(binding_id="edit.ctrl+x"))
    revision = registry.revision()

    removed = registry.unregister_binding("edit.ctrl+x")

    assert removed is not None
    assert registry.lookup("edit", "ctrl+x") is None
    assert registry.revision() == revision + 1
    assert registry.unregister_binding("edit.ctrl+x") is None


def test_binding_fields_validated() -> None:
    with pytest.raises(ValueError):
        Binding(id="x", mode="edit", token="", action_id="a")


def test_resolver_match_and_miss() -> None:
    registry = KeymapRegistry()
    load_default_keymaps(registry)
    resolver = KeymapResolver(registry)

    hit = resolver.resolve(EDIT_MODE, "ctrl+s")
    miss = resolver.resolve(EDIT_MODE, "ctrl+z")

    assert hit.status == "match"
    assert hit.match is not None
    assert hit.match.action.id == "command.save"
    assert miss.status == "miss"
    assert miss.match is None


def test_default_keymaps_cover_editor_commands() -> None:
    registry = KeymapRegistry()
    load_default_keymaps(registry)

    expected = {
        "ARROW_UP": "nav.up",
        "PAGE_DOWN": "nav.page_down",
        "ENTER": "edit.newline",
        "BACKSPACE": "edit.delete_backward",
        "ctrl+h": "edit.delete_backward",
        "DELETE": "edit.delete_forward",
        "ctrl+q": "command.quit",
        "ctrl+f": "command.find",
        "ESC": "core.noop",
    }
    for token, action_id in expected.items():
        binding = registry.lookup(EDIT_MODE, token)
        assert binding is not None, token
        assert binding.action_id == action_id
    assert registry.stats().binding_count == len(DEFAULT_BINDINGS)


def test_default_keymaps_exclude_and_extra() -> None:
    registry = KeymapRegistry()
    extra = Binding(
        id="edit.ctrl+l.save", mode=EDIT_MODE, token="ctrl+l", action_id="command.save"
    )

    load_default_keymaps(
        registry, exclude_bindings=["edit.ctrl+f"], extra_bindings=[extra]
    )

    assert registry.lookup(EDIT_MODE, "ctrl+f") is None
    assert registry.lookup(EDIT_MODE, "ctrl+l") == extra
