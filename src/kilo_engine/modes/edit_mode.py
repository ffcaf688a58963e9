"""Default editing mode: keymap dispatch with printable-byte insertion."""

from __future__ import annotations

from kilo_engine.runtime import telemetry

from kilo_engine.keymaps import KeymapResolver, ResolutionMatch
from kilo_engine.terminal.decoder import KeyEvent

from .base_mode import Mode, ModeContext, ModeResult


class EditMode(Mode):
    name = "edit"

    def __init__(self, context: ModeContext) -> None:
        super().__init__(context)
        self.logger = telemetry.get_logger("kilo_engine.modes.edit")
        resolver = context.extras.get("keymap_resolver")
        if not isinstance(resolver, KeymapResolver):
            raise RuntimeError("ModeContext.extras missing 'keymap_resolver'")
        self._resolver = resolver

    def handle_key(self, key: KeyEvent) -> ModeResult:
        result = self._resolver.resolve(self.name, key.token)
        if result.status == "match" and result.match:
            return self._execute_match(result.match)

        if key.is_printable:
            assert key.code is not None
            self.context.session.insert_char(key.code)
            return ModeResult(consumed=True, status="insert")

        return ModeResult(consumed=False, status="miss", message="unbound")

    def _execute_match(self, match: ResolutionMatch) -> ModeResult:
        with telemetry.span(
            "keymaps::execute",
            component="keymaps",
            metadata={"binding_id": match.binding.id, "action": match.action.id},
        ):
            outcome = match.action(self.context, match)

        if isinstance(outcome, ModeResult):
            return outcome
        return ModeResult(consumed=True)
