"""Token-to-action resolution with telemetry instrumentation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

from kilo_engine.runtime.telemetry import span

from .models import ActionRef, Binding
from .registry import KeymapRegistry


@dataclass(frozen=True, slots=True)
class ResolutionMatch:
    """Resolved binding paired with its action."""

    binding: Binding
    action: ActionRef


@dataclass(frozen=True, slots=True)
class ResolutionResult:
    """Outcome returned from the resolver."""

    status: Literal["match", "miss"]
    match: Optional[ResolutionMatch] = None


class KeymapResolver:
    """Resolves a key token against a mode's bindings."""

    def __init__(
        self, registry: KeymapRegistry, *, logger_name: str | None = None
    ) -> None:
        self._registry = registry
        self._logger_name = logger_name

    @property
    def registry(self) -> KeymapRegistry:
        return self._registry

    def resolve(self, mode: str, token: str) -> ResolutionResult:
        with span(
            "keymaps::resolve",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"mode": mode, "token": token},
        ) as handle:
            binding = self._registry.lookup(mode, token)
            if binding is None:
                handle.add_metadata("status", "miss")
                return ResolutionResult(status="miss")
            action = self._registry.get_action(binding.action_id)
            handle.add_metadata("status", "match")
            handle.add_metadata("binding_id", binding.id)
            return ResolutionResult(
                status="match", match=ResolutionMatch(binding=binding, action=action)
            )


__all__ = ["KeymapResolver", "ResolutionResult", "ResolutionMatch"]
