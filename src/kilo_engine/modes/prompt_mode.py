"""Single-line prompt shown in the message bar.

The prompt collects bytes until Enter (confirm, non-empty input only) or
Escape (cancel). After every keystroke, including the confirming or
cancelling one, the registered :class:`PromptObserver` sees the current
input and the key that was just handled.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from kilo_engine.runtime import telemetry
from kilo_engine.terminal.decoder import BACKSPACE, ENTER, Key, KeyEvent, ctrl

from .base_mode import Mode, ModeContext, ModeResult

_ERASE_CODES = {BACKSPACE, ctrl("h")}


class PromptObserver(Protocol):
    """Receives every prompt keystroke (search uses this to scan as you type)."""

    def on_keystroke(self, text: bytes, key: KeyEvent) -> None: ...


@dataclass(slots=True)
class PromptRequest:
    template: str
    observer: Optional[PromptObserver] = None
    on_done: Optional[Callable[[Optional[bytes]], None]] = None


class PromptMode(Mode):
    name = "prompt"

    def __init__(self, context: ModeContext, *, return_to: str = "edit") -> None:
        super().__init__(context)
        self.logger = telemetry.get_logger("kilo_engine.modes.prompt")
        self._return_to = return_to
        self._request: Optional[PromptRequest] = None
        self._typed = bytearray()

    @property
    def active(self) -> bool:
        return self._request is not None

    @property
    def current_text(self) -> bytes:
        return bytes(self._typed)

    def begin(self, request: PromptRequest) -> None:
        self._request = request
        self._typed.clear()
        self._show()

    def on_exit(self, next_mode: str | None) -> None:
        del next_mode
        if self._request is None:
            self._typed.clear()

    def handle_key(self, key: KeyEvent) -> ModeResult:
        request = self._request
        if request is None:
            return ModeResult(consumed=False, switch_to=self._return_to)

        if key.key is Key.DELETE or key.code in _ERASE_CODES:
            if self._typed:
                del self._typed[-1]
        elif key.key is Key.ESCAPE:
            return self._finish(request, key, None)
        elif key.code == ENTER:
            if self._typed:
                return self._finish(request, key, bytes(self._typed))
        elif key.is_printable and key.code is not None and key.code < 0x80:
            self._typed.append(key.code)

        self._show()
        if request.observer is not None:
            request.observer.on_keystroke(self.current_text, key)
        return ModeResult(consumed=True, status="editing")

    def _finish(
        self, request: PromptRequest, key: KeyEvent, value: Optional[bytes]
    ) -> ModeResult:
        text = self.current_text
        self._request = None
        self.context.session.set_status_message("")
        if request.observer is not None:
            request.observer.on_keystroke(text, key)
        status = "prompt_cancel" if value is None else "prompt_submit"
        telemetry.record_event(status, data={"length": len(text)})
        if request.on_done is not None:
            request.on_done(value)
        # on_done may have opened a follow-up prompt; stay in this mode then.
        switch_to = None if self.active else self._return_to
        return ModeResult(consumed=True, switch_to=switch_to, status=status)

    def _show(self) -> None:
        if self._request is None:
            return
        shown = self.current_text.decode("latin-1")
        self.context.session.set_status_message(self._request.template.format(shown))


__all__ = ["PromptMode", "PromptObserver", "PromptRequest"]
