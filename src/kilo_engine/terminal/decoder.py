"""Raw byte stream to logical key events.

Escape sequences are recognised by a small, depth-bounded state machine: a
lead ``ESC`` byte is followed by at most three more bytes. Whenever a follow
byte fails to arrive within the source's stall window, or the bytes do not
match a known sequence, the whole thing collapses to a plain ``Key.ESCAPE``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol

ESC = 0x1B
ENTER = 0x0D
BACKSPACE = 0x7F
TAB = 0x09


def ctrl(letter: str) -> int:
    """Byte produced by holding Ctrl with ``letter``."""

    return ord(letter) & 0x1F


class Key(str, Enum):
    """Named keys the decoder can produce."""

    ARROW_UP = "ARROW_UP"
    ARROW_DOWN = "ARROW_DOWN"
    ARROW_LEFT = "ARROW_LEFT"
    ARROW_RIGHT = "ARROW_RIGHT"
    DELETE = "DELETE"
    HOME = "HOME"
    END = "END"
    PAGE_UP = "PAGE_UP"
    PAGE_DOWN = "PAGE_DOWN"
    ESCAPE = "ESC"


_TILDE_KEYS = {
    ord("1"): Key.HOME,
    ord("3"): Key.DELETE,
    ord("4"): Key.END,
    ord("5"): Key.PAGE_UP,
    ord("6"): Key.PAGE_DOWN,
    ord("7"): Key.HOME,
    ord("8"): Key.END,
}

_CSI_KEYS = {
    ord("A"): Key.ARROW_UP,
    ord("B"): Key.ARROW_DOWN,
    ord("C"): Key.ARROW_RIGHT,
    ord("D"): Key.ARROW_LEFT,
    ord("H"): Key.HOME,
    ord("F"): Key.END,
}

_SS3_KEYS = {
    ord("H"): Key.HOME,
    ord("F"): Key.END,
}

_CONTROL_TOKENS = {
    ENTER: "ENTER",
    BACKSPACE: "BACKSPACE",
    TAB: "TAB",
}


@dataclass(frozen=True, slots=True)
class KeyEvent:
    """One decoded key: either a raw byte (``code``) or a named ``key``."""

    code: Optional[int] = None
    key: Optional[Key] = None

    def __post_init__(self) -> None:
        if (self.code is None) == (self.key is None):
            raise ValueError("KeyEvent needs exactly one of code or key")

    @classmethod
    def named(cls, key: Key) -> "KeyEvent":
        return cls(key=key)

    @classmethod
    def byte(cls, code: int) -> "KeyEvent":
        return cls(code=code)

    @property
    def is_control(self) -> bool:
        return self.code is not None and (self.code < 0x20 or self.code == 0x7F)

    @property
    def is_printable(self) -> bool:
        return self.code is not None and not self.is_control

    def is_ctrl(self, letter: str) -> bool:
        return self.code == ctrl(letter)

    @property
    def token(self) -> str:
        """Keymap token used to look up a binding."""

        if self.key is not None:
            return self.key.value
        assert self.code is not None
        if self.code in _CONTROL_TOKENS:
            return _CONTROL_TOKENS[self.code]
        if self.is_control:
            return f"ctrl+{chr(self.code | 0x60)}"
        return chr(self.code)


class ByteSource(Protocol):
    """Anything that yields input bytes; ``b""`` means nothing arrived yet."""

    def read(self, size: int = 1) -> bytes: ...


class KeyDecoder:
    """Pulls bytes from a :class:`ByteSource` and yields one key per call."""

    def __init__(self, source: ByteSource) -> None:
        self._source = source

    def next(self) -> KeyEvent:
        lead = self._read_byte()
        while lead is None:
            lead = self._read_byte()
        if lead != ESC:
            return KeyEvent.byte(lead)
        return KeyEvent.named(self._decode_escape())

    def _read_byte(self) -> Optional[int]:
        data = self._source.read(1)
        if not data:
            return None
        return data[0]

    def _decode_escape(self) -> Key:
        first = self._read_byte()
        if first is None:
            return Key.ESCAPE
        second = self._read_byte()
        if second is None:
            return Key.ESCAPE

        if first == ord("["):
            if ord("0") <= second <= ord("9"):
                third = self._read_byte()
                if third != ord("~"):
                    return Key.ESCAPE
                return _TILDE_KEYS.get(second, Key.ESCAPE)
            return _CSI_KEYS.get(second, Key.ESCAPE)
        if first == ord("O"):
            return _SS3_KEYS.get(second, Key.ESCAPE)
        return Key.ESCAPE


__all__ = [
    "ESC",
    "ENTER",
    "BACKSPACE",
    "TAB",
    "ctrl",
    "Key",
    "KeyEvent",
    "ByteSource",
    "KeyDecoder",
]
