"""Terminal host, ANSI vocabulary and raw key decoding."""

from .decoder import ByteSource, Key, KeyDecoder, KeyEvent, ctrl
from .host import ProcessTerminal, Terminal, TerminalError, parse_cursor_report

__all__ = [
    "ByteSource",
    "Key",
    "KeyDecoder",
    "KeyEvent",
    "ctrl",
    "ProcessTerminal",
    "Terminal",
    "TerminalError",
    "parse_cursor_report",
]
