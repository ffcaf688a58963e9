"""Process terminal: raw mode, size discovery, byte input and frame output.

``ProcessTerminal`` is the only place that touches ``termios`` and the real
stdin/stdout descriptors. Everything above it sees a :class:`ByteSource`
for input and a ``write(bytes)`` sink for frames.
"""

from __future__ import annotations

import errno
import os
import re
import signal
import sys
import termios
from typing import Callable, Optional, Protocol, Tuple

from kilo_engine.runtime import telemetry

from . import ansi

_CURSOR_REPORT_RE = re.compile(rb"^\x1b\[(\d+);(\d+)R?$")
_RETRYABLE_READ_ERRORS = {errno.EAGAIN, errno.EWOULDBLOCK, errno.EINTR}


class TerminalError(RuntimeError):
    """Raised when the terminal itself is unusable; always fatal."""

    def __init__(self, operation: str, cause: BaseException | None = None) -> None:
        detail = f"{operation}: {cause}" if cause is not None else operation
        super().__init__(detail)
        self.operation = operation


class Terminal(Protocol):
    """Interface the edit session needs from its host terminal."""

    def read(self, size: int = 1) -> bytes: ...

    def write(self, data: bytes) -> None: ...

    def window_size(self) -> Tuple[int, int]: ...

    def clear_screen(self) -> None: ...


def parse_cursor_report(data: bytes) -> Tuple[int, int]:
    """Parse an ``ESC [ rows ; cols R`` cursor position report."""

    match = _CURSOR_REPORT_RE.match(data)
    if match is None:
        raise TerminalError("cursor position report", ValueError(repr(data)))
    return int(match.group(1)), int(match.group(2))


class ProcessTerminal:
    """Terminal backed by the process's stdin/stdout file descriptors.

    Use as a context manager: entering switches stdin to raw mode (no echo,
    no canonical buffering, no signals, 8-bit, 100 ms read stall); leaving
    restores it along with any SIGWINCH handler replaced by :meth:`on_resize`.
    """

    def __init__(
        self,
        *,
        stdin_fd: Optional[int] = None,
        stdout_fd: Optional[int] = None,
    ) -> None:
        self.stdin_fd = sys.stdin.fileno() if stdin_fd is None else stdin_fd
        self.stdout_fd = sys.stdout.fileno() if stdout_fd is None else stdout_fd
        self._original_termios: list | None = None
        self._sigwinch_installed = False
        self._prev_sigwinch_handler: object = signal.SIG_DFL
        self._resize_handler: Callable[[], None] | None = None
        self.logger = telemetry.get_logger("kilo_engine.terminal")

    # -- raw mode -----------------------------------------------------------

    def __enter__(self) -> "ProcessTerminal":
        self.enable_raw_mode()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.restore()
        return False

    def enable_raw_mode(self) -> None:
        try:
            self._original_termios = termios.tcgetattr(self.stdin_fd)
            raw = termios.tcgetattr(self.stdin_fd)
        except termios.error as exc:
            raise TerminalError("tcgetattr", exc) from exc

        raw[0] &= ~(
            termios.BRKINT | termios.ICRNL | termios.INPCK | termios.ISTRIP | termios.IXON
        )
        raw[1] &= ~termios.OPOST
        raw[2] |= termios.CS8
        raw[3] &= ~(termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG)
        raw[6][termios.VMIN] = 0
        raw[6][termios.VTIME] = 1

        try:
            termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, raw)
        except termios.error as exc:
            raise TerminalError("tcsetattr", exc) from exc
        telemetry.record_event("terminal.raw_mode", data={"fd": self.stdin_fd})

    def restore(self) -> None:
        if self._sigwinch_installed:
            signal.signal(signal.SIGWINCH, self._prev_sigwinch_handler)
            self._sigwinch_installed = False
            self._prev_sigwinch_handler = signal.SIG_DFL
        if self._original_termios is None:
            return
        try:
            termios.tcsetattr(
                self.stdin_fd, termios.TCSAFLUSH, self._original_termios
            )
        except termios.error as exc:
            raise TerminalError("tcsetattr", exc) from exc
        finally:
            self._original_termios = None

    # -- resize -------------------------------------------------------------

    def on_resize(self, handler: Callable[[], None]) -> None:
        """Call ``handler()`` from the SIGWINCH handler.

        The handler runs in signal context and must only note that a resize
        happened; the new size is queried later from the main loop.
        """

        self._resize_handler = handler
        if not self._sigwinch_installed:
            previous = signal.getsignal(signal.SIGWINCH)
            # None: installed outside Python and cannot be reinstalled.
            self._prev_sigwinch_handler = (
                signal.SIG_DFL if previous is None else previous
            )
            signal.signal(signal.SIGWINCH, self._on_sigwinch)
            self._sigwinch_installed = True

    def _on_sigwinch(self, signum: int, frame: object) -> None:
        if self._resize_handler is not None:
            self._resize_handler()

    # -- I/O ----------------------------------------------------------------

    def read(self, size: int = 1) -> bytes:
        try:
            return os.read(self.stdin_fd, size)
        except OSError as exc:
            if exc.errno in _RETRYABLE_READ_ERRORS:
                return b""
            raise TerminalError("read", exc) from exc

    def write(self, data: bytes) -> None:
        """Write ``data`` in full; a frame is never left half-written."""

        view = memoryview(data)
        try:
            while view:
                written = os.write(self.stdout_fd, view)
                view = view[written:]
        except OSError as exc:
            raise TerminalError("write", exc) from exc

    def clear_screen(self) -> None:
        self.write(ansi.CLEAR_SCREEN + ansi.CURSOR_HOME)

    # -- size ---------------------------------------------------------------

    def window_size(self) -> Tuple[int, int]:
        """Return ``(rows, cols)``, falling back to a cursor position probe."""

        try:
            size = os.get_terminal_size(self.stdout_fd)
        except OSError:
            size = None
        if size is not None and size.columns > 0:
            return size.lines, size.columns
        self.write(ansi.CURSOR_FAR_CORNER)
        return self._cursor_position()

    def _cursor_position(self) -> Tuple[int, int]:
        self.write(ansi.CURSOR_POSITION_QUERY)
        reply = bytearray()
        while len(reply) < 31:
            chunk = self.read(1)
            if not chunk or chunk == b"R":
                break
            reply += chunk
        self.logger.debug(f"cursor report {bytes(reply)!r}")
        return parse_cursor_report(bytes(reply))


__all__ = ["Terminal", "ProcessTerminal", "TerminalError", "parse_cursor_report"]
