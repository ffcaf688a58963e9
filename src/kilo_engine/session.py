"""Edit session: owns the document, cursor and viewport, and runs the loop.

Each cycle draws one frame, blocks for one decoded key and hands it to the
active mode. Actions reach the session through ``ModeContext.session``;
there is no module-level editor state.
"""

from __future__ import annotations

import os
import time
from typing import Callable, Optional

from kilo_engine.runtime import telemetry

from kilo_engine import fileio
from kilo_engine.buffer import Cursor, Document, SearchSnapshot, ViewportOffsets
from kilo_engine.buffer.line import stored_col_to_render_col
from kilo_engine.keymaps import KeymapRegistry
from kilo_engine.modes import (
    EditMode,
    ModeBus,
    ModeContext,
    ModeResult,
    PromptMode,
    PromptObserver,
    PromptRequest,
)
from kilo_engine.modes.mode_manager import ModeManager
from kilo_engine.render import FrameRenderer, StatusMessage, recompute
from kilo_engine.search import SearchEngine
from kilo_engine.terminal.decoder import Key, KeyDecoder, KeyEvent
from kilo_engine.terminal.host import Terminal

QUIT_TIMES = 3
HELP_MESSAGE = "HELP: Ctrl-S = save | Ctrl-Q = quit | Ctrl-F = find"
SEARCH_PROMPT = "Search: {} (Use ESC/Arrows/Enter)"
SAVE_AS_PROMPT = "Save as: {} (ESC to cancel)"

Writer = Callable[[str, bytes], int]


class EditSession:
    def __init__(
        self,
        terminal: Terminal,
        *,
        document: Optional[Document] = None,
        filename: Optional[str] = None,
        writer: Writer = fileio.write_all,
        clock: Callable[[], float] = time.monotonic,
        keymap_registry: KeymapRegistry | None = None,
    ) -> None:
        self.terminal = terminal
        self.document = document if document is not None else Document()
        self.filename = filename
        self.cursor = Cursor()
        self.offsets = ViewportOffsets()
        self.screen_rows = 1
        self.screen_cols = 1
        self.status = StatusMessage(clock=clock)
        self.quit_times = QUIT_TIMES
        self.quit_requested = False
        self.resize_pending = False
        self.logger = telemetry.get_logger("kilo_engine.session")

        self._writer = writer
        self._decoder = KeyDecoder(terminal)
        self._renderer = FrameRenderer()
        self.bus = ModeBus()
        self.context = ModeContext(session=self, bus=self.bus)
        self.manager = ModeManager(self.context, keymap_registry=keymap_registry)
        self.manager.register_mode(EditMode)
        self._prompt_mode = self.manager.register_mode(PromptMode)

        self.resize(*terminal.window_size())

    @classmethod
    def open(cls, path: str, terminal: Terminal, **kwargs: object) -> "EditSession":
        """Load ``path`` into a new session; ``OSError`` propagates to the caller."""

        document = Document.from_lines(fileio.read_lines(path))
        return cls(terminal, document=document, filename=path, **kwargs)  # type: ignore[arg-type]

    # -- screen -------------------------------------------------------------

    def resize(self, rows: int, cols: int) -> None:
        # Two rows are reserved for the status and message bars.
        self.screen_rows = max(1, rows - 2)
        self.screen_cols = max(1, cols)

    def notify_resize(self) -> None:
        """Signal-safe: only flags the resize for the next loop cycle."""

        self.resize_pending = True

    def apply_pending_resize(self) -> bool:
        if not self.resize_pending:
            return False
        self.resize_pending = False
        self.resize(*self.terminal.window_size())
        telemetry.record_event(
            "terminal.resize",
            level="debug",
            data={"rows": self.screen_rows, "cols": self.screen_cols},
        )
        return True

    def scroll(self) -> None:
        self.offsets = recompute(
            self.cursor, self.offsets, self.screen_rows, self.screen_cols
        )

    def render_frame(self) -> bytes:
        self.scroll()
        return self._renderer.render(
            self.document,
            self.cursor,
            self.offsets,
            filename=self.filename,
            message=self.status.visible(),
            screen_rows=self.screen_rows,
            screen_cols=self.screen_cols,
        )

    def refresh_screen(self) -> None:
        self.terminal.write(self.render_frame())

    def set_status_message(self, text: str) -> None:
        self.status.set(text)

    # -- cursor -------------------------------------------------------------

    def set_cursor(self, row: int, col: int) -> None:
        self.cursor.row = row
        self.cursor.col = col
        self.sync_render_col()

    def sync_render_col(self) -> None:
        row = self.cursor.row
        if row < len(self.document):
            self.cursor.render_col = stored_col_to_render_col(
                self.document[row], self.cursor.col
            )
        else:
            self.cursor.render_col = 0

    def move_cursor(self, key: Key) -> None:
        row, col = self.cursor.row, self.cursor.col
        total = len(self.document)
        on_line = row < total

        if key is Key.ARROW_LEFT:
            if col > 0:
                col -= 1
            elif row > 0:
                row -= 1
                col = self.document.line_length(row)
        elif key is Key.ARROW_RIGHT:
            if on_line and col < self.document.line_length(row):
                col += 1
            elif on_line:
                row += 1
                col = 0
        elif key is Key.ARROW_UP:
            if row > 0:
                row -= 1
        elif key is Key.ARROW_DOWN:
            if row < total:
                row += 1

        self.set_cursor(row, min(col, self.document.line_length(row)))

    # -- editing ------------------------------------------------------------

    def insert_char(self, byte: int) -> None:
        self.document.insert_char(self.cursor.row, self.cursor.col, byte)
        self.set_cursor(self.cursor.row, self.cursor.col + 1)

    def insert_newline(self) -> None:
        self.document.split_line(self.cursor.row, self.cursor.col)
        self.set_cursor(self.cursor.row + 1, 0)

    def delete_char(self) -> None:
        row, col = self.document.delete_char(self.cursor.row, self.cursor.col)
        self.set_cursor(row, col)

    def delete_forward(self) -> None:
        self.move_cursor(Key.ARROW_RIGHT)
        self.delete_char()

    # -- prompt / commands --------------------------------------------------

    def prompt(
        self,
        template: str,
        observer: Optional[PromptObserver] = None,
        on_done: Optional[Callable[[Optional[bytes]], None]] = None,
    ) -> None:
        """Collect a line in the message bar.

        ``on_done`` receives the confirmed bytes, or ``None`` on cancel.
        """

        assert isinstance(self._prompt_mode, PromptMode)
        self._prompt_mode.begin(PromptRequest(template, observer, on_done))
        self.manager.switch_mode(PromptMode.name)

    def find(self) -> None:
        snapshot = SearchSnapshot(
            col=self.cursor.col, row=self.cursor.row, offsets=self.offsets
        )
        engine = SearchEngine(self)

        def finished(query: Optional[bytes]) -> None:
            if query is None:
                self.offsets = snapshot.offsets
                self.set_cursor(snapshot.row, snapshot.col)
            telemetry.record_event(
                "search.done",
                data={"confirmed": query is not None, "row": self.cursor.row},
            )

        self.prompt(SEARCH_PROMPT, engine, finished)

    def save(self) -> None:
        if self.filename is None:
            self.prompt(SAVE_AS_PROMPT, on_done=self._save_as)
            return
        self._write()

    def _save_as(self, name: Optional[bytes]) -> None:
        if name is None:
            self.set_status_message("Save aborted")
            return
        self.filename = os.fsdecode(name)
        self._write()

    def _write(self) -> bool:
        assert self.filename is not None
        data = self.document.to_bytes()
        try:
            written = self._writer(self.filename, data)
        except OSError as exc:
            reason = exc.strerror or str(exc)
            self.set_status_message(f"Can't save! I/O error: {reason}")
            telemetry.record_event(
                "file.save_failed",
                level="warning",
                data={"path": self.filename, "reason": reason},
            )
            self.bus.emit("file.save_failed", {"path": self.filename, "reason": reason})
            return False

        self.document.mark_clean()
        self.quit_times = QUIT_TIMES
        self.set_status_message(f"{written} bytes written to disk")
        self.bus.emit("file.saved", {"path": self.filename, "bytes": written})
        return True

    def request_quit(self) -> bool:
        """Return True when the session may exit.

        A dirty buffer needs ``QUIT_TIMES`` more quit requests first. Other
        keys leave the countdown where it is; a successful save restarts it.
        """

        if self.document.dirty and self.quit_times > 0:
            self.set_status_message(
                "WARNING!!! File has unsaved changes. "
                f"Press Ctrl-Q {self.quit_times} more times to quit."
            )
            self.quit_times -= 1
            return False
        self.quit_requested = True
        telemetry.record_event("session.quit", data={"dirty": self.document.dirty})
        self.bus.emit("session.quit", {"dirty": self.document.dirty})
        return True

    # -- loop ---------------------------------------------------------------

    def handle_key(self, key: KeyEvent) -> ModeResult:
        return self.manager.handle_key(key)

    def process_keypress(self) -> ModeResult:
        return self.handle_key(self._decoder.next())

    def run(self) -> None:
        """Refresh, read, dispatch until a quit request succeeds."""

        while not self.quit_requested:
            self.apply_pending_resize()
            self.refresh_screen()
            self.process_keypress()
        self.terminal.clear_screen()


__all__ = ["EditSession", "QUIT_TIMES", "HELP_MESSAGE"]
