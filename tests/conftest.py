from __future__ import annotations

import errno
from typing import Callable, Iterable

import pytest

from kilo_engine.buffer import Document
from kilo_engine.session import EditSession

from virtual_terminal import FakeClock, RecordingWriter, VirtualTerminal


@pytest.fixture
def writer() -> RecordingWriter:
    return RecordingWriter()


@pytest.fixture
def failing_writer() -> RecordingWriter:
    return RecordingWriter(OSError(errno.ENOSPC, "No space left on device"))


@pytest.fixture
def make_session(writer: RecordingWriter) -> Callable[..., EditSession]:
    def factory(
        lines: Iterable[bytes] | None = None,
        *,
        filename: str | None = None,
        rows: int = 24,
        columns: int = 80,
        session_writer: Callable[[str, bytes], int] | None = None,
        clock: FakeClock | None = None,
    ) -> EditSession:
        document = Document.from_lines(lines) if lines is not None else None
        return EditSession(
            VirtualTerminal(rows=rows, columns=columns),
            document=document,
            filename=filename,
            writer=session_writer or writer,
            clock=clock or FakeClock(),
        )

    return factory
