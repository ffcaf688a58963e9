from __future__ import annotations

import errno
import os
import signal

import pytest

from kilo_engine import fileio
from kilo_engine.terminal import ansi
from kilo_engine.terminal import host
from kilo_engine.terminal.host import ProcessTerminal, TerminalError, parse_cursor_report


@pytest.fixture
def pipes():
    stdin_r, stdin_w = os.pipe()
    stdout_r, stdout_w = os.pipe()
    yield stdin_r, stdin_w, stdout_r, stdout_w
    for fd in (stdin_r, stdin_w, stdout_r, stdout_w):
        try:
            os.close(fd)
        except OSError:
            pass


@pytest.mark.parametrize(
    ("reply", "expected"),
    [(b"\x1b[24;80R", (24, 80)), (b"\x1b[1;1", (1, 1)), (b"\x1b[200;3R", (200, 3))],
)
def test_parse_cursor_report(reply: bytes, expected: tuple[int, int]) -> None:
    assert parse_cursor_report(reply) == expected


@pytest.mark.parametrize("reply", [b"", b"24;80R", b"\x1b[24R", b"\x1b[a;bR"])
def test_parse_cursor_report_rejects_garbage(reply: bytes) -> None:
    with pytest.raises(TerminalError):
        parse_cursor_report(reply)


def test_process_terminal_reads_and_writes_raw_bytes(pipes) -> None:
    stdin_r, stdin_w, stdout_r, stdout_w = pipes
    terminal = ProcessTerminal(stdin_fd=stdin_r, stdout_fd=stdout_w)
    os.write(stdin_w, b"q")

    terminal.write(b"frame")

    assert terminal.read(1) == b"q"
    assert os.read(stdout_r, 16) == b"frame"


def test_window_size_falls_back_to_cursor_probe(pipes) -> None:
    stdin_r, stdin_w, stdout_r, stdout_w = pipes
    terminal = ProcessTerminal(stdin_fd=stdin_r, stdout_fd=stdout_w)
    os.write(stdin_w, b"\x1b[40;120R")

    assert terminal.window_size() == (40, 120)
    assert os.read(stdout_r, 64) == ansi.CURSOR_FAR_CORNER + ansi.CURSOR_POSITION_QUERY


def test_raw_mode_on_non_tty_is_a_terminal_error(pipes) -> None:
    stdin_r, _, _, stdout_w = pipes
    terminal = ProcessTerminal(stdin_fd=stdin_r, stdout_fd=stdout_w)

    with pytest.raises(TerminalError):
        terminal.enable_raw_mode()


def test_read_lines_strips_line_endings(tmp_path) -> None:
    path = tmp_path / "mixed.txt"
    path.write_bytes(b"unix\ndos\r\n\nlast-no-newline")

    assert fileio.read_lines(str(path)) == [b"unix", b"dos", b"", b"last-no-newline"]


def test_read_lines_missing_file_raises(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        fileio.read_lines(str(tmp_path / "absent.txt"))


def test_write_all_truncates_existing_content(tmp_path) -> None:
    path = tmp_path / "out.txt"
    path.write_bytes(b"a much longer previous body\n")

    written = fileio.write_all(str(path), b"short\n")

    assert written == 6
    assert path.read_bytes() == b"short\n"


def test_write_all_creates_file(tmp_path) -> None:
    path = tmp_path / "new.txt"

    fileio.write_all(str(path), b"x\n")

    assert path.read_bytes() == b"x\n"


@pytest.fixture
def sigwinch_guard():
    saved = signal.getsignal(signal.SIGWINCH)
    yield
    signal.signal(signal.SIGWINCH, saved if saved is not None else signal.SIG_DFL)


def test_read_failure_is_a_terminal_error() -> None:
    read_fd, write_fd = os.pipe()
    terminal = ProcessTerminal(stdin_fd=read_fd, stdout_fd=write_fd)
    os.close(read_fd)
    os.close(write_fd)

    with pytest.raises(TerminalError) as excinfo:
        terminal.read(1)

    assert excinfo.value.operation == "read"


@pytest.mark.parametrize(
    "error",
    [BlockingIOError(errno.EAGAIN, "again"), InterruptedError(errno.EINTR, "intr")],
)
def test_read_with_no_data_yet_returns_empty(monkeypatch, pipes, error) -> None:
    stdin_r, _, _, stdout_w = pipes
    terminal = ProcessTerminal(stdin_fd=stdin_r, stdout_fd=stdout_w)

    def failing_read(fd: int, size: int) -> bytes:
        raise error

    monkeypatch.setattr(host.os, "read", failing_read)

    assert terminal.read(1) == b""


def test_sigwinch_calls_handler_and_restore_reinstalls_previous(
    pipes, sigwinch_guard
) -> None:
    stdin_r, _, _, stdout_w = pipes
    seen: list[str] = []

    def previous(signum, frame) -> None:
        seen.append("previous")

    signal.signal(signal.SIGWINCH, previous)
    terminal = ProcessTerminal(stdin_fd=stdin_r, stdout_fd=stdout_w)
    terminal.on_resize(lambda: seen.append("resize"))

    signal.raise_signal(signal.SIGWINCH)
    assert seen == ["resize"]

    terminal.restore()
    assert signal.getsignal(signal.SIGWINCH) is previous


def test_restore_when_previous_handler_is_not_from_python(
    monkeypatch, pipes, sigwinch_guard
) -> None:
    stdin_r, _, _, stdout_w = pipes
    real_getsignal = signal.getsignal
    terminal = ProcessTerminal(stdin_fd=stdin_r, stdout_fd=stdout_w)
    monkeypatch.setattr(host.signal, "getsignal", lambda signum: None)

    terminal.on_resize(lambda: None)
    terminal.restore()

    assert real_getsignal(signal.SIGWINCH) == signal.SIG_DFL


def test_sigwinch_only_flags_resize_until_the_loop_applies_it(
    pipes, sigwinch_guard, make_session
) -> None:
    stdin_r, _, _, stdout_w = pipes
    terminal = ProcessTerminal(stdin_fd=stdin_r, stdout_fd=stdout_w)
    session = make_session(rows=24, columns=80)
    terminal.on_resize(session.notify_resize)

    session.terminal.rows, session.terminal.columns = 12, 40
    signal.raise_signal(signal.SIGWINCH)

    assert session.resize_pending
    assert session.screen_rows == 22

    assert session.apply_pending_resize() is True
    assert (session.screen_rows, session.screen_cols) == (10, 40)
    assert session.apply_pending_resize() is False
    terminal.restore()
