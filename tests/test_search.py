from __future__ import annotations

from kilo_engine.buffer import ViewportOffsets
from kilo_engine.search import BACKWARD, FORWARD, SearchEngine
from kilo_engine.terminal.decoder import Key, KeyEvent, ctrl

from virtual_terminal import press

CTRL_F = bytes([ctrl("f")])
UP, DOWN, RIGHT, LEFT = b"\x1b[A", b"\x1b[B", b"\x1b[C", b"\x1b[D"
LINES = [b"ab", b"xcdy", b"cdz"]


def position(session) -> tuple[int, int]:
    return session.cursor.row, session.cursor.render_col


def test_incremental_search_steps_and_wraps(make_session) -> None:
    session = make_session(LINES)

    press(session, CTRL_F + b"cd")
    assert position(session) == (1, 1)

    press(session, DOWN)
    assert position(session) == (2, 0)

    press(session, RIGHT)
    assert position(session) == (1, 1)


def test_backward_search_wraps_to_last_row(make_session) -> None:
    session = make_session(LINES)

    press(session, CTRL_F + b"cd" + UP)

    assert position(session) == (2, 0)


def test_search_prompt_shows_query(make_session) -> None:
    session = make_session(LINES)

    press(session, CTRL_F + b"cd")

    assert session.status.text == "Search: cd (Use ESC/Arrows/Enter)"
    assert session.manager.active_mode.name == "prompt"


def test_match_scrolls_to_top_of_window(make_session) -> None:
    session = make_session([b"filler"] * 40 + [b"needle"], rows=12)

    press(session, CTRL_F + b"needle")
    session.scroll()

    assert session.cursor.row == 40
    assert session.offsets.row_offset == 40


def test_enter_keeps_cursor_on_match(make_session) -> None:
    session = make_session(LINES)

    press(session, CTRL_F + b"cd" + DOWN + b"\r")

    assert position(session) == (2, 0)
    assert session.manager.active_mode.name == "edit"
    assert session.status.text == ""


def test_escape_restores_cursor_and_viewport(make_session) -> None:
    session = make_session(LINES)
    session.set_cursor(0, 1)
    session.offsets = ViewportOffsets(row_offset=0, col_offset=0)

    press(session, CTRL_F + b"cd" + DOWN + b"\x1b")

    assert position(session) == (0, 1)
    assert session.offsets == ViewportOffsets()
    assert session.manager.active_mode.name == "edit"


def test_query_without_match_leaves_cursor(make_session) -> None:
    session = make_session(LINES)

    press(session, CTRL_F + b"qq")

    assert position(session) == (0, 0)


def test_match_column_accounts_for_tabs(make_session) -> None:
    session = make_session([b"\tfoo"])

    press(session, CTRL_F + b"foo")

    assert session.cursor.col == 1
    assert session.cursor.render_col == 8


def test_engine_direction_follows_arrows(make_session) -> None:
    session = make_session(LINES)
    engine = SearchEngine(session)
    engine.on_keystroke(b"cd", KeyEvent.byte(ord("d")))
    assert engine.last_match_row == 1

    engine.on_keystroke(b"cd", KeyEvent.named(Key.ARROW_LEFT))
    assert engine.direction == BACKWARD
    assert engine.last_match_row == 2

    engine.on_keystroke(b"cd", KeyEvent.named(Key.ESCAPE))
    assert engine.last_match_row is None
    assert engine.direction == FORWARD


def test_arrow_before_any_match_searches_forward(make_session) -> None:
    session = make_session(LINES)
    engine = SearchEngine(session)

    engine.on_keystroke(b"cd", KeyEvent.named(Key.ARROW_UP))

    assert engine.last_match_row == 1


def test_empty_query_does_not_search(make_session) -> None:
    session = make_session(LINES)
    engine = SearchEngine(session)

    engine.on_keystroke(b"", KeyEvent.byte(ord("a")))

    assert engine.last_match_row is None
    assert position(session) == (0, 0)
