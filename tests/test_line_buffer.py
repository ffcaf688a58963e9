from __future__ import annotations

import pytest

from kilo_engine.buffer import (
    Document,
    Line,
    render_col_to_stored_col,
    render_tabs,
    stored_col_to_render_col,
)


def test_tab_expands_to_next_stop() -> None:
    line = Line(b"ab\tcd")

    assert line.rendered == b"ab      cd"
    assert stored_col_to_render_col(line, 3) == 8


def test_rendered_tracks_stored_updates() -> None:
    line = Line(b"x")
    line.stored = b"\tx"

    assert line.rendered == b" " * 8 + b"x"


@pytest.mark.parametrize(
    "stored",
    [b"", b"plain text", b"\t", b"\t\tlead", b"a\tb\tc", b"1234567\t8", b"tail\t"],
)
def test_render_and_stored_columns_round_trip(stored: bytes) -> None:
    line = Line(stored)
    for col in range(len(stored) + 1):
        assert render_col_to_stored_col(line, stored_col_to_render_col(line, col)) == col


def test_render_col_inside_tab_maps_to_the_tab() -> None:
    line = Line(b"ab\tcd")

    assert render_col_to_stored_col(line, 5) == 2
    assert render_col_to_stored_col(line, 40) == len(line)


def test_render_tabs_without_tabs_is_identity() -> None:
    assert render_tabs(b"no tabs here") == b"no tabs here"


def test_insert_then_delete_restores_line() -> None:
    doc = Document.from_lines([b"hello\tworld"])
    doc.insert_char(0, 3, ord("X"))
    assert doc[0].stored == b"helXlo\tworld"

    row, col = doc.delete_char(0, 4)

    assert (row, col) == (0, 3)
    assert doc[0].stored == b"hello\tworld"
    assert doc.dirty is True


def test_split_then_join_restores_line() -> None:
    doc = Document.from_lines([b"first", b"some\ttext", b"last"])
    doc.split_line(1, 4)
    assert [line.stored for line in doc] == [b"first", b"some", b"\ttext", b"last"]

    row, col = doc.delete_char(2, 0)

    assert (row, col) == (1, 4)
    assert [line.stored for line in doc] == [b"first", b"some\ttext", b"last"]


def test_split_at_column_zero_inserts_blank_line_above() -> None:
    doc = Document.from_lines([b"abc"])

    doc.split_line(0, 0)

    assert [line.stored for line in doc] == [b"", b"abc"]


def test_insert_char_on_virtual_row_appends_line() -> None:
    doc = Document()

    doc.insert_char(0, 0, ord("a"))

    assert len(doc) == 1
    assert doc[0].stored == b"a"


def test_insert_char_clamps_column() -> None:
    doc = Document.from_lines([b"ab"])

    doc.insert_char(0, 99, ord("c"))

    assert doc[0].stored == b"abc"


def test_delete_char_at_document_start_is_noop() -> None:
    doc = Document.from_lines([b"abc"])

    assert doc.delete_char(0, 0) == (0, 0)
    assert doc[0].stored == b"abc"
    assert doc.dirty is False


def test_delete_char_on_virtual_row_is_noop() -> None:
    doc = Document.from_lines([b"abc"])

    assert doc.delete_char(1, 0) == (1, 0)
    assert len(doc) == 1


def test_out_of_range_line_edits_are_ignored() -> None:
    doc = Document.from_lines([b"a"])

    doc.insert_line(5, b"x")
    doc.insert_line(-1, b"x")
    doc.delete_line(3)

    assert [line.stored for line in doc] == [b"a"]
    assert doc.dirty is False


def test_to_bytes_terminates_every_line() -> None:
    doc = Document.from_lines([b"one", b"", b"t\two"])

    assert doc.to_bytes() == b"one\n\nt\two\n"


def test_mark_clean_resets_dirty() -> None:
    doc = Document.from_lines([b"a"])
    doc.insert_line(1, b"b")
    assert doc.dirty

    doc.mark_clean()

    assert doc.dirty is False
