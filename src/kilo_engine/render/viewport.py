"""Scroll controller mapping the cursor into the visible screen rectangle."""

from __future__ import annotations

from kilo_engine.buffer.state import Cursor, ViewportOffsets


def recompute(
    cursor: Cursor,
    offsets: ViewportOffsets,
    screen_rows: int,
    screen_cols: int,
) -> ViewportOffsets:
    """Return offsets that keep the cursor's render position on screen.

    Only the offsets move. Columns are measured in render space so rows
    containing tabs scroll by their displayed width.
    """

    screen_rows = max(1, screen_rows)
    screen_cols = max(1, screen_cols)
    row_offset = offsets.row_offset
    col_offset = offsets.col_offset

    if cursor.row < row_offset:
        row_offset = cursor.row
    if cursor.row >= row_offset + screen_rows:
        row_offset = cursor.row - screen_rows + 1
    if cursor.render_col < col_offset:
        col_offset = cursor.render_col
    if cursor.render_col >= col_offset + screen_cols:
        col_offset = cursor.render_col - screen_cols + 1

    return ViewportOffsets(row_offset=row_offset, col_offset=col_offset)


__all__ = ["recompute"]
