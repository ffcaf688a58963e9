"""Cursor and viewport state owned by an edit session."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class Cursor:
    """Buffer-space cursor; ``render_col`` indexes the row's rendered bytes."""

    col: int = 0
    row: int = 0
    render_col: int = 0


@dataclass(frozen=True, slots=True)
class ViewportOffsets:
    """Top-left buffer coordinate currently visible on screen."""

    row_offset: int = 0
    col_offset: int = 0


@dataclass(frozen=True, slots=True)
class SearchSnapshot:
    """Cursor and viewport captured before a search prompt opens."""

    col: int
    row: int
    offsets: ViewportOffsets
