"""Line buffer, cursor and viewport state."""

from .document import Document
from .line import (
    TAB_STOP,
    Line,
    render_col_to_stored_col,
    render_tabs,
    stored_col_to_render_col,
)
from .state import Cursor, SearchSnapshot, ViewportOffsets

__all__ = [
    "Document",
    "Line",
    "TAB_STOP",
    "render_tabs",
    "stored_col_to_render_col",
    "render_col_to_stored_col",
    "Cursor",
    "ViewportOffsets",
    "SearchSnapshot",
]
