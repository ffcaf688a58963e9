"""Viewport scrolling and frame rendering."""

from .frame import AppendBuffer, FrameRenderer, StatusMessage
from .viewport import recompute

__all__ = ["AppendBuffer", "FrameRenderer", "StatusMessage", "recompute"]
