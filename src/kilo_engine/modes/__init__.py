"""Editor modes and the per-keystroke dispatch logic."""

from .base_mode import Mode, ModeBus, ModeContext, ModeResult
from .edit_mode import EditMode
from .prompt_mode import PromptMode, PromptObserver, PromptRequest

__all__ = [
    "Mode",
    "ModeBus",
    "ModeContext",
    "ModeResult",
    "EditMode",
    "PromptMode",
    "PromptObserver",
    "PromptRequest",
]
