"""Terminal-resident, single-document text editing engine."""

__all__ = [
    "actions",
    "buffer",
    "cli",
    "fileio",
    "keymaps",
    "modes",
    "render",
    "runtime",
    "search",
    "session",
    "terminal",
]

__version__ = "0.1.0"
