"""Command-line entry point: ``kilo-engine [FILE]``."""

from __future__ import annotations

import argparse
import sys
from contextlib import suppress
from typing import Optional, Sequence

from kilo_engine.runtime import telemetry

from kilo_engine import __version__
from kilo_engine.session import HELP_MESSAGE, EditSession
from kilo_engine.terminal.host import ProcessTerminal, TerminalError

PROG = "kilo-engine"


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog=PROG, description="Edit a text file in the terminal."
    )
    parser.add_argument("file", nargs="?", help="File to open (omit for a new buffer)")
    parser.add_argument(
        "--log-file",
        default=None,
        help="Write telemetry to this file (default: KILO_ENGINE_LOG_FILE)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Minimum telemetry level (default: KILO_ENGINE_LOG_LEVEL or INFO)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def _fail(terminal: ProcessTerminal, error: BaseException) -> int:
    with suppress(TerminalError):
        terminal.clear_screen()
    telemetry.record_event("session.fatal", level="error", data={"error": str(error)})
    print(f"{PROG}: {error}", file=sys.stderr)
    return 1


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    if args.log_file or args.log_level:
        telemetry.configure(level=args.log_level, log_file=args.log_file)

    terminal = ProcessTerminal()
    try:
        with terminal:
            if args.file:
                session = EditSession.open(args.file, terminal)
            else:
                session = EditSession(terminal)
            terminal.on_resize(session.notify_resize)
            session.set_status_message(HELP_MESSAGE)
            session.run()
    except (TerminalError, OSError) as exc:
        return _fail(terminal, exc)
    return 0


if __name__ == "__main__":  # pragma: no cover - manual entry point
    raise SystemExit(main())
