"""Document persistence: plain text, one ``\\n`` per line on write."""

from __future__ import annotations

import os
from typing import List

from kilo_engine.runtime import telemetry


def read_lines(path: str | os.PathLike[str]) -> List[bytes]:
    """Read ``path`` as bytes, stripping ``\\n`` or ``\\r\\n`` from every line."""

    lines: List[bytes] = []
    with open(path, "rb") as handle:
        for raw in handle:
            while raw.endswith((b"\n", b"\r")):
                raw = raw[:-1]
            lines.append(raw)
    telemetry.record_event("file.read", data={"path": os.fspath(path), "lines": len(lines)})
    return lines


def write_all(path: str | os.PathLike[str], data: bytes) -> int:
    """Replace the contents of ``path`` with ``data``; return the byte count.

    The file is truncated to the new length rather than recreated, so its
    permissions and ownership survive the save.
    """

    fd = os.open(path, os.O_RDWR | os.O_CREAT, 0o644)
    try:
        os.ftruncate(fd, len(data))
        view = memoryview(data)
        while view:
            written = os.write(fd, view)
            view = view[written:]
    finally:
        os.close(fd)
    telemetry.record_event("file.write", data={"path": os.fspath(path), "bytes": len(data)})
    return len(data)


__all__ = ["read_lines", "write_all"]
