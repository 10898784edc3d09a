"""Multi-line hex dumps of byte buffers, sixteen bytes to a line."""

from __future__ import annotations

from typing import Iterator

from .fmt import cformat

_PER_LINE = 16


def dump_lines(data: bytes, base: int = 0) -> Iterator[str]:
    """Yield dump lines: an eight-digit address, two spaces, then the bytes."""
    view = bytes(data)
    for offset in range(0, len(view), _PER_LINE):
        chunk = view[offset : offset + _PER_LINE]
        head = cformat("%h  ", base + offset)
        body = "".join(cformat("%x ", b) for b in chunk)
        yield head + body


def dump_buf(data: bytes, base: int = 0) -> str:
    """Return the whole dump as text, every line ending in a newline."""
    return "".join(line + "\n" for line in dump_lines(data, base))