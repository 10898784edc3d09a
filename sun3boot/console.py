"""Polled serial console with line editing conventions of the boot monitor."""

from __future__ import annotations

from typing import Callable, Union

from .fmt import PRINTF_BUF_SIZE, cformat

CharLike = Union[str, bytes, int]


def _code(value: CharLike) -> int:
    if isinstance(value, int):
        return value
    if isinstance(value, (bytes, bytearray)):
        if len(value) != 1:
            raise ValueError("expected a single byte")
        return value[0]
    if len(value) != 1:
        raise ValueError("expected a single character")
    return ord(value)


class Console:
    """A character console built on a reader and a writer.

    ``reader()`` returns the next received character (a one-character
    ``str``, a one-byte ``bytes`` or an ``int``); an empty string or
    ``None`` means the line is closed.  ``writer(text)`` sends characters.
    """

    def __init__(
        self,
        reader: Callable[[], CharLike | None],
        writer: Callable[[str], object],
    ) -> None:
        self._reader = reader
        self._writer = writer

    def putc(self, ch: CharLike) -> None:
        """Send one character; a newline is preceded by a carriage return."""
        code = _code(ch)
        if code == ord("\n"):
            self._writer("\r")
        self._writer(chr(code & 0xFF))

    def puts(self, text: str) -> None:
        """Send a string, adding a carriage return before each newline."""
        for ch in text:
            if ch == "\n":
                self.putc("\r")
            self.putc(ch)

    def getc(self) -> str:
        """Receive one 7-bit character, mapping CR to LF and echoing it."""
        raw = self._reader()
        if raw is None or raw in ("", b""):
            raise EOFError("console input closed")
        code = _code(raw) & 0x7F
        if code == ord("\r"):
            code = ord("\n")
        ch = chr(code)
        self.putc(ch)
        return ch

    def gets(self) -> str:
        """Receive characters up to a newline and return them without it."""
        chars: list[str] = []
        while (ch := self.getc()) != "\n":
            chars.append(ch)
        return "".join(chars)

    def printf(self, fmt: str, *args) -> None:
        """Format with the monitor's printf rules and send the result."""
        self.puts(cformat(fmt, *args, size=PRINTF_BUF_SIZE))