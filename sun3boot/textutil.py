"""Number parsing, word splitting and the interactive command loop."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .fmt import PRINTF_BUF_SIZE, cformat

if TYPE_CHECKING:
    from .console import Console

MAX_WORDS = 8
PROMPT = "Ready% "


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value


def hextoi(s: str) -> int:
    """Parse leading hex digits of ``s``; parsing stops at the first other character."""
    val = 0
    for ch in s:
        digit = "0123456789abcdef".find(ch.lower())
        if digit < 0 or not ch.isascii():
            break
        val = _to_int32(val * 16 + digit)
    return val


def atoi(s: str) -> int:
    """Parse a decimal number, or a hex number when ``s`` starts with ``0x``."""
    if s.startswith("0x"):
        return hextoi(s[2:])
    val = 0
    for ch in s:
        if not ("0" <= ch <= "9"):
            break
        val = _to_int32(val * 10 + (ord(ch) - ord("0")))
    return val


def split(line: str, limit: int = MAX_WORDS) -> list[str]:
    """Split ``line`` on spaces into at most ``limit`` words."""
    if limit < 0:
        raise ValueError("limit must not be negative")
    return [word for word in line.split(" ") if word][:limit]


def describe_command(cmd: str) -> str:
    """Return the report printed for a command line typed at the prompt."""
    words = split(cmd, MAX_WORDS)
    return "".join(
        (
            cformat("Command: %s\n", cmd, size=PRINTF_BUF_SIZE),
            cformat("Command: %d:: %s\n", len(cmd), cmd, size=PRINTF_BUF_SIZE),
            cformat("nw = %d\n", len(words), size=PRINTF_BUF_SIZE),
        )
    )


def command_loop(console: "Console") -> None:
    """Prompt for lines and report each one until a line starting with ``q``."""
    while True:
        console.puts(PROMPT)
        try:
            line = console.gets()
        except EOFError:
            return
        if line.startswith("q"):
            return
        if not line:
            continue
        console.puts(describe_command(line))