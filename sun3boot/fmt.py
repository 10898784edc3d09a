"""A small printf-style formatter for the boot monitor console.

Supported conversions:

* ``%d``: signed 32-bit decimal
* ``%x``: low byte as two upper-case hex digits
* ``%h`` / ``%X``: 32-bit value as eight upper-case hex digits
* ``%c``: a single character
* ``%s``: a string

Any other character after ``%`` is swallowed without consuming an
argument, so ``%%`` produces nothing.  Output is limited to ``size - 1``
characters, the last slot of the buffer being reserved for the terminator.
"""

from __future__ import annotations

PRINTF_BUF_SIZE = 128
SPRINTF_BUF_SIZE = 256

_HEX = "0123456789ABCDEF"


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value


def _hex_digits(value: int, count: int) -> str:
    return "".join(
        _HEX[(value >> shift) & 0xF] for shift in range(4 * (count - 1), -1, -4)
    )


def _as_char(value) -> str:
    if isinstance(value, str):
        if len(value) != 1:
            raise ValueError("%c needs a single character")
        return value
    if isinstance(value, (bytes, bytearray)):
        if len(value) != 1:
            raise ValueError("%c needs a single byte")
        return chr(value[0])
    return chr(int(value) & 0xFF)


def _as_text(value) -> str:
    if isinstance(value, (bytes, bytearray)):
        value = bytes(value).decode("latin-1")
    text = str(value)
    # A C string ends at its first NUL.
    return text.split("\0", 1)[0]


def cformat(fmt: str, *args, size: int = PRINTF_BUF_SIZE) -> str:
    """Format ``args`` according to ``fmt``, truncated to ``size - 1`` characters."""
    if size < 1:
        raise ValueError("buffer size must be at least 1")

    values = iter(args)

    def next_arg():
        try:
            return next(values)
        except StopIteration:
            raise TypeError("not enough arguments for format string") from None

    out: list[str] = []
    chars = iter(fmt.split("\0", 1)[0])
    for ch in chars:
        if ch != "%":
            out.append(ch)
            continue
        conv = next(chars, None)
        if conv is None:
            break
        if conv == "d":
            out.append(str(_to_int32(int(next_arg()))))
        elif conv == "x":
            out.append(_hex_digits(int(next_arg()) & 0xFF, 2))
        elif conv in ("h", "X"):
            out.append(_hex_digits(int(next_arg()) & 0xFFFFFFFF, 8))
        elif conv == "c":
            out.append(_as_char(next_arg()))
        elif conv == "s":
            out.append(_as_text(next_arg()))

    return "".join(out)[: size - 1]


def show_reg(msg: str, addr: int, value: int) -> str:
    """Describe a register: its label, address and contents in hex."""
    return cformat("%s %h %h\n", msg, addr, value)