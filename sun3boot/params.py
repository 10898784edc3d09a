"""Machine dependent memory constants and unit conversions."""

from __future__ import annotations

NBPG = 8192
PGOFSET = NBPG - 1
PGSHIFT = 13

NBSG = 131072
SGOFSET = NBSG - 1
SGSHIFT = 17

CLSIZE = 1
CLSIZELOG2 = 0

SSIZE = 1
SINCR = 1

UADDR = (0 - 4 * NBPG) & 0xFFFFFFFF
UPAGES = 1
KERNSTACK = 0x800
KERNELBASE = 0x0F000000

_SEG_PAGE_SHIFT = SGSHIFT - PGSHIFT


def ctos(x: int) -> int:
    """Pages to segments, rounding up."""
    return (x + 15) >> _SEG_PAGE_SHIFT


def stoc(x: int) -> int:
    """Segments to pages."""
    return x << _SEG_PAGE_SHIFT


def ptos(x: int) -> int:
    """Page number to segment number."""
    return x >> _SEG_PAGE_SHIFT


def ctod(x: int) -> int:
    """Pages to disk blocks."""
    return x << 4


def dtoc(x: int) -> int:
    """Disk blocks to pages, rounding up."""
    return (x + 15) >> 4


def dtob(x: int) -> int:
    """Disk blocks to bytes."""
    return x << 9


def ctob(x: int) -> int:
    """Pages to bytes."""
    return x << PGSHIFT


def btoc(x: int) -> int:
    """Bytes to pages, rounding up, with 32-bit unsigned arithmetic."""
    return (((x & 0xFFFFFFFF) + (NBPG - 1)) & 0xFFFFFFFF) >> PGSHIFT