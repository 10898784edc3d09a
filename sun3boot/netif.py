"""Network interface flags and the bounded packet queue used by drivers."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from enum import IntFlag
from typing import Deque, Generic, Iterator, Optional, TypeVar

IFQ_MAXLEN = 50
IFNET_SLOWHZ = 1
IFNAMSIZ = 16

T = TypeVar("T")


class InterfaceFlags(IntFlag):
    """State and capability bits of a network interface."""

    UP = 0x1
    BROADCAST = 0x2
    DEBUG = 0x4
    ROUTE = 0x8
    POINTOPOINT = 0x10
    NOTRAILERS = 0x20
    RUNNING = 0x40
    NOARP = 0x80


class ArpFlags(IntFlag):
    """Flags of an address resolution table entry."""

    INUSE = 1
    COM = 2
    PERM = 4
    PUBL = 8


@dataclass
class IfQueue(Generic[T]):
    """A FIFO of packets with a soft length limit and a drop counter.

    The queue does not refuse items by itself; callers check :meth:`full`
    and call :meth:`drop` instead of enqueueing, as drivers do.
    """

    maxlen: int = IFQ_MAXLEN
    drops: int = 0
    _items: Deque[T] = field(default_factory=deque, repr=False)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def enqueue(self, item: T) -> None:
        """Add ``item`` at the tail."""
        self._items.append(item)

    def prepend(self, item: T) -> None:
        """Add ``item`` at the head."""
        self._items.appendleft(item)

    def dequeue(self) -> Optional[T]:
        """Remove and return the head, or ``None`` when the queue is empty."""
        return self._items.popleft() if self._items else None

    def full(self) -> bool:
        """True when the queue holds ``maxlen`` items or more."""
        return len(self._items) >= self.maxlen

    def drop(self) -> None:
        """Count a packet that was discarded instead of queued."""
        self.drops += 1