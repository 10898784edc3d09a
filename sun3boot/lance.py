"""Registers and in-memory structures of the AMD 7990 LANCE Ethernet controller.

All structures are laid out as the 68020 sees them: big-endian, with
bit fields allocated from the most significant bit down.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import IntFlag
from typing import Union

from .ether import MacAddress

MAXBUF = 2000
MINPACKET = 64

# Internal registers, selected by the value written to the address port.
LE_CSR0 = 0
LE_CSR1 = 1
LE_CSR2 = 2
LE_CSR3 = 3


class Csr0(IntFlag):
    """Control and status bits of CSR0."""

    ERR = 0x8000
    BABL = 0x4000
    CERR = 0x2000
    MISS = 0x1000
    MERR = 0x0800
    RINT = 0x0400
    TINT = 0x0200
    IDON = 0x0100
    INTR = 0x0080
    INEA = 0x0040
    RXON = 0x0020
    TXON = 0x0010
    TDMD = 0x0008
    STOP = 0x0004
    STRT = 0x0002
    INIT = 0x0001


# CSR3 mode bits.
LE_BSWP = 0x4
LE_ACON = 0x2
LE_BCON = 0x1

# Bits common to receive and transmit descriptors.
LMD_OWN = 0x80
LMD_ERR = 0x40
LMD_STP = 0x02
LMD_ENP = 0x01

# Receive descriptor flags.
RMD_FRAM = 0x20
RMD_OFLO = 0x10
RMD_CRC = 0x08
RMD_BUFF = 0x04

# Transmit descriptor flags.
TMD_MORE = 0x10
TMD_ONE = 0x08
TMD_DEF = 0x04

# Transmit error bits, held where the receive descriptor keeps its count.
TMD_BUFF = 0x8000
TMD_UFLO = 0x4000
TMD_LCOL = 0x1000
TMD_LCAR = 0x0800
TMD_RTRY = 0x0400
TMD_TDR = 0x003F

_MAX_ADDRESS = 0xFFFFFF


def _check_address(address: int) -> None:
    if not 0 <= address <= _MAX_ADDRESS:
        raise ValueError(f"address {address:#x} does not fit in 24 bits")


def _check_u16(value: int, what: str) -> None:
    if not 0 <= value <= 0xFFFF:
        raise ValueError(f"{what} {value:#x} does not fit in 16 bits")


def _need(data: bytes, size: int, what: str) -> bytes:
    view = bytes(data)
    if len(view) < size:
        raise ValueError(f"{what} needs {size} bytes, got {len(view)}")
    return view[:size]


def swap_station_address(mac: Union[MacAddress, bytes]) -> bytes:
    """Swap the bytes within each 16-bit word of an Ethernet address.

    This is the order in which the chip expects its physical address
    in the initialization block.
    """
    octets = mac.octets if isinstance(mac, MacAddress) else bytes(mac)
    if len(octets) != 6:
        raise ValueError("an Ethernet address has 6 octets")
    return bytes(octets[i ^ 1] for i in range(6))


@dataclass
class RingPointer:
    """A descriptor ring pointer: 24-bit ring address and log2 of its length."""

    address: int
    log2_entries: int = 0

    SIZE = 4
    _FMT = struct.Struct(">HBB")

    def __post_init__(self) -> None:
        _check_address(self.address)
        if not 0 <= self.log2_entries <= 7:
            raise ValueError("ring length exponent must be 0..7")

    @property
    def entries(self) -> int:
        """Number of descriptors in the ring."""
        return 1 << self.log2_entries

    def pack(self) -> bytes:
        return self._FMT.pack(
            self.address & 0xFFFF,
            (self.log2_entries & 0x7) << 5,
            (self.address >> 16) & 0xFF,
        )

    @classmethod
    def unpack(cls, data: bytes) -> "RingPointer":
        laddr, lenbyte, haddr = cls._FMT.unpack(_need(data, cls.SIZE, "ring pointer"))
        return cls(address=(haddr << 16) | laddr, log2_entries=lenbyte >> 5)


# Mode word bit positions, most significant first, as the bit fields fall.
_MODE_BITS = {
    "promiscuous": 15,
    "internal_loopback": 7,
    "disable_retry": 6,
    "force_collision": 5,
    "disable_tx_crc": 4,
    "loopback": 3,
    "disable_tx": 2,
    "disable_rx": 1,
}


@dataclass
class InitBlock:
    """The initialization block the chip fetches when CSR0 INIT is set.

    ``padr`` holds the station address already in chip order; build it
    with :func:`swap_station_address`.
    """

    padr: bytes
    rdrp: RingPointer
    tdrp: RingPointer
    ladrf: bytes = field(default=bytes(8))
    promiscuous: bool = False
    internal_loopback: bool = False
    disable_retry: bool = False
    force_collision: bool = False
    disable_tx_crc: bool = False
    loopback: bool = False
    disable_tx: bool = False
    disable_rx: bool = False

    SIZE = 24
    _FMT = struct.Struct(">H6s8s4s4s")

    def __post_init__(self) -> None:
        self.padr = bytes(self.padr)
        self.ladrf = bytes(self.ladrf)
        if len(self.padr) != 6:
            raise ValueError("physical address must be 6 bytes")
        if len(self.ladrf) != 8:
            raise ValueError("logical address filter must be 8 bytes")

    @property
    def mode(self) -> int:
        """The 16-bit mode word."""
        word = 0
        for name, bit in _MODE_BITS.items():
            if getattr(self, name):
                word |= 1 << bit
        return word

    def pack(self) -> bytes:
        return self._FMT.pack(
            self.mode, self.padr, self.ladrf, self.rdrp.pack(), self.tdrp.pack()
        )

    @classmethod
    def unpack(cls, data: bytes) -> "InitBlock":
        mode, padr, ladrf, rdrp, tdrp = cls._FMT.unpack(
            _need(data, cls.SIZE, "initialization block")
        )
        flags = {name: bool(mode & (1 << bit)) for name, bit in _MODE_BITS.items()}
        return cls(
            padr=padr,
            rdrp=RingPointer.unpack(rdrp),
            tdrp=RingPointer.unpack(tdrp),
            ladrf=ladrf,
            **flags,
        )


@dataclass
class MessageDescriptor:
    """A receive or transmit message descriptor.

    For transmit descriptors ``mcnt`` holds the error bits (``TMD_*``).
    """

    address: int
    flags: int = 0
    bcnt: int = 0
    mcnt: int = 0

    SIZE = 8
    _FMT = struct.Struct(">HBBHH")

    def __post_init__(self) -> None:
        _check_address(self.address)
        if not 0 <= self.flags <= 0xFF:
            raise ValueError("descriptor flags must fit in 8 bits")
        _check_u16(self.bcnt, "buffer byte count")
        _check_u16(self.mcnt, "message byte count")

    def pack(self) -> bytes:
        return self._FMT.pack(
            self.address & 0xFFFF,
            self.flags,
            (self.address >> 16) & 0xFF,
            self.bcnt,
            self.mcnt,
        )

    @classmethod
    def unpack(cls, data: bytes) -> "MessageDescriptor":
        ladr, flags, hadr, bcnt, mcnt = cls._FMT.unpack(
            _need(data, cls.SIZE, "message descriptor")
        )
        return cls(address=(hadr << 16) | ladr, flags=flags, bcnt=bcnt, mcnt=mcnt)

    def owned_by_chip(self) -> bool:
        """True while the controller owns this descriptor."""
        return bool(self.flags & LMD_OWN)