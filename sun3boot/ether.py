"""Ethernet, ARP, UDP, TFTP and ID prom wire structures."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import IntEnum
from functools import reduce
from operator import xor

ETHERTYPE_PUP = 0x0200
ETHERTYPE_IP = 0x0800
ETHERTYPE_ARP = 0x0806
ETHERTYPE_REVARP = 0x8035
ETHERTYPE_TRAIL = 0x1000
ETHERTYPE_NTRAILER = 16

ETHERMTU = 1500
ETHERMIN = 60 - 14

ARPHRD_ETHER = 1


class ArpOp(IntEnum):
    REQUEST = 1
    REPLY = 2
    REVARP_REQUEST = 3
    REVARP_REPLY = 4


SEGSIZE = 512


class TftpOpcode(IntEnum):
    RRQ = 1
    WRQ = 2
    DATA = 3
    ACK = 4
    ERROR = 5


class TftpErrorCode(IntEnum):
    EUNDEF = 0
    ENOTFOUND = 1
    EACCESS = 2
    ENOSPACE = 3
    EBADOP = 4
    EBADID = 5
    EEXISTS = 6
    ENOUSER = 7


IDFORM_1 = 1
IDM_ARCH_MASK = 0xF0
IDM_ARCH_SUN2 = 0x00
IDM_ARCH_SUN3 = 0x10
IDM_SUN2_MULTI = 1
IDM_SUN2_VME = 2
IDM_SUN3_CARRERA = 0x11
IDM_SUN3_M25 = 0x12
IDM_SUN3_SIRIUS = 0x13
IDM_SUN3_PRISM = 0x14


def _need(data: bytes, size: int, what: str) -> bytes:
    view = bytes(data)
    if len(view) < size:
        raise ValueError(f"{what} needs {size} bytes, got {len(view)}")
    return view[:size]


@dataclass(frozen=True)
class MacAddress:
    """A six-octet Ethernet address."""

    octets: bytes

    def __post_init__(self) -> None:
        octets = bytes(self.octets)
        if len(octets) != 6:
            raise ValueError("an Ethernet address has 6 octets")
        object.__setattr__(self, "octets", octets)

    @classmethod
    def parse(cls, text: str) -> "MacAddress":
        """Parse colon separated hex octets such as ``2:0:0:aa:bb:cc``."""
        parts = text.split(":")
        if len(parts) != 6:
            raise ValueError(f"bad Ethernet address: {text!r}")
        try:
            values = [int(p, 16) for p in parts if 1 <= len(p) <= 2]
        except ValueError:
            raise ValueError(f"bad Ethernet address: {text!r}") from None
        if len(values) != 6:
            raise ValueError(f"bad Ethernet address: {text!r}")
        return cls(bytes(values))

    def __str__(self) -> str:
        return ":".join(f"{b:02X}" for b in self.octets)


BROADCAST = MacAddress(b"\xff" * 6)


@dataclass
class EtherHeader:
    """A 10Mb/s Ethernet header."""

    dhost: MacAddress
    shost: MacAddress
    ether_type: int

    SIZE = 14
    _FMT = struct.Struct(">6s6sH")

    def pack(self) -> bytes:
        return self._FMT.pack(self.dhost.octets, self.shost.octets, self.ether_type)

    @classmethod
    def unpack(cls, data: bytes) -> "EtherHeader":
        dhost, shost, ether_type = cls._FMT.unpack(_need(data, cls.SIZE, "Ethernet header"))
        return cls(MacAddress(dhost), MacAddress(shost), ether_type)


@dataclass
class EtherArp:
    """An ARP or reverse ARP packet body for IPv4 over Ethernet."""

    op: int
    sha: MacAddress = BROADCAST
    spa: int = 0
    tha: MacAddress = BROADCAST
    tpa: int = 0
    hrd: int = ARPHRD_ETHER
    pro: int = ETHERTYPE_IP
    hln: int = 6
    pln: int = 4

    SIZE = 28
    _FMT = struct.Struct(">HHBBH6sI6sI")

    def pack(self) -> bytes:
        return self._FMT.pack(
            self.hrd,
            self.pro,
            self.hln,
            self.pln,
            self.op,
            self.sha.octets,
            self.spa & 0xFFFFFFFF,
            self.tha.octets,
            self.tpa & 0xFFFFFFFF,
        )

    @classmethod
    def unpack(cls, data: bytes) -> "EtherArp":
        hrd, pro, hln, pln, op, sha, spa, tha, tpa = cls._FMT.unpack(
            _need(data, cls.SIZE, "ARP packet")
        )
        return cls(
            op=op,
            sha=MacAddress(sha),
            spa=spa,
            tha=MacAddress(tha),
            tpa=tpa,
            hrd=hrd,
            pro=pro,
            hln=hln,
            pln=pln,
        )


@dataclass
class UdpHeader:
    """A UDP header; ``ulen`` is a signed 16-bit length."""

    sport: int
    dport: int
    ulen: int
    checksum: int = 0

    SIZE = 8
    _FMT = struct.Struct(">HHhH")

    def pack(self) -> bytes:
        return self._FMT.pack(self.sport, self.dport, self.ulen, self.checksum)

    @classmethod
    def unpack(cls, data: bytes) -> "UdpHeader":
        return cls(*cls._FMT.unpack(_need(data, cls.SIZE, "UDP header")))


@dataclass
class IdProm:
    """The ID prom found on CPU and Ethernet boards."""

    format: int
    machine: int
    ether: MacAddress
    date: int
    serial: int
    xsum: int
    undef: bytes = field(default=bytes(16))

    SIZE = 32
    _FMT = struct.Struct(">BB6si3sB16s")

    def pack(self) -> bytes:
        return self._FMT.pack(
            self.format,
            self.machine,
            self.ether.octets,
            self.date,
            (self.serial & 0xFFFFFF).to_bytes(3, "big"),
            self.xsum,
            bytes(self.undef).ljust(16, b"\0")[:16],
        )

    @classmethod
    def unpack(cls, data: bytes) -> "IdProm":
        fmt, machine, ether, date, serial, xsum, undef = cls._FMT.unpack(
            _need(data, cls.SIZE, "ID prom")
        )
        return cls(
            format=fmt,
            machine=machine,
            ether=MacAddress(ether),
            date=date,
            serial=int.from_bytes(serial, "big"),
            xsum=xsum,
            undef=undef,
        )

    def architecture(self) -> int:
        """The architecture bits of the machine type."""
        return self.machine & IDM_ARCH_MASK

    def checksum_ok(self) -> bool:
        """True when the XOR of the bytes before the checksum equals it."""
        return reduce(xor, self.pack()[:15], 0) == self.xsum