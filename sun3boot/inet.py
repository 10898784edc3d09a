"""Standalone IP send and receive over Ethernet, with ARP and reverse ARP."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol

from .ether import (
    ARPHRD_ETHER,
    BROADCAST,
    ETHERMIN,
    ETHERTYPE_ARP,
    ETHERTYPE_IP,
    ETHERTYPE_REVARP,
    ArpOp,
    EtherArp,
    EtherHeader,
    MacAddress,
)
from .fmt import cformat

IPVERSION = 4
MAXTTL = 255
IPPROTO_UDP = 17

IN_CLASSA_HOST = 0x00FFFFFF
IN_CLASSB_HOST = 0x0000FFFF
IN_CLASSC_HOST = 0x000000FF

WAITCNT = 2
MAX_DELAY = 64
ARP_PACKET_SIZE = EtherHeader.SIZE + ETHERMIN
_ARP_USED_SIZE = EtherHeader.SIZE + EtherArp.SIZE
_MIN_FRAME = EtherHeader.SIZE + ETHERMIN
_INDICATOR = "-\\|/"


class NetInterface(Protocol):
    """What :class:`Inet` needs from an Ethernet driver."""

    mac: MacAddress

    def xmit(self, frame: bytes) -> int: ...

    def poll(self) -> bytes: ...

    def reset(self) -> object: ...


@dataclass
class IpHeader:
    """An IPv4 header without options."""

    version: int = IPVERSION
    hl: int = 5
    tos: int = 0
    length: int = 0
    ident: int = 0
    off: int = 0
    ttl: int = 0
    protocol: int = 0
    checksum: int = 0
    src: int = 0
    dst: int = 0

    SIZE = 20
    _FMT = struct.Struct(">BBHHHBBHII")

    def pack(self) -> bytes:
        return self._FMT.pack(
            ((self.version & 0xF) << 4) | (self.hl & 0xF),
            self.tos,
            self.length & 0xFFFF,
            self.ident & 0xFFFF,
            self.off & 0xFFFF,
            self.ttl,
            self.protocol,
            self.checksum & 0xFFFF,
            self.src & 0xFFFFFFFF,
            self.dst & 0xFFFFFFFF,
        )

    @classmethod
    def unpack(cls, data: bytes) -> "IpHeader":
        view = bytes(data)
        if len(view) < cls.SIZE:
            raise ValueError(f"IP header needs {cls.SIZE} bytes, got {len(view)}")
        vhl, tos, length, ident, off, ttl, proto, csum, src, dst = cls._FMT.unpack(
            view[: cls.SIZE]
        )
        return cls(
            version=vhl >> 4,
            hl=vhl & 0xF,
            tos=tos,
            length=length,
            ident=ident,
            off=off,
            ttl=ttl,
            protocol=proto,
            checksum=csum,
            src=src,
            dst=dst,
        )


def ip_checksum(data: bytes) -> int:
    """One's complement checksum over 16-bit big-endian words; an odd last byte is ignored."""
    view = bytes(data)
    total = 0
    for (word,) in struct.iter_unpack(">H", view[: len(view) & ~1]):
        total += word
        if total >= 0x10000:
            total -= 0xFFFF
    return ~total & 0xFFFF


def in_lnaof(addr: int) -> int:
    """Return the host portion of a class A, B or C internet address."""
    i = addr & 0xFFFFFFFF
    if i & 0x80000000 == 0:
        return i & IN_CLASSA_HOST
    if i & 0xC0000000 == 0x80000000:
        return i & IN_CLASSB_HOST
    return i & IN_CLASSC_HOST


def _host_mask(addr: int) -> int:
    i = addr & 0xFFFFFFFF
    if i & 0x80000000 == 0:
        return IN_CLASSA_HOST
    if i & 0xC0000000 == 0x80000000:
        return IN_CLASSB_HOST
    return IN_CLASSC_HOST


def inet_format(addr: int) -> str:
    """Dotted decimal followed by the address in hex, e.g. ``10.0.0.1 = 0A000001``."""
    octets = (addr & 0xFFFFFFFF).to_bytes(4, "big")
    dotted = cformat("%d.%d.%d.%d = ", *octets)
    return dotted + "".join(cformat("%x", b) for b in octets)


def ether_format(mac: MacAddress) -> str:
    """Colon separated two-digit hex octets."""
    return cformat("%x:%x:%x:%x:%x:%x", *mac.octets)


@dataclass
class InetState:
    """Addresses of this host and of the peer currently talked to."""

    myether: MacAddress = field(default_factory=lambda: MacAddress(bytes(6)))
    myaddr: int = 0
    hisaddr: int = 0
    hisether: MacAddress = BROADCAST


class Inet:
    """IP over a polled Ethernet interface, resolving addresses by ARP.

    ``nif`` supplies ``mac``, ``xmit(frame)``, ``poll()`` (returning a
    received frame or empty bytes) and ``reset()``.  ``clock()`` returns
    milliseconds; ``out(text)`` receives progress messages.
    """

    def __init__(
        self,
        nif: NetInterface,
        clock: Callable[[], int],
        out: Optional[Callable[[str], object]] = None,
    ) -> None:
        self.nif = nif
        self.clock = clock
        self.out = out if out is not None else (lambda text: None)
        self.state = InetState()

    def init(self) -> None:
        """Learn our Ethernet address, then our internet address by reverse ARP."""
        self.state.myether = self.nif.mac
        self.state.hisaddr = 0
        self.state.hisether = BROADCAST
        self.revarp()

    def ip_output(self, frame: bytes) -> int:
        """Send an Ethernet frame holding an IP packet, resolving the peer first if needed."""
        data = bytes(frame)
        if len(data) < EtherHeader.SIZE + IpHeader.SIZE:
            raise ValueError("frame too short for Ethernet and IP headers")
        ip = IpHeader.unpack(data[EtherHeader.SIZE :])
        st = self.state
        if ip.dst != st.hisaddr:
            st.hisaddr = ip.dst
            self.arp()
        eh = EtherHeader(st.hisether, st.myether, ETHERTYPE_IP)
        ip.checksum = 0
        ip.checksum = ip_checksum(ip.pack())
        start = EtherHeader.SIZE + IpHeader.SIZE
        packet = eh.pack() + ip.pack() + data[start:]
        return self.nif.xmit(packet.ljust(_MIN_FRAME, b"\0"))

    def ip_input(self) -> Optional[bytes]:
        """Poll once; return an IP frame addressed to us, answering ARP requests on the way."""
        frame = bytes(self.nif.poll() or b"")
        if len(frame) < EtherHeader.SIZE:
            return None
        eh = EtherHeader.unpack(frame)
        st = self.state
        if eh.ether_type == ETHERTYPE_IP and len(frame) >= EtherHeader.SIZE + IpHeader.SIZE:
            ip = IpHeader.unpack(frame[EtherHeader.SIZE :])
            return frame if ip.dst == st.myaddr else None
        if eh.ether_type == ETHERTYPE_ARP and len(frame) >= _ARP_USED_SIZE:
            ea = EtherArp.unpack(frame[EtherHeader.SIZE :])
            if ea.pro != ETHERTYPE_IP:
                return None
            if ea.spa == st.hisaddr:
                st.hisether = ea.sha
            if ea.op == ArpOp.REQUEST and ea.tpa == st.myaddr:
                ea.op = ArpOp.REPLY
                eh.dhost = ea.sha
                eh.shost = st.myether
                ea.tha, ea.tpa = ea.sha, ea.spa
                ea.sha, ea.spa = st.myether, st.myaddr
                rest = frame[_ARP_USED_SIZE:]
                reply = (eh.pack() + ea.pack() + rest).ljust(ARP_PACKET_SIZE, b"\0")
                self.nif.xmit(reply[:ARP_PACKET_SIZE])
        return None

    def arp(self) -> None:
        """Find the Ethernet address of the current peer; broadcast hosts need none."""
        st = self.state
        host = in_lnaof(st.hisaddr)
        if host == 0 or host == _host_mask(st.hisaddr):
            st.hisether = BROADCAST
            return
        request = EtherArp(op=ArpOp.REQUEST, tha=BROADCAST, tpa=st.hisaddr)
        self._comarp(ETHERTYPE_ARP, request)

    def revarp(self) -> None:
        """Find our internet address from our Ethernet address."""
        request = EtherArp(op=ArpOp.REVARP_REQUEST, tha=self.state.myether, tpa=0)
        self._comarp(ETHERTYPE_REVARP, request)

    def _comarp(self, ether_type: int, out: EtherArp) -> None:
        st = self.state
        out.hrd = ARPHRD_ETHER
        out.pro = ETHERTYPE_IP
        out.hln = 6
        out.pln = 4
        out.sha = st.myether
        out.spa = st.myaddr
        eh = EtherHeader(BROADCAST, st.myether, ether_type)
        packet = (eh.pack() + out.pack()).ljust(ARP_PACKET_SIZE, b"\0")
        is_request = out.op == ArpOp.REQUEST

        delay = 2
        feedback = 0
        count = 0
        while True:
            if count == WAITCNT:
                if is_request:
                    self.out("Requesting Ethernet address for " + inet_format(out.tpa) + "\n")
                else:
                    self.out("Requesting Internet address for " + ether_format(out.tha) + "\n")
            self.nif.xmit(packet)
            deadline = self.clock() + delay * 1000
            self.out(_INDICATOR[feedback % 4] + "\b")
            feedback += 1

            while self.clock() <= deadline:
                frame = bytes(self.nif.poll() or b"")
                if len(frame) < _ARP_USED_SIZE:
                    continue
                in_eh = EtherHeader.unpack(frame)
                ea = EtherArp.unpack(frame[EtherHeader.SIZE :])
                if ea.pro != ETHERTYPE_IP:
                    continue
                if is_request:
                    if in_eh.ether_type != ETHERTYPE_ARP or ea.op != ArpOp.REPLY:
                        continue
                    if ea.spa != out.tpa:
                        continue
                    if count >= WAITCNT:
                        self.out("Found at " + ether_format(ea.sha) + "\n")
                    st.hisether = ea.sha
                    return
                if in_eh.ether_type != ETHERTYPE_REVARP or ea.op != ArpOp.REVARP_REPLY:
                    continue
                if ea.tha != out.tha:
                    continue
                self.out("Using IP Address " + inet_format(ea.tpa) + "\n")
                st.myaddr = ea.tpa
                st.hisaddr = ea.spa
                st.hisether = ea.sha
                return

            delay = min(delay * 2, MAX_DELAY)
            self.nif.reset()
            count += 1