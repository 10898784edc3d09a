"""Network boot by TFTP read request over the standalone IP layer."""

from __future__ import annotations

import struct
from typing import Callable, Optional

from .ether import ETHERTYPE_IP, SEGSIZE, EtherHeader, MacAddress, TftpOpcode, UdpHeader
from .fmt import cformat
from .inet import IPPROTO_UDP, MAXTTL, IpHeader, in_lnaof, inet_format

IPPORT_TFTP = 69
CLIENT_PORT = 1024 + 57
REXMIT_MSEC = 4000
MAX_XMIT = 5
MAX_RETRY = 15

TFTPHDRLEN = EtherHeader.SIZE + IpHeader.SIZE + UdpHeader.SIZE + 4
_IP_OFF = EtherHeader.SIZE
_UDP_OFF = _IP_OFF + IpHeader.SIZE
_TFTP_OFF = _UDP_OFF + UdpHeader.SIZE

TFTP_ERRORS = (
    "not defined",
    "file not found",
    "access violation",
    "disk full or allocation exceeded",
    "illegal TFTP operation",
    "unknown transfer ID",
    "file already exists",
    "no such user",
)

_INDICATOR = "-\\|/"
_NO_MAC = MacAddress(bytes(6))


def _to_int16(value: int) -> int:
    value &= 0xFFFF
    return value - 0x10000 if value & 0x8000 else value


class TftpError(Exception):
    """The transfer failed: the server reported an error or it timed out."""

    def __init__(self, message: str, code: Optional[int] = None) -> None:
        super().__init__(message)
        self.code = code


def build_read_request(addr: int) -> bytes:
    """The TFTP read request for the file named after ``addr`` in hex, octet mode."""
    name = cformat("%h", addr).encode("ascii")
    return struct.pack(">h", TftpOpcode.RRQ) + name + b"\0octet\0"


def tftp_error_message(code: int) -> str:
    """The text for a TFTP error code."""
    if 0 <= code < len(TFTP_ERRORS):
        return TFTP_ERRORS[code]
    return cformat("Unknown error 0x%x", code)


class TftpClient:
    """Loads a boot file from a TFTP server.

    ``inet`` provides ``state``, ``ip_output(frame)`` and ``ip_input()``.
    Unit 0 is an autoboot: it asks the host that answered reverse ARP,
    then broadcasts, and keeps retrying instead of failing.
    """

    def __init__(
        self,
        inet,
        clock: Callable[[], int],
        unit: int = 0,
        out: Optional[Callable[[str], object]] = None,
    ) -> None:
        self.inet = inet
        self.clock = clock
        self.unit = unit
        self.out = out if out is not None else (lambda text: None)
        self._feedback = 0
        self._sport = CLIENT_PORT
        self._dport = IPPORT_TFTP
        self._src = 0
        self._dst = 0

    def load(self) -> bytes:
        """Download the boot file and return its contents."""
        autoboot = self.unit == 0
        firsttry = 0
        while True:
            src = self.inet.state.myaddr & 0xFFFFFFFF
            if autoboot and firsttry == 0:
                dst = self.inet.state.hisaddr
            elif autoboot:
                dst = 0xFFFFFFFF
            else:
                dst = (src + self.unit - in_lnaof(src)) & 0xFFFFFFFF
            firsttry += 1
            try:
                return self._transfer(autoboot, src, dst)
            except TftpError:
                if not autoboot:
                    raise

    def _frame(self, payload: bytes) -> bytes:
        udp = UdpHeader(self._sport, self._dport, UdpHeader.SIZE + len(payload), 0)
        ip = IpHeader(
            ttl=MAXTTL,
            protocol=IPPROTO_UDP,
            length=IpHeader.SIZE + udp.ulen,
            src=self._src,
            dst=self._dst,
        )
        eh = EtherHeader(_NO_MAC, _NO_MAC, ETHERTYPE_IP)
        return eh.pack() + ip.pack() + udp.pack() + payload

    def _send(self, payload: bytes) -> None:
        self.out(_INDICATOR[self._feedback % 4] + "\b")
        self._feedback += 1
        if self.inet.ip_output(self._frame(payload)):
            self.out("X\b")

    def _transfer(self, autoboot: bool, src: int, dst: int) -> bytes:
        self._sport = CLIENT_PORT
        self._dport = IPPORT_TFTP
        self._src = src
        self._dst = dst
        locked = False
        retry = 0
        block = 1
        data = bytearray()
        pending = build_read_request(src)

        last = 0
        xcount = 0
        while xcount < MAX_XMIT:
            if self.clock() - last >= REXMIT_MSEC:
                last = self.clock()
                self._send(pending)
                if not locked or retry > MAX_RETRY:
                    xcount += 1
                else:
                    retry += 1

            frame = self.inet.ip_input()
            if frame is None:
                continue
            frame = bytes(frame)
            if len(frame) < TFTPHDRLEN:
                continue
            ip = IpHeader.unpack(frame[_IP_OFF:])
            udp = UdpHeader.unpack(frame[_UDP_OFF:])
            if ip.protocol != IPPROTO_UDP or udp.dport != self._sport:
                continue
            if locked and self._dst != ip.src:
                continue
            opcode, word = struct.unpack(">hh", frame[_TFTP_OFF:TFTPHDRLEN])

            if opcode == TftpOpcode.ERROR:
                if autoboot and block == 1:
                    continue
                if 0 <= word < len(TFTP_ERRORS):
                    text = cformat("tftp: %s @ block %d\n", TFTP_ERRORS[word], block)
                else:
                    text = "tftp: " + tftp_error_message(word) + "\n"
                self.out(text)
                raise TftpError(text.strip(), word)

            if opcode != TftpOpcode.DATA or word != block:
                continue

            if block == 1:
                self._dport = udp.sport
                if autoboot:
                    self._dst = ip.src
                self.out("Booting from tftp server at " + inet_format(self._dst) + "\n")
                locked = True

            length = udp.ulen - (UdpHeader.SIZE + 4)
            if length > 0:
                data.extend(frame[TFTPHDRLEN : TFTPHDRLEN + length])

            xcount = 0
            retry = 0
            pending = struct.pack(">hh", TftpOpcode.ACK, _to_int16(block))
            block += 1
            last = self.clock()
            self._send(pending)
            if length < SEGSIZE:
                self.out(cformat("Downloaded %d bytes from tftp server.\n\n", len(data)))
                return bytes(data)

        self.out("tftp: time-out.\n")
        raise TftpError("tftp: time-out.")