import pytest

from sun3boot.ether import (
    BROADCAST,
    ETHERTYPE_IP,
    IDM_ARCH_SUN3,
    IDM_SUN3_M25,
    ArpOp,
    EtherArp,
    EtherHeader,
    IdProm,
    MacAddress,
    UdpHeader,
)

MAC_A = MacAddress(bytes([0x02, 0, 0, 0xAA, 0xBB, 0xCC]))
MAC_B = MacAddress(bytes([0x02, 0, 0, 0x11, 0x22, 0x33]))


def test_mac_parse_and_str_round_trip():
    mac = MacAddress.parse("2:0:0:aa:bb:cc")
    assert mac == MAC_A
    assert str(mac) == "02:00:00:AA:BB:CC"
    assert MacAddress.parse(str(mac)) == mac


@pytest.mark.parametrize("text", ["1:2:3", "1:2:3:4:5:zz", "1:2:3:4:5:123", "::::::"])
def test_mac_parse_rejects_bad_text(text):
    with pytest.raises(ValueError):
        MacAddress.parse(text)


def test_mac_length_checked():
    with pytest.raises(ValueError):
        MacAddress(b"\x01\x02")


def test_ether_header_wire_bytes_and_round_trip():
    hdr = EtherHeader(BROADCAST, MAC_A, ETHERTYPE_IP)
    raw = hdr.pack()
    assert raw[:6] == b"\xff" * 6
    assert raw[6:12] == MAC_A.octets
    assert raw[12:] == b"\x08\x00"
    assert EtherHeader.unpack(raw) == hdr


def test_ether_header_short_data():
    with pytest.raises(ValueError):
        EtherHeader.unpack(b"\x00" * 13)


def test_arp_round_trip_and_layout():
    arp = EtherArp(op=ArpOp.REQUEST, sha=MAC_A, spa=0x0A000001, tha=MAC_B, tpa=0x0A000002)
    raw = arp.pack()
    assert len(raw) == EtherArp.SIZE
    assert raw[6:8] == b"\x00\x01"
    assert raw[8:14] == MAC_A.octets
    back = EtherArp.unpack(raw)
    assert back == arp
    assert back.pro == ETHERTYPE_IP


def test_arp_short_data():
    with pytest.raises(ValueError):
        EtherArp.unpack(b"\x00" * (EtherArp.SIZE - 1))


def test_udp_round_trip():
    udp = UdpHeader(sport=1081, dport=69, ulen=20)
    raw = udp.pack()
    assert len(raw) == UdpHeader.SIZE
    assert raw[2:4] == b"\x00\x45"
    assert UdpHeader.unpack(raw) == udp


def test_udp_short_data():
    with pytest.raises(ValueError):
        UdpHeader.unpack(b"\x00\x01")


def _prom(**overrides):
    fields = dict(format=1, machine=IDM_SUN3_M25, ether=MAC_A, date=0, serial=0x123456, xsum=0)
    fields.update(overrides)
    prom = IdProm(**fields)
    good = 0
    for b in prom.pack()[:15]:
        good ^= b
    prom.xsum = good
    return prom


def test_idprom_round_trip_and_architecture():
    prom = _prom()
    raw = prom.pack()
    assert len(raw) == IdProm.SIZE
    back = IdProm.unpack(raw)
    assert back == prom
    assert back.serial == 0x123456
    assert back.architecture() == IDM_ARCH_SUN3


def test_idprom_checksum():
    prom = _prom()
    assert prom.checksum_ok()
    prom.xsum ^= 0x01
    assert not prom.checksum_ok()


def test_idprom_short_data():
    with pytest.raises(ValueError):
        IdProm.unpack(b"\x01" * 16)