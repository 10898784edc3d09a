import pytest

from sun3boot.ether import MacAddress
from sun3boot.lance import (
    LMD_ENP,
    LMD_OWN,
    LMD_STP,
    Csr0,
    InitBlock,
    MessageDescriptor,
    RingPointer,
    swap_station_address,
)


def test_swap_station_address_pairs():
    mac = MacAddress.parse("02:00:00:aa:bb:cc")
    assert swap_station_address(mac) == bytes([0x00, 0x02, 0xAA, 0x00, 0xCC, 0xBB])


def test_swap_station_address_is_involution():
    raw = bytes([2, 0, 0, 0x11, 0x22, 0x33])
    assert swap_station_address(swap_station_address(raw)) == raw


def test_swap_station_address_bad_length():
    with pytest.raises(ValueError):
        swap_station_address(b"\x01\x02\x03")


def test_csr0_decodes_status_word():
    status = Csr0(Csr0.ERR | Csr0.RINT | Csr0.INEA)
    assert Csr0.RINT in status
    assert Csr0.TINT not in status
    assert int(status) == Csr0.ERR + Csr0.RINT + Csr0.INEA


def test_ring_pointer_layout():
    rp = RingPointer(address=0x123456, log2_entries=3)
    assert rp.pack() == b"\x34\x56\x60\x12"
    assert rp.entries == 8


def test_ring_pointer_round_trip():
    rp = RingPointer(address=0xABCDEF, log2_entries=7)
    assert RingPointer.unpack(rp.pack()) == rp


@pytest.mark.parametrize("address,exp", [(0x1000000, 0), (-1, 0), (0, 8)])
def test_ring_pointer_rejects_out_of_range(address, exp):
    with pytest.raises(ValueError):
        RingPointer(address=address, log2_entries=exp)


def test_ring_pointer_short_data():
    with pytest.raises(ValueError):
        RingPointer.unpack(b"\x00\x00")


def _block(**kwargs):
    return InitBlock(
        padr=swap_station_address(MacAddress.parse("02:00:00:00:00:01")),
        rdrp=RingPointer(address=0x4000, log2_entries=4),
        tdrp=RingPointer(address=0x4100, log2_entries=0),
        **kwargs,
    )


def test_init_block_size_and_default_mode():
    packed = _block().pack()
    assert len(packed) == InitBlock.SIZE
    assert packed[:2] == b"\x00\x00"


def test_init_block_promiscuous_is_top_bit():
    assert _block(promiscuous=True).pack()[:2] == b"\x80\x00"


def test_init_block_round_trip_with_flags():
    block = _block(loopback=True, disable_retry=True, ladrf=bytes(range(8)))
    again = InitBlock.unpack(block.pack())
    assert again == block
    assert again.loopback and again.disable_retry
    assert not again.promiscuous


def test_init_block_rings_are_at_the_end():
    block = _block()
    packed = block.pack()
    assert packed[16:20] == block.rdrp.pack()
    assert packed[20:24] == block.tdrp.pack()


def test_init_block_rejects_bad_padr():
    with pytest.raises(ValueError):
        InitBlock(padr=b"\x00" * 5, rdrp=RingPointer(0), tdrp=RingPointer(0))


def test_message_descriptor_layout():
    md = MessageDescriptor(address=0x123456, flags=LMD_OWN, bcnt=0xF830, mcnt=0)
    packed = md.pack()
    assert packed[:4] == b"\x34\x56\x80\x12"
    assert len(packed) == MessageDescriptor.SIZE


def test_message_descriptor_round_trip():
    md = MessageDescriptor(
        address=0x00F000, flags=LMD_STP | LMD_ENP, bcnt=0xF830, mcnt=60
    )
    assert MessageDescriptor.unpack(md.pack()) == md


def test_message_descriptor_ownership():
    assert MessageDescriptor(address=0, flags=LMD_OWN | LMD_STP).owned_by_chip()
    assert not MessageDescriptor(address=0, flags=LMD_STP | LMD_ENP).owned_by_chip()


def test_message_descriptor_rejects_large_flags():
    with pytest.raises(ValueError):
        MessageDescriptor(address=0, flags=0x100)