from sun3boot.dump import dump_buf, dump_lines
from sun3boot.fmt import cformat


def parse_dump(text):
    result = bytearray()
    for line in text.splitlines():
        tokens = line.split()
        result.extend(int(tok, 16) for tok in tokens[1:])
    return bytes(result)


def test_empty_buffer():
    assert dump_buf(b"") == ""
    assert list(dump_lines(b"", 0x4000)) == []


def test_pinned_short_line():
    assert dump_buf(bytes(range(3)), 0x1000) == "00001000  00 01 02 \n"


def test_full_line_has_sixteen_bytes():
    lines = list(dump_lines(bytes(range(16)), 0x3000))
    assert len(lines) == 1
    assert lines[0].startswith(cformat("%h", 0x3000) + "  ")
    assert len(lines[0].split()) == 17


def test_exact_multiple_has_no_extra_newline():
    text = dump_buf(bytes(32))
    assert text.count("\n") == 2
    assert text.endswith("\n")


def test_partial_last_line_addresses():
    lines = list(dump_lines(bytes(20), 0x100))
    assert len(lines) == 2
    assert int(lines[0].split()[0], 16) == 0x100
    assert int(lines[1].split()[0], 16) == 0x100 + 16
    assert len(lines[1].split()) == 5


def test_round_trip():
    data = bytes((i * 37) & 0xFF for i in range(100))
    assert parse_dump(dump_buf(data, 0xFEF00000)) == data


def test_bytearray_input():
    data = bytearray(b"\xde\xad\xbe\xef")
    assert parse_dump(dump_buf(data)) == bytes(data)