import pytest

from sun3boot.fmt import cformat, show_reg


def test_plain_text_passes_through():
    assert cformat("Starting test\n") == "Starting test\n"


@pytest.mark.parametrize("n", [0, 7, -15, 123456, -2147483648, 2147483647])
def test_decimal_matches_python(n):
    assert cformat("%d", n) == str(n)


def test_decimal_wraps_to_32_bits():
    assert cformat("%d", (1 << 32) + 5) == cformat("%d", 5)
    assert cformat("%d", 0xFFFFFFFF) == str(-1)


@pytest.mark.parametrize("v", [0, 5, 0xAB, 0x1AB, 0xFFFF])
def test_byte_hex_is_two_digits_of_low_byte(v):
    out = cformat("%x", v)
    assert len(out) == 2
    assert int(out, 16) == v & 0xFF
    assert out == out.upper()


def test_word_hex_pinned():
    assert cformat("%h", -1) == "FFFFFFFF"


@pytest.mark.parametrize("v", [0, 0x1234ABCD, 0xFEF02000, 42])
def test_word_hex_round_trip_and_aliases(v):
    out = cformat("%h", v)
    assert len(out) == 8
    assert int(out, 16) == v
    assert cformat("%X", v) == out


def test_char_from_int_and_str():
    assert cformat("%c%c", ord("Q"), "z") == "Qz"


def test_string_insertion():
    assert cformat("Command: %s!", "go") == "Command: go!"


def test_string_stops_at_nul():
    assert cformat("[%s]", "ab\0cd") == "[ab]"


def test_unknown_conversion_consumes_nothing():
    assert cformat("a%qb%d", 3) == "ab3"
    assert cformat("100%%") == "100"


def test_trailing_percent_is_dropped():
    assert cformat("abc%") == "abc"


def test_truncation_to_buffer():
    text = "x" * 500
    assert cformat(text) == text[:127]
    out = cformat("%s", "abcdefghijklmnop", size=10)
    assert out == "abcdefghijklmnop"[:9]


def test_size_one_gives_empty():
    assert cformat("hello", size=1) == ""


def test_bad_size_raises():
    with pytest.raises(ValueError):
        cformat("x", size=0)


def test_missing_argument_raises():
    with pytest.raises(TypeError):
        cformat("%d %d", 1)


def test_show_reg_layout():
    out = show_reg("CSR0", 0xFEF02000, 0x2A)
    assert out.endswith("\n")
    parts = out.split()
    assert parts[0] == "CSR0"
    assert parts[1] == cformat("%h", 0xFEF02000)
    assert int(parts[2], 16) == 0x2A