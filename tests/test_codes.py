import pytest

from bitops import BitWriter, BitReader
from codes import (
    EMPTY_MARKER,
    read_binary,
    read_count,
    read_gamma,
    write_binary,
    write_count,
    write_gamma,
)
from errors import CorruptStreamError, OutOfDataError, PreconditionError


def test_binary_roundtrip_and_layout(bits_of_fn):
    bw = BitWriter()
    write_binary(bw, 5, 0b10011)
    write_binary(bw, 3, 0b001)
    assert bits_of_fn(bw.data) == "10011001"
    br = BitReader(bw.data)
    assert read_binary(br, 5) == 0b10011
    assert read_binary(br, 3) == 0b001


def test_binary_wide_write_reads_back_in_halves():
    bw = BitWriter()
    write_binary(bw, 64, 0x0123456789ABCDEF)
    br = BitReader(bw.data)
    assert read_binary(br, 32) == 0x01234567
    assert read_binary(br, 32) == 0x89ABCDEF


@pytest.mark.parametrize("width, value", [(0, 0), (65, 1), (3, 8), (4, -1)])
def test_write_binary_rejects_bad_arguments(width, value):
    with pytest.raises(PreconditionError):
        write_binary(BitWriter(), width, value)


@pytest.mark.parametrize("width", [0, 33])
def test_read_binary_rejects_bad_width(width):
    with pytest.raises(PreconditionError):
        read_binary(BitReader(b"\x00" * 8), width)


@pytest.mark.parametrize(
    "value, expected",
    [(1, "0"), (2, "100"), (3, "101"), (4, "11000"), (5, "11001")],
)
def test_gamma_bit_patterns(value, expected, bits_of_fn):
    bw = BitWriter()
    write_gamma(bw, value)
    assert bw.bit_length == len(expected)
    assert bits_of_fn(bw.data)[:len(expected)] == expected


def test_gamma_of_four_then_sync():
    bw = BitWriter()
    write_gamma(bw, 4)
    assert bw.sync() == b"\xc3"


@pytest.mark.parametrize(
    "value", [1, 2, 3, 4, 1023, 1024, (1 << 30) - 1, (1 << 32) - 1]
)
def test_gamma_roundtrip_boundaries(value):
    bw = BitWriter()
    write_gamma(bw, value)
    br = BitReader(bw.sync())
    assert read_gamma(br) == value
    br.sync()


@pytest.mark.parametrize("value", [0, -3, 1 << 32])
def test_gamma_rejects_out_of_range(value):
    bw = BitWriter()
    with pytest.raises(PreconditionError):
        write_gamma(bw, value)
    assert bw.bit_length == 0


def test_gamma_sequence_roundtrip():
    values = list(range(1, 300)) + [65535, 65536, 1 << 20]
    bw = BitWriter()
    for v in values:
        write_gamma(bw, v)
    br = BitReader(bw.sync())
    assert [read_gamma(br) for _ in values] == values


def test_read_gamma_rejects_overlong_prefix():
    with pytest.raises(CorruptStreamError):
        read_gamma(BitReader(b"\xff" * 5))


def test_read_gamma_truncated():
    with pytest.raises(OutOfDataError):
        read_gamma(BitReader(b"\xff"))


def test_count_positive_matches_gamma():
    a = BitWriter()
    b = BitWriter()
    write_count(a, 37)
    write_gamma(b, 37)
    assert a.data == b.data
    assert read_count(BitReader(a.data)) == 37


def test_count_zero_uses_empty_marker():
    bw = BitWriter()
    write_count(bw, 0)
    assert bw.bit_length == EMPTY_MARKER
    assert bw.data == b"\xff\xff\xff\xff"
    assert read_count(BitReader(bw.data)) == 0


def test_count_zero_followed_by_more_data():
    bw = BitWriter()
    write_count(bw, 0)
    write_count(bw, 6)
    br = BitReader(bw.sync())
    assert read_count(br) == 0
    assert read_count(br) == 6
    br.sync()


def test_count_rejects_negative():
    with pytest.raises(PreconditionError):
        write_count(BitWriter(), -1)
