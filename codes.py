from bitops import BitReader, BitWriter
from errors import CorruptStreamError, PreconditionError

UINT32_LIMIT = 1 << 32  #: Exclusive upper bound of a 32-bit unsigned value
MAX_GAMMA_EXPONENT = 31  #: Longest unary prefix a 32-bit value can have
EMPTY_MARKER = 32  #: Run of one-bits that encodes a count of zero


# --------------------------------------------------------------------
#   Binary mode writes a fixed bitcount number of bits for a value

def write_binary(writer: BitWriter, width: int, value: int):
    """Write ``value`` using exactly ``width`` bits, MSB first.

    :param writer: Destination bit stream.
    :type writer: BitWriter
    :param width: Number of bits, 1 to 64.
    :type width: int
    :param value: Value to write; must fit in ``width`` bits.
    :type value: int
    :returns: None
    :rtype: None
    :raises PreconditionError: If ``width`` is out of range or
        ``value`` does not fit.
    """
    if not 1 <= width <= 64:
        raise PreconditionError(f"Binary width must be in [1, 64], got {width}")
    if value < 0 or value >> width:
        raise PreconditionError(f"Value {value} does not fit in {width} bits")
    writer.write(value, width)


def read_binary(reader: BitReader, width: int) -> int:
    """Read a ``width``-bit value written by :func:`write_binary`.

    :param reader: Source bit stream.
    :type reader: BitReader
    :param width: Number of bits, 1 to 32.
    :type width: int
    :returns: The decoded value.
    :rtype: int
    :raises PreconditionError: If ``width`` is out of range.
    :raises OutOfDataError: If the stream is exhausted.
    """
    return reader.read(width)


# --------------------------------------------------------------------
#   Gamma mode writes a variable number of bits for a value, optimal for
#   small numbers

def write_gamma(writer: BitWriter, value: int):
    """Write a strictly positive ``value`` with the Elias gamma code.

    The code is ``e`` one-bits and a zero-bit, ``e = floor(log2(value))``,
    followed by the low ``e`` bits of ``value``.

    :param writer: Destination bit stream.
    :type writer: BitWriter
    :param value: Value in ``[1, 2**32)``.
    :type value: int
    :returns: None
    :rtype: None
    :raises PreconditionError: If ``value`` is not in ``[1, 2**32)``.
    """
    if not 1 <= value < UINT32_LIMIT:
        raise PreconditionError(
            f"Gamma code needs a value in [1, 2**32), got {value}"
        )

    e = value.bit_length() - 1
    for _ in range(e):
        writer.write_bit(1)
    writer.write_bit(0)
    writer.write(value, e)


def _read_prefix(reader: BitReader, limit: int) -> int:
    """Count one-bits up to a zero-bit, stopping after ``limit`` ones."""
    e = 0
    while e < limit and reader.read_bit():
        e += 1
    return e


def read_gamma(reader: BitReader) -> int:
    """Read a value written by :func:`write_gamma`.

    :param reader: Source bit stream.
    :type reader: BitReader
    :returns: The decoded value, at least 1.
    :rtype: int
    :raises CorruptStreamError: If the unary prefix is longer than any
        32-bit value could produce.
    :raises OutOfDataError: If the stream is exhausted.
    """
    e = _read_prefix(reader, MAX_GAMMA_EXPONENT + 1)
    if e > MAX_GAMMA_EXPONENT:
        raise CorruptStreamError("Gamma prefix too long")
    return _read_mantissa(reader, e)


def _read_mantissa(reader: BitReader, e: int) -> int:
    v2 = reader.read(e) if e else 0
    return (1 << e) + v2


# --------------------------------------------------------------------
#   Element counts: gamma code, with a reserved marker for zero

def write_count(writer: BitWriter, count: int):
    """Write an element count.

    Positive counts are plain gamma codes. Zero is written as
    ``EMPTY_MARKER`` one-bits, a prefix no 32-bit gamma code starts with.

    :param writer: Destination bit stream.
    :type writer: BitWriter
    :param count: Number of elements, ``0 <= count < 2**32``.
    :type count: int
    :returns: None
    :rtype: None
    :raises PreconditionError: If ``count`` is out of range.
    """
    if count == 0:
        writer.write((1 << EMPTY_MARKER) - 1, EMPTY_MARKER)
    else:
        write_gamma(writer, count)


def read_count(reader: BitReader) -> int:
    """Read an element count written by :func:`write_count`.

    :param reader: Source bit stream.
    :type reader: BitReader
    :returns: The element count, possibly 0.
    :rtype: int
    :raises OutOfDataError: If the stream is exhausted.
    """
    e = _read_prefix(reader, EMPTY_MARKER)
    if e == EMPTY_MARKER:
        return 0
    return _read_mantissa(reader, e)
