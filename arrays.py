from typing import List, Sequence

from bitops import BitReader, BitWriter
from codes import read_count, write_count
from errors import CorruptStreamError, PreconditionError
from packer import BlockPacker

UINT32_MASK = 0xFFFFFFFF


# --------------------------------------------------------------------
#   Delta arrays: a count followed by the packed values

def write_delta_array(writer: BitWriter, values: Sequence[int]):
    """Write an array of small values.

    The layout is the element count (see :func:`codes.write_count`)
    followed by the values packed by :class:`BlockPacker`. Nothing is
    written when a value is rejected.

    :param writer: Destination bit stream.
    :type writer: BitWriter
    :param values: Values in ``[0, 2**30)``, any order.
    :type values: Sequence[int]
    :returns: None
    :rtype: None
    :raises PreconditionError: If a value cannot be packed.
    """
    BlockPacker().validate(values)
    _write_packed(writer, values)


def _write_packed(writer: BitWriter, values: Sequence[int]):
    """Write the count and packed body of already validated ``values``."""
    write_count(writer, len(values))
    BlockPacker()._encode(writer, values)


def read_delta_array(reader: BitReader) -> List[int]:
    """Read an array written by :func:`write_delta_array`.

    :param reader: Source bit stream.
    :type reader: BitReader
    :returns: The values, in their original order.
    :rtype: List[int]
    :raises OutOfDataError: If the stream ends early.
    :raises CorruptStreamError: If the stream is malformed.
    """
    count = read_count(reader)
    return BlockPacker().decode(reader, count)


# --------------------------------------------------------------------
#   Arrays of increasing values, stored as the gaps between them

def _gaps(values: Sequence[int]) -> List[int]:
    """Turn strictly increasing ``values`` into gaps minus one.

    ``last`` starts at ``2**32 - 1`` so that, modulo ``2**32``, the first
    gap equals the first value. ``values`` must already be valid (see
    :meth:`BlockPacker.validate`).
    """
    deltas = []
    last = UINT32_MASK
    for index, v in enumerate(values):
        if index > 0 and v <= last:
            raise PreconditionError(
                f"Values must be strictly increasing: {v} follows {last} "
                f"at index {index}"
            )
        deltas.append((v - last - 1) & UINT32_MASK)
        last = v
    return deltas


def write_array(writer: BitWriter, values: Sequence[int]):
    """Write an array of unique, increasing values.

    :param writer: Destination bit stream.
    :type writer: BitWriter
    :param values: Strictly increasing values in ``[0, 2**30)``; may
        start with zero.
    :type values: Sequence[int]
    :returns: None
    :rtype: None
    :raises PreconditionError: If ``values`` is not strictly increasing
        or holds a value out of range.
    """
    BlockPacker().validate(values)
    _write_packed(writer, _gaps(values))


def read_array(reader: BitReader) -> List[int]:
    """Read an array written by :func:`write_array`.

    :param reader: Source bit stream.
    :type reader: BitReader
    :returns: The increasing values.
    :rtype: List[int]
    :raises OutOfDataError: If the stream ends early.
    :raises CorruptStreamError: If the stream is malformed.
    """
    result = read_delta_array(reader)

    last = UINT32_MASK
    for i, delta in enumerate(result):
        last = result[i] = (delta + last + 1) & UINT32_MASK

    return result


# --------------------------------------------------------------------
#   One-shot helpers

def pack_delta_array(values: Sequence[int]) -> bytes:
    """Encode ``values`` with :func:`write_delta_array` into a synced stream.

    :rtype: bytes
    """
    writer = BitWriter()
    write_delta_array(writer, values)
    return writer.sync()


def unpack_delta_array(data: bytes) -> List[int]:
    """Decode a stream produced by :func:`pack_delta_array`.

    :rtype: List[int]
    """
    reader = BitReader(data)
    result = read_delta_array(reader)
    _finish(reader)
    return result


def pack_array(values: Sequence[int]) -> bytes:
    """Encode ``values`` with :func:`write_array` into a synced stream.

    :rtype: bytes
    """
    writer = BitWriter()
    write_array(writer, values)
    return writer.sync()


def unpack_array(data: bytes) -> List[int]:
    """Decode a stream produced by :func:`pack_array`.

    :rtype: List[int]
    """
    reader = BitReader(data)
    result = read_array(reader)
    _finish(reader)
    return result


def _finish(reader: BitReader):
    """Consume the sync padding and require the input to end there."""
    reader.sync()
    if reader.bits_remaining:
        raise CorruptStreamError(
            f"{reader.bits_remaining // 8} unexpected bytes after the stream"
        )
