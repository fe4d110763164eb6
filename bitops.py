from errors import CorruptStreamError, OutOfDataError, PreconditionError

_MASKS = (0x00, 0x01, 0x03, 0x07, 0x0F, 0x1F, 0x3F, 0x7F, 0xFF)


class BitWriter:
    """Append-only bit writer.

    Bits are packed most-significant-bit first. Completed bytes go to
    ``buffer``; the byte being filled lives in ``bit_buffer`` with
    ``bit_offset`` pointing at the next free bit (7 down to 0).

    :ivar buffer: Completed bytes.
    :type buffer: bytearray
    :ivar bit_buffer: The in-progress trailing byte.
    :type bit_buffer: int
    :ivar bit_offset: Position of the next free bit in ``bit_buffer``.
    :type bit_offset: int
    """

    def __init__(self):
        """Initialize an empty bit writer.

        :returns: None
        :rtype: None
        """
        self.buffer = bytearray()
        self.bit_buffer = 0
        self.bit_offset = 7

    def write_bit(self, bit):
        """Write a single bit.

        :param bit: Any value; truthy writes a ``1``.
        :returns: None
        :rtype: None
        """
        if bit:
            self.bit_buffer |= 1 << self.bit_offset

        self.bit_offset -= 1
        if self.bit_offset < 0:
            self.buffer.append(self.bit_buffer)
            self.bit_buffer = 0
            self.bit_offset = 7

    def write(self, value: int, bits: int):
        """Write the lowest ``bits`` bits of ``value``, MSB first.

        :param value: Integer whose bits will be written.
        :type value: int
        :param bits: Number of bits from ``value`` to write.
        :type bits: int
        :returns: None
        :rtype: None
        :raises PreconditionError: If ``bits`` is negative.
        """
        if bits < 0:
            raise PreconditionError(f"Cannot write {bits} bits")
        for i in range(bits - 1, -1, -1):
            self.write_bit((value >> i) & 1)

    def sync(self) -> bytes:
        """Terminate the stream and pad it to a byte boundary.

        Writes a single ``0`` bit followed by ``1`` bits until the next
        byte boundary, so between one and eight bits are always added.

        :returns: The finalized stream.
        :rtype: bytes
        """
        self.write_bit(0)
        while self.bit_offset != 7:
            self.write_bit(1)
        return self.data

    @property
    def data(self) -> bytes:
        """Bytes written so far, including a partially filled last byte.

        :rtype: bytes
        """
        if self.bit_offset == 7:
            return bytes(self.buffer)
        return bytes(self.buffer) + bytes([self.bit_buffer])

    @property
    def size(self) -> int:
        """Number of bytes in :attr:`data`.

        :rtype: int
        """
        return len(self.buffer) + (self.bit_offset != 7)

    @property
    def bit_length(self) -> int:
        """Number of bits written so far.

        :rtype: int
        """
        return len(self.buffer) * 8 + (7 - self.bit_offset)

    def __len__(self):
        return self.size


class BitReader:
    """Sequential bit reader over a bounded byte sequence.

    Reads never go past the end of ``data``; asking for more bits than
    remain raises :class:`OutOfDataError`.

    :ivar data: Input data to read bits from.
    :type data: bytes
    :ivar pos: Index of the next byte to fetch from ``data``.
    :type pos: int
    :ivar byte: The byte currently being consumed.
    :type byte: int
    :ivar bit_offset: Next unread bit of ``byte`` (7..0), -1 once it is used up.
    :type bit_offset: int
    """

    MAX_READ = 32

    def __init__(self, data: bytes):
        """Create a bit reader positioned at the first bit of ``data``.

        :param data: Source data to read from.
        :type data: bytes
        :returns: None
        :rtype: None
        """
        self.data = bytes(data)
        self.pos = 0
        self.byte = 0
        self.bit_offset = -1

    @classmethod
    def from_writer(cls, writer: BitWriter) -> "BitReader":
        """Create a reader over everything ``writer`` has produced.

        :param writer: Writer whose bytes should be read back.
        :type writer: BitWriter
        :returns: A new reader.
        :rtype: BitReader
        """
        return cls(writer.data)

    def _next_byte(self):
        if self.pos >= len(self.data):
            raise OutOfDataError("Unexpected end of data")
        self.byte = self.data[self.pos]
        self.pos += 1
        self.bit_offset = 7

    def read(self, bit_count: int) -> int:
        """Read ``bit_count`` bits and return them as an unsigned integer.

        Bits are assembled MSB first, crossing byte boundaries as needed.

        :param bit_count: Number of bits to read, 1 to 32.
        :type bit_count: int
        :returns: The integer composed of the next ``bit_count`` bits.
        :rtype: int
        :raises PreconditionError: If ``bit_count`` is outside ``[1, 32]``.
        :raises OutOfDataError: If the data ends before ``bit_count`` bits.
        """
        if not 1 <= bit_count <= self.MAX_READ:
            raise PreconditionError(
                f"Bit count must be in [1, {self.MAX_READ}], got {bit_count}"
            )
        if bit_count > self.bits_remaining:
            raise OutOfDataError(
                f"Unexpected end of data: {bit_count} bits requested, "
                f"{self.bits_remaining} left"
            )

        result = 0
        while bit_count > 0:
            if self.bit_offset < 0:
                self._next_byte()

            bw = min(self.bit_offset + 1, bit_count)
            self.bit_offset -= bw
            result = (result << bw) | (
                _MASKS[bw] & (self.byte >> (self.bit_offset + 1))
            )
            bit_count -= bw

        return result

    def read_bit(self) -> bool:
        """Read a single bit.

        :returns: ``True`` for a ``1`` bit.
        :rtype: bool
        :raises OutOfDataError: If the data is exhausted.
        """
        return bool(self.read(1))

    def sync(self):
        """Consume the padding written by :meth:`BitWriter.sync`.

        :returns: None
        :rtype: None
        :raises CorruptStreamError: If the padding is not a ``0`` bit
            followed by ``1`` bits up to the byte boundary.
        :raises OutOfDataError: If the data ends inside the padding.
        """
        if self.read_bit():
            raise CorruptStreamError("Bad stream padding: missing terminator")
        while self.bit_offset >= 0:
            if not self.read_bit():
                raise CorruptStreamError("Bad stream padding: expected 1 bits")

    @property
    def bits_remaining(self) -> int:
        """Number of unread bits left in the input.

        :rtype: int
        """
        return (len(self.data) - self.pos) * 8 + (self.bit_offset + 1)
