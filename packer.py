from collections import namedtuple
from typing import Iterator, List, Sequence

from bitops import BitReader, BitWriter
from errors import CorruptStreamError, PreconditionError

Selector = namedtuple("Selector", ["databits", "span"])
Block = namedtuple("Block", ["selector", "width", "values"])


class BlockPacker:
    """Adaptive block packer for sequences of small unsigned integers.

    Values are grouped in batches of 1, 2 or 4. Each batch is preceded by
    a 4-bit selector that adjusts a running bit width and gives the batch
    size; every value of the batch is then written with that width. The
    width carries over from batch to batch, so only its change is stored.

    Selector 0 is the escape: it forces the width to ``MAX_WIDTH`` for a
    single value.

    :ivar START_WIDTH: Running width at the start of every pass.
    :type START_WIDTH: int
    :ivar MAX_WIDTH: Largest width, and the escape width of selector 0.
    :type MAX_WIDTH: int
    :ivar SELECTOR_BITS: Size of a selector index in the stream.
    :type SELECTOR_BITS: int
    :ivar MAX_SPAN: Largest batch, also the encoder's look-ahead.
    :type MAX_SPAN: int
    :ivar SELECTORS: The 16 ``(databits, span)`` selector entries.
    :type SELECTORS: Tuple[Selector, ...]
    """

    START_WIDTH = 8
    MAX_WIDTH = 30
    SELECTOR_BITS = 4
    MAX_SPAN = 4

    SELECTORS = (
        Selector(0, 1),
        Selector(-4, 1),
        Selector(-2, 1), Selector(-2, 2),
        Selector(-1, 1), Selector(-1, 2), Selector(-1, 4),
        Selector(0, 1), Selector(0, 2), Selector(0, 4),
        Selector(1, 1), Selector(1, 2), Selector(1, 4),
        Selector(2, 1), Selector(2, 2),
        Selector(4, 1),
    )

    @staticmethod
    def bit_width(value: int) -> int:
        """Return the number of bits needed to store ``value`` (0 for 0).

        :param value: Non-negative integer.
        :type value: int
        :rtype: int
        """
        return value.bit_length()

    def validate(self, values: Sequence[int]):
        """Check that every value can be packed.

        :param values: Values to check.
        :type values: Sequence[int]
        :returns: None
        :rtype: None
        :raises PreconditionError: If a value is not an integer in
            ``[0, 2**MAX_WIDTH)``.
        """
        for index, value in enumerate(values):
            if not isinstance(value, int) or isinstance(value, bool):
                raise PreconditionError(
                    f"Value at index {index} is not an integer: {value!r}"
                )
            if value < 0 or value.bit_length() > self.MAX_WIDTH:
                raise PreconditionError(
                    f"Value at index {index} out of range "
                    f"[0, 2**{self.MAX_WIDTH}): {value}"
                )

    def choose_selector(self, width: int, bit_widths: Sequence[int]) -> int:
        """Pick the densest selector for the look-ahead values.

        A selector fits when its new width stays within ``[0, MAX_WIDTH]``
        and holds every value of its span. Among fitting selectors the one
        with the highest ``(span - 1) * 4 - waste`` wins, where ``waste``
        is the number of unused bits; the earliest index wins ties.

        :param width: Current running width.
        :type width: int
        :param bit_widths: Bit widths of the 1 to 4 look-ahead values.
        :type bit_widths: Sequence[int]
        :returns: Selector index, 0 if none beats the escape.
        :rtype: int
        :raises PreconditionError: If ``bit_widths`` is empty.
        """
        if not bit_widths:
            raise PreconditionError("No look-ahead values to choose for")

        best = 0
        best_score = bit_widths[0] - self.MAX_WIDTH

        for index in range(1, len(self.SELECTORS)):
            databits, span = self.SELECTORS[index]
            if span > len(bit_widths):
                continue

            w = width + databits
            if w < 0 or w > self.MAX_WIDTH:
                continue

            batch = bit_widths[:span]
            if max(batch) > w:
                continue

            waste = sum(w - bn for bn in batch)
            score = (span - 1) * 4 - waste
            if score > best_score:
                best = index
                best_score = score

        return best

    def _apply(self, width: int, selector: int) -> int:
        if selector == 0:
            return self.MAX_WIDTH
        return width + self.SELECTORS[selector].databits

    def blocks(self, values: Sequence[int]) -> Iterator[Block]:
        """Plan the encoding of ``values`` as a sequence of blocks.

        ``values`` must already be valid (see :meth:`validate`).

        :param values: Values to pack.
        :type values: Sequence[int]
        :returns: Generator of ``Block(selector, width, values)``, where
            ``width`` is the running width after the selector is applied.
        :rtype: Iterator[Block]
        """
        widths = [self.bit_width(v) for v in values]
        width = self.START_WIDTH
        pos = 0

        while pos < len(values):
            lookahead = widths[pos:pos + self.MAX_SPAN]
            selector = self.choose_selector(width, lookahead)
            width = self._apply(width, selector)
            span = self.SELECTORS[selector].span
            yield Block(selector, width, tuple(values[pos:pos + span]))
            pos += span

    def encode(self, writer: BitWriter, values: Sequence[int]):
        """Pack ``values`` into ``writer``.

        All values are validated before the first bit is written.

        :param writer: Destination bit stream.
        :type writer: BitWriter
        :param values: Values in ``[0, 2**MAX_WIDTH)``.
        :type values: Sequence[int]
        :returns: None
        :rtype: None
        :raises PreconditionError: If a value cannot be packed.
        """
        self.validate(values)
        self._encode(writer, values)

    def _encode(self, writer: BitWriter, values: Sequence[int]):
        """Pack already validated ``values`` into ``writer``."""
        for block in self.blocks(values):
            writer.write(block.selector, self.SELECTOR_BITS)
            if block.width > 0:
                for value in block.values:
                    writer.write(value, block.width)

    def decode(self, reader: BitReader, count: int) -> List[int]:
        """Unpack ``count`` values from ``reader``.

        :param reader: Source bit stream.
        :type reader: BitReader
        :param count: Number of values to read.
        :type count: int
        :returns: The decoded values, in order.
        :rtype: List[int]
        :raises CorruptStreamError: If a selector moves the width out of
            ``[0, MAX_WIDTH]``.
        :raises OutOfDataError: If the stream ends early.
        """
        result = []
        width = self.START_WIDTH
        span = 0

        for _ in range(count):
            if span == 0:
                selector = reader.read(self.SELECTOR_BITS)
                span = self.SELECTORS[selector].span
                width = self._apply(width, selector)
                if not 0 <= width <= self.MAX_WIDTH:
                    raise CorruptStreamError(
                        f"Selector {selector} gives invalid width {width}"
                    )

            result.append(reader.read(width) if width > 0 else 0)
            span -= 1

        return result
