import argparse
import sys

from typing import List, Optional
from arrays import pack_array, pack_delta_array, unpack_array, unpack_delta_array
from errors import SqueezeError

RAW_VALUE_SIZE = 4  #: Bytes per value in an uncompressed uint32 array


def get_parser():
    """Create and configure the CLI argument parser.

    :returns: Configured argument parser.
    :rtype: argparse.ArgumentParser
    """
    parser = argparse.ArgumentParser(
        description="Pack integer arrays into a compact bit stream"
    )
    subparsers = parser.add_subparsers(
        title="subcommands", dest="cmd", required=True
    )

    pack = subparsers.add_parser(
        "pack", aliases=["p"], help="Pack a text file of integers"
    )
    pack.add_argument(
        "input", help="Text file with whitespace-separated integers"
    )
    pack.add_argument(
        "-o", "--output", required=True, help="Output stream file path"
    )
    pack.add_argument(
        "-d",
        "--delta",
        action="store_true",
        help="Store values as-is instead of as an increasing array",
    )
    pack.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Do not print size statistics",
    )

    unpack = subparsers.add_parser(
        "unpack", aliases=["u"], help="Unpack a stream back to integers"
    )
    unpack.add_argument("input", help="Stream file to decode")
    unpack.add_argument(
        "-o",
        "--output",
        default=None,
        help="Destination text file (default: stdout)",
    )
    unpack.add_argument(
        "-d",
        "--delta",
        action="store_true",
        help="The stream holds a delta array",
    )

    return parser


def _parse_values(text: str) -> List[int]:
    """Parse whitespace-separated decimal integers.

    :param text: Input text.
    :type text: str
    :returns: Parsed values, in order.
    :rtype: List[int]
    :raises ValueError: If a token is not a decimal integer.
    """
    values = []
    for token in text.split():
        try:
            values.append(int(token, 10))
        except ValueError:
            raise ValueError(f"Not an integer: {token!r}") from None
    return values


def _fmt_bytes(n: int) -> str:
    """Format a byte count into a human-readable string.

    :param n: Number of bytes.
    :type n: int
    :returns: Human-readable string.
    :rtype: str
    """
    for unit in ['', 'Ki', 'Mi', 'Gi', 'Ti']:
        if abs(n) < 1024:
            return f"{n:.2f} {unit}B"
        n /= 1024
    return f"{n:.2f} PiB"


def _fmt_bits_per_value(packed_size: int, count: int) -> str:
    """Format the average packed size per value like ``3.25 bits/value``.

    :param packed_size: Size of the packed stream in bytes.
    :type packed_size: int
    :param count: Number of values in the stream.
    :type count: int
    :rtype: str
    """
    if count <= 0:
        return "n/a"
    return f"{packed_size * 8 / count:.2f} bits/value"


def pack_file(
    input_path: str, output_path: str, delta: bool, quiet: bool
) -> bool:
    """Pack the integers of a text file into a stream file.

    The output holds only the synced bit stream, with no header.

    :param input_path: Text file with whitespace-separated integers.
    :type input_path: str
    :param output_path: Destination stream file.
    :type output_path: str
    :param delta: Write a delta array instead of an increasing array.
    :type delta: bool
    :param quiet: Suppress the size statistics.
    :type quiet: bool
    :returns: ``True`` if the file was written.
    :rtype: bool
    """
    try:
        with open(input_path, "r", encoding="utf-8") as f:
            values = _parse_values(f.read())
    except FileNotFoundError:
        print(f"[!] Input file not found: {input_path}")
        return False
    except ValueError as e:
        print(f"[!] Bad input in {input_path}: {e}")
        return False

    try:
        data = pack_delta_array(values) if delta else pack_array(values)
    except SqueezeError as e:
        print(f"[!] Cannot pack {input_path}: {e}")
        return False

    try:
        with open(output_path, "wb") as out:
            out.write(data)
    except OSError as e:
        print(f"[!] Cannot write {output_path}: {e}")
        return False

    if not quiet:
        raw_size = len(values) * RAW_VALUE_SIZE
        print("Values: ", len(values))
        print("Size before packing: ", _fmt_bytes(raw_size))
        print("Size after packing: ", _fmt_bytes(len(data)))
        print("Density: ", _fmt_bits_per_value(len(data), len(values)))
        if raw_size:
            print(f"Compression ratio: {raw_size / len(data):.2f}")
    return True


def unpack_file(
    input_path: str, output_path: Optional[str], delta: bool
) -> bool:
    """Decode a stream file and write one integer per line.

    :param input_path: Stream file produced by :func:`pack_file`.
    :type input_path: str
    :param output_path: Destination text file, or ``None`` for stdout.
    :type output_path: Optional[str]
    :param delta: The stream holds a delta array.
    :type delta: bool
    :returns: ``True`` if the stream was decoded.
    :rtype: bool
    """
    try:
        with open(input_path, "rb") as f:
            data = f.read()
    except FileNotFoundError:
        print(f"[!] Stream file not found: {input_path}")
        return False

    try:
        values = unpack_delta_array(data) if delta else unpack_array(data)
    except SqueezeError as e:
        print(f"[!] Cannot unpack {input_path}: {e}")
        return False

    text = "".join(f"{v}\n" for v in values)
    if output_path is None:
        sys.stdout.write(text)
        sys.stdout.flush()
    else:
        try:
            with open(output_path, "w", encoding="utf-8") as out:
                out.write(text)
        except OSError as e:
            print(f"[!] Cannot write {output_path}: {e}")
            return False
    return True


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the CLI tool.

    :param argv: Arguments to parse instead of ``sys.argv[1:]``.
    :type argv: Optional[List[str]]
    :returns: Process exit status.
    :rtype: int
    """
    parser = get_parser()
    args = parser.parse_args(argv)

    ok = False
    if args.cmd in ["pack", "p"]:
        ok = pack_file(args.input, args.output, args.delta, args.quiet)
    elif args.cmd in ["unpack", "u"]:
        ok = unpack_file(args.input, args.output, args.delta)
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
