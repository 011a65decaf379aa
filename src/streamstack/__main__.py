"""
streamstack command line entry point.

Compress, decompress, or print files through a channel stack.

Usage::

    python -m streamstack compress access.log access.log.gz
    python -m streamstack decompress --format auto access.log.gz access.log
    python -m streamstack cat --compressed --encoding latin-1 access.log.gz
    cat data.bin | python -m streamstack compress --format zlib - data.bin.z

A path of "-" reads from stdin or writes to stdout.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from pydantic import ValidationError

from streamstack.channels.base import ByteChannel
from streamstack.channels.file import FileChannel
from streamstack.channels.fileobj import IOChannel
from streamstack.config import DEFAULT_BLOCK_SIZE
from streamstack.stack import open_bytes, open_text
from streamstack.types.exceptions import ChannelError
from streamstack.types.options import CompressionFormat, CompressionMode, OpenMode

logger = logging.getLogger(__name__)

STDIO_PATH = "-"
"""Path naming the process's standard input or output."""


def setup_logging(verbose: bool = False) -> None:
    """Configure logging to stderr."""
    level = logging.DEBUG if verbose else logging.WARNING

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(handler)


def open_source(path: str) -> ByteChannel:
    """Open path for reading; "-" is stdin, which is left open on close."""
    if path == STDIO_PATH:
        return IOChannel(sys.stdin.buffer, close_inner=False)
    return FileChannel(path, OpenMode.READ)


def open_sink(path: str) -> ByteChannel:
    """Open path for writing, truncating it; "-" is stdout, left open on close."""
    if path == STDIO_PATH:
        return IOChannel(sys.stdout.buffer, close_inner=False)
    return FileChannel(path, OpenMode.WRITE)


def copy(source: ByteChannel, sink: ByteChannel, block_size: int = DEFAULT_BLOCK_SIZE) -> int:
    """Copy source to sink until end-of-stream, returning the byte count."""
    total = 0
    while chunk := source.read(block_size):
        sink.write_all(chunk)
        total += len(chunk)
    return total


def run_compress(args: argparse.Namespace) -> None:
    """Compress args.source into args.dest."""
    fmt = CompressionFormat(args.format)
    with open_bytes(open_source(args.source)) as source:
        with open_bytes(
            open_sink(args.dest),
            compression=fmt,
            mode=CompressionMode.COMPRESS,
            level=args.level,
        ) as sink:
            total = copy(source, sink)
    logger.info("Compressed %d bytes from %s into %s", total, args.source, args.dest)


def run_decompress(args: argparse.Namespace) -> None:
    """Decompress args.source into args.dest."""
    fmt = CompressionFormat(args.format)
    with open_bytes(open_source(args.source), compression=fmt) as source:
        with open_bytes(open_sink(args.dest)) as sink:
            total = copy(source, sink)
    logger.info("Decompressed %s into %d bytes in %s", args.source, total, args.dest)


def run_cat(args: argparse.Namespace) -> None:
    """Decode args.source and print it line by line."""
    compression = CompressionFormat.AUTO if args.compressed else None
    with open_text(
        open_source(args.source),
        encoding=args.encoding,
        errors=args.errors,
        compression=compression,
    ) as text:
        for number, line in enumerate(text, start=1):
            if args.number:
                sys.stdout.write(f"{number:6d}  ")
            sys.stdout.write(line + "\n")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one subcommand per operation."""
    parser = argparse.ArgumentParser(
        prog="streamstack",
        description="Move data through composable channel stacks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    compress = commands.add_parser("compress", help="Compress a file")
    compress.add_argument("source", help='File to compress ("-" for stdin)')
    compress.add_argument("dest", help='Compressed output ("-" for stdout)')
    compress.add_argument(
        "--format",
        choices=[f.value for f in CompressionFormat if f is not CompressionFormat.AUTO],
        default=CompressionFormat.GZIP.value,
        help="Compressed framing (default: gzip)",
    )
    compress.add_argument(
        "--level",
        type=int,
        choices=range(-1, 10),
        default=-1,
        metavar="{-1..9}",
        help="Compression level, -1 for the zlib default",
    )
    compress.set_defaults(handler=run_compress)

    decompress = commands.add_parser("decompress", help="Decompress a file")
    decompress.add_argument("source", help='Compressed file ("-" for stdin)')
    decompress.add_argument("dest", help='Decompressed output ("-" for stdout)')
    decompress.add_argument(
        "--format",
        choices=[f.value for f in CompressionFormat],
        default=CompressionFormat.AUTO.value,
        help="Compressed framing (default: auto-detect zlib or gzip)",
    )
    decompress.set_defaults(handler=run_decompress)

    cat = commands.add_parser("cat", help="Print a text file line by line")
    cat.add_argument("source", help='Text file ("-" for stdin)')
    cat.add_argument("--encoding", default=None, help="Text encoding (default: utf-8)")
    cat.add_argument(
        "--errors",
        choices=["strict", "replace", "ignore"],
        default="strict",
        help="How to handle undecodable bytes",
    )
    cat.add_argument(
        "--compressed",
        action="store_true",
        help="Decompress zlib or gzip input first",
    )
    cat.add_argument("-n", "--number", action="store_true", help="Number output lines")
    cat.set_defaults(handler=run_cat)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        args.handler(args)
    except ChannelError as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"streamstack: {e}", file=sys.stderr)
        return 1
    except ValidationError as e:
        print(f"streamstack: invalid option: {e.errors()[0]['msg']}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
