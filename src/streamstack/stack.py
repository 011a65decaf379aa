"""
Builders for the common channel stacks.

Text over compressed files is the usual layering::

    TextCodecChannel
      CompressionChannel      (optional)
        BufferedChannel
          FileChannel / MemoryChannel / SocketChannel / IOChannel

Buffering sits directly above the backend so that both the compressor's
output and the decompressor's input move in whole blocks.

Each builder takes ownership of the channel it is given. If building a layer
fails (for example, invalid options) everything built so far is closed
before the error propagates, so nothing leaks.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from typing import TypeVar

from streamstack.channels.base import ByteChannel, Channel
from streamstack.channels.buffered import BufferedChannel
from streamstack.channels.compression import CompressionChannel
from streamstack.channels.file import FileChannel
from streamstack.channels.text import TextCodecChannel
from streamstack.config import DEFAULT_COMPRESSION_LEVEL
from streamstack.types.options import CompressionFormat, CompressionMode, OpenMode

C = TypeVar("C", bound=Channel)


def _wrap(inner: ByteChannel, build: Callable[[ByteChannel], C]) -> C:
    """Apply build to inner, closing inner if build raises."""
    try:
        return build(inner)
    except BaseException:
        inner.close()
        raise


def open_bytes(
    inner: ByteChannel,
    *,
    block_size: int | None = None,
    compression: CompressionFormat | None = None,
    mode: CompressionMode = CompressionMode.DECOMPRESS,
    level: int = DEFAULT_COMPRESSION_LEVEL,
) -> ByteChannel:
    """
    Layer buffering and optional compression over inner.

    Args:
        inner: The backend channel. Ownership passes to the returned chain.
        block_size: Buffer block size; defaults to the configured default.
        compression: Framing to compress or decompress with; None for none.
        mode: Direction of compression when compression is set.
        level: Compression level when compressing.

    Returns:
        The outermost channel of the chain.
    """
    chain: ByteChannel = _wrap(inner, lambda c: BufferedChannel(c, block_size))
    if compression is not None:
        chain = _wrap(chain, lambda c: CompressionChannel(c, compression, mode, level=level))
    return chain


def open_text(
    inner: ByteChannel,
    *,
    encoding: str | None = None,
    errors: str = "strict",
    newline: str = "\n",
    block_size: int | None = None,
    compression: CompressionFormat | None = None,
    for_writing: bool = False,
    level: int = DEFAULT_COMPRESSION_LEVEL,
) -> TextCodecChannel:
    """
    Layer text decoding (or encoding) over buffering and optional compression.

    Args:
        inner: The backend channel. Ownership passes to the returned chain.
        encoding: Text encoding; defaults to the configured default.
        errors: Codec error policy.
        newline: Terminator written by write_line().
        block_size: Buffer block size.
        compression: Framing of the compressed layer; None for plain text.
        for_writing: Compress on write instead of decompressing on read.
        level: Compression level when writing.
    """
    mode = CompressionMode.COMPRESS if for_writing else CompressionMode.DECOMPRESS
    chain = open_bytes(
        inner,
        block_size=block_size,
        compression=compression,
        mode=mode,
        level=level,
    )
    return _wrap(
        chain,
        lambda c: TextCodecChannel(c, encoding, errors=errors, newline=newline),
    )


def open_file(
    path: str | os.PathLike[str],
    open_mode: OpenMode = OpenMode.READ,
    *,
    block_size: int | None = None,
    compression: CompressionFormat | None = None,
    level: int = DEFAULT_COMPRESSION_LEVEL,
) -> ByteChannel:
    """
    Open path as a buffered, optionally compressed, byte chain.

    Write-only modes compress; readable modes decompress.
    """
    mode = CompressionMode.DECOMPRESS if open_mode.readable else CompressionMode.COMPRESS
    return open_bytes(
        FileChannel(path, open_mode),
        block_size=block_size,
        compression=compression,
        mode=mode,
        level=level,
    )


def open_file_text(
    path: str | os.PathLike[str],
    open_mode: OpenMode = OpenMode.READ,
    *,
    encoding: str | None = None,
    errors: str = "strict",
    newline: str = "\n",
    block_size: int | None = None,
    compression: CompressionFormat | None = None,
    level: int = DEFAULT_COMPRESSION_LEVEL,
) -> TextCodecChannel:
    """Open path as a text chain; write-only modes encode, readable modes decode."""
    return open_text(
        FileChannel(path, open_mode),
        encoding=encoding,
        errors=errors,
        newline=newline,
        block_size=block_size,
        compression=compression,
        for_writing=not open_mode.readable,
        level=level,
    )
