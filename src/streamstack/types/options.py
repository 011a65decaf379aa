"""
Configuration models and enumerations for channel construction.

Each decorator channel validates its keyword arguments by building one of
the frozen models below. Invalid values raise ``pydantic.ValidationError``
before any resource is touched.
"""

from __future__ import annotations

import codecs
import os
import zlib
from enum import Enum
from typing import Literal

from pydantic import Field, field_validator, model_validator
from typing_extensions import Self

from streamstack.config import DEFAULT_BLOCK_SIZE, DEFAULT_COMPRESSION_LEVEL, DEFAULT_ENCODING

from .base import StrictBaseModel


class OpenMode(Enum):
    """How a FileChannel opens its path."""

    READ = "r"
    """Open an existing file for reading."""

    WRITE = "w"
    """Create the file, or truncate it if it exists, for writing."""

    APPEND = "a"
    """Create the file if missing; every write lands at the end."""

    CREATE = "x"
    """Create a new file for writing; fail if it already exists."""

    READ_WRITE = "r+"
    """Open an existing file for reading and writing without truncation."""

    @property
    def flags(self) -> int:
        """The ``os.open`` flags for this mode."""
        return _OPEN_FLAGS[self] | getattr(os, "O_BINARY", 0)

    @property
    def readable(self) -> bool:
        """Whether the mode permits reading."""
        return self in (OpenMode.READ, OpenMode.READ_WRITE)

    @property
    def writable(self) -> bool:
        """Whether the mode permits writing."""
        return self is not OpenMode.READ


_OPEN_FLAGS: dict[OpenMode, int] = {
    OpenMode.READ: os.O_RDONLY,
    OpenMode.WRITE: os.O_WRONLY | os.O_CREAT | os.O_TRUNC,
    OpenMode.APPEND: os.O_WRONLY | os.O_CREAT | os.O_APPEND,
    OpenMode.CREATE: os.O_WRONLY | os.O_CREAT | os.O_EXCL,
    OpenMode.READ_WRITE: os.O_RDWR,
}


class CompressionFormat(Enum):
    """Deflate-family framing formats understood by CompressionChannel."""

    DEFLATE = "deflate"
    """Raw deflate stream (RFC 1951), no header or checksum."""

    ZLIB = "zlib"
    """zlib framing (RFC 1950): 2-byte header, Adler-32 trailer."""

    GZIP = "gzip"
    """gzip framing (RFC 1952): 10-byte header, CRC-32 and size trailer."""

    AUTO = "auto"
    """Decompression only: detect zlib or gzip framing from the header."""

    @property
    def wbits(self) -> int:
        """
        The zlib ``wbits`` value selecting this framing.

        zlib encodes the framing in the window size argument:
          - 9..15: zlib header
          - -9..-15: raw deflate
          - 25..31: gzip header (16 + window)
          - 40..47: automatic header detection (32 + window)
        """
        return _WBITS[self]


_WBITS: dict[CompressionFormat, int] = {
    CompressionFormat.DEFLATE: -zlib.MAX_WBITS,
    CompressionFormat.ZLIB: zlib.MAX_WBITS,
    CompressionFormat.GZIP: 16 + zlib.MAX_WBITS,
    CompressionFormat.AUTO: 32 + zlib.MAX_WBITS,
}


class CompressionMode(Enum):
    """The single direction a CompressionChannel transforms data in."""

    COMPRESS = "compress"
    """Writes are compressed into the inner channel."""

    DECOMPRESS = "decompress"
    """Reads are decompressed from the inner channel."""


class BufferOptions(StrictBaseModel):
    """Options for BufferedChannel."""

    block_size: int = Field(default=DEFAULT_BLOCK_SIZE, gt=0)
    """Size of each block transferred to or from the inner channel."""


class TextOptions(StrictBaseModel):
    """Options for TextCodecChannel."""

    encoding: str = DEFAULT_ENCODING
    """Codec name; normalized to Python's canonical spelling."""

    errors: Literal["strict", "replace", "ignore"] = "strict"
    """How undecodable bytes and unencodable text are handled."""

    newline: Literal["\n", "\r\n"] = "\n"
    """Terminator appended by write_line."""

    @field_validator("encoding")
    @classmethod
    def _validate_encoding(cls, v: str) -> str:
        """Reject unknown codecs and codecs that are not text encodings."""
        try:
            info = codecs.lookup(v)
        except LookupError:
            raise ValueError(f"Unknown encoding: {v!r}") from None

        # Codecs like "hex" or "zlib" map bytes to bytes, not text.
        if not info._is_text_encoding:  # type: ignore[attr-defined]
            raise ValueError(f"{v!r} is not a text encoding")
        return info.name


class CompressionOptions(StrictBaseModel):
    """Options for CompressionChannel."""

    format: CompressionFormat = CompressionFormat.GZIP
    """Framing of the compressed stream."""

    mode: CompressionMode = CompressionMode.DECOMPRESS
    """Direction of the transformation."""

    level: int = Field(default=DEFAULT_COMPRESSION_LEVEL, ge=-1, le=9)
    """Compression level; -1 selects zlib's default. Ignored for decompression."""

    @model_validator(mode="after")
    def _auto_only_for_decompression(self) -> Self:
        """Header detection has no meaning when producing output."""
        if self.format is CompressionFormat.AUTO and self.mode is CompressionMode.COMPRESS:
            raise ValueError("CompressionFormat.AUTO can only be used for decompression")
        return self
