"""
Process-wide defaults for streamstack channels.

Values are read from the environment once, at import, and validated eagerly
so that a bad setting fails loudly instead of surfacing mid-stream.
"""

import codecs
import os

from typing_extensions import Final

_BLOCK_SIZE_ENV: Final = "STREAMSTACK_BLOCK_SIZE"
_ENCODING_ENV: Final = "STREAMSTACK_ENCODING"

_raw_block_size = os.environ.get(_BLOCK_SIZE_ENV, "8192")
if not _raw_block_size.isdigit() or int(_raw_block_size) <= 0:
    raise ValueError(
        f"Invalid {_BLOCK_SIZE_ENV} environment variable: '{_raw_block_size}'. "
        f"Expected a positive integer."
    )

DEFAULT_BLOCK_SIZE: Final[int] = int(_raw_block_size)
"""Block size used by BufferedChannel when none is given (8 KiB unless overridden)."""

DEFAULT_ENCODING: Final[str] = os.environ.get(_ENCODING_ENV, "utf-8").lower()
"""Encoding used by TextCodecChannel when none is given."""

try:
    codecs.lookup(DEFAULT_ENCODING)
except LookupError:
    raise ValueError(
        f"Invalid {_ENCODING_ENV} environment variable: '{DEFAULT_ENCODING}'. "
        f"Not a known codec."
    ) from None

DEFAULT_COMPRESSION_LEVEL: Final[int] = -1
"""zlib's default trade-off between speed and ratio (currently level 6)."""

DECOMPRESS_CHUNK_SIZE: Final[int] = 16384
"""Compressed bytes requested from the inner channel per decompressor feed."""
