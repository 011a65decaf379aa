"""
Deflate-family compression layer.

CompressionChannel transforms bytes in one direction only:

  COMPRESS:    write(data) -> compressor -> inner.write()
  DECOMPRESS:  inner.read() -> decompressor -> read()

The output is standard framing, readable by ``gzip``/``zlib`` and any other
general-purpose decompressor, and standard framed input decodes here.


FORMATS
-------
All three formats share the same deflate body (RFC 1951) and differ only in
their wrapper::

    DEFLATE   [deflate blocks]
    ZLIB      [2-byte header][deflate blocks][Adler-32]
    GZIP      [10-byte header][deflate blocks][CRC-32][input size mod 2^32]

The trailer is the "footer" written when the compressor is finalized. A
stream without its footer is truncated and never decodes silently.


WHY LOOP ON READ?
-----------------
A burst of compressed input yields a variable amount of output, sometimes
nothing at all (a header, or the middle of a long block). ``read()`` keeps
pulling compressed chunks until at least one decompressed byte exists or
the inner channel is exhausted. Output is bounded by the requested size;
input the decompressor could not use yet is kept for the next call.


MULTIPLE MEMBERS
----------------
gzip allows concatenated members (``cat a.gz b.gz``); they decode as one
stream. DEFLATE and ZLIB streams end at their end-of-stream marker, and any
bytes after it are corrupt data.
"""

from __future__ import annotations

import io
import logging
import zlib

from streamstack.config import DECOMPRESS_CHUNK_SIZE, DEFAULT_COMPRESSION_LEVEL
from streamstack.types.exceptions import CorruptDataError
from streamstack.types.options import CompressionFormat, CompressionMode, CompressionOptions

from .base import ByteChannel, ChannelDecorator

logger = logging.getLogger(__name__)


class CompressionChannel(ChannelDecorator):
    """Compress writes into, or decompress reads from, the inner channel."""

    def __init__(
        self,
        inner: ByteChannel,
        format: CompressionFormat = CompressionFormat.GZIP,
        mode: CompressionMode = CompressionMode.DECOMPRESS,
        *,
        level: int = DEFAULT_COMPRESSION_LEVEL,
        chunk_size: int = DECOMPRESS_CHUNK_SIZE,
    ) -> None:
        """
        Wrap inner with a compressor or decompressor.

        Args:
            inner: Channel holding (or receiving) the compressed stream.
            format: Framing of the compressed stream.
            mode: COMPRESS to write through, DECOMPRESS to read through.
            level: Compression level 0-9, or -1 for zlib's default.
            chunk_size: Compressed bytes requested from inner per read.

        Raises:
            pydantic.ValidationError: If an option is invalid.
            io.UnsupportedOperation: If inner cannot be used in this direction.
        """
        self._options = CompressionOptions(format=format, mode=mode, level=level)
        super().__init__(inner)
        self._chunk_size = chunk_size

        # Plain bytes in and compressed bytes out when compressing, the
        # reverse when decompressing.
        self.bytes_in = 0
        self.bytes_out = 0

        if mode is CompressionMode.COMPRESS:
            if not inner.writable():
                raise io.UnsupportedOperation("Compression needs a writable inner channel")
            self._compressor = zlib.compressobj(level, zlib.DEFLATED, format.wbits)
        else:
            if not inner.readable():
                raise io.UnsupportedOperation("Decompression needs a readable inner channel")
            self._decompressor = zlib.decompressobj(format.wbits)

            # Compressed input not yet accepted by the decompressor.
            self._input = b""

            # Decompressed output not yet returned to the caller.
            self._output = b""

            # True while the current member has received input but not ended.
            self._in_member = False
            self._members = 0
            self._stream_done = False
            self._failure: CorruptDataError | None = None

    @property
    def options(self) -> CompressionOptions:
        """The validated compression options."""
        return self._options

    @property
    def format(self) -> CompressionFormat:
        """Framing of the compressed stream."""
        return self._options.format

    @property
    def mode(self) -> CompressionMode:
        """Direction of the transformation."""
        return self._options.mode

    def readable(self) -> bool:
        return self.mode is CompressionMode.DECOMPRESS and self._inner.readable()

    def writable(self) -> bool:
        return self.mode is CompressionMode.COMPRESS and self._inner.writable()

    def seekable(self) -> bool:
        return False

    # ------------------------------------------------------------------
    # Decompression
    # ------------------------------------------------------------------

    def _read(self, size: int) -> bytes:
        if self._failure is not None:
            raise CorruptDataError(
                self.format.value, "channel is unusable after an earlier error"
            ) from self._failure

        try:
            return self._decompress(size)
        except zlib.error as e:
            raise self._fail(str(e)) from e

    def _decompress(self, size: int) -> bytes:
        while not self._output:
            if self._stream_done:
                self._check_trailing_data()
                return b""

            # Step 1: Make sure there is compressed input to feed.
            if not self._input:
                chunk = self._inner.read(self._chunk_size)
                if not chunk:
                    self._finish_input()
                    continue
                self._input = chunk
                self.bytes_in += len(chunk)

            # Step 2: Feed it, bounding the output by the requested size.
            #
            # Whatever the decompressor could not take because of the bound
            # comes back as unconsumed_tail and is fed on the next pass.
            self._in_member = True
            self._output = self._decompressor.decompress(self._input, size)
            self._input = self._decompressor.unconsumed_tail

            # Step 3: Handle the end of a member.
            if self._decompressor.eof:
                self._end_member()

        chunk, self._output = self._output[:size], self._output[size:]
        self.bytes_out += len(chunk)
        return chunk

    def _finish_input(self) -> None:
        """The inner channel is exhausted: drain the decompressor or fail."""
        if self._in_member:
            # Any output still buffered inside zlib comes out on flush.
            self._output += self._decompressor.flush()
            if not self._decompressor.eof:
                raise self._fail("stream is truncated")
            self._end_member()
        elif self._members == 0 and self.format is not CompressionFormat.GZIP:
            raise self._fail("stream is empty")

        self._stream_done = True

    def _end_member(self) -> None:
        """Account for a finished member and set up for what follows it."""
        self._members += 1
        self._in_member = False
        self._input = self._decompressor.unused_data + self._input
        logger.debug("Decoded %s member %d from %r", self.format.value, self._members, self._inner)

        if self.format in (CompressionFormat.GZIP, CompressionFormat.AUTO):
            self._decompressor = zlib.decompressobj(self.format.wbits)
        else:
            self._stream_done = True

    def _check_trailing_data(self) -> None:
        """Bytes after a DEFLATE or ZLIB end-of-stream marker are corrupt."""
        if self._input or self._inner.read(1):
            raise self._fail("trailing data after end of stream")

    def _fail(self, detail: str) -> CorruptDataError:
        """Record the channel as unusable and build the error to raise."""
        self._failure = CorruptDataError(self.format.value, detail)
        logger.debug("Corrupt input on %r: %s", self, detail)
        return self._failure

    # ------------------------------------------------------------------
    # Compression
    # ------------------------------------------------------------------

    def _write(self, data: bytes | memoryview) -> int:
        compressed = self._compressor.compress(data)
        self.bytes_in += len(data)
        self._emit(compressed)
        return len(data)

    def _flush(self) -> None:
        if self.mode is CompressionMode.COMPRESS:
            # A sync flush ends the current deflate block on a byte boundary,
            # so everything written so far can be decoded by the reader.
            self._emit(self._compressor.flush(zlib.Z_SYNC_FLUSH))
        self._inner.flush()

    def _finalize(self) -> None:
        if self.mode is not CompressionMode.COMPRESS:
            return
        self._emit(self._compressor.flush(zlib.Z_FINISH))
        logger.debug(
            "Finalized %s stream: %d bytes in, %d bytes out",
            self.format.value,
            self.bytes_in,
            self.bytes_out,
        )

    def _emit(self, compressed: bytes) -> None:
        if compressed:
            self._inner.write_all(compressed)
            self.bytes_out += len(compressed)
