"""
Block buffering decorator.

Small reads and writes against a raw backend cost one system call each.
BufferedChannel turns them into fixed-size block transfers:

  READ:  refill a block from the inner channel only when the buffer is
         empty, then serve callers from memory.
  WRITE: accumulate into a block, hand exactly one full block to the
         inner channel every time it fills.

The inner channel only ever sees reads and writes of ``block_size`` bytes,
except for the final partial block on flush, and reads larger than a
block, which bypass the buffer to avoid a pointless copy.


POSITION
--------
Buffered bytes make the inner position run ahead (reads) or behind
(writes) of the caller's view. Pending writes are flushed before any read,
seek, or tell. On seekable backends, unread buffered bytes are given back
with a relative seek before writing, so data lands where the caller expects.
"""

from __future__ import annotations

import logging
import os

from streamstack.types.options import BufferOptions

from .base import ByteChannel, ChannelDecorator

logger = logging.getLogger(__name__)


class BufferedChannel(ChannelDecorator):
    """Amortize small transfers into block-sized inner reads and writes."""

    def __init__(self, inner: ByteChannel, block_size: int | None = None) -> None:
        """
        Wrap inner with a block buffer.

        Args:
            inner: The channel to buffer. Ownership passes to this channel.
            block_size: Bytes per inner transfer. Defaults to
                ``streamstack.config.DEFAULT_BLOCK_SIZE``.

        Raises:
            pydantic.ValidationError: If block_size is not a positive integer.
        """
        self._options = BufferOptions() if block_size is None else BufferOptions(block_size=block_size)
        super().__init__(inner)

        # Read region: a block fetched from the inner channel and a cursor.
        #
        # The valid length is len(self._read_buf) and never exceeds the block
        # size because each refill asks the inner channel for one block.
        self._read_buf = b""
        self._read_pos = 0

        # Write region: bytes accepted but not yet handed to the inner channel.
        self._write_buf = bytearray()

    @property
    def options(self) -> BufferOptions:
        """The validated buffer options."""
        return self._options

    @property
    def block_size(self) -> int:
        """Bytes per inner transfer."""
        return self._options.block_size

    @property
    def buffered_read_bytes(self) -> int:
        """Bytes fetched from the inner channel but not yet returned."""
        return len(self._read_buf) - self._read_pos

    @property
    def buffered_write_bytes(self) -> int:
        """Bytes accepted but not yet written to the inner channel."""
        return len(self._write_buf)

    def _read(self, size: int) -> bytes:
        self._flush_writes()

        if not self.buffered_read_bytes:
            # Large requests go straight through; buffering them would only
            # add a copy.
            if size > self.block_size:
                return self._inner.read(size)

            self._read_buf = self._inner.read(self.block_size)
            self._read_pos = 0
            if not self._read_buf:
                return b""

        end = min(self._read_pos + size, len(self._read_buf))
        chunk = self._read_buf[self._read_pos : end]
        self._read_pos = end

        if self._read_pos == len(self._read_buf):
            self._read_buf = b""
            self._read_pos = 0
        return chunk

    def _write(self, data: bytes | memoryview) -> int:
        if self.buffered_read_bytes and self._inner.seekable():
            self._discard_read_buffer()

        view = memoryview(data)
        total = len(view)
        while view:
            space = self.block_size - len(self._write_buf)
            self._write_buf += view[:space]
            view = view[space:]

            # A full block goes out immediately, as exactly one inner write.
            if len(self._write_buf) == self.block_size:
                self._flush_writes()
        return total

    def _flush(self) -> None:
        self._flush_writes()
        self._inner.flush()

    def _seek(self, offset: int, whence: int) -> int:
        self._flush_writes()
        if whence == os.SEEK_CUR:
            # The caller's position trails the inner one by the unread bytes.
            offset -= self.buffered_read_bytes
        self._read_buf = b""
        self._read_pos = 0
        return self._inner.seek(offset, whence)

    def _tell(self) -> int:
        return self._inner.tell() - self.buffered_read_bytes + self.buffered_write_bytes

    def _finalize(self) -> None:
        self._flush_writes()

    def _flush_writes(self) -> None:
        """Hand any pending write bytes to the inner channel."""
        if not self._write_buf:
            return
        pending = bytes(self._write_buf)
        self._write_buf.clear()
        self._inner.write_all(pending)
        logger.debug("Flushed %d buffered bytes to %r", len(pending), self._inner)

    def _discard_read_buffer(self) -> None:
        """Drop unread bytes and rewind the inner channel over them."""
        unread = self.buffered_read_bytes
        self._read_buf = b""
        self._read_pos = 0
        self._inner.seek(-unread, os.SEEK_CUR)
