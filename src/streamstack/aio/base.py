"""
Suspending channel contract.

The asyncio counterpart of ``streamstack.channels.base.ByteChannel``. It is a
separate capability set rather than a flag on the blocking one, so a call
site always knows whether it may block the thread or must be awaited.

Read, write, and lifetime rules are the same as for blocking channels:
``read(size)`` returns 1..size bytes or ``b""`` at end-of-stream, ``write``
may be partial, ``close()`` is idempotent, and operations on a closed
channel raise ChannelClosedError.
"""

from __future__ import annotations

import io
import logging
from abc import ABC, abstractmethod
from types import TracebackType

from typing_extensions import Self

from streamstack.config import DEFAULT_BLOCK_SIZE
from streamstack.types.exceptions import ChannelClosedError, ChannelEOFError, ChannelIOError

logger = logging.getLogger(__name__)


class SuspendingByteChannel(ABC):
    """Base class for byte channels whose operations are awaited."""

    def __init__(self) -> None:
        """Initialize an open channel."""
        self._closed = False

    @property
    def closed(self) -> bool:
        """True once close() has been called."""
        return self._closed

    def readable(self) -> bool:
        """Whether read() is supported."""
        return False

    def writable(self) -> bool:
        """Whether write() is supported."""
        return False

    async def read(self, size: int | None = -1) -> bytes:
        """
        Read up to size bytes, suspending until some are available.

        Negative or None reads to end-of-stream; 0 returns b"" at once.
        """
        self._check_readable("read")
        if size is None or size < 0:
            return await self.read_all()
        if size == 0:
            return b""
        return await self._read(size)

    async def read_all(self) -> bytes:
        """Read until end-of-stream."""
        self._check_readable("read")
        chunks = []
        while chunk := await self._read(DEFAULT_BLOCK_SIZE):
            chunks.append(chunk)
        return b"".join(chunks)

    async def read_exactly(self, size: int) -> bytes:
        """
        Read exactly size bytes.

        Raises:
            ChannelEOFError: If the stream ends first.
        """
        self._check_readable("read")
        result = bytearray()
        while len(result) < size:
            chunk = await self._read(size - len(result))
            if not chunk:
                raise ChannelEOFError(size, len(result))
            result.extend(chunk)
        return bytes(result)

    async def write(self, data: bytes) -> int:
        """Write data, returning how many bytes were accepted."""
        self._check_writable("write")
        if not data:
            return 0
        return await self._write(data)

    async def write_all(self, data: bytes) -> int:
        """Write every byte of data, looping over partial writes."""
        self._check_writable("write")
        view = memoryview(data)
        while view:
            written = await self._write(view)
            if written <= 0:
                raise ChannelIOError("write", "backend accepted no bytes")
            view = view[written:]
        return len(data)

    async def flush(self) -> None:
        """Push any buffered bytes towards the backend."""
        self._check_open("flush")
        await self._flush()

    async def close(self) -> None:
        """Release the channel's resources. Safe to call more than once."""
        if self._closed:
            return
        try:
            await self._close()
        finally:
            self._closed = True
            logger.debug("Closed %r", self)

    async def _read(self, size: int) -> bytes:
        raise io.UnsupportedOperation(f"{type(self).__name__} is not readable")

    async def _write(self, data: bytes | memoryview) -> int:
        raise io.UnsupportedOperation(f"{type(self).__name__} is not writable")

    async def _flush(self) -> None:
        pass

    @abstractmethod
    async def _close(self) -> None:
        """Release the backend resource. Called at most once."""

    def _check_open(self, operation: str) -> None:
        if self._closed:
            raise ChannelClosedError(type(self).__name__, operation)

    def _check_readable(self, operation: str) -> None:
        self._check_open(operation)
        if not self.readable():
            raise io.UnsupportedOperation(f"{type(self).__name__} is not readable")

    def _check_writable(self, operation: str) -> None:
        self._check_open(operation)
        if not self.writable():
            raise io.UnsupportedOperation(f"{type(self).__name__} is not writable")

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<{type(self).__name__} {state}>"
