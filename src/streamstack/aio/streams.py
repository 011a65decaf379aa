"""Suspending channel over asyncio streams."""

from __future__ import annotations

import asyncio
import logging

from streamstack.channels.base import backend_errors

from .base import SuspendingByteChannel

logger = logging.getLogger(__name__)


class AsyncStreamChannel(SuspendingByteChannel):
    """
    A network leaf built on an ``asyncio.StreamReader``/``StreamWriter`` pair.

    Either side may be None for a one-directional channel. Connection setup
    stays with the caller::

        reader, writer = await asyncio.open_connection(host, port)
        async with AsyncStreamChannel(reader, writer) as channel:
            await channel.write_all(request)
            response = await channel.read_all()

    Unlike the blocking SocketChannel, cancellation is native here: a
    cancelled read or write simply stops waiting.
    """

    def __init__(
        self,
        reader: asyncio.StreamReader | None,
        writer: asyncio.StreamWriter | None,
    ) -> None:
        super().__init__()
        self._reader = reader
        self._writer = writer
        self._write_finished = False

    def readable(self) -> bool:
        return self._reader is not None

    def writable(self) -> bool:
        return self._writer is not None and not self._write_finished

    async def finish_write(self) -> None:
        """Half-close: send end-of-stream to the peer, keep reading."""
        self._check_writable("finish_write")
        assert self._writer is not None
        with backend_errors("shutdown"):
            if self._writer.can_write_eof():
                self._writer.write_eof()
            await self._writer.drain()
        self._write_finished = True
        logger.debug("Half-closed %r for writing", self)

    async def _read(self, size: int) -> bytes:
        assert self._reader is not None
        with backend_errors("read"):
            return await self._reader.read(size)

    async def _write(self, data: bytes | memoryview) -> int:
        # StreamWriter buffers everything it is given; drain() applies
        # backpressure until the transport has room again.
        assert self._writer is not None
        with backend_errors("write"):
            self._writer.write(data)
            await self._writer.drain()
        return len(data)

    async def _flush(self) -> None:
        if self._writer is not None and not self._write_finished:
            with backend_errors("flush"):
                await self._writer.drain()

    async def _close(self) -> None:
        if self._writer is None:
            return
        self._writer.close()
        with backend_errors("close"):
            await self._writer.wait_closed()
