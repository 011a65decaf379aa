"""
Run a blocking channel from asyncio without blocking the event loop.

Every operation is submitted to a worker thread and the calling task
suspends until it finishes. By default each adapter owns a single-thread
executor, so operations reach the inner channel in exactly the order they
were awaited, even when one of them was cancelled.


CANCELLATION
------------
A blocking call that is already running on a thread cannot be interrupted.
When the awaiting task is cancelled, the adapter:

  1. Tries to cancel the queued work item. This succeeds when the worker has
     not picked it up yet, so the inner channel never sees the operation.
  2. Otherwise waits for the in-flight call to finish and discards its
     result, keeping the chain consistent for whoever closes it.

Either way the caller receives OperationCancelledError, a subclass of
asyncio.CancelledError, so the task still ends up cancelled.
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Callable
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import TypeVar

from streamstack.channels.base import ByteChannel
from streamstack.types.exceptions import OperationCancelledError

from .base import SuspendingByteChannel

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AsyncAdapter(SuspendingByteChannel):
    """Expose a blocking ByteChannel through the suspending interface."""

    def __init__(self, inner: ByteChannel, executor: Executor | None = None) -> None:
        """
        Wrap inner for use from coroutines.

        Args:
            inner: The blocking channel. Ownership passes to the adapter.
            executor: Where blocking calls run. When omitted the adapter
                creates, and on close shuts down, a single-thread executor.
        """
        super().__init__()
        self._inner = inner
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="streamstack-io"
        )

    @property
    def inner(self) -> ByteChannel:
        """The wrapped blocking channel."""
        return self._inner

    def readable(self) -> bool:
        return self._inner.readable()

    def writable(self) -> bool:
        return self._inner.writable()

    def seekable(self) -> bool:
        """Whether seek() and tell() are supported."""
        return self._inner.seekable()

    async def read_all(self) -> bytes:
        self._check_readable("read")
        return await self._run("read", self._inner.read_all)

    async def read_exactly(self, size: int) -> bytes:
        self._check_readable("read")
        return await self._run("read", self._inner.read_exactly, size)

    async def write_all(self, data: bytes) -> int:
        # One worker round trip for the whole payload.
        self._check_writable("write")
        return await self._run("write", self._inner.write_all, bytes(data))

    async def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        """Move the inner channel's position (seekable backends only)."""
        self._check_open("seek")
        return await self._run("seek", self._inner.seek, offset, whence)

    async def tell(self) -> int:
        """Return the inner channel's position (seekable backends only)."""
        self._check_open("tell")
        return await self._run("tell", self._inner.tell)

    async def _read(self, size: int) -> bytes:
        return await self._run("read", self._inner.read, size)

    async def _write(self, data: bytes | memoryview) -> int:
        # Copy: the caller may reuse its buffer while the worker still runs.
        return await self._run("write", self._inner.write, bytes(data))

    async def _flush(self) -> None:
        await self._run("flush", self._inner.flush)

    async def _close(self) -> None:
        try:
            await self._run("close", self._inner.close)
        finally:
            if self._owns_executor:
                self._executor.shutdown(wait=False)

    async def _run(self, operation: str, func: Callable[..., T], *args: object) -> T:
        """
        Run func(*args) on the executor and suspend until it completes.

        Errors raised by func propagate unchanged.
        """
        job = self._executor.submit(func, *args)
        future = asyncio.wrap_future(job)

        try:
            # Shielded so that cancelling the caller does not cancel the
            # wrapper future before we decide what to do with the job.
            return await asyncio.shield(future)
        except asyncio.CancelledError:
            if job.cancel():
                logger.debug("Cancelled queued %s on %r", operation, self._inner)
                raise OperationCancelledError(operation, completed=False) from None

            await _wait_discarding(future)
            logger.warning("Discarded result of cancelled %s on %r", operation, self._inner)
            raise OperationCancelledError(operation, completed=True) from None

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<AsyncAdapter {state} inner={self._inner!r}>"


async def _wait_discarding(future: asyncio.Future[object]) -> None:
    """Wait for an in-flight future, ignoring further cancellation requests."""
    while not future.done():
        try:
            await asyncio.shield(future)
        except asyncio.CancelledError:
            continue
        except Exception:
            break

    # Mark any failure as retrieved; the caller only reports cancellation.
    if not future.cancelled() and future.exception() is not None:
        logger.debug("Cancelled operation failed after the fact: %s", future.exception())
