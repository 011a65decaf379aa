"""Deadline decorator for suspending channels."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

from streamstack.types.exceptions import ChannelTimeoutError

from .base import SuspendingByteChannel

T = TypeVar("T")


class TimeoutChannel(SuspendingByteChannel):
    """
    Race every read, write, and flush of the inner channel against a timer.

    On expiry the inner operation is cancelled and ChannelTimeoutError is
    raised. Like any other channel error it is terminal: the caller should
    close the chain rather than retry on it. close() is never timed, so the
    inner resource is always released.
    """

    def __init__(self, inner: SuspendingByteChannel, timeout: float) -> None:
        """
        Args:
            inner: The channel to guard. Ownership passes here.
            timeout: Seconds each operation may take.

        Raises:
            ValueError: If timeout is not positive.
        """
        if timeout <= 0:
            raise ValueError(f"Timeout must be positive, got {timeout}")
        super().__init__()
        self._inner = inner
        self._timeout = timeout

    @property
    def inner(self) -> SuspendingByteChannel:
        """The guarded channel."""
        return self._inner

    @property
    def timeout(self) -> float:
        """Seconds each operation may take."""
        return self._timeout

    def readable(self) -> bool:
        return self._inner.readable()

    def writable(self) -> bool:
        return self._inner.writable()

    async def _read(self, size: int) -> bytes:
        return await self._deadline("read", self._inner.read(size))

    async def _write(self, data: bytes | memoryview) -> int:
        return await self._deadline("write", self._inner.write(bytes(data)))

    async def _flush(self) -> None:
        await self._deadline("flush", self._inner.flush())

    async def _close(self) -> None:
        await self._inner.close()

    async def _deadline(self, operation: str, awaitable: Awaitable[T]) -> T:
        deadline = asyncio.timeout(self._timeout)
        try:
            async with deadline:
                return await awaitable
        except TimeoutError:
            raise ChannelTimeoutError(operation, self._timeout) from None
        except asyncio.CancelledError:
            # An AsyncAdapter reports the expiry as OperationCancelledError,
            # which older interpreters do not convert to TimeoutError.
            if deadline.expired():
                raise ChannelTimeoutError(operation, self._timeout) from None
            raise

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<TimeoutChannel {state} timeout={self._timeout}s inner={self._inner!r}>"
