"""Instrumented channels shared by the streamstack tests."""

from __future__ import annotations

import threading

from streamstack.channels import MemoryChannel
from streamstack.types import ChannelIOError


class RecordingChannel(MemoryChannel):
    """
    MemoryChannel that records every backend call.

    - ``reads`` holds the size of every backend read request.
    - ``writes`` holds the bytes accepted by every backend write.
    - ``max_read``/``max_write`` cap how much one call transfers, to force
      short reads and partial writes.
    - ``fail_reads``/``fail_writes`` make the backend raise ChannelIOError.
    """

    def __init__(
        self,
        initial: bytes = b"",
        *,
        max_read: int | None = None,
        max_write: int | None = None,
    ) -> None:
        super().__init__(initial)
        self.max_read = max_read
        self.max_write = max_write
        self.fail_reads = False
        self.fail_writes = False
        self.reads: list[int] = []
        self.writes: list[bytes] = []
        self.close_calls = 0

    def _read(self, size: int) -> bytes:
        self.reads.append(size)
        if self.fail_reads:
            raise ChannelIOError("read", "connection reset")
        if self.max_read is not None:
            size = min(size, self.max_read)
        return super()._read(size)

    def _write(self, data: bytes | memoryview) -> int:
        if self.fail_writes:
            raise ChannelIOError("write", "disk full")
        if self.max_write is not None:
            data = data[: self.max_write]
        if not data:
            return 0
        self.writes.append(bytes(data))
        return super()._write(data)

    def _close(self) -> None:
        self.close_calls += 1
        super()._close()


class ReadOnlyChannel(MemoryChannel):
    """MemoryChannel that refuses writes."""

    def writable(self) -> bool:
        return False


class GatedChannel(MemoryChannel):
    """
    MemoryChannel whose reads block on a gate, for cancellation tests.

    ``started`` is set when a read enters the backend; the read then waits
    for ``release`` before completing.
    """

    def __init__(self, initial: bytes = b"") -> None:
        super().__init__(initial)
        self.started = threading.Event()
        self.release = threading.Event()
        self.read_calls = 0
        self.thread_ids: list[int] = []

    def _read(self, size: int) -> bytes:
        self.thread_ids.append(threading.get_ident())
        self.started.set()
        self.release.wait(timeout=5)
        self.read_calls += 1
        return super()._read(size)
