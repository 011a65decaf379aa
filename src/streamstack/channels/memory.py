"""In-memory byte channel."""

from __future__ import annotations

import io

from .base import ByteChannel


class MemoryChannel(ByteChannel):
    """
    A seekable, readable and writable channel over an in-memory buffer.

    The position starts at 0, so reading back what was just written needs
    an explicit ``seek(0)``. The contents stay available from getvalue()
    after the channel is closed.
    """

    def __init__(self, initial: bytes = b"") -> None:
        """Create a channel whose buffer starts with initial."""
        super().__init__()
        self._buffer = io.BytesIO(initial)
        self._final: bytes | None = None

    def readable(self) -> bool:
        return True

    def writable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return True

    def getvalue(self) -> bytes:
        """Return the entire buffer, regardless of position."""
        if self._final is not None:
            return self._final
        return self._buffer.getvalue()

    def _read(self, size: int) -> bytes:
        return self._buffer.read(size)

    def _write(self, data: bytes | memoryview) -> int:
        return self._buffer.write(data)

    def _seek(self, offset: int, whence: int) -> int:
        return self._buffer.seek(offset, whence)

    def _tell(self) -> int:
        return self._buffer.tell()

    def _close(self) -> None:
        self._final = self._buffer.getvalue()
        self._buffer.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<MemoryChannel {state} size={len(self.getvalue())}>"
