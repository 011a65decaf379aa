"""
Blocking channel contracts.

A channel is a stream with an explicit lifetime. Byte channels are readable
and/or writable byte streams: leaves talk to a backend (memory, file
descriptor, socket), decorators wrap exactly one inner channel and add one
capability. TextCodecChannel shares the lifetime rules but speaks text.


READ CONTRACT
-------------
``read(size)`` returns between 1 and ``size`` bytes, or ``b""`` when no more
bytes will ever arrive (end-of-stream). Short reads are normal: callers
needing an exact amount use ``read_exactly()``. ``read(0)`` returns ``b""``
without touching the backend.


WRITE CONTRACT
--------------
``write(data)`` returns the number of bytes accepted, which may be fewer
than ``len(data)`` (sockets). ``write_all(data)`` loops until everything is
accepted.


LIFETIME
--------
``close()`` is idempotent. A decorator closes its inner channel exactly once,
even when its own flush step fails; the flush error is re-raised after the
inner resource is released. Every other operation on a closed channel
raises ChannelClosedError. All channels are context managers::

    with BufferedChannel(FileChannel(path, OpenMode.WRITE)) as channel:
        channel.write_all(payload)
"""

from __future__ import annotations

import io
import logging
import os
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from types import TracebackType

from typing_extensions import Self

from streamstack.config import DEFAULT_BLOCK_SIZE
from streamstack.types.exceptions import (
    ChannelClosedError,
    ChannelEOFError,
    ChannelError,
    ChannelIOError,
)

logger = logging.getLogger(__name__)


@contextmanager
def backend_errors(operation: str) -> Iterator[None]:
    """
    Translate backend OSErrors into ChannelIOError.

    io.UnsupportedOperation is an OSError too, but it signals a capability
    mismatch rather than a backend fault, so it passes through unchanged.
    """
    try:
        yield
    except io.UnsupportedOperation:
        raise
    except OSError as e:
        detail = e.strerror or str(e) or type(e).__name__
        raise ChannelIOError(operation, detail) from e


def close_wrapped(channel: Channel, finalize: Callable[[], None], inner: Channel) -> None:
    """
    Finalize channel, then close inner no matter what.

    A finalize failure is logged and re-raised once inner is released.
    """
    try:
        finalize()
    except ChannelError as e:
        logger.warning("Flush failed while closing %r: %s", channel, e)
        raise
    finally:
        inner.close()


class Channel(ABC):
    """
    Lifetime shared by every channel: open until closed, closed exactly once.

    Subclasses implement ``_close()`` and optionally ``_flush()``.
    """

    def __init__(self) -> None:
        """Initialize an open channel."""
        self._closed = False

    @property
    def closed(self) -> bool:
        """True once close() has been called."""
        return self._closed

    def flush(self) -> None:
        """Push any buffered output towards the backend."""
        self._check_open("flush")
        self._flush()

    def close(self) -> None:
        """
        Release the channel's resources.

        Safe to call more than once. The channel counts as closed even if
        releasing failed, so a failed close is never retried implicitly.
        """
        if self._closed:
            return
        try:
            self._close()
        finally:
            self._closed = True
            logger.debug("Closed %r", self)

    def _flush(self) -> None:
        pass

    @abstractmethod
    def _close(self) -> None:
        """Release the backend resource. Called at most once."""

    def _check_open(self, operation: str) -> None:
        if self._closed:
            raise ChannelClosedError(type(self).__name__, operation)

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<{type(self).__name__} {state}>"


class ByteChannel(Channel):
    """
    Base class for blocking byte channels.

    Subclasses implement the underscored hooks; the public methods enforce
    the lifetime and capability rules shared by every byte channel.
    """

    # ------------------------------------------------------------------
    # Capabilities
    # ------------------------------------------------------------------

    def readable(self) -> bool:
        """Whether read() is supported."""
        return False

    def writable(self) -> bool:
        """Whether write() is supported."""
        return False

    def seekable(self) -> bool:
        """Whether seek() and tell() are supported."""
        return False

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def read(self, size: int | None = -1) -> bytes:
        """
        Read up to size bytes.

        Args:
            size: Maximum number of bytes to return. Negative or None reads
                to end-of-stream.

        Returns:
            Between 1 and size bytes, or b"" at end-of-stream.
        """
        self._check_readable("read")
        if size is None or size < 0:
            return self.read_all()
        if size == 0:
            return b""
        return self._read(size)

    def read_all(self) -> bytes:
        """Read until end-of-stream and return everything."""
        self._check_readable("read")
        chunks = []
        while chunk := self._read(DEFAULT_BLOCK_SIZE):
            chunks.append(chunk)
        return b"".join(chunks)

    def read_exactly(self, size: int) -> bytes:
        """
        Read exactly size bytes.

        Raises:
            ChannelEOFError: If the stream ends first.
        """
        self._check_readable("read")
        result = bytearray()
        while len(result) < size:
            chunk = self._read(size - len(result))
            if not chunk:
                raise ChannelEOFError(size, len(result))
            result.extend(chunk)
        return bytes(result)

    def write(self, data: bytes) -> int:
        """
        Write data, returning how many bytes were accepted.

        Fewer than len(data) bytes may be accepted; see write_all().
        """
        self._check_writable("write")
        if not data:
            return 0
        return self._write(data)

    def write_all(self, data: bytes) -> int:
        """
        Write every byte of data, looping over partial writes.

        Returns:
            len(data).

        Raises:
            ChannelIOError: If the backend stops accepting bytes.
        """
        self._check_writable("write")
        view = memoryview(data)
        while view:
            written = self._write(view)
            if written <= 0:
                raise ChannelIOError("write", "backend accepted no bytes")
            view = view[written:]
        return len(data)

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        """
        Move the stream position.

        Only seekable backends support this; network channels do not.

        Returns:
            The new absolute position.
        """
        self._check_seekable("seek")
        return self._seek(offset, whence)

    def tell(self) -> int:
        """Return the current absolute position."""
        self._check_seekable("tell")
        return self._tell()

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def _read(self, size: int) -> bytes:
        raise io.UnsupportedOperation(f"{type(self).__name__} is not readable")

    def _write(self, data: bytes | memoryview) -> int:
        raise io.UnsupportedOperation(f"{type(self).__name__} is not writable")

    def _seek(self, offset: int, whence: int) -> int:
        raise io.UnsupportedOperation(f"{type(self).__name__} is not seekable")

    def _tell(self) -> int:
        raise io.UnsupportedOperation(f"{type(self).__name__} is not seekable")

    # ------------------------------------------------------------------
    # Checks
    # ------------------------------------------------------------------

    def _check_readable(self, operation: str) -> None:
        self._check_open(operation)
        if not self.readable():
            raise io.UnsupportedOperation(f"{type(self).__name__} is not readable")

    def _check_writable(self, operation: str) -> None:
        self._check_open(operation)
        if not self.writable():
            raise io.UnsupportedOperation(f"{type(self).__name__} is not writable")

    def _check_seekable(self, operation: str) -> None:
        self._check_open(operation)
        if not self.seekable():
            raise io.UnsupportedOperation(f"{type(self).__name__} is not seekable")


class ChannelDecorator(ByteChannel):
    """
    A byte channel that owns exactly one inner channel.

    Capabilities default to the inner channel's. Subclasses put any pending
    output into ``_finalize()``; closing always reaches the inner channel.
    """

    def __init__(self, inner: ByteChannel) -> None:
        """Take ownership of inner."""
        if inner.closed:
            raise ChannelClosedError(type(inner).__name__, "wrap")
        super().__init__()
        self._inner = inner

    @property
    def inner(self) -> ByteChannel:
        """The wrapped channel."""
        return self._inner

    def readable(self) -> bool:
        return self._inner.readable()

    def writable(self) -> bool:
        return self._inner.writable()

    def seekable(self) -> bool:
        return self._inner.seekable()

    def _flush(self) -> None:
        self._inner.flush()

    def _finalize(self) -> None:
        """Emit pending output before the inner channel is closed."""

    def _close(self) -> None:
        close_wrapped(self, self._finalize, self._inner)

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<{type(self).__name__} {state} inner={self._inner!r}>"
