"""Adapter exposing a Python binary file object as a channel."""

from __future__ import annotations

from typing import BinaryIO

from streamstack.types.exceptions import ChannelIOError

from .base import ByteChannel, backend_errors


class IOChannel(ByteChannel):
    """
    Wrap any binary file object (``open(..., "rb")``, ``sys.stdin.buffer``,
    ``io.BytesIO``) in the channel contract.

    Capabilities mirror the wrapped object. With ``close_inner=False`` the
    object is flushed but left open on close, which suits the process's
    standard streams.
    """

    def __init__(self, fileobj: BinaryIO, *, close_inner: bool = True) -> None:
        super().__init__()
        self._fileobj = fileobj
        self._close_inner = close_inner

    def readable(self) -> bool:
        return self._fileobj.readable()

    def writable(self) -> bool:
        return self._fileobj.writable()

    def seekable(self) -> bool:
        return self._fileobj.seekable()

    def _read(self, size: int) -> bytes:
        # read1() returns after at most one backend read, so pipes and
        # terminals hand over data as it arrives instead of filling size.
        read = getattr(self._fileobj, "read1", self._fileobj.read)
        with backend_errors("read"):
            data = read(size)
        # Non-blocking raw files return None when no data is ready; b"" is
        # reserved for end-of-stream.
        if data is None:
            raise ChannelIOError("read", "file object is non-blocking and has no data ready")
        return data

    def _write(self, data: bytes | memoryview) -> int:
        with backend_errors("write"):
            written = self._fileobj.write(data)
        return written if written is not None else 0

    def _flush(self) -> None:
        with backend_errors("flush"):
            self._fileobj.flush()

    def _seek(self, offset: int, whence: int) -> int:
        with backend_errors("seek"):
            return self._fileobj.seek(offset, whence)

    def _tell(self) -> int:
        with backend_errors("tell"):
            return self._fileobj.tell()

    def _close(self) -> None:
        with backend_errors("close"):
            if self._close_inner:
                self._fileobj.close()
            elif self._fileobj.writable():
                self._fileobj.flush()
