"""File descriptor backed byte channel."""

from __future__ import annotations

import logging
import os

from streamstack.types.options import OpenMode

from .base import ByteChannel, backend_errors

logger = logging.getLogger(__name__)


class FileChannel(ByteChannel):
    """
    A channel over a raw operating system file descriptor.

    No buffering happens here: every read() and write() is one system call.
    Wrap in a BufferedChannel for small transfers.
    """

    def __init__(self, path: str | os.PathLike[str], mode: OpenMode = OpenMode.READ) -> None:
        """
        Open path according to mode.

        Raises:
            ChannelIOError: If the file cannot be opened (missing, exists
                for CREATE, permission denied).
        """
        super().__init__()
        self._path = os.fspath(path)
        self._mode = mode
        with backend_errors("open"):
            self._fd = os.open(self._path, mode.flags, 0o666)
        logger.debug("Opened %s with mode %s (fd=%d)", self._path, mode.name, self._fd)

    @property
    def path(self) -> str:
        """The path the channel was opened with."""
        return self._path

    @property
    def mode(self) -> OpenMode:
        """The mode the file was opened with."""
        return self._mode

    def fileno(self) -> int:
        """Return the underlying file descriptor."""
        self._check_open("fileno")
        return self._fd

    def readable(self) -> bool:
        return self._mode.readable

    def writable(self) -> bool:
        return self._mode.writable

    def seekable(self) -> bool:
        return True

    def _read(self, size: int) -> bytes:
        with backend_errors("read"):
            return os.read(self._fd, size)

    def _write(self, data: bytes | memoryview) -> int:
        with backend_errors("write"):
            return os.write(self._fd, data)

    def _seek(self, offset: int, whence: int) -> int:
        with backend_errors("seek"):
            return os.lseek(self._fd, offset, whence)

    def _tell(self) -> int:
        with backend_errors("tell"):
            return os.lseek(self._fd, 0, os.SEEK_CUR)

    def _close(self) -> None:
        with backend_errors("close"):
            os.close(self._fd)

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<FileChannel {state} path={self._path!r} mode={self._mode.name}>"
