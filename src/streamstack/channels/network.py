"""Network socket backed byte channel."""

from __future__ import annotations

import errno
import logging
import socket

from .base import ByteChannel, backend_errors

logger = logging.getLogger(__name__)


class SocketChannel(ByteChannel):
    """
    A channel over a connected stream socket.

    Sockets have no position, so seek() and tell() are unsupported.
    write() returns however many bytes the kernel accepted; use write_all()
    to send a whole payload.
    """

    def __init__(self, sock: socket.socket) -> None:
        """Take ownership of an already connected socket."""
        super().__init__()
        self._sock = sock
        self._write_finished = False

    def readable(self) -> bool:
        return True

    def writable(self) -> bool:
        return not self._write_finished

    def finish_write(self) -> None:
        """
        Half-close the connection: signal end-of-stream to the peer.

        Reads remain possible until the peer closes its side.
        """
        self._check_open("finish_write")
        if self._write_finished:
            return
        with backend_errors("shutdown"):
            self._sock.shutdown(socket.SHUT_WR)
        self._write_finished = True
        logger.debug("Half-closed %r for writing", self)

    def _read(self, size: int) -> bytes:
        with backend_errors("read"):
            return self._sock.recv(size)

    def _write(self, data: bytes | memoryview) -> int:
        with backend_errors("write"):
            return self._sock.send(data)

    def _close(self) -> None:
        try:
            with backend_errors("close"):
                try:
                    self._sock.shutdown(socket.SHUT_RDWR)
                except OSError as e:
                    # The peer may already have torn the connection down.
                    if e.errno not in (errno.ENOTCONN, errno.ECONNRESET, errno.EPIPE):
                        raise
        finally:
            self._sock.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<SocketChannel {state}>"
