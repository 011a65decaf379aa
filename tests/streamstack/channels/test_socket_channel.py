"""Tests for the socket channel, over connected socket pairs."""

from __future__ import annotations

import io
import socket
from collections.abc import Iterator

import pytest

from streamstack.channels import BufferedChannel, SocketChannel


@pytest.fixture
def pair() -> Iterator[tuple[SocketChannel, SocketChannel]]:
    """A connected pair of socket channels, closed after the test."""
    left, right = socket.socketpair()
    a, b = SocketChannel(left), SocketChannel(right)
    yield a, b
    a.close()
    b.close()


class TestSocketChannel:
    """Tests for SocketChannel."""

    def test_exchange(self, pair: tuple[SocketChannel, SocketChannel]) -> None:
        """Bytes written on one end are read on the other."""
        a, b = pair
        a.write_all(b"ping")
        assert b.read_exactly(4) == b"ping"
        b.write_all(b"pong")
        assert a.read_exactly(4) == b"pong"

    def test_finish_write_signals_end_of_stream(
        self, pair: tuple[SocketChannel, SocketChannel]
    ) -> None:
        """A half-close lets the peer read to end-of-stream."""
        a, b = pair
        a.write_all(b"request")
        a.finish_write()

        assert not a.writable()
        assert b.read_all() == b"request"

        # The other direction still works.
        b.write_all(b"reply")
        assert a.read_exactly(5) == b"reply"

    def test_peer_close_is_end_of_stream(self, pair: tuple[SocketChannel, SocketChannel]) -> None:
        """Reads return b"" once the peer has gone."""
        a, b = pair
        b.close()
        assert a.read(10) == b""

    def test_not_seekable(self, pair: tuple[SocketChannel, SocketChannel]) -> None:
        """Sockets have no position."""
        a, _ = pair
        assert not a.seekable()
        with pytest.raises(io.UnsupportedOperation):
            a.tell()

    def test_close_after_peer_close(self, pair: tuple[SocketChannel, SocketChannel]) -> None:
        """Closing a socket whose peer is gone does not raise."""
        a, b = pair
        b.close()
        a.close()
        a.close()
        assert a.closed

    def test_buffered_request_response(self, pair: tuple[SocketChannel, SocketChannel]) -> None:
        """A buffered client flushes its request before waiting for a reply."""
        a, b = pair
        client = BufferedChannel(a, block_size=64)
        client.write(b"GET")
        assert client.buffered_write_bytes == 3

        client.flush()
        assert b.read_exactly(3) == b"GET"

        b.write_all(b"200 OK")
        assert client.read_exactly(6) == b"200 OK"
        client.close()
        assert a.closed
