"""Tests for the in-memory channel."""

from __future__ import annotations

import os

from streamstack.channels import MemoryChannel


class TestMemoryChannel:
    """Tests for MemoryChannel."""

    def test_reads_initial_contents(self) -> None:
        """A channel starts positioned at the beginning of its initial bytes."""
        channel = MemoryChannel(b"hello")
        assert channel.read(3) == b"hel"
        assert channel.read_all() == b"lo"

    def test_write_then_seek_back_to_read(self) -> None:
        """Written bytes are readable after rewinding."""
        channel = MemoryChannel()
        channel.write_all(b"hello")
        assert channel.read(5) == b""
        assert channel.seek(0) == 0
        assert channel.read(5) == b"hello"

    def test_seek_whence(self) -> None:
        """Relative and end-relative seeks report the absolute position."""
        channel = MemoryChannel(b"0123456789")
        channel.seek(4)
        assert channel.seek(2, os.SEEK_CUR) == 6
        assert channel.seek(-1, os.SEEK_END) == 9
        assert channel.read(1) == b"9"
        assert channel.tell() == 10

    def test_overwrite_in_place(self) -> None:
        """Writing after a seek replaces existing bytes."""
        channel = MemoryChannel(b"abcdef")
        channel.seek(2)
        channel.write_all(b"XY")
        assert channel.getvalue() == b"abXYef"

    def test_getvalue_after_close(self) -> None:
        """Contents stay available once the channel is closed."""
        channel = MemoryChannel()
        channel.write_all(b"kept")
        channel.close()
        assert channel.getvalue() == b"kept"

    def test_capabilities(self) -> None:
        """Memory channels support everything."""
        channel = MemoryChannel()
        assert channel.readable()
        assert channel.writable()
        assert channel.seekable()

    def test_repr(self) -> None:
        """repr shows state and size."""
        channel = MemoryChannel(b"abc")
        assert repr(channel) == "<MemoryChannel open size=3>"
        channel.close()
        assert repr(channel) == "<MemoryChannel closed size=3>"
