"""Tests for the contract shared by every byte channel."""

from __future__ import annotations

import io
import logging

import pytest

from streamstack.channels import BufferedChannel, MemoryChannel
from streamstack.types import ChannelClosedError, ChannelEOFError, ChannelIOError
from tests.streamstack.helpers import RecordingChannel


class TestReadContract:
    """Tests for read sizes and end-of-stream."""

    def test_read_zero_does_not_touch_the_backend(self) -> None:
        """read(0) answers immediately with no bytes."""
        inner = RecordingChannel(b"abc")
        channel = BufferedChannel(inner, block_size=4)

        assert channel.read(0) == b""
        assert inner.reads == []

    def test_end_of_stream_is_sticky(self) -> None:
        """Once exhausted, every read returns b""."""
        channel = MemoryChannel(b"ab")
        assert channel.read(10) == b"ab"
        assert channel.read(10) == b""
        assert channel.read(10) == b""

    @pytest.mark.parametrize("size", [-1, None])
    def test_unbounded_read_returns_everything(self, size: int | None) -> None:
        """Negative or None sizes read to end-of-stream."""
        channel = RecordingChannel(b"x" * 20000, max_read=3000)
        assert channel.read(size) == b"x" * 20000

    def test_short_reads_are_allowed(self) -> None:
        """A read may return fewer bytes than asked for."""
        channel = RecordingChannel(b"abcdef", max_read=2)
        assert channel.read(5) == b"ab"

    def test_read_exactly_loops_over_short_reads(self) -> None:
        """read_exactly keeps reading until the count is met."""
        channel = RecordingChannel(b"abcdef", max_read=2)
        assert channel.read_exactly(5) == b"abcde"
        assert len(channel.reads) == 3

    def test_read_exactly_raises_at_end_of_stream(self) -> None:
        """A stream that ends early is an EOF error with the partial count."""
        channel = MemoryChannel(b"ab")
        with pytest.raises(ChannelEOFError) as exc_info:
            channel.read_exactly(5)
        assert exc_info.value.expected_bytes == 5
        assert exc_info.value.actual_bytes == 2


class TestWriteContract:
    """Tests for partial and complete writes."""

    def test_write_may_be_partial(self) -> None:
        """write() reports how many bytes the backend accepted."""
        channel = RecordingChannel(max_write=3)
        assert channel.write(b"abcdef") == 3
        assert channel.getvalue() == b"abc"

    def test_empty_write_is_a_no_op(self) -> None:
        """Writing nothing does not reach the backend."""
        channel = RecordingChannel()
        assert channel.write(b"") == 0
        assert channel.writes == []

    def test_write_all_loops_over_partial_writes(self) -> None:
        """write_all() delivers every byte."""
        channel = RecordingChannel(max_write=3)
        assert channel.write_all(b"abcdefgh") == 8
        assert channel.getvalue() == b"abcdefgh"
        assert channel.writes == [b"abc", b"def", b"gh"]

    def test_write_all_fails_when_the_backend_stalls(self) -> None:
        """A backend accepting nothing is an I/O failure, not a hang."""
        channel = RecordingChannel(max_write=0)
        with pytest.raises(ChannelIOError, match="accepted no bytes"):
            channel.write_all(b"abc")


class TestLifetime:
    """Tests for close semantics."""

    def test_close_is_idempotent(self) -> None:
        """Closing twice is harmless and releases the backend once."""
        channel = RecordingChannel()
        channel.close()
        channel.close()
        assert channel.closed
        assert channel.close_calls == 1

    @pytest.mark.parametrize(
        "operation",
        [
            lambda c: c.read(1),
            lambda c: c.read_all(),
            lambda c: c.write(b"x"),
            lambda c: c.write_all(b"x"),
            lambda c: c.flush(),
            lambda c: c.seek(0),
            lambda c: c.tell(),
        ],
    )
    def test_operations_after_close_fail(self, operation) -> None:  # type: ignore[no-untyped-def]
        """Every operation other than close() raises on a closed channel."""
        channel = MemoryChannel(b"data")
        channel.close()
        with pytest.raises(ChannelClosedError):
            operation(channel)

    def test_closed_error_is_a_value_error(self) -> None:
        """Code written against the io module keeps working."""
        channel = MemoryChannel()
        channel.close()
        with pytest.raises(ValueError, match="closed MemoryChannel"):
            channel.write(b"x")

    def test_decorator_closes_inner_exactly_once(self) -> None:
        """Closing a decorator twice closes its inner channel once."""
        inner = RecordingChannel()
        channel = BufferedChannel(inner)
        channel.close()
        channel.close()
        assert inner.closed
        assert inner.close_calls == 1

    def test_context_manager_closes_on_error(self) -> None:
        """Leaving the with block closes the whole chain, even on error."""
        inner = RecordingChannel()
        with pytest.raises(RuntimeError):
            with BufferedChannel(inner) as channel:
                channel.write(b"pending")
                raise RuntimeError("boom")
        assert channel.closed
        assert inner.closed
        assert inner.getvalue() == b"pending"

    def test_wrapping_a_closed_channel_fails(self) -> None:
        """A decorator refuses an inner channel that is already closed."""
        inner = MemoryChannel()
        inner.close()
        with pytest.raises(ChannelClosedError, match="Cannot wrap"):
            BufferedChannel(inner)

    def test_flush_failure_on_close_still_closes_inner(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        """The flush error surfaces, but only after the inner channel is released."""
        inner = RecordingChannel()
        inner.fail_writes = True
        channel = BufferedChannel(inner, block_size=16)
        channel.write(b"abc")

        with caplog.at_level(logging.WARNING, logger="streamstack"):
            with pytest.raises(ChannelIOError, match="disk full"):
                channel.close()

        assert channel.closed
        assert inner.closed
        assert "Flush failed while closing" in caplog.text


class TestCapabilities:
    """Tests for unsupported operations."""

    def test_seek_on_unseekable_channel(self) -> None:
        """Seeking where there is no position is an unsupported operation."""
        channel = BufferedChannel(_UnseekableChannel(b"abc"))
        assert not channel.seekable()
        with pytest.raises(io.UnsupportedOperation):
            channel.seek(0)
        with pytest.raises(io.UnsupportedOperation):
            channel.tell()


class _UnseekableChannel(MemoryChannel):
    def seekable(self) -> bool:
        return False
