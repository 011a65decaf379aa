"""Tests for the channel exception hierarchy."""

from __future__ import annotations

import asyncio

import pytest

from streamstack.types import (
    ChannelClosedError,
    ChannelEncodingError,
    ChannelEOFError,
    ChannelError,
    ChannelIOError,
    ChannelTimeoutError,
    CorruptDataError,
    OperationCancelledError,
)


class TestHierarchy:
    """Tests for how the exception classes relate."""

    @pytest.mark.parametrize(
        "error",
        [
            ChannelClosedError("MemoryChannel", "read"),
            ChannelIOError("write", "disk full"),
            ChannelEOFError(8, 3),
            ChannelTimeoutError("read", 1.5),
            CorruptDataError("gzip", "stream is truncated"),
            ChannelEncodingError("utf-8", "invalid start byte"),
        ],
    )
    def test_channel_errors_share_a_base(self, error: ChannelError) -> None:
        """Every channel failure can be caught as ChannelError."""
        assert isinstance(error, ChannelError)

    def test_closed_is_a_value_error(self) -> None:
        """Matches the standard io classes, which raise ValueError when closed."""
        assert isinstance(ChannelClosedError("FileChannel", "write"), ValueError)

    def test_eof_and_timeout_are_io_failures(self) -> None:
        """Premature end-of-stream and expiry are backend failures."""
        assert isinstance(ChannelEOFError(4, 0), ChannelIOError)
        assert isinstance(ChannelTimeoutError("flush", 2.0), ChannelIOError)

    def test_cancellation_is_not_a_channel_error(self) -> None:
        """Cancellation keeps asyncio semantics instead."""
        error = OperationCancelledError("read", completed=False)
        assert isinstance(error, asyncio.CancelledError)
        assert not isinstance(error, ChannelError)


class TestMessages:
    """Tests for error attributes and messages."""

    def test_closed_message(self) -> None:
        """Names the operation and the channel class."""
        error = ChannelClosedError("BufferedChannel", "write")
        assert error.message == "Cannot write on closed BufferedChannel"
        assert error.channel_name == "BufferedChannel"
        assert error.operation == "write"

    def test_io_message(self) -> None:
        """Names the operation and the failure."""
        error = ChannelIOError("read", "connection reset")
        assert str(error) == "I/O failure during read: connection reset"
        assert repr(error) == "ChannelIOError('I/O failure during read: connection reset')"

    def test_eof_counts(self) -> None:
        """Reports how far the exact read got."""
        error = ChannelEOFError(expected_bytes=10, actual_bytes=4)
        assert error.expected_bytes == 10
        assert error.actual_bytes == 4
        assert "after 4 of 10 bytes" in error.message

    def test_timeout_attribute(self) -> None:
        """Keeps the expired deadline."""
        error = ChannelTimeoutError("read", 0.25)
        assert error.timeout == 0.25
        assert error.operation == "read"
        assert "0.25s" in str(error)

    def test_corrupt_message(self) -> None:
        """Names the format."""
        error = CorruptDataError("zlib", "trailing data after end of stream")
        assert error.message == "Corrupt zlib data: trailing data after end of stream"

    def test_encoding_message(self) -> None:
        """Names the encoding."""
        error = ChannelEncodingError("ascii", "ordinal not in range(128)")
        assert error.encoding == "ascii"
        assert str(error).startswith("Encoding error (ascii)")

    @pytest.mark.parametrize(
        ("completed", "fragment"),
        [(True, "result discarded"), (False, "before it started")],
    )
    def test_cancelled_message(self, completed: bool, fragment: str) -> None:
        """Distinguishes discarded results from operations that never ran."""
        error = OperationCancelledError("write", completed=completed)
        assert error.completed is completed
        assert fragment in str(error)
