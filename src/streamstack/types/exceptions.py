"""Exception hierarchy for channel operations."""

from __future__ import annotations

import asyncio


class ChannelError(Exception):
    """
    Base exception for all channel-related errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class ChannelClosedError(ChannelError, ValueError):
    """
    Raised when an operation is attempted on a closed channel.

    Also a ValueError, matching what the standard io classes raise.

    Attributes:
        channel_name: Class name of the closed channel.
        operation: The operation that was attempted.
    """

    def __init__(self, channel_name: str, operation: str) -> None:
        self.channel_name = channel_name
        self.operation = operation
        super().__init__(f"Cannot {operation} on closed {channel_name}")


class ChannelIOError(ChannelError):
    """
    Raised when the backend of a channel fails.

    The original OSError, if any, is chained as ``__cause__``.

    Attributes:
        operation: The operation that failed (e.g., "read", "write").
        detail: Description of the failure.
    """

    def __init__(self, operation: str, detail: str) -> None:
        self.operation = operation
        self.detail = detail
        super().__init__(f"I/O failure during {operation}: {detail}")


class ChannelEOFError(ChannelIOError):
    """
    Raised when a channel ends before an exact read is satisfied.

    Attributes:
        expected_bytes: Number of bytes requested.
        actual_bytes: Number of bytes received before end-of-stream.
    """

    def __init__(self, expected_bytes: int, actual_bytes: int) -> None:
        self.expected_bytes = expected_bytes
        self.actual_bytes = actual_bytes
        super().__init__(
            "read",
            f"stream ended after {actual_bytes} of {expected_bytes} bytes",
        )


class ChannelTimeoutError(ChannelIOError):
    """
    Raised when a suspending operation does not complete in time.

    Attributes:
        timeout: The deadline that expired, in seconds.
    """

    def __init__(self, operation: str, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(operation, f"timed out after {timeout}s")


class CorruptDataError(ChannelError):
    """
    Raised when compressed input is malformed or truncated.

    A channel that raised this error must be discarded.

    Attributes:
        format_name: The compression format being decoded.
        detail: Description of what went wrong.
    """

    def __init__(self, format_name: str, detail: str) -> None:
        self.format_name = format_name
        self.detail = detail
        super().__init__(f"Corrupt {format_name} data: {detail}")


class ChannelEncodingError(ChannelError):
    """
    Raised when bytes are invalid for, or text cannot be represented in, an encoding.

    Attributes:
        encoding: The configured encoding.
        detail: Description of the offending input.
    """

    def __init__(self, encoding: str, detail: str) -> None:
        self.encoding = encoding
        self.detail = detail
        super().__init__(f"Encoding error ({encoding}): {detail}")


class OperationCancelledError(asyncio.CancelledError):
    """
    Raised when a suspending operation is cancelled while outstanding.

    Subclasses asyncio.CancelledError so that task cancellation semantics are
    preserved for callers that only handle the asyncio type.

    Attributes:
        operation: The operation that was cancelled.
        completed: True if the inner operation ran to completion and its
            result was discarded, False if it was cancelled before starting.
    """

    def __init__(self, operation: str, *, completed: bool) -> None:
        self.operation = operation
        self.completed = completed
        if completed:
            msg = f"{operation} cancelled; in-flight result discarded"
        else:
            msg = f"{operation} cancelled before it started"
        super().__init__(msg)
