"""
Composable byte and text channels.

Build a chain from the backend outwards, then use the outermost channel::

    from streamstack import BufferedChannel, MemoryChannel, TextCodecChannel

    memory = MemoryChannel()
    with TextCodecChannel(BufferedChannel(memory)) as text:
        text.write_text("Hello, World!")

    with TextCodecChannel(BufferedChannel(MemoryChannel(memory.getvalue()))) as text:
        assert text.read_all() == "Hello, World!"

Each layer adds one capability (buffering, text codec, compression, asyncio
access) behind the same read/write/close contract.
"""

from .aio import AsyncAdapter, AsyncStreamChannel, SuspendingByteChannel, TimeoutChannel
from .channels import (
    BufferedChannel,
    ByteChannel,
    Channel,
    ChannelDecorator,
    CompressionChannel,
    FileChannel,
    IOChannel,
    MemoryChannel,
    SocketChannel,
    TextCodecChannel,
)
from .stack import open_bytes, open_file, open_file_text, open_text
from .types import (
    BufferOptions,
    ChannelClosedError,
    ChannelEncodingError,
    ChannelEOFError,
    ChannelError,
    ChannelIOError,
    ChannelTimeoutError,
    CompressionFormat,
    CompressionMode,
    CompressionOptions,
    CorruptDataError,
    OpenMode,
    OperationCancelledError,
    TextOptions,
)

__all__ = [
    # Blocking channels
    "Channel",
    "ByteChannel",
    "ChannelDecorator",
    "MemoryChannel",
    "FileChannel",
    "SocketChannel",
    "IOChannel",
    "BufferedChannel",
    "TextCodecChannel",
    "CompressionChannel",
    # Suspending channels
    "SuspendingByteChannel",
    "AsyncAdapter",
    "AsyncStreamChannel",
    "TimeoutChannel",
    # Stack builders
    "open_bytes",
    "open_text",
    "open_file",
    "open_file_text",
    # Options
    "BufferOptions",
    "TextOptions",
    "CompressionOptions",
    "OpenMode",
    "CompressionFormat",
    "CompressionMode",
    # Exceptions
    "ChannelError",
    "ChannelClosedError",
    "ChannelIOError",
    "ChannelEOFError",
    "ChannelTimeoutError",
    "CorruptDataError",
    "ChannelEncodingError",
    "OperationCancelledError",
]
