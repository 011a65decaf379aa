"""
Blocking channels: backend leaves and the decorators that layer over them.

Usage::

    from streamstack.channels import BufferedChannel, MemoryChannel, TextCodecChannel

    with TextCodecChannel(BufferedChannel(MemoryChannel())) as text:
        text.write_line("Hello, World!")
"""

from .base import ByteChannel, Channel, ChannelDecorator
from .buffered import BufferedChannel
from .compression import CompressionChannel
from .file import FileChannel
from .fileobj import IOChannel
from .memory import MemoryChannel
from .network import SocketChannel
from .text import TextCodecChannel

__all__ = [
    # Contracts
    "Channel",
    "ByteChannel",
    "ChannelDecorator",
    # Leaves
    "MemoryChannel",
    "FileChannel",
    "SocketChannel",
    "IOChannel",
    # Decorators
    "BufferedChannel",
    "TextCodecChannel",
    "CompressionChannel",
]
