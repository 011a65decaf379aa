"""Shared configuration models and exceptions for streamstack channels."""

from .base import StrictBaseModel
from .exceptions import (
    ChannelClosedError,
    ChannelEncodingError,
    ChannelEOFError,
    ChannelError,
    ChannelIOError,
    ChannelTimeoutError,
    CorruptDataError,
    OperationCancelledError,
)
from .options import (
    BufferOptions,
    CompressionFormat,
    CompressionMode,
    CompressionOptions,
    OpenMode,
    TextOptions,
)

__all__ = [
    # Models
    "StrictBaseModel",
    "BufferOptions",
    "TextOptions",
    "CompressionOptions",
    # Enumerations
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
