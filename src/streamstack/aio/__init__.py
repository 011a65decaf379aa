"""
Suspending channels for asyncio.

Usage::

    from streamstack.aio import AsyncAdapter
    from streamstack.channels import FileChannel

    async with AsyncAdapter(FileChannel(path)) as channel:
        data = await channel.read_all()
"""

from .adapter import AsyncAdapter
from .base import SuspendingByteChannel
from .streams import AsyncStreamChannel
from .timeout import TimeoutChannel

__all__ = [
    "SuspendingByteChannel",
    "AsyncAdapter",
    "AsyncStreamChannel",
    "TimeoutChannel",
]
