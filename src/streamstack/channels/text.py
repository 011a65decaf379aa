"""
Text codec layer over a byte channel.

Bytes arrive from the inner channel in arbitrary chunks. A chunk boundary can
fall in the middle of a multi-byte character::

    "é" in UTF-8 is 0xC3 0xA9

    chunk 1: ... 0x61 0xC3      <- decoding this alone would fail or corrupt
    chunk 2: 0xA9 0x62 ...

TextCodecChannel feeds every chunk through an incremental decoder. The
decoder keeps the incomplete tail (0xC3) and joins it with the next chunk,
so a character is never split across two returned pieces of text. Only at
true end-of-stream is a leftover tail an error.


LINES
-----
Lines are split on "\\n" and "\\r\\n"; the terminator is not part of the
returned line. A "\\r" ending one chunk and a "\\n" starting the next are
still one terminator, because splitting happens on decoded text that
accumulates across chunks. The last line need not be terminated.

The terminator written by ``write_line()`` is configured (``newline``),
never taken from the platform.
"""

from __future__ import annotations

import codecs
import io
import logging
from collections.abc import Iterator

from streamstack.config import DEFAULT_BLOCK_SIZE
from streamstack.types.exceptions import ChannelEncodingError
from streamstack.types.options import TextOptions

from .base import ByteChannel, Channel, close_wrapped

logger = logging.getLogger(__name__)


class TextCodecChannel(Channel):
    """
    Read and write text over a byte channel in a configured encoding.

    Not a byte channel itself: it offers line and whole-content reads and
    text writes. Text decoded ahead of the caller is held internally, so a
    chain should be used for reading or for writing, not both interleaved.
    """

    def __init__(
        self,
        inner: ByteChannel,
        encoding: str | None = None,
        *,
        errors: str = "strict",
        newline: str = "\n",
        chunk_size: int = DEFAULT_BLOCK_SIZE,
    ) -> None:
        """
        Wrap inner with a text codec.

        Args:
            inner: The byte channel to translate. Ownership passes here.
            encoding: Codec name. Defaults to ``streamstack.config.DEFAULT_ENCODING``.
            errors: "strict", "replace", or "ignore".
            newline: Terminator written by write_line(): "\\n" or "\\r\\n".
            chunk_size: Bytes requested from inner per decode step.

        Raises:
            pydantic.ValidationError: If an option is invalid.
        """
        options = {"errors": errors, "newline": newline}
        if encoding is not None:
            options["encoding"] = encoding
        self._options = TextOptions(**options)

        super().__init__()
        self._inner = inner
        self._chunk_size = chunk_size

        self._decoder = codecs.getincrementaldecoder(self.encoding)(self._options.errors)
        self._encoder = codecs.getincrementalencoder(self.encoding)(self._options.errors)

        # Decoded text not yet handed to the caller.
        self._pending = ""
        self._eof = False
        self._wrote = False

    @property
    def options(self) -> TextOptions:
        """The validated text options."""
        return self._options

    @property
    def encoding(self) -> str:
        """Canonical codec name."""
        return self._options.encoding

    @property
    def newline(self) -> str:
        """Terminator written by write_line()."""
        return self._options.newline

    @property
    def inner(self) -> ByteChannel:
        """The wrapped byte channel."""
        return self._inner

    def readable(self) -> bool:
        return self._inner.readable()

    def writable(self) -> bool:
        return self._inner.writable()

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def readline(self) -> str | None:
        """
        Return the next line without its terminator, or None at end-of-stream.

        An empty string is an empty line, not end-of-stream.
        """
        self._check_readable("readline")

        # Only text appended since the last search can contain a new "\n".
        start = 0
        while True:
            index = self._pending.find("\n", start)
            if index >= 0:
                line = self._pending[:index]
                self._pending = self._pending[index + 1 :]
                return line[:-1] if line.endswith("\r") else line

            if self._eof:
                if not self._pending:
                    return None
                line, self._pending = self._pending, ""
                return line

            start = len(self._pending)
            self._fill()

    def lines(self) -> Iterator[str]:
        """
        Yield the remaining lines lazily.

        The generator shares the channel's position: it is finite and cannot
        be restarted.
        """
        while (line := self.readline()) is not None:
            yield line

    def __iter__(self) -> Iterator[str]:
        return self.lines()

    def read_all(self) -> str:
        """Decode every remaining byte, including text already read ahead."""
        self._check_readable("read")
        while not self._eof:
            self._fill()
        text, self._pending = self._pending, ""
        return text

    def _fill(self) -> None:
        """Decode one more chunk from the inner channel into the pending text."""
        data = self._inner.read(self._chunk_size)

        # An empty read is end-of-stream: decode with final=True so an
        # incomplete trailing sequence is reported instead of dropped.
        final = not data
        try:
            self._pending += self._decoder.decode(data, final=final)
        except UnicodeDecodeError as e:
            raise ChannelEncodingError(self.encoding, _describe(e)) from e

        if final:
            self._eof = True

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    def write_text(self, text: str) -> int:
        """
        Encode and write text.

        Returns:
            The number of characters written.
        """
        self._check_writable("write")
        try:
            data = self._encoder.encode(text)
        except UnicodeEncodeError as e:
            raise ChannelEncodingError(self.encoding, _describe(e)) from e

        self._wrote = True
        if data:
            self._inner.write_all(data)
        return len(text)

    def write_line(self, text: str) -> int:
        """Write text followed by the configured terminator."""
        return self.write_text(text + self.newline)

    # ------------------------------------------------------------------
    # Lifetime
    # ------------------------------------------------------------------

    def _flush(self) -> None:
        self._flush_encoder()
        self._inner.flush()

    def _finalize(self) -> None:
        self._flush_encoder()

    def _flush_encoder(self) -> None:
        """Emit whatever the encoder still holds."""
        # Stateful encodings (e.g. ISO-2022) owe a sequence returning to
        # their initial state; the encoder starts over cleanly afterwards.
        if not self._wrote:
            return
        try:
            tail = self._encoder.encode("", final=True)
        except UnicodeEncodeError as e:
            raise ChannelEncodingError(self.encoding, _describe(e)) from e
        if tail:
            self._inner.write_all(tail)

    def _close(self) -> None:
        close_wrapped(self, self._finalize, self._inner)

    def _check_readable(self, operation: str) -> None:
        self._check_open(operation)
        if not self.readable():
            raise io.UnsupportedOperation(f"{type(self).__name__} is not readable")

    def _check_writable(self, operation: str) -> None:
        self._check_open(operation)
        if not self.writable():
            raise io.UnsupportedOperation(f"{type(self).__name__} is not writable")

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<TextCodecChannel {state} encoding={self.encoding!r} inner={self._inner!r}>"


def _describe(error: UnicodeError) -> str:
    """Summarize a codec error with the offending bytes or characters."""
    if isinstance(error, (UnicodeDecodeError, UnicodeEncodeError)):
        bad = error.object[error.start : error.end]
        return f"{error.reason}: {bad!r}"
    return str(error)
