"""Structural types for stream endpoints.

Components typed against these protocols accept a real asyncio
`StreamReader`/`StreamWriter` pair as well as a `Mock`.

StreamReaderProtocol
    The reading half. ``read()`` returns one chunk, ``b""`` at end-of-stream.

StreamWriterProtocol
    The writing half. ``write()`` is synchronous, ``drain()`` flushes.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class StreamReaderProtocol(Protocol):
    """Reading half of a byte stream."""

    async def read(self, n: int = -1) -> bytes:
        """Read up to n bytes."""
        ...

    def at_eof(self) -> bool:
        """Whether the stream has ended."""
        ...


@runtime_checkable
class StreamWriterProtocol(Protocol):
    """Writing half of a byte stream."""

    def write(self, data: bytes) -> object:
        """Buffer data for writing."""
        ...

    def writelines(self, data: list[bytes]) -> None:
        """Buffer several chunks for writing."""
        ...

    async def drain(self) -> None:
        """Flush buffered data."""
        ...

    def close(self) -> None:
        """Begin closing the stream."""
        ...

    def is_closing(self) -> bool:
        """Whether close() has been called."""
        ...

    async def wait_closed(self) -> None:
        """Wait until the stream is closed."""
        ...
