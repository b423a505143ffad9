"""A small stream client used as the component under test."""

from __future__ import annotations

from mock_io import StreamReaderProtocol, StreamWriterProtocol

MAX_LINE = 1024
"""Largest reply the client is prepared to receive in one read."""


class LineClient:
    """
    Request/response client for a newline-terminated text protocol.

    Sends one command line, then reads one reply line. Retries once on a
    connection reset, which is what the error-injection tests exercise.
    """

    def __init__(self, reader: StreamReaderProtocol, writer: StreamWriterProtocol) -> None:
        self._reader = reader
        self._writer = writer

    async def request(self, command: str) -> str:
        """Send `command` and return the reply without its newline."""
        self._writer.write(command.encode() + b"\n")
        await self._writer.drain()

        reply = await self._reader.read(MAX_LINE)
        if not reply:
            raise ConnectionError("Stream closed before a reply arrived")
        return reply.rstrip(b"\n").decode()

    async def request_with_retry(self, command: str, attempts: int = 2) -> str:
        """Like `request`, but starts over after a connection reset."""
        for attempt in range(1, attempts + 1):
            try:
                return await self.request(command)
            except ConnectionResetError:
                if attempt == attempts:
                    raise
        raise AssertionError("unreachable")

    async def close(self) -> None:
        """Close the writing side."""
        self._writer.close()
        await self._writer.wait_closed()
