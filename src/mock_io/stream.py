"""
The mock stream handed to the component under test.

`Mock` offers the reading and writing surface of asyncio's `StreamReader` and
`StreamWriter`. Every operation is answered from the script built on the
paired `Handle`:

- Reads suspend until a read action is available, then copy the scripted bytes
  (never part of them) or raise the scripted error.
- Writes never suspend. The written bytes must equal the next scripted write;
  anything else is a `ProtocolViolation`.
- Flush and shutdown calls always succeed at once. There is nothing to flush
  and nothing to tear down.

Usage::

    mock, handle = mock_io.mock()
    handle.write(b"PING\\r\\n").read(b"PONG\\r\\n")

    with mock:
        await client.ping(mock)

    assert await handle.next_event() == WriteEvent(b"PING\\r\\n")
"""

from __future__ import annotations

import logging
import warnings
from collections.abc import Iterable
from types import TracebackType
from typing import Self

from .action import Action, Direction, Injected
from .config import MockConfig
from .exceptions import (
    ProtocolViolation,
    ReadOverflow,
    UnexpectedWrite,
    UnusedAction,
    WriteMismatch,
)
from .matcher import ActionQueue

logger = logging.getLogger(__name__)


class Mock:
    """Scripted stand-in for a duplex byte stream."""

    __slots__ = ("_queue", "_config", "_eof", "_closing", "_disposed", "_violation")

    def __init__(self, queue: ActionQueue, config: MockConfig) -> None:
        """Wrap an action queue. Use `mock_io.mock()` to build a connected pair."""
        self._queue = queue
        self._config = config
        self._eof = False
        self._closing = False
        self._disposed = False
        self._violation: ProtocolViolation | None = None

    @property
    def config(self) -> MockConfig:
        """Settings shared with the paired handle."""
        return self._config

    @property
    def violation(self) -> ProtocolViolation | None:
        """The first protocol violation raised by any operation, if any."""
        return self._violation

    def pending(self) -> list[Action]:
        """Scripted actions not consumed yet, in script order."""
        return self._queue.pending()

    # -------------------------------------------------------------------------
    # Reading
    # -------------------------------------------------------------------------

    async def readinto(self, buffer: bytearray | memoryview) -> int:
        """
        Read one scripted chunk into `buffer`.

        Suspends until a read action is scripted. The whole chunk is copied;
        a chunk larger than `buffer` is a protocol violation and nothing is copied.

        Returns:
            Number of bytes copied. Zero means a scripted end-of-stream.

        Raises:
            OSError: The scripted read error.
            ReadOverflow: The chunk does not fit in `buffer`.
            TypeError: `buffer` is read-only. The script is left untouched.
        """
        view = memoryview(buffer).cast("B")
        if view.readonly:
            raise TypeError(f"readinto() needs a writable buffer, got {type(buffer).__name__}")
        data = await self._read(capacity=view.nbytes)
        view[: len(data)] = data
        return len(data)

    async def read(self, n: int = -1) -> bytes:
        """
        Read one scripted chunk of at most `n` bytes.

        A negative `n` accepts a chunk of any size. Mirrors `StreamReader.read`,
        except that a chunk larger than `n` is a protocol violation rather than
        being split across calls.

        Raises:
            OSError: The scripted read error.
            ReadOverflow: The chunk is longer than `n`.
        """
        return await self._read(capacity=None if n < 0 else n)

    def at_eof(self) -> bool:
        """Whether a scripted end-of-stream has been read."""
        return self._eof

    async def _read(self, capacity: int | None) -> bytes:
        while (action := self._pop(Direction.READ)) is None:
            await self._queue.wait()

        match action.payload:
            case Injected(error=error):
                logger.debug("%s: read fails with %r", self._config.name, error)
                raise error
            case data:
                if capacity is not None and len(data) > capacity:
                    raise self._remember(
                        ReadOverflow(
                            f"{self._config.name}: scripted read of {len(data)} bytes "
                            f"but the caller only has room for {capacity} bytes: "
                            f"{self._config.preview(data)}",
                            needed=len(data),
                            capacity=capacity,
                        )
                    )
                if not data:
                    self._eof = True
                return data

    # -------------------------------------------------------------------------
    # Writing
    # -------------------------------------------------------------------------

    def write(self, data: bytes | bytearray | memoryview) -> int:
        """
        Write `data`, which must be exactly the next scripted write.

        Never suspends: an unscripted write is a protocol violation rather
        than something to wait out.

        Returns:
            Number of bytes accepted (always all of them).

        Raises:
            OSError: The scripted write error. No bytes are accepted.
            UnexpectedWrite: No write is scripted at this point.
            WriteMismatch: The scripted write holds different bytes.
        """
        actual = bytes(data)
        action = self._pop(Direction.WRITE)

        if action is None:
            raise self._remember(
                UnexpectedWrite(
                    f"{self._config.name}: unexpected write of {self._config.preview(actual)}",
                    data=actual,
                )
            )

        match action.payload:
            case Injected(error=error):
                logger.debug("%s: write fails with %r", self._config.name, error)
                raise error
            case expected if expected != actual:
                raise self._remember(
                    WriteMismatch(
                        f"{self._config.name}: write mismatch, expected "
                        f"{self._config.preview(expected)} but got {self._config.preview(actual)}",
                        expected=expected,
                        actual=actual,
                    )
                )
        return len(actual)

    def writelines(self, chunks: Iterable[bytes | bytearray | memoryview]) -> None:
        """Write each chunk in turn; each must match its own scripted write."""
        for chunk in chunks:
            self.write(chunk)

    async def drain(self) -> None:
        """Nothing is ever buffered."""

    async def flush(self) -> None:
        """Nothing is ever buffered."""

    def can_write_eof(self) -> bool:
        return True

    def write_eof(self) -> None:
        """Accepted and ignored."""

    def close(self) -> None:
        """
        Mark the stream as closing.

        This is the component's shutdown call and always succeeds. It does not
        end the script: the test ends it with `dispose()`.
        """
        self._closing = True

    def is_closing(self) -> bool:
        return self._closing

    async def wait_closed(self) -> None:
        """Completes at once."""

    # -------------------------------------------------------------------------
    # Teardown
    # -------------------------------------------------------------------------

    def dispose(self, *, unwinding: bool = False) -> None:
        """
        Tear down the mock's ends of both channels and verify the script was used up.

        Idempotent. Leftover actions are only reported when the test is not
        already failing for another reason: pass `unwinding=True` while an
        exception is propagating, and they are logged instead. Leftovers are
        also expected after a protocol violation and are not reported then.

        Raises:
            UnusedAction: Scripted actions were never consumed.
        """
        if self._disposed:
            return
        self._disposed = True

        pending = self._queue.pending()
        self._queue.close()

        if not pending:
            return

        described = ", ".join(action.describe(self._config) for action in pending)
        if unwinding or self._violation is not None:
            logger.warning(
                "%s: disposed with %d unused action(s): %s",
                self._config.name,
                len(pending),
                described,
            )
            return

        if self._config.verify_unused:
            raise UnusedAction(
                f"{self._config.name}: unused mock action(s): {described}",
                actions=pending,
            )

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.dispose(unwinding=exc_type is not None)

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.dispose(unwinding=exc_type is not None)

    def __del__(self, _warn=warnings.warn) -> None:
        # Attributes may be missing if __init__ never completed.
        if getattr(self, "_disposed", True):
            return
        self._disposed = True

        pending = self._queue.pending()
        self._queue.close()
        if pending and self._violation is None and self._config.verify_unused:
            described = ", ".join(action.describe(self._config) for action in pending)
            _warn(
                f"{self._config.name}: mock garbage-collected without dispose() "
                f"with unused mock action(s): {described}",
                ResourceWarning,
                source=self,
            )

    def __repr__(self) -> str:
        state = "disposed" if self._disposed else f"{len(self._queue.pending())} pending"
        return f"<Mock {self._config.name!r} {state}>"

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _pop(self, direction: Direction) -> Action | None:
        try:
            return self._queue.pop(direction)
        except ProtocolViolation as exc:
            self._remember(exc)
            raise

    def _remember(self, violation: ProtocolViolation) -> ProtocolViolation:
        if self._violation is None:
            self._violation = violation
        logger.debug("%s: %s", self._config.name, violation.message)
        return violation
