"""
Exception hierarchy for mock streams.

Two families never overlap:

- Injected failures are plain `OSError` instances scripted by the test. They
  reach the component under test as ordinary I/O errors and are not defined here.
- `ProtocolViolation` means the script disagrees with what the component
  actually did. It derives from `AssertionError` and never from `OSError`,
  so an `except OSError` in the component cannot absorb it and pytest
  reports it as a test failure.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .action import Action


class MockIOError(Exception):
    """
    Base exception for everything raised by the mock itself.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class ChannelEmpty(MockIOError):
    """Raised by a non-blocking receive when nothing is queued yet."""


class ChannelClosed(MockIOError):
    """Raised when the other end of a channel has been closed."""


class ProtocolViolation(MockIOError, AssertionError):
    """Base class for script/behaviour disagreements. Always a test bug."""


class UnexpectedWrite(ProtocolViolation):
    """
    Raised when the component writes but no write was scripted.

    Attributes:
        data: The bytes the component tried to write.
    """

    def __init__(self, message: str, *, data: bytes) -> None:
        self.data = data
        super().__init__(message)


class WriteMismatch(ProtocolViolation):
    """
    Raised when the written bytes differ from the scripted ones.

    Attributes:
        expected: Bytes the script expected.
        actual: Bytes the component wrote.
    """

    def __init__(self, message: str, *, expected: bytes, actual: bytes) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(message)


class ReadOverflow(ProtocolViolation):
    """
    Raised when a scripted read does not fit the caller's buffer.

    Attributes:
        needed: Length of the scripted payload.
        capacity: Space the caller offered.
    """

    def __init__(self, message: str, *, needed: int, capacity: int) -> None:
        self.needed = needed
        self.capacity = capacity
        super().__init__(message)


class ScriptExhausted(ProtocolViolation):
    """Raised when the handle closed its script while the mock still expects input."""


class UnusedAction(ProtocolViolation):
    """
    Raised on dispose when scripted actions were never consumed.

    Attributes:
        actions: The actions left over, in script order.
    """

    def __init__(self, message: str, *, actions: Sequence[Action]) -> None:
        self.actions = tuple(actions)
        super().__init__(message)
