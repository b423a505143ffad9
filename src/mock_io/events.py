"""
Events reported back to the test.

Every action the mock consumes produces exactly one event, sent before the
component under test sees the effect. Events arrive in the order operations
were performed, which may differ from script order when reads and writes
interleave differently than scripted.

::

    Action (direction, payload)      Event
    ---------------------------      -----
    READ,  bytes                 --> ReadEvent(data)
    WRITE, bytes                 --> WriteEvent(data)
    READ,  Injected              --> ReadErrorEvent(kind)
    WRITE, Injected              --> WriteErrorEvent(kind)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from .action import Action, Direction, Injected
from .error_kind import ErrorKind


@dataclass(frozen=True, slots=True)
class ReadEvent:
    """A scripted read was handed to the component."""

    direction: ClassVar[Direction] = Direction.READ

    data: bytes
    """Bytes copied into the caller's buffer."""

    @property
    def size(self) -> int:
        """Number of bytes read."""
        return len(self.data)


@dataclass(frozen=True, slots=True)
class WriteEvent:
    """The component wrote the scripted bytes."""

    direction: ClassVar[Direction] = Direction.WRITE

    data: bytes
    """Bytes accepted from the caller."""

    @property
    def size(self) -> int:
        """Number of bytes written."""
        return len(self.data)


@dataclass(frozen=True, slots=True)
class ReadErrorEvent:
    """A scripted read error was raised to the component."""

    direction: ClassVar[Direction] = Direction.READ

    kind: ErrorKind
    """Kind of the injected error."""


@dataclass(frozen=True, slots=True)
class WriteErrorEvent:
    """A scripted write error was raised to the component."""

    direction: ClassVar[Direction] = Direction.WRITE

    kind: ErrorKind
    """Kind of the injected error."""


type Event = ReadEvent | WriteEvent | ReadErrorEvent | WriteErrorEvent
"""Anything the mock reports to its handle."""


def event_for(action: Action) -> Event:
    """Derive the event recorded when `action` is consumed."""
    match action.direction, action.payload:
        case Direction.READ, Injected(kind=kind):
            return ReadErrorEvent(kind)
        case Direction.WRITE, Injected(kind=kind):
            return WriteErrorEvent(kind)
        case Direction.READ, data:
            return ReadEvent(data)
        case _, data:
            return WriteEvent(data)
