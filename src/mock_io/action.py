"""
Scripted actions.

An `Action` is one operation the test expects the component under test to
perform: a read that yields some bytes, a write of some exact bytes, or either
direction failing with an injected error. Actions form a single ordered script
across both directions; the mock consumes each exactly once.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .config import MockConfig
from .error_kind import ErrorKind


class Direction(Enum):
    """Which stream operation an action answers."""

    READ = "read"
    WRITE = "write"


@dataclass(frozen=True, slots=True)
class Injected:
    """An error scripted to be raised instead of transferring data."""

    kind: ErrorKind
    """Classification reported in the resulting event."""

    error: OSError
    """The exception raised to the component under test."""

    @classmethod
    def of(cls, value: ErrorKind | OSError) -> Injected:
        """Build from a kind (fresh exception) or from a concrete exception (raised as-is)."""
        if isinstance(value, ErrorKind):
            return cls(kind=value, error=value.to_exception())
        if isinstance(value, OSError):
            return cls(kind=ErrorKind.of(value), error=value)
        raise TypeError(f"Expected ErrorKind or OSError, got {type(value).__name__}")


@dataclass(frozen=True, slots=True)
class Action:
    """One scripted operation."""

    direction: Direction
    """Operation this action answers."""

    payload: bytes | Injected
    """Data to hand out (read) or expect (write), or an error to raise."""

    @classmethod
    def read(cls, data: bytes) -> Action:
        """Script a read returning `data`. Empty data scripts end-of-stream."""
        return cls(Direction.READ, bytes(data))

    @classmethod
    def write(cls, data: bytes) -> Action:
        """Script a write of exactly `data`."""
        return cls(Direction.WRITE, bytes(data))

    @classmethod
    def read_error(cls, error: ErrorKind | OSError) -> Action:
        """Script a read failing with `error`."""
        return cls(Direction.READ, Injected.of(error))

    @classmethod
    def write_error(cls, error: ErrorKind | OSError) -> Action:
        """Script a write failing with `error`."""
        return cls(Direction.WRITE, Injected.of(error))

    @property
    def is_error(self) -> bool:
        """Whether this action injects an error."""
        return isinstance(self.payload, Injected)

    def describe(self, config: MockConfig | None = None) -> str:
        """Short human-readable form used in logs and failure messages."""
        match self.payload:
            case Injected(kind=kind):
                return f"{self.direction.value} error {kind.name}"
            case data:
                rendered = config.preview(data) if config is not None else repr(data)
                return f"{self.direction.value} {rendered}"
