"""
Scripted mock for asyncio byte streams.

A test scripts the reads, writes and errors it expects on a `Handle`; the
component under test reads and writes against the paired `Mock` as it would
against a real stream; the test then checks the `Event`s the mock reported.

Architecture:
    Handle --(action channel)--> Mock --(event channel)--> Handle

Components:
    - action: scripted operations and their direction
    - matcher: direction-aware matching with a one-action lookahead slot
    - stream: the mock stream the component under test talks to
    - handle: scripting and event observation for the test
    - events: what the mock reports for each consumed action
    - error_kind: the I/O failure taxonomy for injected errors
"""

from .action import Action, Direction, Injected
from .channel import Receiver, Sender, channel
from .config import MockConfig
from .error_kind import ErrorKind
from .events import Event, ReadErrorEvent, ReadEvent, WriteErrorEvent, WriteEvent, event_for
from .exceptions import (
    ChannelClosed,
    ChannelEmpty,
    MockIOError,
    ProtocolViolation,
    ReadOverflow,
    ScriptExhausted,
    UnexpectedWrite,
    UnusedAction,
    WriteMismatch,
)
from .handle import Handle
from .matcher import ActionQueue
from .protocols import StreamReaderProtocol, StreamWriterProtocol
from .stream import Mock


def mock(config: MockConfig | None = None) -> tuple[Mock, Handle]:
    """Create a mock stream and the handle that scripts it."""
    config = config or MockConfig()
    action_tx, action_rx = channel()
    event_tx, event_rx = channel()
    return Mock(ActionQueue(action_rx, event_tx, config), config), Handle(action_tx, event_rx)


__all__ = [
    "mock",
    # Endpoints
    "Mock",
    "Handle",
    "MockConfig",
    # Script and events
    "Action",
    "Direction",
    "Injected",
    "ErrorKind",
    "Event",
    "ReadEvent",
    "WriteEvent",
    "ReadErrorEvent",
    "WriteErrorEvent",
    "event_for",
    # Plumbing
    "ActionQueue",
    "Sender",
    "Receiver",
    "channel",
    "StreamReaderProtocol",
    "StreamWriterProtocol",
    # Errors
    "MockIOError",
    "ChannelEmpty",
    "ChannelClosed",
    "ProtocolViolation",
    "UnexpectedWrite",
    "WriteMismatch",
    "ReadOverflow",
    "ScriptExhausted",
    "UnusedAction",
]
