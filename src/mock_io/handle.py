"""
Test-facing controller for a mock stream.

The handle builds the script the mock answers from and receives the events the
mock reports as it consumes that script. Scripting methods return the handle,
so a whole exchange reads top to bottom::

    handle.write(b"HELLO\\n").read(b"WELCOME\\n").read_error(ErrorKind.CONNECTION_RESET)

Scripting never blocks and may be done from another thread than the one
running the component under test; a suspended read wakes up as soon as its
action arrives.
"""

from __future__ import annotations

from typing import Self

from .action import Action
from .channel import Receiver, Sender
from .error_kind import ErrorKind
from .events import Event
from .exceptions import ChannelClosed, ChannelEmpty


class Handle:
    """Scripts a `Mock` and observes what it did."""

    __slots__ = ("_actions", "_events")

    def __init__(self, actions: Sender[Action], events: Receiver[Event]) -> None:
        """Wrap the sending end of the action channel and the receiving end of the event channel."""
        self._actions = actions
        self._events = events

    def read(self, data: bytes) -> Self:
        """
        Script a read that hands `data` to the component.

        Empty `data` scripts an end-of-stream.

        Raises:
            ChannelClosed: The mock was disposed or the script was closed.
        """
        self._actions.send(Action.read(data))
        return self

    def write(self, data: bytes) -> Self:
        """Script a write the component must perform with exactly `data`."""
        self._actions.send(Action.write(data))
        return self

    def read_error(self, error: ErrorKind | OSError) -> Self:
        """
        Script a read that fails.

        An `ErrorKind` gets a fresh exception; an `OSError` is raised as given.
        """
        self._actions.send(Action.read_error(error))
        return self

    def write_error(self, error: ErrorKind | OSError) -> Self:
        """Script a write that fails."""
        self._actions.send(Action.write_error(error))
        return self

    def close(self) -> None:
        """
        Declare the script complete.

        A read that finds nothing left afterwards fails with `ScriptExhausted`
        instead of waiting forever. Events can still be received.
        """
        self._actions.close()

    async def next_event(self) -> Event:
        """
        Wait for the next event.

        Raises:
            ChannelClosed: The mock was disposed and every event was received.
        """
        return await self._events.recv()

    def pop_event(self) -> Event | None:
        """The next event if one is already available, else None."""
        try:
            return self._events.try_recv()
        except (ChannelEmpty, ChannelClosed):
            return None

    def drain_events(self) -> list[Event]:
        """Every event available right now, oldest first."""
        events = []
        while (event := self.pop_event()) is not None:
            events.append(event)
        return events

    def __repr__(self) -> str:
        return f"<Handle {len(self._events)} event(s) waiting>"
