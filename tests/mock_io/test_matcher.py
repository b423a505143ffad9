"""Tests for direction-aware action matching."""

from __future__ import annotations

import asyncio

import pytest
from hypothesis import given
from hypothesis import strategies as st

from mock_io import (
    Action,
    ActionQueue,
    Direction,
    ErrorKind,
    Event,
    ReadEvent,
    Receiver,
    ScriptExhausted,
    Sender,
    WriteErrorEvent,
    WriteEvent,
    channel,
)


def make_queue() -> tuple[ActionQueue, Sender[Action], Receiver[Event]]:
    """An action queue plus the test's ends of its two channels."""
    action_tx, action_rx = channel()
    event_tx, event_rx = channel()
    return ActionQueue(action_rx, event_tx), action_tx, event_rx


class TestSameDirection:
    """Tests for matching without direction changes."""

    def test_match_emits_event(self) -> None:
        """A matched action is reported on the event channel."""
        queue, actions, events = make_queue()
        actions.send(Action.write(b"hello"))

        assert queue.pop(Direction.WRITE) == Action.write(b"hello")
        assert events.try_recv() == WriteEvent(b"hello")

    def test_nothing_scripted(self) -> None:
        """An empty script is "no match yet", not an error."""
        queue, _actions, events = make_queue()

        assert queue.pop(Direction.READ) is None
        assert events.snapshot() == []

    def test_closed_script(self) -> None:
        """A script closed by the handle is fatal once drained."""
        queue, actions, _events = make_queue()
        actions.close()

        with pytest.raises(ScriptExhausted, match="read was still expected"):
            queue.pop(Direction.READ)


class TestLookahead:
    """Tests for holding back actions of the other direction."""

    def test_read_request_holds_back_write(self) -> None:
        """A read waiting behind a write leaves the write for later."""
        queue, actions, events = make_queue()
        actions.send(Action.write_error(ErrorKind.BROKEN_PIPE))

        assert queue.pop(Direction.READ) is None
        assert queue.held is not None
        assert queue.held.direction is Direction.WRITE
        assert events.snapshot() == []

        actions.send(Action.read(b"data"))
        assert queue.pop(Direction.READ) == Action.read(b"data")

        assert queue.pop(Direction.WRITE) is not None
        assert events.snapshot() == [ReadEvent(b"data"), WriteErrorEvent(ErrorKind.BROKEN_PIPE)]

    def test_write_request_holds_back_read(self) -> None:
        """The held-back read is still first in line for the next read."""
        queue, actions, events = make_queue()
        actions.send(Action.read(b"first"))

        assert queue.pop(Direction.WRITE) is None
        assert queue.held == Action.read(b"first")

        actions.send(Action.write(b"w"))
        assert queue.pop(Direction.WRITE) == Action.write(b"w")

        actions.send(Action.read(b"second"))
        assert queue.pop(Direction.READ) == Action.read(b"first")
        assert queue.pop(Direction.READ) == Action.read(b"second")
        assert events.snapshot() == [WriteEvent(b"w"), ReadEvent(b"first"), ReadEvent(b"second")]

    def test_later_same_direction_action_is_reachable(self) -> None:
        """Holding back one action does not hide one already queued behind it."""
        queue, actions, _events = make_queue()
        actions.send(Action.write(b"w"))
        actions.send(Action.read(b"r"))

        assert queue.pop(Direction.READ) == Action.read(b"r")
        assert queue.pending() == [Action.write(b"w")]

    def test_full_slot_leaves_next_action_queued(self) -> None:
        """With the slot taken, a second other-direction action stays in the channel."""
        queue, actions, events = make_queue()
        actions.send(Action.write(b"one"))
        actions.send(Action.write(b"two"))
        actions.send(Action.read(b"r"))

        assert queue.pop(Direction.READ) is None
        assert queue.held == Action.write(b"one")
        assert queue.pending() == [Action.write(b"one"), Action.write(b"two"), Action.read(b"r")]
        assert events.snapshot() == []

        assert queue.pop(Direction.WRITE) == Action.write(b"one")
        assert queue.pop(Direction.WRITE) == Action.write(b"two")
        assert queue.pop(Direction.READ) == Action.read(b"r")
        assert queue.pending() == []

    def test_pending_lists_slot_first(self) -> None:
        """Pending actions are reported in script order."""
        queue, actions, _events = make_queue()
        actions.send(Action.read(b"r"))
        queue.pop(Direction.WRITE)
        actions.send(Action.write(b"w"))

        assert queue.pending() == [Action.read(b"r"), Action.write(b"w")]


class TestWait:
    """Tests for suspension on the action channel."""

    @pytest.mark.asyncio
    async def test_wait_resolves_on_new_action(self) -> None:
        """The waiter fires when the script grows."""
        queue, actions, _events = make_queue()
        waiter = queue.wait()
        assert not waiter.done()

        actions.send(Action.read(b"x"))

        await asyncio.wait_for(waiter, timeout=1)
        assert queue.pop(Direction.READ) == Action.read(b"x")

    @pytest.mark.asyncio
    async def test_wait_on_full_slot_resolves_when_slot_frees(self) -> None:
        """A request stuck behind the slot is woken by the match that empties it."""
        queue, actions, _events = make_queue()
        actions.send(Action.write(b"one"))
        actions.send(Action.write(b"two"))
        actions.send(Action.read(b"r"))
        assert queue.pop(Direction.READ) is None

        waiter = queue.wait()
        assert not waiter.done()

        assert queue.pop(Direction.WRITE) == Action.write(b"one")

        await asyncio.wait_for(waiter, timeout=1)
        assert queue.pop(Direction.READ) == Action.read(b"r")
        assert queue.held == Action.write(b"two")


scripts = st.lists(
    st.tuples(st.sampled_from(Direction), st.binary(max_size=8)),
    max_size=20,
)


class TestOrdering:
    """Property tests for matching order."""

    @given(st.lists(st.binary(max_size=16), max_size=20), st.sampled_from(Direction))
    def test_fifo_per_direction(self, chunks: list[bytes], direction: Direction) -> None:
        """Same-direction actions match in the order they were scripted."""
        queue, actions, _events = make_queue()
        for chunk in chunks:
            actions.send(Action(direction, chunk))

        matched = [queue.pop(direction) for _ in chunks]

        assert [action.payload for action in matched if action is not None] == chunks
        assert queue.pop(direction) is None

    @given(scripts)
    def test_events_follow_performed_order(
        self, script: list[tuple[Direction, bytes]]
    ) -> None:
        """Performing the script as written reports it back in the same order."""
        queue, actions, events = make_queue()
        for direction, chunk in script:
            actions.send(Action(direction, chunk))

        for direction, _chunk in script:
            assert queue.pop(direction) is not None

        reported = [
            (event.direction, event.data)  # type: ignore[union-attr]
            for event in events.snapshot()
        ]
        assert reported == script
