"""
Unbounded single-producer/single-consumer channel.

Connects a handle to its mock in both directions. Sending never blocks and may
happen from any thread; receiving is either a non-blocking `try_recv` or an
awaited `recv` on the consumer's event loop.

Wake-ups cannot be missed: the emptiness check and the waiter registration
happen under the same lock that `send` takes before resolving the waiter.
"""

from __future__ import annotations

import asyncio
from collections import deque
from dataclasses import dataclass, field
from threading import Lock
from typing import Generic, TypeVar

from .exceptions import ChannelClosed, ChannelEmpty

T = TypeVar("T")


@dataclass(slots=True)
class _Shared(Generic[T]):
    """State both ends of a channel point at."""

    items: deque[T] = field(default_factory=deque)
    """Sent but not yet received, oldest first."""

    sender_closed: bool = False
    """No more items will arrive."""

    receiver_closed: bool = False
    """Further sends are rejected."""

    waiter: asyncio.Future[None] | None = None
    """Future the consumer is suspended on, if any."""

    lock: Lock = field(default_factory=Lock)
    """Guards every field above."""

    def wake(self) -> None:
        """Resolve the pending waiter. Caller must hold the lock."""
        waiter, self.waiter = self.waiter, None
        if waiter is None or waiter.done():
            return
        loop = waiter.get_loop()
        if loop.is_closed():
            return
        loop.call_soon_threadsafe(_resolve, waiter)


def _resolve(waiter: asyncio.Future[None]) -> None:
    # The consumer may have been cancelled between scheduling and running.
    if not waiter.done():
        waiter.set_result(None)


class Sender(Generic[T]):
    """Producing end of a channel."""

    __slots__ = ("_shared",)

    def __init__(self, shared: _Shared[T]) -> None:
        self._shared = shared

    def send(self, item: T) -> None:
        """
        Append an item.

        Raises:
            ChannelClosed: If the receiving end was closed, or this end was.
        """
        shared = self._shared
        with shared.lock:
            if shared.receiver_closed:
                raise ChannelClosed("Receiving end of the channel is closed")
            if shared.sender_closed:
                raise ChannelClosed("Sending end of the channel is closed")
            shared.items.append(item)
            shared.wake()

    def close(self) -> None:
        """Signal that nothing more will be sent. Idempotent."""
        shared = self._shared
        with shared.lock:
            shared.sender_closed = True
            shared.wake()

    @property
    def is_closed(self) -> bool:
        """Whether either end has been closed."""
        return self._shared.sender_closed or self._shared.receiver_closed


class Receiver(Generic[T]):
    """Consuming end of a channel."""

    __slots__ = ("_shared",)

    def __init__(self, shared: _Shared[T]) -> None:
        self._shared = shared

    def try_recv(self) -> T:
        """
        Take the oldest item without waiting.

        Raises:
            ChannelEmpty: Nothing queued yet and the sender is still open.
            ChannelClosed: Nothing queued and the sender has closed.
        """
        shared = self._shared
        with shared.lock:
            if shared.items:
                return shared.items.popleft()
            if shared.sender_closed:
                raise ChannelClosed("Sending end of the channel is closed")
            raise ChannelEmpty("No item available")

    def peek(self) -> T:
        """
        The oldest item, left in place.

        Raises the same errors as `try_recv`.
        """
        shared = self._shared
        with shared.lock:
            if shared.items:
                return shared.items[0]
            if shared.sender_closed:
                raise ChannelClosed("Sending end of the channel is closed")
            raise ChannelEmpty("No item available")

    def register_waiter(self) -> asyncio.Future[None]:
        """
        Return a future resolved once `try_recv` can make progress.

        Resolved immediately when an item is already queued or the sender has
        closed. Replaces any earlier waiter: there is only one consumer.
        """
        loop = asyncio.get_running_loop()
        waiter: asyncio.Future[None] = loop.create_future()
        shared = self._shared
        with shared.lock:
            if shared.items or shared.sender_closed:
                waiter.set_result(None)
            else:
                shared.waiter = waiter
        return waiter

    async def recv(self) -> T:
        """
        Wait for the next item.

        Raises:
            ChannelClosed: The sender closed and every item has been taken.
        """
        while True:
            try:
                return self.try_recv()
            except ChannelEmpty:
                await self.register_waiter()

    def close(self) -> None:
        """Reject further sends. Items already queued can still be taken."""
        shared = self._shared
        with shared.lock:
            shared.receiver_closed = True

    def snapshot(self) -> list[T]:
        """Queued items, oldest first, without taking them."""
        with self._shared.lock:
            return list(self._shared.items)

    def __len__(self) -> int:
        with self._shared.lock:
            return len(self._shared.items)


def channel() -> tuple[Sender[T], Receiver[T]]:
    """Create a connected sender/receiver pair."""
    shared: _Shared[T] = _Shared()
    return Sender(shared), Receiver(shared)
