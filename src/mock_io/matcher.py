"""
Direction-aware action matching.

The script is one ordered stream of actions for both directions. A request
for direction D only ever consumes actions of direction D; an action for the
other direction met on the way is held back in a one-action lookahead slot
until a request of its own direction arrives.

::

    request(D) --> slot holds D? ---yes---> match, free the slot
                        |
                        no
                        v
                 channel.peek() --empty--> no match yet (wait for the handle)
                        |       --closed--> ScriptExhausted
                        v
                 action is D? ---yes---> take it, match
                        |
                        no --> slot free? --yes--> take it, hold back, peek again
                                   |
                                   no --> no match yet (wait for the slot)

Holding back keeps true script order across directions, which is what the
event order is checked against. Two separate per-direction queues would lose it.
"""

from __future__ import annotations

import asyncio
import logging

from .action import Action, Direction
from .channel import Receiver, Sender
from .config import MockConfig
from .events import Event, event_for
from .exceptions import ChannelClosed, ChannelEmpty, ScriptExhausted

logger = logging.getLogger(__name__)


class ActionQueue:
    """Hands out scripted actions by direction and reports each as an event."""

    __slots__ = ("_actions", "_events", "_config", "_held", "_blocked", "_slot_waiter")

    def __init__(
        self,
        actions: Receiver[Action],
        events: Sender[Event],
        config: MockConfig | None = None,
    ) -> None:
        """Wrap the receiving end of the action channel and the sending end of the event channel."""
        self._actions = actions
        self._events = events
        self._config = config or MockConfig()
        self._held: Action | None = None
        self._blocked = False
        self._slot_waiter: asyncio.Future[None] | None = None

    @property
    def held(self) -> Action | None:
        """The action waiting in the lookahead slot, if any."""
        return self._held

    def pop(self, direction: Direction) -> Action | None:
        """
        Take the next action for `direction`.

        A match is reported on the event channel before it is returned.

        Returns:
            The matched action, or None when nothing for `direction` is
            available yet. That includes the case where the next action in
            the channel is for the other direction while the slot is already
            taken: it stays in the channel until the slot frees up.

        Raises:
            ScriptExhausted: The handle closed the script and nothing is left.
            ChannelClosed: The event channel is gone (the handle was dropped
                before the mock).
        """
        self._blocked = False

        if self._held is not None and self._held.direction is direction:
            action, self._held = self._held, None
            self._release_slot()
            return self._matched(action)

        while True:
            try:
                action = self._actions.peek()
            except ChannelEmpty:
                return None
            except ChannelClosed:
                raise ScriptExhausted(
                    f"{self._config.name}: script closed by the handle while a "
                    f"{direction.value} was still expected"
                ) from None

            if action.direction is not direction and self._held is not None:
                logger.debug(
                    "%s: %s waits for the slot held by %s",
                    self._config.name,
                    action.describe(self._config),
                    self._held.describe(self._config),
                )
                self._blocked = True
                return None

            # Single consumer: the peeked action is still at the front.
            self._actions.try_recv()
            if action.direction is direction:
                return self._matched(action)

            logger.debug(
                "%s: holding back %s until a %s is requested",
                self._config.name,
                action.describe(self._config),
                action.direction.value,
            )
            self._held = action

    def wait(self) -> asyncio.Future[None]:
        """
        Future resolved once `pop` may make progress.

        After a `pop` that stopped on a full slot, that is when the slot is
        freed; otherwise it is when the action channel changes.
        """
        if not self._blocked:
            return self._actions.register_waiter()
        waiter: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._slot_waiter = waiter
        return waiter

    def pending(self) -> list[Action]:
        """Every action not yet consumed, in script order."""
        held = [self._held] if self._held is not None else []
        return held + self._actions.snapshot()

    def close(self) -> None:
        """Stop accepting actions and events. Pending actions stay inspectable."""
        self._actions.close()
        self._events.close()

    def _release_slot(self) -> None:
        waiter, self._slot_waiter = self._slot_waiter, None
        if waiter is not None and not waiter.done():
            waiter.set_result(None)

    def _matched(self, action: Action) -> Action:
        event = event_for(action)
        logger.debug("%s: matched %s", self._config.name, action.describe(self._config))
        self._events.send(event)
        return action
