"""Ordered, short-circuiting handler chain run once per inbound message.

Each handler returns :attr:`Flow.CONTINUE` to pass the message on or
:attr:`Flow.STOP` to end processing of that message. Nothing is shared
between runs, so any number of messages can be in flight at once; the
only cross-message coordination is the subscription store's lock.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Collection, Sequence
from enum import Enum

from ..errors import InvalidCommandTarget
from ..state.subscriptions import SubscriptionStore
from .broadcast import Broadcaster
from .commands import CommandKind, CommandParser
from .events import Gateway, InboundMessage
from .formatting import invalid_target_reply, subscribed_reply, unsubscribed_reply

logger = logging.getLogger(__name__)


class Flow(Enum):
    CONTINUE = "continue"
    STOP = "stop"


Handler = Callable[[InboundMessage], Awaitable[Flow]]


class Pipeline:
    def __init__(self, handlers: Sequence[Handler]) -> None:
        self._handlers = tuple(handlers)

    @property
    def handlers(self) -> tuple[Handler, ...]:
        return self._handlers

    async def run(self, message: InboundMessage) -> Flow:
        """Run the chain for *message*; failures end this message only."""
        for handler in self._handlers:
            try:
                flow = await handler(message)
            except Exception:
                logger.exception(
                    "Handler %s failed on message %s in channel %s",
                    _name(handler), message.id, message.channel_id,
                )
                return Flow.STOP
            if flow is Flow.STOP:
                logger.debug("Message %s stopped at %s", message.id, _name(handler))
                return Flow.STOP
        return Flow.CONTINUE

    @classmethod
    def default(
        cls,
        *,
        gateway: Gateway,
        store: SubscriptionStore,
        parser: CommandParser,
        monitored: Callable[[], Collection[int]],
        broadcaster: Broadcaster | None = None,
    ) -> Pipeline:
        """The standard chain: origin, scope, subscribe, unsubscribe, fan-out."""
        broadcaster = broadcaster or Broadcaster(store, gateway)
        return cls([
            ignore_bots,
            ScopeFilter(monitored),
            SubscribeHandler(parser, store, gateway),
            UnsubscribeHandler(parser, store, gateway),
            FanOutHandler(broadcaster),
        ])


def _name(handler: Handler) -> str:
    return getattr(handler, "__name__", type(handler).__name__)


async def ignore_bots(message: InboundMessage) -> Flow:
    if message.from_self or message.author_is_bot:
        return Flow.STOP
    return Flow.CONTINUE


class ScopeFilter:
    """Stops messages outside the monitored channel set.

    *monitored* is called per message so the set resolved at startup is
    picked up once it is available; it is never mutated afterwards.
    """

    def __init__(self, monitored: Callable[[], Collection[int]]) -> None:
        self._monitored = monitored

    async def __call__(self, message: InboundMessage) -> Flow:
        if message.channel_id in self._monitored():
            return Flow.CONTINUE
        return Flow.STOP


class _CommandHandler(ABC):
    action: CommandKind

    def __init__(self, parser: CommandParser, store: SubscriptionStore, gateway: Gateway) -> None:
        self._parser = parser
        self._store = store
        self._gateway = gateway

    async def __call__(self, message: InboundMessage) -> Flow:
        if self._parser.recognize(message.content) is not self.action:
            return Flow.CONTINUE

        command = await self._parser.parse(message.content)
        if command.kind is CommandKind.INVALID_TARGET or command.target is None:
            rejected = InvalidCommandTarget(command.raw)
            action = command.action or command.kind
            logger.info("User %s: %s rejected, %s", message.author_id, action.value, rejected)
            await self._gateway.send_reply(message.channel_id, invalid_target_reply(rejected.raw), message.id)
            return Flow.STOP

        # StorageFailure propagates to the runner; no confirmation is sent.
        text = await self.apply(message.author_id, command.target)
        await self._gateway.send_reply(message.channel_id, text, message.id)
        return Flow.STOP

    @abstractmethod
    async def apply(self, user_id: int, channel_id: int) -> str:
        """Mutate the store and return the confirmation text."""


class SubscribeHandler(_CommandHandler):
    action = CommandKind.SUBSCRIBE

    async def apply(self, user_id: int, channel_id: int) -> str:
        await self._store.add_subscription(user_id, channel_id)
        return subscribed_reply(channel_id)


class UnsubscribeHandler(_CommandHandler):
    action = CommandKind.UNSUBSCRIBE

    async def apply(self, user_id: int, channel_id: int) -> str:
        await self._store.remove_subscription(user_id, channel_id)
        return unsubscribed_reply(channel_id)


class FanOutHandler:
    def __init__(self, broadcaster: Broadcaster) -> None:
        self._broadcaster = broadcaster

    async def __call__(self, message: InboundMessage) -> Flow:
        await self._broadcaster.broadcast(message)
        return Flow.STOP
