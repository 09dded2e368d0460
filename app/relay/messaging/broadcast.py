"""Fan-out of a monitored-channel message to its subscribers' DMs."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

from ..errors import DeliveryFailure, LookupFailure
from ..state.subscriptions import SubscriptionStore
from ..util.async_helpers import bounded
from ..util.result import Result
from .events import Gateway, InboundMessage, RelayEmbed, UserProfile
from .formatting import build_relay_embed

logger = logging.getLogger(__name__)


@dataclass
class BroadcastReport:
    delivered: list[str] = field(default_factory=list)
    failed: list[DeliveryFailure] = field(default_factory=list)

    @property
    def attempted(self) -> int:
        return len(self.delivered) + len(self.failed)


class Broadcaster:
    def __init__(self, store: SubscriptionStore, gateway: Gateway, *, timeout: float | None = None) -> None:
        self._store = store
        self._gateway = gateway
        self._timeout = timeout

    async def broadcast(self, message: InboundMessage) -> BroadcastReport:
        # The store lock is released before any network I/O starts.
        recipients = await self._store.subscribers_of(message.channel_id)
        report = BroadcastReport()
        if not recipients:
            logger.debug("[fanout] no subscribers for channel %s", message.channel_id)
            return report

        embed = build_relay_embed(message, await self._author_profile(message))
        results = await asyncio.gather(*(self._deliver(uid, embed) for uid in recipients))

        for result in results:
            if result:
                report.delivered.append(result.subject)
            else:
                failure = DeliveryFailure(result.subject, result.message)
                report.failed.append(failure)
                logger.warning("[fanout] %s", failure)

        logger.info(
            "[fanout] message %s from channel %s: %d delivered, %d failed",
            message.id, message.channel_id, len(report.delivered), len(report.failed),
        )
        return report

    async def _author_profile(self, message: InboundMessage) -> UserProfile:
        try:
            return await bounded(self._gateway.user_profile(message.author_id), self._timeout)
        except (LookupFailure, asyncio.TimeoutError) as exc:
            logger.warning("[fanout] author %s lookup failed: %s", message.author_id, str(exc) or "timeout")
            return UserProfile(username=message.author_name or str(message.author_id))

    async def _deliver(self, user_id: str, embed: RelayEmbed) -> Result:
        try:
            dm_id = await bounded(self._gateway.dm_channel(int(user_id)), self._timeout)
            await bounded(self._gateway.send_embed(dm_id, embed), self._timeout)
        except asyncio.TimeoutError as exc:
            return Result.fail("timed out", subject=user_id, error=exc)
        except Exception as exc:
            return Result.fail(str(exc) or type(exc).__name__, subject=user_id, error=exc)
        return Result.ok(subject=user_id)
