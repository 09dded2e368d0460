"""Discord client -- feeds gateway messages through the relay pipeline."""

from __future__ import annotations

import logging

import discord

from ..config.settings import Settings
from ..state.subscriptions import SubscriptionStore
from .broadcast import Broadcaster
from .commands import CommandParser
from .gateway import DiscordGateway, to_inbound
from .pipeline import Pipeline

logger = logging.getLogger(__name__)


def relay_intents() -> discord.Intents:
    intents = discord.Intents.default()
    intents.message_content = True
    return intents


class RelayBot(discord.Client):
    def __init__(self, settings: Settings, store: SubscriptionStore) -> None:
        super().__init__(intents=relay_intents())
        self._settings = settings
        self._monitored: frozenset[int] = frozenset()
        self.gateway = DiscordGateway(self)
        timeout = settings.call_timeout
        parser = CommandParser(
            settings.subscribe_prefix,
            settings.unsubscribe_prefix,
            self.gateway.channel_exists,
            timeout=timeout,
        )
        self.pipeline = Pipeline.default(
            gateway=self.gateway,
            store=store,
            parser=parser,
            monitored=lambda: self._monitored,
            broadcaster=Broadcaster(store, self.gateway, timeout=timeout),
        )

    @property
    def monitored_channels(self) -> frozenset[int]:
        return self._monitored

    async def setup_hook(self) -> None:
        # Resolved once, before the gateway connection delivers any message.
        guild_id, category_id = self._settings.guild_id, self._settings.category_id
        if guild_id is None or category_id is None:
            raise RuntimeError("GUILD_ID and CATEGORY_ID must be configured")
        self._monitored = await self.gateway.category_channels(guild_id, category_id)
        logger.info(
            "Monitoring %d channel(s) in category %s of guild %s",
            len(self._monitored), category_id, guild_id,
        )
        if not self._monitored:
            logger.warning("Category %s has no channels; nothing will be relayed", category_id)

    async def on_ready(self) -> None:
        logger.info("Connected as %s (%s)", self.user, self.user.id if self.user else "?")

    async def on_message(self, message: discord.Message) -> None:
        self_id = self.user.id if self.user else None
        await self.pipeline.run(to_inbound(message, self_id))
