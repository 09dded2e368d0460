"""discord.py implementation of the :class:`~.events.Gateway` capabilities."""

from __future__ import annotations

import logging

import aiohttp
import discord

from ..errors import LookupFailure
from .events import InboundMessage, RelayEmbed, UserProfile

logger = logging.getLogger(__name__)

# Failures that say nothing about whether the target exists.
_TRANSIENT = (discord.HTTPException, discord.InvalidData, aiohttp.ClientError)


def to_inbound(message: discord.Message, self_id: int | None) -> InboundMessage:
    author = message.author
    return InboundMessage(
        id=message.id,
        author_id=author.id,
        channel_id=message.channel.id,
        content=message.content or "",
        timestamp=message.created_at,
        from_self=self_id is not None and author.id == self_id,
        author_is_bot=author.bot,
        author_name=author.display_name,
    )


def to_discord_embed(embed: RelayEmbed) -> discord.Embed:
    out = discord.Embed(
        title=embed.title,
        description=embed.description,
        color=embed.color,
        timestamp=embed.timestamp,
    )
    out.set_author(name=embed.author_name, icon_url=embed.author_icon_url)
    return out


def _avatar_url(user: discord.abc.User) -> str:
    asset = user.display_avatar
    try:
        return asset.with_format("webp").url
    except ValueError:
        return asset.url


class DiscordGateway:
    def __init__(self, client: discord.Client) -> None:
        self._client = client

    async def _messageable(self, channel_id: int) -> discord.abc.Messageable:
        channel = self._client.get_channel(channel_id)
        if channel is None:
            channel = await self._client.fetch_channel(channel_id)
        return channel

    async def send_reply(self, channel_id: int, text: str, reply_to: int) -> None:
        channel = await self._messageable(channel_id)
        reference = discord.MessageReference(
            message_id=reply_to, channel_id=channel_id, fail_if_not_exists=False,
        )
        await channel.send(text, reference=reference, mention_author=False)

    async def send_embed(self, channel_id: int, embed: RelayEmbed) -> None:
        channel = await self._messageable(channel_id)
        await channel.send(embed=to_discord_embed(embed))

    async def channel_exists(self, channel_id: int) -> bool:
        if self._client.get_channel(channel_id) is not None:
            return True
        try:
            await self._client.fetch_channel(channel_id)
        except (discord.NotFound, discord.Forbidden):
            return False
        except _TRANSIENT as exc:
            raise LookupFailure(f"channel {channel_id}: {exc}") from exc
        return True

    async def _user(self, user_id: int) -> discord.User:
        user = self._client.get_user(user_id)
        if user is not None:
            return user
        try:
            return await self._client.fetch_user(user_id)
        except _TRANSIENT as exc:
            raise LookupFailure(f"user {user_id}: {exc}") from exc

    async def dm_channel(self, user_id: int) -> int:
        user = await self._user(user_id)
        dm = user.dm_channel
        if dm is None:
            try:
                dm = await user.create_dm()
            except _TRANSIENT as exc:
                raise LookupFailure(f"DM channel for {user_id}: {exc}") from exc
        return dm.id

    async def user_profile(self, user_id: int) -> UserProfile:
        user = await self._user(user_id)
        return UserProfile(username=user.name, avatar_url=_avatar_url(user))

    async def category_channels(self, guild_id: int, category_id: int) -> frozenset[int]:
        """Ids of the guild channels whose parent category is *category_id*."""
        guild = self._client.get_guild(guild_id) or await self._client.fetch_guild(guild_id)
        channels = await guild.fetch_channels()
        return frozenset(
            c.id for c in channels if getattr(c, "category_id", None) == category_id
        )
