"""Gateway-neutral message and capability types used by the pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol


@dataclass(frozen=True)
class InboundMessage:
    id: int
    author_id: int
    channel_id: int
    content: str
    timestamp: datetime
    from_self: bool = False
    author_is_bot: bool = False
    author_name: str = ""


@dataclass(frozen=True)
class UserProfile:
    username: str
    avatar_url: str | None = None


@dataclass(frozen=True)
class RelayEmbed:
    """Formatted copy of a source message as delivered to a subscriber."""

    title: str
    description: str
    author_name: str
    author_icon_url: str | None
    timestamp: datetime
    color: int = 0x888888


class Gateway(Protocol):
    """Outbound capabilities of the chat platform client.

    ``channel_exists`` returns ``False`` for channels that are missing or
    not visible to the bot and raises ``LookupFailure`` on transient
    errors. ``dm_channel`` and ``user_profile`` raise ``LookupFailure``
    when the user cannot be resolved.
    """

    async def send_reply(self, channel_id: int, text: str, reply_to: int) -> None: ...

    async def send_embed(self, channel_id: int, embed: RelayEmbed) -> None: ...

    async def channel_exists(self, channel_id: int) -> bool: ...

    async def dm_channel(self, user_id: int) -> int: ...

    async def user_profile(self, user_id: int) -> UserProfile: ...
