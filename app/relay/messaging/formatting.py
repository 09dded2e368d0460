"""User-facing texts and the relayed embed layout."""

from __future__ import annotations

from .events import InboundMessage, RelayEmbed, UserProfile

RELAY_COLOR = 0x888888


def channel_mention(channel_id: int) -> str:
    return f"<#{channel_id}>"


def subscribed_reply(channel_id: int) -> str:
    return f"Subscribed to {channel_mention(channel_id)}. New posts there will be sent to your DMs."


def unsubscribed_reply(channel_id: int) -> str:
    return f"Unsubscribed from {channel_mention(channel_id)}."


def invalid_target_reply(raw: str) -> str:
    shown = raw.replace("`", "'") or " "
    return f"`{shown}` is not a channel I can subscribe you to."


def build_relay_embed(message: InboundMessage, author: UserProfile) -> RelayEmbed:
    return RelayEmbed(
        title=channel_mention(message.channel_id),
        description=message.content,
        author_name=author.username,
        author_icon_url=author.avatar_url,
        timestamp=message.timestamp,
        color=RELAY_COLOR,
    )
