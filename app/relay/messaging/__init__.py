"""Channel messaging pipeline -- commands, fan-out and the Discord binding."""

from .broadcast import Broadcaster, BroadcastReport
from .commands import Command, CommandKind, CommandParser
from .events import Gateway, InboundMessage, RelayEmbed, UserProfile
from .pipeline import Flow, Pipeline

__all__ = [
    "BroadcastReport",
    "Broadcaster",
    "Command",
    "CommandKind",
    "CommandParser",
    "Flow",
    "Gateway",
    "InboundMessage",
    "Pipeline",
    "RelayEmbed",
    "UserProfile",
]
