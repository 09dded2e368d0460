"""Subscribe / unsubscribe command recognition and target validation."""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum

from ..errors import LookupFailure
from ..util.async_helpers import bounded

logger = logging.getLogger(__name__)

ChannelExistsFn = Callable[[int], Awaitable[bool]]

_DIGITS = re.compile(r"[0-9]+")


class CommandKind(Enum):
    NOT_A_COMMAND = "not_a_command"
    SUBSCRIBE = "subscribe"
    UNSUBSCRIBE = "unsubscribe"
    INVALID_TARGET = "invalid_target"


@dataclass(frozen=True)
class Command:
    """Parsed command.

    ``target`` is set for SUBSCRIBE / UNSUBSCRIBE. For INVALID_TARGET,
    ``raw`` holds the rejected text and ``action`` the command it came from.
    """

    kind: CommandKind
    target: int | None = None
    raw: str = ""
    action: CommandKind | None = None

    @classmethod
    def not_a_command(cls) -> Command:
        return cls(CommandKind.NOT_A_COMMAND)

    @classmethod
    def invalid(cls, raw: str, action: CommandKind) -> Command:
        return cls(CommandKind.INVALID_TARGET, raw=raw, action=action)


class CommandParser:
    def __init__(
        self,
        subscribe_prefix: str,
        unsubscribe_prefix: str,
        channel_exists: ChannelExistsFn,
        *,
        timeout: float | None = None,
    ) -> None:
        # Longest prefix first so "!sub" never shadows e.g. "!subx".
        self._prefixes: tuple[tuple[str, CommandKind], ...] = tuple(sorted(
            ((subscribe_prefix, CommandKind.SUBSCRIBE), (unsubscribe_prefix, CommandKind.UNSUBSCRIBE)),
            key=lambda p: len(p[0]),
            reverse=True,
        ))
        self._channel_exists = channel_exists
        self._timeout = timeout

    def _split(self, text: str) -> tuple[CommandKind, str]:
        stripped = text.strip()
        for prefix, kind in self._prefixes:
            if stripped.startswith(prefix):
                return kind, stripped[len(prefix):].strip()
        return CommandKind.NOT_A_COMMAND, ""

    def recognize(self, text: str) -> CommandKind:
        return self._split(text)[0]

    async def parse(self, text: str) -> Command:
        kind, remainder = self._split(text)
        if kind is CommandKind.NOT_A_COMMAND:
            return Command.not_a_command()

        if not _DIGITS.fullmatch(remainder):
            return Command.invalid(remainder, kind)
        target = int(remainder)

        if not await self._validate(target):
            return Command.invalid(remainder, kind)
        return Command(kind, target=target, raw=remainder)

    async def _validate(self, channel_id: int) -> bool:
        try:
            return bool(await bounded(self._channel_exists(channel_id), self._timeout))
        except (LookupFailure, asyncio.TimeoutError) as exc:
            logger.info("Channel %s could not be verified: %s", channel_id, str(exc) or type(exc).__name__)
        except Exception:
            logger.warning("Channel %s validation raised unexpectedly", channel_id, exc_info=True)
        return False
