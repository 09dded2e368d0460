"""Exception hierarchy shared by the store, the pipeline and the gateway."""

from __future__ import annotations


class RelayError(Exception):
    """Base class for every error raised by the relay."""


class ConfigError(RelayError):
    """Required configuration is missing or malformed."""

    def __init__(self, problems: list[str]) -> None:
        self.problems = list(problems)
        super().__init__("invalid configuration: " + "; ".join(self.problems))


class StorageFailure(RelayError):
    """The subscription document could not be read or written."""


class LookupFailure(RelayError):
    """A channel or user could not be resolved through the gateway."""


class InvalidCommandTarget(RelayError):
    """A command named a channel that is malformed or does not exist."""

    def __init__(self, raw: str) -> None:
        self.raw = raw
        super().__init__(f"invalid command target: {raw!r}")


class DeliveryFailure(RelayError):
    """A relayed copy could not be delivered to one subscriber."""

    def __init__(self, user_id: int | str, reason: str) -> None:
        self.user_id = user_id
        self.reason = reason
        super().__init__(f"delivery to {user_id} failed: {reason}")
