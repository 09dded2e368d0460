"""Shared pytest fixtures for app.relay tests."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from app.relay.messaging.events import InboundMessage, UserProfile
from app.relay.state.subscriptions import SubscriptionStore

BOT_ID = 1
MONITORED = 123
OTHER_MONITORED = 124
UNMONITORED = 999

_RELAY_ENV = (
    "BOT_TOKEN",
    "CATEGORY_ID",
    "DB_PATH",
    "GUILD_ID",
    "SUBSCRIBE_PREFIX",
    "UNSUBSCRIBE_PREFIX",
    "RELAY_CALL_TIMEOUT",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _isolate_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    for key in _RELAY_ENV:
        monkeypatch.delenv(key, raising=False)
    env_path = tmp_path / ".env"
    monkeypatch.setenv("DOTENV_PATH", str(env_path))
    return env_path


@pytest.fixture(autouse=True)
def _reset_singletons(_isolate_env: Path):
    from app.relay.util.singletons import reset_all_singletons

    reset_all_singletons()
    yield
    reset_all_singletons()


@pytest.fixture()
def env_path(_isolate_env: Path) -> Path:
    return _isolate_env


@pytest.fixture()
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "db" / "subscriptions.json"


@pytest.fixture()
def store(db_path: Path) -> SubscriptionStore:
    return SubscriptionStore(db_path)


@pytest.fixture()
def gateway() -> AsyncMock:
    gw = AsyncMock()
    gw.channel_exists.return_value = True
    gw.dm_channel.side_effect = lambda user_id: 50_000 + int(user_id)
    gw.user_profile.return_value = UserProfile(
        username="alice", avatar_url="https://cdn.example/avatar.webp",
    )
    return gw


@pytest.fixture()
def make_message() -> Callable[..., InboundMessage]:
    counter = iter(range(1000, 10_000))

    def _make(
        content: str = "hello",
        *,
        author_id: int = 42,
        channel_id: int = MONITORED,
        from_self: bool = False,
        author_is_bot: bool = False,
    ) -> InboundMessage:
        return InboundMessage(
            id=next(counter),
            author_id=author_id,
            channel_id=channel_id,
            content=content,
            timestamp=datetime(2024, 5, 1, 12, 0, tzinfo=UTC),
            from_self=from_self,
            author_is_bot=author_is_bot,
            author_name=f"user{author_id}",
        )

    return _make
