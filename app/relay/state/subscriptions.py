"""Subscription document and the lock-guarded store around it.

On disk the document is::

    {"<user id>": {"subscribed": ["<channel id>", ...]}, ...}

Channel ids are Python ints in memory and decimal strings on disk, so
snowflakes larger than 2**53 never pass through a float.

Every public coroutine holds the store lock for its whole
load -> mutate/read -> save cycle. ``load`` and ``save`` are the raw I/O
steps and must only be called with :attr:`SubscriptionStore.lock` held.
"""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..util.async_helpers import run_sync
from ..util.singletons import register_singleton
from ._json_store import JsonStore

logger = logging.getLogger(__name__)

_DIGITS = re.compile(r"[0-9]+")


@dataclass
class SubscriptionRecord:
    subscribed: list[int] = field(default_factory=list)


Document = dict[str, SubscriptionRecord]


def to_channel_id(value: Any) -> int:
    """Coerce a stored channel id (digit string or int) to ``int``."""
    if isinstance(value, bool):
        raise ValueError(f"not a channel id: {value!r}")
    if isinstance(value, int) and value >= 0:
        return value
    if isinstance(value, str) and _DIGITS.fullmatch(value):
        return int(value)
    raise ValueError(f"not a channel id: {value!r}")


def serialize_document(doc: Document) -> dict[str, Any]:
    return {
        user_id: {"subscribed": [str(cid) for cid in record.subscribed]}
        for user_id, record in doc.items()
    }


def deserialize_document(data: Any) -> Document:
    """Build a :data:`Document` from decoded JSON.

    Raises ``ValueError`` if *data* is not an object. Malformed records
    and ids inside an otherwise valid document are skipped with a warning.
    """
    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object, got {type(data).__name__}")

    doc: Document = {}
    for user_id, raw in data.items():
        entries = raw.get("subscribed") if isinstance(raw, dict) else None
        if not isinstance(entries, list):
            logger.warning("[store] dropping malformed record for user %s", user_id)
            continue
        channels: list[int] = []
        for entry in entries:
            try:
                channels.append(to_channel_id(entry))
            except ValueError:
                logger.warning("[store] dropping channel %r from user %s", entry, user_id)
        doc[str(user_id)] = SubscriptionRecord(subscribed=channels)
    return doc


class SubscriptionStore:
    """JSON-file-backed subscription document behind one ``asyncio.Lock``."""

    def __init__(self, path: Path) -> None:
        self._file = JsonStore(path, default={})
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._file.path

    @property
    def lock(self) -> asyncio.Lock:
        return self._lock

    # -- raw I/O (lock must be held) ---------------------------------------

    async def load(self) -> Document:
        data = await run_sync(self._file.load)
        try:
            return deserialize_document(data)
        except ValueError as exc:
            logger.warning("[store] %s holds no usable document (%s); treating as empty", self.path, exc)
            return {}

    async def save(self, doc: Document) -> None:
        await run_sync(self._file.save, serialize_document(doc))

    # -- locked operations -------------------------------------------------

    async def read(self) -> Document:
        async with self._lock:
            return await self.load()

    async def add_subscription(self, user_id: int | str, channel_id: int) -> bool:
        """Subscribe *user_id* to *channel_id*; returns ``False`` if already present."""
        key = str(user_id)
        async with self._lock:
            doc = await self.load()
            record = doc.setdefault(key, SubscriptionRecord())
            added = channel_id not in record.subscribed
            if added:
                record.subscribed.append(channel_id)
            await self.save(doc)
        logger.info("[store] user %s subscribed to %s (new=%s)", key, channel_id, added)
        return added

    async def remove_subscription(self, user_id: int | str, channel_id: int) -> bool:
        """Drop every occurrence of *channel_id*; returns whether any was removed."""
        key = str(user_id)
        async with self._lock:
            doc = await self.load()
            record = doc.setdefault(key, SubscriptionRecord())
            before = len(record.subscribed)
            record.subscribed = [cid for cid in record.subscribed if cid != channel_id]
            removed = len(record.subscribed) != before
            await self.save(doc)
        logger.info("[store] user %s unsubscribed from %s (removed=%s)", key, channel_id, removed)
        return removed

    async def subscriptions_of(self, user_id: int | str) -> list[int]:
        doc = await self.read()
        record = doc.get(str(user_id))
        return list(record.subscribed) if record else []

    async def subscribers_of(self, channel_id: int) -> list[str]:
        """User ids whose list contains *channel_id*, in document order."""
        doc = await self.read()
        return [user_id for user_id, record in doc.items() if channel_id in record.subscribed]


_store: SubscriptionStore | None = None


def get_subscription_store(path: Path | None = None) -> SubscriptionStore:
    """Return the process-wide store, creating it on first use.

    *path* defaults to ``DB_PATH`` from settings and is ignored once the
    store exists.
    """
    global _store
    if _store is None:
        if path is None:
            from ..config.settings import cfg

            if cfg.db_path is None:
                raise RuntimeError("DB_PATH is not configured")
            path = cfg.db_path
        _store = SubscriptionStore(path)
    return _store


@register_singleton
def _reset_store() -> None:
    global _store
    _store = None
