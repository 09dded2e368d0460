"""Persistent state."""

from .subscriptions import (
    Document,
    SubscriptionRecord,
    SubscriptionStore,
    get_subscription_store,
)

__all__ = [
    "Document",
    "SubscriptionRecord",
    "SubscriptionStore",
    "get_subscription_store",
]
