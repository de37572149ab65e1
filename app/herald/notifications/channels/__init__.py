"""Notification channel contract and bundled drivers."""

from herald.notifications.channels.base import NotificationChannel
from herald.notifications.channels.in_app import (
    InAppChannel,
    InAppMessage,
    InMemoryInAppStorage,
)
from herald.notifications.channels.webhook import WebhookChannel

__all__ = [
    "NotificationChannel",
    "InAppChannel",
    "InAppMessage",
    "InMemoryInAppStorage",
    "WebhookChannel",
]
