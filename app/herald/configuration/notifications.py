"""Notification dispatch settings."""

from typing import Optional

from pydantic import Field, field_validator

from herald.configuration.base import FeatureSettings
from herald.notifications.models import DeliveryStrategy


class NotificationSettings(FeatureSettings):
    """Notification registry and delivery configuration.

    Environment Variables:
        NOTIFICATIONS_DEFAULT_CHANNEL: Channel returned by get_default_channel()
        NOTIFICATIONS_ENABLE_FALLBACK: Scan other ready channels when the
            preferred one is unavailable (default: True)
        NOTIFICATIONS_DELIVERY_STRATEGY: 'best-effort' or 'all-or-nothing'
        NOTIFICATIONS_WEBHOOK_URL: Incoming webhook URL for the chat channel
        NOTIFICATIONS_WEBHOOK_TIMEOUT_SECONDS: HTTP timeout for webhook posts

    Example:
        ```python
        from herald.configuration import settings

        manager = NotificationManager.from_settings(settings)
        strategy = settings.notifications.delivery_strategy
        ```
    """

    default_channel: Optional[str] = Field(
        default=None,
        alias="NOTIFICATIONS_DEFAULT_CHANNEL",
        description="Name of the default notification channel",
    )
    enable_fallback: bool = Field(
        default=True,
        alias="NOTIFICATIONS_ENABLE_FALLBACK",
        description="Fall back to any ready channel when the preferred one is not ready",
    )
    delivery_strategy: DeliveryStrategy = Field(
        default=DeliveryStrategy.BEST_EFFORT,
        alias="NOTIFICATIONS_DELIVERY_STRATEGY",
        description="Multi-channel delivery strategy: 'best-effort' or 'all-or-nothing'",
    )
    webhook_url: Optional[str] = Field(
        default=None,
        alias="NOTIFICATIONS_WEBHOOK_URL",
        description="Incoming webhook URL used by the chat webhook channel",
    )
    webhook_timeout_seconds: float = Field(
        default=10.0,
        alias="NOTIFICATIONS_WEBHOOK_TIMEOUT_SECONDS",
        description="Timeout for webhook HTTP calls (seconds)",
    )

    @field_validator("delivery_strategy", mode="before")
    @classmethod
    def normalize_delivery_strategy(cls, v):
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("default_channel")
    @classmethod
    def normalize_default_channel(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v.strip().lower()
