"""Multi-channel notification dispatch.

Registers channel drivers under logical names, resolves the channel that
handles a send (with readiness-based fallback) and spreads load or retries
across several drivers of one logical channel.

Usage Example:
    from herald.notifications import (
        ChannelConfig,
        FallbackStrategy,
        InAppChannel,
        Notification,
        NotificationManager,
        NotificationSender,
    )

    manager = NotificationManager()
    manager.register_channel("in_app", InAppChannel())
    manager.register_fallback_group(
        "chat",
        [(primary, ChannelConfig(priority=10)), (backup, ChannelConfig(priority=1))],
        FallbackStrategy.PRIORITY_FALLBACK,
    )

    sender = NotificationSender(manager)
    result = await sender.send(
        Notification(message="Deploy finished", user_id="u-1"),
        ["in_app", "chat"],
    )
"""

from herald.notifications.channels import (
    InAppChannel,
    InAppMessage,
    InMemoryInAppStorage,
    NotificationChannel,
    WebhookChannel,
)
from herald.notifications.events import (
    EventDispatcher,
    NotificationEvent,
    NotificationFailed,
    NotificationSending,
    NotificationSent,
)
from herald.notifications.exceptions import (
    AllDriversUnavailableError,
    ChannelConfigurationError,
    ChannelNotFoundError,
    NoDefaultChannelConfiguredError,
    NotificationError,
    NotificationValidationError,
    ProviderError,
)
from herald.notifications.fallback import FallbackGroup, FallbackMember
from herald.notifications.manager import ChannelFactory, NotificationManager
from herald.notifications.models import (
    ChannelConfig,
    ChannelType,
    DeliveryStrategy,
    DispatchResult,
    FallbackStrategy,
    ManagerConfig,
    Notification,
    NotificationPriority,
    NotificationResponse,
    NotificationStatus,
)
from herald.notifications.sender import NotificationSender

__all__ = [
    # Models
    "ChannelConfig",
    "ChannelType",
    "DeliveryStrategy",
    "DispatchResult",
    "FallbackStrategy",
    "ManagerConfig",
    "Notification",
    "NotificationPriority",
    "NotificationResponse",
    "NotificationStatus",
    # Exceptions
    "AllDriversUnavailableError",
    "ChannelConfigurationError",
    "ChannelNotFoundError",
    "NoDefaultChannelConfiguredError",
    "NotificationError",
    "NotificationValidationError",
    "ProviderError",
    # Channels
    "NotificationChannel",
    "InAppChannel",
    "InAppMessage",
    "InMemoryInAppStorage",
    "WebhookChannel",
    # Dispatch
    "ChannelFactory",
    "FallbackGroup",
    "FallbackMember",
    "NotificationManager",
    "NotificationSender",
    # Events
    "EventDispatcher",
    "NotificationEvent",
    "NotificationFailed",
    "NotificationSending",
    "NotificationSent",
]
