"""Notification channel registry.

Single source of truth mapping logical channel names to channel instances,
lazily-built factories and fallback groups. Resolves which channel handles a
send, including readiness-based fallback across registered channels.

Usage Example:
    from herald.notifications import (
        ChannelConfig,
        FallbackStrategy,
        ManagerConfig,
        NotificationManager,
    )

    manager = (
        NotificationManager(ManagerConfig(default_channel="email"))
        .register_channel("in_app", InAppChannel(), ChannelConfig(priority=1))
        .register_factory("chat", WebhookChannel, ChannelConfig(webhook_url=url))
        .register_fallback_group(
            "email",
            [(resend, ChannelConfig(priority=10)), (smtp, ChannelConfig(priority=1))],
            FallbackStrategy.PRIORITY_FALLBACK,
        )
    )

    channel = manager.get_channel_with_fallback("chat")
    if channel is None:
        ...  # no channel available; the caller decides whether that is fatal
"""

import itertools
import random
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, TYPE_CHECKING

from herald.logging import get_module_logger
from herald.notifications.channels.base import NotificationChannel
from herald.notifications.exceptions import (
    AllDriversUnavailableError,
    ChannelConfigurationError,
    ChannelNotFoundError,
    NoDefaultChannelConfiguredError,
)
from herald.notifications.fallback import FallbackGroup, MemberSpec
from herald.notifications.models import (
    ChannelConfig,
    FallbackStrategy,
    ManagerConfig,
    Notification,
    NotificationResponse,
)

if TYPE_CHECKING:
    from herald.configuration import Settings

logger = get_module_logger()

ChannelFactory = Callable[[ChannelConfig], NotificationChannel]


def _normalize(name: str) -> str:
    return name.strip().lower()


@dataclass
class _ChannelEntry:
    """Registry slot for one logical channel.

    Attributes:
        sequence: Monotonic registration number, the priority tie-break key
        priority: Sort priority taken from the registration config
        channel: Built instance (None until a lazy factory is resolved)
        factory: Factory for lazy construction
        config: Config handed to the factory
    """

    name: str
    sequence: int
    priority: int = 0
    channel: Optional[NotificationChannel] = None
    factory: Optional[ChannelFactory] = None
    config: Optional[ChannelConfig] = None


class NotificationManager:
    """Registry of notification channels.

    Attributes:
        default_channel: Name returned by get_default_channel(), if any
        fallback_enabled: Whether get_channel_with_fallback() scans other channels

    Example:
        manager = NotificationManager()
        manager.register_channel("in_app", InAppChannel())
        channel = manager.get_channel("in_app")
    """

    def __init__(self, config: Optional[ManagerConfig] = None):
        """Initialize the registry.

        Args:
            config: Optional ManagerConfig (default_channel, enable_fallback).
                A default channel that is not registered yet is accepted and
                checked when get_default_channel() is called.
        """
        config = config or ManagerConfig()
        self._entries: Dict[str, _ChannelEntry] = {}
        self._sequence = itertools.count()
        self._default_channel: Optional[str] = (
            _normalize(config.default_channel) if config.default_channel else None
        )
        self._enable_fallback = config.enable_fallback

        logger.info(
            "initialized_notification_manager",
            default_channel=self._default_channel,
            fallback_enabled=self._enable_fallback,
        )

    @classmethod
    def from_settings(cls, settings: "Settings") -> "NotificationManager":
        """Create a registry from application settings.

        Args:
            settings: Settings instance with a notifications section

        Returns:
            NotificationManager with no channels registered yet
        """
        return cls(
            ManagerConfig(
                default_channel=settings.notifications.default_channel,
                enable_fallback=settings.notifications.enable_fallback,
            )
        )

    @property
    def default_channel(self) -> Optional[str]:
        return self._default_channel

    @property
    def fallback_enabled(self) -> bool:
        return self._enable_fallback

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register_factory(
        self,
        name: str,
        factory: ChannelFactory,
        config: Optional[ChannelConfig] = None,
    ) -> "NotificationManager":
        """Register a channel factory, built lazily on first lookup.

        Re-registering a name replaces the previous binding.

        Args:
            name: Logical channel name
            factory: Callable building the driver from a ChannelConfig
            config: Config passed to the factory (default: ChannelConfig())

        Returns:
            self, for chained configuration
        """
        config = config or ChannelConfig()
        if not config.enabled:
            logger.info("channel_factory_disabled", channel=_normalize(name))
            return self

        key = _normalize(name)
        self._entries[key] = _ChannelEntry(
            name=key,
            sequence=next(self._sequence),
            priority=config.priority,
            factory=factory,
            config=config,
        )
        logger.debug("channel_factory_registered", channel=key, priority=config.priority)
        return self

    def register_channel(
        self,
        name: str,
        channel: NotificationChannel,
        config: Optional[ChannelConfig] = None,
    ) -> "NotificationManager":
        """Register a channel instance.

        Re-registering a name replaces the previous binding (last write wins).

        Args:
            name: Logical channel name
            channel: Driver or FallbackGroup instance
            config: Optional config; only its priority is used here

        Returns:
            self, for chained configuration
        """
        key = _normalize(name)
        priority = config.priority if config else 0
        replaced = key in self._entries
        self._entries[key] = _ChannelEntry(
            name=key,
            sequence=next(self._sequence),
            priority=priority,
            channel=channel,
            config=config,
        )
        logger.debug(
            "channel_registered",
            channel=key,
            driver=channel.channel_name,
            priority=priority,
            replaced=replaced,
        )
        return self

    def register_fallback_group(
        self,
        name: str,
        members: Sequence[MemberSpec],
        strategy: FallbackStrategy = FallbackStrategy.PRIORITY_FALLBACK,
        config: Optional[ChannelConfig] = None,
        rng: Optional[random.Random] = None,
    ) -> "NotificationManager":
        """Register several drivers behind one logical channel.

        Args:
            name: Logical channel name
            members: Drivers with their priority/weight configs
            strategy: Selection strategy for the group
            config: Optional config; its priority orders the group among
                other channels
            rng: Random source for the random strategy

        Returns:
            self, for chained configuration

        Raises:
            ChannelConfigurationError: Empty group or invalid weights
        """
        group = FallbackGroup(_normalize(name), members, strategy=strategy, rng=rng)
        logger.info(
            "fallback_group_registered",
            channel=group.channel_name,
            strategy=group.strategy.value,
            driver_count=len(group.members),
        )
        return self.register_channel(name, group, config)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get_channel(self, name: str) -> NotificationChannel:
        """Exact lookup by name; readiness is not considered.

        Raises:
            ChannelNotFoundError: Name is not registered
            ChannelConfigurationError: Lazy factory failed to build the driver
        """
        entry = self._entries.get(_normalize(name))
        if entry is None:
            raise ChannelNotFoundError(
                f"Notification channel '{name}' is not registered",
                details={
                    "channel": name,
                    "available_channels": self.get_available_channels(),
                },
            )
        return self._resolve(entry)

    def get_default_channel(self) -> NotificationChannel:
        """Return the configured default channel.

        Raises:
            NoDefaultChannelConfiguredError: No default was set
            ChannelNotFoundError: The configured default is not registered
        """
        if self._default_channel is None:
            raise NoDefaultChannelConfiguredError(
                "No default notification channel configured"
            )
        return self.get_channel(self._default_channel)

    def get_channel_with_fallback(
        self, preferred_name: Optional[str] = None
    ) -> Optional[NotificationChannel]:
        """Resolve the best available channel.

        1. The preferred channel, if registered and ready.
        2. Otherwise, when fallback is enabled, the first ready channel in
           sorted order (priority desc, registration asc).
        3. Otherwise None.

        Never raises; None means "no channel available".
        """
        if preferred_name is not None:
            entry = self._entries.get(_normalize(preferred_name))
            if entry is not None and self._is_entry_ready(entry):
                return self._resolve(entry)
            logger.warning(
                "preferred_channel_unavailable",
                channel=preferred_name,
                registered=entry is not None,
                fallback_enabled=self._enable_fallback,
            )

        if not self._enable_fallback:
            return None

        for entry in self._sorted_entries():
            if self._is_entry_ready(entry):
                if preferred_name is not None:
                    logger.info(
                        "using_fallback_channel",
                        preferred=preferred_name,
                        channel=entry.name,
                    )
                return self._resolve(entry)

        logger.warning(
            "no_ready_channel",
            preferred=preferred_name,
            available_channels=self.get_available_channels(),
        )
        return None

    def get_available_channels(self) -> List[str]:
        """All registered channel names, in sorted order."""
        return [entry.name for entry in self._sorted_entries()]

    def get_ready_channels(self) -> List[str]:
        """Registered channel names passing is_ready(), in sorted order."""
        return [
            entry.name for entry in self._sorted_entries() if self._is_entry_ready(entry)
        ]

    def has_channel(self, name: str) -> bool:
        return _normalize(name) in self._entries

    def is_channel_ready(self, name: str) -> bool:
        entry = self._entries.get(_normalize(name))
        return entry is not None and self._is_entry_ready(entry)

    # ------------------------------------------------------------------
    # Configuration mutators
    # ------------------------------------------------------------------

    def set_default_channel(self, name: str) -> "NotificationManager":
        """Set the default channel.

        Raises:
            ChannelNotFoundError: Name is not registered
        """
        if not self.has_channel(name):
            raise ChannelNotFoundError(
                f"Cannot set '{name}' as default channel. Channel not registered.",
                details={
                    "channel": name,
                    "available_channels": self.get_available_channels(),
                },
            )
        self._default_channel = _normalize(name)
        return self

    def set_fallback_enabled(self, enabled: bool) -> "NotificationManager":
        self._enable_fallback = enabled
        return self

    def remove_channel(self, name: str) -> "NotificationManager":
        """Remove a channel; unknown names are ignored."""
        key = _normalize(name)
        if self._entries.pop(key, None) is not None:
            logger.debug("channel_removed", channel=key)
        if self._default_channel == key:
            self._default_channel = None
        return self

    def clear(self) -> "NotificationManager":
        """Remove every channel and the default channel."""
        self._entries.clear()
        self._default_channel = None
        logger.debug("channels_cleared")
        return self

    # ------------------------------------------------------------------
    # Sending
    # ------------------------------------------------------------------

    async def send(
        self, name: str, notification: Notification
    ) -> NotificationResponse:
        """Send through the named channel.

        Raises:
            ChannelNotFoundError: Name is not registered
        """
        channel = self.get_channel(name)
        return await channel.send(notification)

    async def send_with_fallback(
        self, notification: Notification, preferred_name: Optional[str] = None
    ) -> NotificationResponse:
        """Send through get_channel_with_fallback(preferred_name).

        Raises:
            AllDriversUnavailableError: No channel is available
        """
        channel = self.get_channel_with_fallback(preferred_name)
        if channel is None:
            raise AllDriversUnavailableError(
                "No notification channel is available",
                details={
                    "preferred": preferred_name,
                    "available_channels": self.get_available_channels(),
                },
            )
        return await channel.send(notification)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _sorted_entries(self) -> List[_ChannelEntry]:
        return sorted(self._entries.values(), key=lambda e: (-e.priority, e.sequence))

    def _resolve(self, entry: _ChannelEntry) -> NotificationChannel:
        if entry.channel is None:
            try:
                entry.channel = entry.factory(entry.config)
            except Exception as e:
                logger.error(
                    "channel_factory_failed",
                    channel=entry.name,
                    error=str(e),
                    exc_info=True,
                )
                raise ChannelConfigurationError(
                    f"Failed to initialize channel '{entry.name}'",
                    details={"channel": entry.name, "error": str(e)},
                ) from e
            logger.debug(
                "channel_factory_resolved",
                channel=entry.name,
                driver=entry.channel.channel_name,
            )
        return entry.channel

    def _is_entry_ready(self, entry: _ChannelEntry) -> bool:
        try:
            return bool(self._resolve(entry).is_ready())
        except ChannelConfigurationError:
            return False
        except Exception as e:
            logger.warning(
                "channel_readiness_check_failed",
                channel=entry.name,
                error=str(e),
                exc_info=True,
            )
            return False
