"""Custom exceptions for the notification dispatch system.

Registry errors (ChannelNotFoundError, NoDefaultChannelConfiguredError,
ChannelConfigurationError) signal misconfiguration and are never retried.
ProviderError is recovered by the priority-fallback strategy and surfaces
directly from round-robin and random dispatch.
"""

from typing import Any, Dict, Optional


class NotificationError(Exception):
    """Base exception for all notification dispatch errors.

    Attributes:
        code: Machine-readable error code
        details: Optional context (channel names, inner errors)

    Example:
        try:
            await manager.send("email", notification)
        except NotificationError as e:
            logger.error("notification_error", code=e.code, error=str(e))
    """

    default_code = "NOTIFICATION_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.code = code or self.default_code
        self.details = details or {}


class ChannelNotFoundError(NotificationError):
    """Raised when a channel name is not registered.

    Example:
        >>> manager.get_channel("fax")
        Traceback (most recent call last):
        ...
        ChannelNotFoundError: Notification channel 'fax' is not registered
    """

    default_code = "CHANNEL_NOT_FOUND"


class NoDefaultChannelConfiguredError(NotificationError):
    """Raised by get_default_channel() when no default was configured."""

    default_code = "NO_DEFAULT_CHANNEL"


class AllDriversUnavailableError(NotificationError):
    """Raised when no candidate driver is ready.

    Distinct from "every driver was attempted and failed", which is
    reported as the last failure response rather than an exception.
    """

    default_code = "ALL_DRIVERS_UNAVAILABLE"


class NotificationValidationError(NotificationError):
    """Raised when a driver rejects the request shape before any network call.

    This is a programmer error: it is never retried on another driver.
    """

    default_code = "VALIDATION_ERROR"


class ProviderError(NotificationError):
    """Raised when a driver's underlying provider call fails.

    Attributes:
        raw: The provider's raw error for diagnostics
    """

    default_code = "PROVIDER_ERROR"

    def __init__(
        self,
        message: str,
        raw: Any = None,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        details = dict(details or {})
        if raw is not None:
            details.setdefault("raw", raw)
        super().__init__(message, code=code, details=details)
        self.raw = raw


class ChannelConfigurationError(NotificationError):
    """Raised for invalid channel or group configuration.

    Examples: an empty fallback group, random weights summing to zero,
    or a channel factory that fails to build its driver.
    """

    default_code = "CONFIGURATION_ERROR"
