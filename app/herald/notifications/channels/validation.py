"""Shared request and config checks for drivers.

Free functions rather than base-class behaviour: each driver calls the
helpers it needs from its own is_ready / is_valid_notification_request /
send implementations.
"""

from typing import Any, Mapping, Union

from herald.notifications.exceptions import (
    NotificationError,
    NotificationValidationError,
    ProviderError,
)
from herald.notifications.models import (
    ChannelConfig,
    Notification,
    NotificationResponse,
)


def _is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple, set, dict)):
        return len(value) > 0
    return True


def has_message_content(notification: Notification) -> bool:
    """At least one of message, text or body is non-blank."""
    return any(
        _is_present(notification.get(field)) for field in ("message", "text", "body")
    )


def has_fields(notification: Notification, *fields: str) -> bool:
    """Every named field is present and not empty."""
    return all(_is_present(notification.get(field)) for field in fields)


def has_credentials(
    config: Union[ChannelConfig, Mapping[str, Any]], *keys: str
) -> bool:
    """At least one of the credential keys is set.

    Args:
        config: ChannelConfig (extra fields are read) or plain mapping
        keys: Credential keys to look for (default: api_key, secret_key)
    """
    options = config.options if isinstance(config, ChannelConfig) else config
    keys = keys or ("api_key", "secret_key")
    return any(_is_present(options.get(key)) for key in keys)


def ensure_valid_request(channel: Any, notification: Notification) -> None:
    """Raise NotificationValidationError if the channel rejects the request.

    Raises:
        NotificationValidationError: Request shape is invalid for the channel
    """
    if not channel.is_valid_notification_request(notification):
        raise NotificationValidationError(
            f"Invalid notification request for channel '{channel.channel_name}'",
            details={
                "channel": channel.channel_name,
                "channel_type": channel.channel_type,
            },
        )


def provider_failure(
    channel_name: str, exc: BaseException, error_code: str = "PROVIDER_ERROR"
) -> NotificationResponse:
    """Translate a provider exception into a failed response."""
    if isinstance(exc, NotificationError):
        error_code = exc.code
    raw = exc.raw if isinstance(exc, ProviderError) and exc.raw is not None else exc.args
    return NotificationResponse.failed(
        error=f"{type(exc).__name__}: {exc}",
        channel=channel_name,
        error_code=error_code,
        raw=raw,
    )
