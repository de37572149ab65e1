"""Notification channel contract.

Every driver (provider adapter) implements this protocol. Drivers are
independent types; shared checks live in
herald.notifications.channels.validation and are called explicitly.
"""

from typing import Protocol, runtime_checkable

from herald.notifications.models import Notification, NotificationResponse


@runtime_checkable
class NotificationChannel(Protocol):
    """Capability set the dispatcher relies on.

    Example Implementation:
        class ResendChannel:

            def __init__(self, config: ChannelConfig):
                self._config = config

            @property
            def channel_name(self) -> str:
                return "resend"

            @property
            def channel_type(self) -> str:
                return "email"

            def is_ready(self) -> bool:
                return has_credentials(self._config, "api_key")

            def is_valid_notification_request(self, notification) -> bool:
                return has_message_content(notification) and has_fields(notification, "to")

            async def send(self, notification) -> NotificationResponse:
                ensure_valid_request(self, notification)
                try:
                    ...
                except requests.RequestException as exc:
                    return provider_failure(self.channel_name, exc)
    """

    @property
    def channel_name(self) -> str:
        """Driver identifier used for logging and diagnostics."""
        ...

    @property
    def channel_type(self) -> str:
        """Logical channel family (email, sms, push, chat, in_app)."""
        ...

    def is_ready(self) -> bool:
        """Cheap synchronous self-check (e.g. credential present).

        Must never block or contact the provider.
        """
        ...

    def is_valid_notification_request(self, notification: Notification) -> bool:
        """Structural validation of the request for this channel family."""
        ...

    async def send(self, notification: Notification) -> NotificationResponse:
        """Send a notification.

        Must handle ordinary provider failures and return a failed
        NotificationResponse rather than raising. A malformed request
        raises NotificationValidationError before any network attempt.
        """
        ...
