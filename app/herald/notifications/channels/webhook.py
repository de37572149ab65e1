"""Chat channel posting to an incoming webhook (Slack, Teams, Discord)."""

import asyncio
from typing import Any, Dict, Optional

import requests
import structlog

from herald.notifications.channels.validation import (
    ensure_valid_request,
    has_credentials,
    has_message_content,
    provider_failure,
)
from herald.notifications.models import (
    ChannelConfig,
    ChannelType,
    Notification,
    NotificationResponse,
)

logger = structlog.get_logger()

DEFAULT_TIMEOUT_SECONDS = 10.0


class WebhookChannel:
    """Incoming-webhook chat channel.

    Posts a JSON payload to ``webhook_url``. The blocking HTTP call runs in
    a worker thread so the event loop is never blocked.

    Config options:
        webhook_url: Incoming webhook URL (required for readiness)
        timeout_seconds: HTTP timeout (default: 10)
        name: Driver name (default: "webhook")
    """

    def __init__(self, config: ChannelConfig, session: Optional[requests.Session] = None):
        self._config = config
        options = config.options
        self._webhook_url: Optional[str] = options.get("webhook_url")
        self._timeout = float(options.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS))
        self._name = options.get("name", "webhook")
        self._session = session or requests.Session()
        logger.info("initialized_webhook_channel", channel=self._name)

    @classmethod
    def from_settings(cls, settings) -> "WebhookChannel":
        """Build the channel from the notifications settings section."""
        return cls(
            ChannelConfig(
                webhook_url=settings.notifications.webhook_url,
                timeout_seconds=settings.notifications.webhook_timeout_seconds,
            )
        )

    @property
    def channel_name(self) -> str:
        return self._name

    @property
    def channel_type(self) -> str:
        return ChannelType.CHAT.value

    def is_ready(self) -> bool:
        return has_credentials(self._config, "webhook_url")

    def is_valid_notification_request(self, notification: Notification) -> bool:
        return has_message_content(notification)

    async def send(self, notification: Notification) -> NotificationResponse:
        """Post the notification to the webhook.

        Returns:
            Sent response on HTTP 2xx, failed response otherwise

        Raises:
            NotificationValidationError: no message content
        """
        ensure_valid_request(self, notification)

        if not self.is_ready():
            return NotificationResponse.failed(
                error="Webhook URL is not configured",
                channel=self._name,
                error_code="NOT_CONFIGURED",
            )

        payload = self._build_payload(notification)
        try:
            response = await asyncio.to_thread(self._post, payload)
        except requests.RequestException as e:
            logger.error("webhook_send_error", channel=self._name, error=str(e))
            return provider_failure(self._name, e)

        if 200 <= response.status_code < 300:
            logger.info("webhook_notification_sent", channel=self._name)
            return NotificationResponse.sent(
                channel=self._name,
                raw=response.text,
                status_code=response.status_code,
            )

        logger.error(
            "webhook_send_failed",
            channel=self._name,
            status_code=response.status_code,
        )
        return NotificationResponse.failed(
            error=f"Webhook error: HTTP {response.status_code}",
            channel=self._name,
            error_code=f"HTTP_{response.status_code}",
            raw=response.text,
            status_code=response.status_code,
        )

    def _build_payload(self, notification: Notification) -> Dict[str, Any]:
        text = notification.content
        if notification.subject:
            text = f"*{notification.subject}*\n{text}"
        return {"text": text}

    def _post(self, payload: Dict[str, Any]) -> requests.Response:
        return self._session.post(self._webhook_url, json=payload, timeout=self._timeout)
