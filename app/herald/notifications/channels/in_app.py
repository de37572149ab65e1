"""In-app channel backed by an in-memory inbox."""

import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional
from uuid import uuid4

import structlog

from herald.notifications.channels.validation import (
    ensure_valid_request,
    has_fields,
    has_message_content,
)
from herald.notifications.models import (
    ChannelConfig,
    ChannelType,
    Notification,
    NotificationResponse,
)

logger = structlog.get_logger()


@dataclass
class InAppMessage:
    """A stored in-app notification."""

    id: str
    user_id: str
    content: str
    subject: Optional[str] = None
    metadata: Dict[str, object] = field(default_factory=dict)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    read_at: Optional[datetime] = None

    @property
    def is_read(self) -> bool:
        return self.read_at is not None


class InMemoryInAppStorage:
    """Process-local inbox keyed by user ID.

    Not persistent: contents are lost on restart.
    """

    def __init__(self):
        self._messages: Dict[str, List[InAppMessage]] = {}
        self._lock = threading.Lock()

    def save(self, message: InAppMessage) -> None:
        with self._lock:
            self._messages.setdefault(message.user_id, []).append(message)

    def list_for(self, user_id: str) -> List[InAppMessage]:
        with self._lock:
            return list(self._messages.get(user_id, []))

    def mark_as_read(self, user_id: str, message_id: str) -> bool:
        with self._lock:
            for message in self._messages.get(user_id, []):
                if message.id == message_id:
                    if message.read_at is None:
                        message.read_at = datetime.now(timezone.utc)
                    return True
        return False


class InAppChannel:
    """In-app notification channel.

    Stores notifications in an inbox the application reads back. Requests
    need a ``user_id`` field plus message content. Always ready.

    Example:
        channel = InAppChannel()
        await channel.send(Notification(message="Welcome!", user_id="u-1"))
        channel.unread_count("u-1")  # 1
    """

    def __init__(
        self,
        config: Optional[ChannelConfig] = None,
        storage: Optional[InMemoryInAppStorage] = None,
    ):
        self._config = config or ChannelConfig()
        self._storage = storage or InMemoryInAppStorage()
        self._name = self._config.options.get("name", "in_app")
        logger.info("initialized_in_app_channel", channel=self._name)

    @property
    def channel_name(self) -> str:
        return self._name

    @property
    def channel_type(self) -> str:
        return ChannelType.IN_APP.value

    @property
    def storage(self) -> InMemoryInAppStorage:
        return self._storage

    def is_ready(self) -> bool:
        return True

    def is_valid_notification_request(self, notification: Notification) -> bool:
        return has_message_content(notification) and has_fields(notification, "user_id")

    async def send(self, notification: Notification) -> NotificationResponse:
        """Store the notification in the recipient's inbox.

        Raises:
            NotificationValidationError: user_id or content missing
        """
        ensure_valid_request(self, notification)

        user_id = str(notification.get("user_id"))
        message = InAppMessage(
            id=str(uuid4()),
            user_id=user_id,
            content=notification.content,
            subject=notification.subject,
            metadata=dict(notification.metadata),
        )
        self._storage.save(message)
        logger.info("in_app_notification_stored", user_id=user_id, message_id=message.id)
        return NotificationResponse.sent(channel=self._name, message_id=message.id)

    def list_for(self, user_id: str) -> List[InAppMessage]:
        return self._storage.list_for(user_id)

    def mark_as_read(self, user_id: str, message_id: str) -> bool:
        return self._storage.mark_as_read(user_id, message_id)

    def unread_count(self, user_id: str) -> int:
        return sum(1 for m in self._storage.list_for(user_id) if not m.is_read)
