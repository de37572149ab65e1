"""Notification lifecycle events.

Events emitted by NotificationSender around a multi-channel send:

- notification.sending: before any channel is attempted
- notification.sent: the dispatch status is success or partial
- notification.failed: a channel failed (failed_channel set) or every
  channel failed (failed_channel is None)

Listeners may be plain functions or coroutines. A listener that raises is
logged and skipped; it never breaks delivery.

Usage Example:
    events = EventDispatcher()

    @events.listener(NotificationFailed)
    async def alert_on_failure(event: NotificationFailed) -> None:
        await pager.page(f"{event.failed_channel}: {event.error}")
"""

import inspect
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Type, Union
from uuid import UUID, uuid4

from herald.logging import get_module_logger
from herald.notifications.models import Notification, NotificationResponse

logger = get_module_logger()


@dataclass
class NotificationEvent:
    """Base class for notification lifecycle events."""

    notification: Notification
    channels: List[str] = field(default_factory=list)

    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    """When the event occurred."""

    correlation_id: UUID = field(default_factory=uuid4)
    """Unique ID to track related events across the system."""

    event_type = "notification.event"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the event envelope (the payload is not included)."""
        return {
            "event_type": self.event_type,
            "channels": list(self.channels),
            "timestamp": self.timestamp.isoformat(),
            "correlation_id": str(self.correlation_id),
        }


@dataclass
class NotificationSending(NotificationEvent):
    event_type = "notification.sending"


@dataclass
class NotificationSent(NotificationEvent):
    responses: Dict[str, NotificationResponse] = field(default_factory=dict)

    event_type = "notification.sent"


@dataclass
class NotificationFailed(NotificationEvent):
    error: Optional[str] = None
    failed_channel: Optional[str] = None

    event_type = "notification.failed"

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["error"] = self.error
        data["failed_channel"] = self.failed_channel
        return data


EventListener = Callable[[NotificationEvent], Any]
EventKey = Union[str, Type[NotificationEvent]]


def _event_type(key: EventKey) -> str:
    return key if isinstance(key, str) else key.event_type


class EventDispatcher:
    """In-process registry of lifecycle event listeners.

    Example:
        events = EventDispatcher()
        events.on(NotificationSent, lambda event: metrics.incr("sent"))
        await events.dispatch(NotificationSent(notification, ["email"]))
    """

    def __init__(self):
        self._listeners: Dict[str, List[EventListener]] = {}

    def on(self, event: EventKey, listener: EventListener) -> None:
        """Register a listener for an event class or event_type string."""
        event_type = _event_type(event)
        self._listeners.setdefault(event_type, []).append(listener)
        logger.debug(
            "registered_event_listener",
            listener=getattr(listener, "__name__", "unknown"),
            event_type=event_type,
            total_listeners=len(self._listeners[event_type]),
        )

    def listener(self, event: EventKey) -> Callable[[EventListener], EventListener]:
        """Decorator form of on()."""

        def decorator(func: EventListener) -> EventListener:
            self.on(event, func)
            return func

        return decorator

    def listeners_for(self, event: EventKey) -> List[EventListener]:
        return list(self._listeners.get(_event_type(event), []))

    async def dispatch(self, event: NotificationEvent) -> None:
        """Call every listener for the event, in registration order."""
        for listener in self._listeners.get(event.event_type, []):
            try:
                result = listener(event)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.error(
                    "event_listener_failed",
                    listener=getattr(listener, "__name__", "unknown"),
                    event_type=event.event_type,
                    error=str(e),
                    correlation_id=str(event.correlation_id),
                )

    def remove_listeners(self, event: EventKey) -> None:
        self._listeners.pop(_event_type(event), None)

    def clear(self) -> None:
        self._listeners.clear()
