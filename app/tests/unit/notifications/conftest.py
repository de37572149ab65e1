"""Test fixtures for notification dispatch tests."""

from typing import Any, List, Optional, Union

import pytest

from herald.notifications.models import (
    ChannelType,
    Notification,
    NotificationResponse,
)


class StubChannel:
    """Scriptable NotificationChannel.

    Each send() pops the next scripted outcome: a NotificationResponse is
    returned, an exception is raised. Once the script is exhausted the
    last outcome repeats. Every notification received is kept in ``calls``.
    """

    def __init__(
        self,
        name: str,
        channel_type: str = ChannelType.EMAIL.value,
        ready: bool = True,
        outcomes: Optional[List[Union[NotificationResponse, Exception]]] = None,
        valid: bool = True,
    ):
        self.name = name
        self.type = channel_type
        self.ready = ready
        self.valid = valid
        self.outcomes = list(outcomes or [NotificationResponse.sent(channel=name)])
        self.calls: List[Notification] = []

    @property
    def channel_name(self) -> str:
        return self.name

    @property
    def channel_type(self) -> str:
        return self.type

    def is_ready(self) -> bool:
        return self.ready

    def is_valid_notification_request(self, notification: Notification) -> bool:
        return self.valid

    async def send(self, notification: Notification) -> NotificationResponse:
        self.calls.append(notification)
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def notification_factory():
    """Factory for creating Notification instances.

    Example:
        notification = notification_factory(message="Hi", user_id="u-1")
    """

    def _factory(message: Optional[str] = "Test message", **fields: Any) -> Notification:
        return Notification(message=message, **fields)

    return _factory


@pytest.fixture
def notification(notification_factory):
    return notification_factory()


@pytest.fixture
def stub_channel_factory():
    """Factory for creating StubChannel instances.

    Example:
        healthy = stub_channel_factory("resend")
        broken = stub_channel_factory(
            "smtp", outcomes=[NotificationResponse.failed(error="down")]
        )
    """

    def _factory(name: str = "stub", **kwargs: Any) -> StubChannel:
        return StubChannel(name, **kwargs)

    return _factory


@pytest.fixture
def sent_response():
    def _factory(channel: str, **extra: Any) -> NotificationResponse:
        return NotificationResponse.sent(channel=channel, **extra)

    return _factory


@pytest.fixture
def failed_response():
    def _factory(channel: str, error: str = "provider down", **extra: Any) -> NotificationResponse:
        return NotificationResponse.failed(error=error, channel=channel, **extra)

    return _factory
