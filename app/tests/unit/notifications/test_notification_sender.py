"""Unit tests for NotificationSender.

Tests cover:
- Best-effort delivery (success, partial, failed)
- All-or-nothing delivery (stop at first failure)
- Lifecycle events
- Error propagation
"""

from types import SimpleNamespace

import pytest

from herald.notifications.events import (
    EventDispatcher,
    NotificationFailed,
    NotificationSending,
    NotificationSent,
)
from herald.notifications.exceptions import (
    NotificationValidationError,
    ProviderError,
)
from herald.notifications.manager import NotificationManager
from herald.notifications.models import DeliveryStrategy
from herald.notifications.sender import NotificationSender


@pytest.fixture
def recorded_events():
    """EventDispatcher recording every lifecycle event."""
    events = EventDispatcher()
    received = []
    for event_class in (NotificationSending, NotificationSent, NotificationFailed):
        events.on(event_class, received.append)
    return events, received


@pytest.fixture
def manager_factory(stub_channel_factory):
    def _factory(**channels):
        manager = NotificationManager()
        for name, channel in channels.items():
            manager.register_channel(name, channel)
        return manager

    return _factory


@pytest.mark.unit
class TestBestEffort:
    """Tests for best-effort delivery."""

    @pytest.mark.asyncio
    async def test_all_channels_succeed(self, manager_factory, stub_channel_factory, notification):
        email = stub_channel_factory("resend")
        sms = stub_channel_factory("twilio")
        sender = NotificationSender(manager_factory(email=email, sms=sms))

        result = await sender.send(notification, ["email", "sms"])

        assert result.status == "success"
        assert result.is_success is True
        assert set(result.results) == {"email", "sms"}
        assert result.errors == {}

    @pytest.mark.asyncio
    async def test_partial_delivery(
        self, manager_factory, stub_channel_factory, failed_response, notification
    ):
        email = stub_channel_factory("resend")
        sms = stub_channel_factory("twilio", outcomes=[failed_response("twilio", error="bad number")])
        sender = NotificationSender(manager_factory(email=email, sms=sms))

        result = await sender.send(notification, ["email", "sms"])

        assert result.status == "partial"
        assert set(result.results) == {"email"}
        assert result.errors == {"sms": "bad number"}
        assert result.responses["sms"].success is False

    @pytest.mark.asyncio
    async def test_every_channel_attempted_after_failure(
        self, manager_factory, stub_channel_factory, notification
    ):
        email = stub_channel_factory("resend", outcomes=[ProviderError("timeout")])
        sms = stub_channel_factory("twilio")
        sender = NotificationSender(manager_factory(email=email, sms=sms))

        result = await sender.send(notification, ["email", "sms"])

        assert result.status == "partial"
        assert result.errors == {"email": "timeout"}
        assert len(sms.calls) == 1

    @pytest.mark.asyncio
    async def test_all_fail(
        self, manager_factory, stub_channel_factory, failed_response, notification
    ):
        email = stub_channel_factory("resend", outcomes=[failed_response("resend")])
        sender = NotificationSender(manager_factory(email=email))

        result = await sender.send(notification, ["email", "push"])

        assert result.status == "failed"
        assert set(result.errors) == {"email", "push"}
        assert "not registered" in result.errors["push"]

    @pytest.mark.asyncio
    async def test_channel_names_normalized(self, manager_factory, stub_channel_factory, notification):
        email = stub_channel_factory("resend")
        sender = NotificationSender(manager_factory(email=email))

        result = await sender.send(notification, [" Email "])

        assert result.status == "success"
        assert set(result.results) == {"email"}

    @pytest.mark.asyncio
    async def test_duplicate_channel_names_sent_once(
        self, manager_factory, stub_channel_factory, notification
    ):
        email = stub_channel_factory("resend")
        sender = NotificationSender(manager_factory(email=email))

        result = await sender.send(notification, ["email", "Email", " EMAIL "])

        assert result.status == "success"
        assert result.errors == {}
        assert set(result.results) == {"email"}
        assert len(email.calls) == 1

    @pytest.mark.asyncio
    async def test_empty_channel_list(self, manager_factory, notification):
        sender = NotificationSender(manager_factory())

        result = await sender.send(notification, [])

        assert result.status == "success"
        assert result.results == {}

    @pytest.mark.asyncio
    async def test_validation_error_propagates(
        self, manager_factory, stub_channel_factory, notification
    ):
        email = stub_channel_factory("resend", outcomes=[NotificationValidationError("no 'to'")])
        sender = NotificationSender(manager_factory(email=email))

        with pytest.raises(NotificationValidationError):
            await sender.send(notification, ["email"])


@pytest.mark.unit
class TestAllOrNothing:
    """Tests for all-or-nothing delivery."""

    @pytest.mark.asyncio
    async def test_all_succeed(self, manager_factory, stub_channel_factory, notification):
        sender = NotificationSender(
            manager_factory(email=stub_channel_factory("resend"), sms=stub_channel_factory("twilio")),
            strategy=DeliveryStrategy.ALL_OR_NOTHING,
        )

        result = await sender.send(notification, ["email", "sms"])

        assert result.status == "success"

    @pytest.mark.asyncio
    async def test_stops_at_first_failure(
        self, manager_factory, stub_channel_factory, failed_response, notification
    ):
        email = stub_channel_factory("resend")
        sms = stub_channel_factory("twilio", outcomes=[failed_response("twilio")])
        push = stub_channel_factory("fcm")
        sender = NotificationSender(
            manager_factory(email=email, sms=sms, push=push),
            strategy="all-or-nothing",
        )

        result = await sender.send(notification, ["email", "sms", "push"])

        assert result.status == "failed"
        assert set(result.results) == {"email"}
        assert set(result.errors) == {"sms"}
        assert push.calls == []

    @pytest.mark.asyncio
    async def test_strategy_override_per_send(
        self, manager_factory, stub_channel_factory, failed_response, notification
    ):
        email = stub_channel_factory("resend", outcomes=[failed_response("resend")])
        sms = stub_channel_factory("twilio")
        sender = NotificationSender(manager_factory(email=email, sms=sms))

        result = await sender.send(
            notification, ["email", "sms"], strategy=DeliveryStrategy.ALL_OR_NOTHING
        )

        assert result.status == "failed"
        assert sms.calls == []


@pytest.mark.unit
class TestSenderEvents:
    """Tests for lifecycle events emitted by the sender."""

    @pytest.mark.asyncio
    async def test_success_emits_sending_then_sent(
        self, manager_factory, stub_channel_factory, recorded_events, notification
    ):
        events, received = recorded_events
        sender = NotificationSender(
            manager_factory(email=stub_channel_factory("resend")), events=events
        )

        await sender.send(notification, ["email"])

        assert [type(e) for e in received] == [NotificationSending, NotificationSent]
        assert received[0].correlation_id == received[1].correlation_id
        assert set(received[1].responses) == {"email"}

    @pytest.mark.asyncio
    async def test_partial_emits_failed_per_channel_then_sent(
        self, manager_factory, stub_channel_factory, failed_response, recorded_events, notification
    ):
        events, received = recorded_events
        sender = NotificationSender(
            manager_factory(
                email=stub_channel_factory("resend"),
                sms=stub_channel_factory("twilio", outcomes=[failed_response("twilio")]),
            ),
            events=events,
        )

        await sender.send(notification, ["email", "sms"])

        assert [type(e) for e in received] == [
            NotificationSending,
            NotificationFailed,
            NotificationSent,
        ]
        assert received[1].failed_channel == "sms"

    @pytest.mark.asyncio
    async def test_total_failure_emits_overall_failed(
        self, manager_factory, stub_channel_factory, failed_response, recorded_events, notification
    ):
        events, received = recorded_events
        sender = NotificationSender(
            manager_factory(
                email=stub_channel_factory("resend", outcomes=[failed_response("resend")])
            ),
            events=events,
        )

        await sender.send(notification, ["email"])

        assert [type(e) for e in received] == [
            NotificationSending,
            NotificationFailed,
            NotificationFailed,
        ]
        assert received[1].failed_channel == "email"
        assert received[2].failed_channel is None
        assert "email" in received[2].error


@pytest.mark.unit
class TestSenderFromSettings:
    """Tests for building a sender from settings."""

    def test_from_settings(self):
        settings = SimpleNamespace(
            notifications=SimpleNamespace(delivery_strategy="all-or-nothing")
        )

        sender = NotificationSender.from_settings(NotificationManager(), settings)

        assert sender.strategy is DeliveryStrategy.ALL_OR_NOTHING
