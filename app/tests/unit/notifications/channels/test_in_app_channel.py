"""Unit tests for InAppChannel."""

import pytest

from herald.notifications.channels.base import NotificationChannel
from herald.notifications.channels.in_app import InAppChannel, InMemoryInAppStorage
from herald.notifications.exceptions import NotificationValidationError
from herald.notifications.models import ChannelConfig


@pytest.mark.unit
class TestInAppChannel:
    """Tests for the in-app channel."""

    def test_satisfies_channel_protocol(self):
        channel = InAppChannel()

        assert isinstance(channel, NotificationChannel)
        assert channel.channel_name == "in_app"
        assert channel.channel_type == "in_app"
        assert channel.is_ready() is True

    def test_custom_name_from_config(self):
        channel = InAppChannel(ChannelConfig(name="inbox"))

        assert channel.channel_name == "inbox"

    def test_request_requires_user_id(self, notification_factory):
        channel = InAppChannel()

        assert channel.is_valid_notification_request(notification_factory(user_id="u-1"))
        assert not channel.is_valid_notification_request(notification_factory())

    @pytest.mark.asyncio
    async def test_send_stores_message(self, notification_factory):
        channel = InAppChannel()

        response = await channel.send(
            notification_factory(message="Welcome!", subject="Hi", user_id="u-1")
        )

        assert response.success is True
        assert response.channel == "in_app"
        messages = channel.list_for("u-1")
        assert len(messages) == 1
        assert messages[0].id == response.message_id
        assert messages[0].content == "Welcome!"
        assert messages[0].subject == "Hi"

    @pytest.mark.asyncio
    async def test_send_without_user_id_raises(self, notification_factory):
        channel = InAppChannel()

        with pytest.raises(NotificationValidationError) as exc_info:
            await channel.send(notification_factory())

        assert exc_info.value.details["channel"] == "in_app"

    @pytest.mark.asyncio
    async def test_unread_count_and_mark_as_read(self, notification_factory):
        channel = InAppChannel()
        first = await channel.send(notification_factory(user_id="u-1"))
        await channel.send(notification_factory(user_id="u-1"))

        assert channel.unread_count("u-1") == 2
        assert channel.mark_as_read("u-1", first.message_id) is True
        assert channel.unread_count("u-1") == 1
        assert channel.mark_as_read("u-1", "unknown") is False
        assert channel.unread_count("u-2") == 0

    @pytest.mark.asyncio
    async def test_shared_storage(self, notification_factory):
        storage = InMemoryInAppStorage()
        writer = InAppChannel(storage=storage)
        reader = InAppChannel(storage=storage)

        await writer.send(notification_factory(user_id="u-9"))

        assert len(reader.list_for("u-9")) == 1
