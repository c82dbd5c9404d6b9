"""Tests for broadcasting message events to the channel layer."""

import pytest
from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer

from chat import realtime
from chat.constants import WS_EVENTS, channel_group_name


@pytest.fixture
def channel_layer():
    layer = get_channel_layer()
    yield layer
    async_to_sync(layer.flush)()


@pytest.mark.django_db
class TestBroadcastMessage:
    """Tests for realtime.broadcast_message."""

    def test_event_reaches_group(self, channel_layer, message):
        async_to_sync(channel_layer.group_add)(
            channel_group_name(message.channel_id), "listener.test"
        )

        assert realtime.broadcast_message(WS_EVENTS.MESSAGE_NEW, message) is True

        event = async_to_sync(channel_layer.receive)("listener.test")
        assert event["type"] == "chat.event"
        assert event["event"] == WS_EVENTS.MESSAGE_NEW
        assert event["message"]["id"] == message.id
        assert event["message"]["content"] == "Hello there"

    def test_deleted_message_payload_hides_content(self, channel_layer, message):
        async_to_sync(channel_layer.group_add)(
            channel_group_name(message.channel_id), "listener.test"
        )
        message.soft_delete()

        realtime.broadcast_message(WS_EVENTS.MESSAGE_DELETED, message)

        event = async_to_sync(channel_layer.receive)("listener.test")
        assert event["message"]["content"] == "[Message deleted]"

    def test_layer_failure_returns_false(self, mocker, message):
        layer = mocker.MagicMock()
        layer.group_send = mocker.AsyncMock(side_effect=RuntimeError("redis down"))
        mocker.patch.object(realtime, "get_channel_layer", return_value=layer)

        assert realtime.broadcast_message(WS_EVENTS.MESSAGE_NEW, message) is False

    def test_no_layer_returns_false(self, mocker, message):
        mocker.patch.object(realtime, "get_channel_layer", return_value=None)

        assert realtime.broadcast_message(WS_EVENTS.MESSAGE_NEW, message) is False
