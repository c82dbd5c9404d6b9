"""
Tests for ChatConsumer.

Each test drives a WebsocketCommunicator through TokenAuthMiddleware and the
chat URL router, using the in-memory channel layer. Async scenarios run
through async_to_sync so the suite needs no async test plugin.
"""

import pytest
from asgiref.sync import async_to_sync
from channels.db import database_sync_to_async
from channels.layers import get_channel_layer
from channels.routing import URLRouter
from channels.testing import WebsocketCommunicator
from rest_framework_simplejwt.tokens import RefreshToken

from chat.constants import WS_CLOSE_CODES, WS_EVENTS
from chat.middleware import TokenAuthMiddleware
from chat.routing import websocket_urlpatterns
from chat.services import MessageService

application = TokenAuthMiddleware(URLRouter(websocket_urlpatterns))


def connect_url(channel_id, user=None):
    url = f"/ws/chat/channels/{channel_id}/"
    if user is not None:
        url += f"?token={RefreshToken.for_user(user).access_token}"
    return url


@pytest.fixture(autouse=True)
def flush_channel_layer():
    yield
    async_to_sync(get_channel_layer().flush)()


@pytest.mark.django_db(transaction=True)
class TestConnect:
    """Connection acceptance and rejection."""

    def test_member_connects(self, channel, member):
        url = connect_url(channel.id, member)

        async def scenario():
            communicator = WebsocketCommunicator(application, url)
            connected, _ = await communicator.connect()
            assert connected
            await communicator.disconnect()

        async_to_sync(scenario)()

    def test_unauthenticated_rejected(self, channel):
        url = connect_url(channel.id)

        async def scenario():
            communicator = WebsocketCommunicator(application, url)
            connected, code = await communicator.connect()
            assert not connected
            assert code == WS_CLOSE_CODES.UNAUTHENTICATED

        async_to_sync(scenario)()

    def test_outsider_rejected(self, channel, outsider):
        url = connect_url(channel.id, outsider)

        async def scenario():
            communicator = WebsocketCommunicator(application, url)
            connected, code = await communicator.connect()
            assert not connected
            assert code == WS_CLOSE_CODES.NOT_A_MEMBER

        async_to_sync(scenario)()

    def test_unknown_channel_rejected(self, member):
        url = connect_url(999999, member)

        async def scenario():
            communicator = WebsocketCommunicator(application, url)
            connected, code = await communicator.connect()
            assert not connected
            assert code == WS_CLOSE_CODES.CHANNEL_NOT_FOUND

        async_to_sync(scenario)()

    def test_deleted_channel_rejected(self, channel, member):
        channel.soft_delete()

        url = connect_url(channel.id, member)

        async def scenario():
            communicator = WebsocketCommunicator(application, url)
            connected, code = await communicator.connect()
            assert not connected
            assert code == WS_CLOSE_CODES.CHANNEL_NOT_FOUND

        async_to_sync(scenario)()


@pytest.mark.django_db(transaction=True)
class TestEvents:
    """Events delivered to connected members."""

    def test_sent_message_is_pushed_to_members(self, channel, creator, member):
        listener_url = connect_url(channel.id, creator)

        async def scenario():
            listener = WebsocketCommunicator(application, listener_url)
            await listener.connect()

            result = await database_sync_to_async(MessageService.send_message)(
                channel, member, content="Live!"
            )
            assert result.success

            event = await listener.receive_json_from()
            assert event["type"] == WS_EVENTS.MESSAGE_NEW
            assert event["message"]["id"] == result.data.id
            assert event["message"]["content"] == "Live!"
            assert event["message"]["sender"]["id"] == member.id

            await listener.disconnect()

        async_to_sync(scenario)()

    def test_typing_reaches_others_but_not_typist(self, channel, creator, member):
        typist_url = connect_url(channel.id, member)
        other_url = connect_url(channel.id, creator)

        async def scenario():
            typist = WebsocketCommunicator(application, typist_url)
            other = WebsocketCommunicator(application, other_url)
            await typist.connect()
            await other.connect()

            await typist.send_json_to({"type": "typing", "is_typing": True})

            event = await other.receive_json_from()
            assert event == {"type": WS_EVENTS.TYPING, "user_id": member.id, "is_typing": True}
            assert await typist.receive_nothing()

            await typist.disconnect()
            await other.disconnect()

        async_to_sync(scenario)()

    def test_unknown_message_type_returns_error(self, channel, member):
        url = connect_url(channel.id, member)

        async def scenario():
            communicator = WebsocketCommunicator(application, url)
            await communicator.connect()

            await communicator.send_json_to({"type": "shout"})

            event = await communicator.receive_json_from()
            assert event["type"] == WS_EVENTS.ERROR
            assert "shout" in event["message"]

            await communicator.disconnect()

        async_to_sync(scenario)()
