"""
WebSocket consumers for the chat application.

This module implements the WebSocket consumer that streams a channel's
activity to connected clients.

Consumers:
    ChatConsumer: Handles WebSocket connections for one channel

Authentication:
    Users are authenticated via token passed as query parameter
    (?token=<jwt> or ?firebase_token=<id token>).
    The TokenAuthMiddleware attaches the user to self.scope["user"].

Channel Groups:
    Each channel has a group named "chat_channel_{channel_id}".
    Connected users join the group and receive broadcast events.

Message Types (from client):
    - typing: Broadcast typing indicator

Message Types (to client):
    - message.new / message.updated / message.deleted: Message changes
      made through the REST API
    - typing: Another member is typing
    - error: Error response
"""

from __future__ import annotations

import logging

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncJsonWebsocketConsumer

from chat.constants import WS_CLOSE_CODES, WS_EVENTS, channel_group_name
from chat.models import Channel, ChannelMember

logger = logging.getLogger(__name__)


class ChatConsumer(AsyncJsonWebsocketConsumer):
    """
    WebSocket consumer for a single channel.

    Handles:
        - Connection authentication and membership checks
        - Joining/leaving the channel group
        - Typing indicators
        - Forwarding message events broadcast by the REST API

    Attributes:
        channel_id: Id of the connected channel
        room_group_name: Channel layer group name for the channel
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.channel_id: int | None = None
        self.room_group_name: str | None = None

    async def connect(self):
        """
        Handle WebSocket connection.

        Validates:
            1. User is authenticated
            2. Channel exists and is not deleted
            3. User is a member of the channel

        On success, joins the channel group and accepts the connection.
        """
        self.channel_id = self.scope["url_route"]["kwargs"]["channel_id"]
        user = self.scope.get("user")

        if user is None or not user.is_authenticated:
            logger.warning(
                f"Rejected unauthenticated connection to channel {self.channel_id}"
            )
            await self.close(code=WS_CLOSE_CODES.UNAUTHENTICATED)
            return

        if not await self._channel_exists():
            logger.warning(
                f"User {user.id} tried to connect to non-existent channel {self.channel_id}"
            )
            await self.close(code=WS_CLOSE_CODES.CHANNEL_NOT_FOUND)
            return

        if not await self._is_member(user):
            logger.warning(f"User {user.id} is not a member of channel {self.channel_id}")
            await self.close(code=WS_CLOSE_CODES.NOT_A_MEMBER)
            return

        self.room_group_name = channel_group_name(self.channel_id)
        await self.channel_layer.group_add(self.room_group_name, self.channel_name)

        await self.accept()
        logger.info(f"User {user.id} connected to channel {self.channel_id}")

    async def disconnect(self, close_code):
        """Leave the channel group if one was joined."""
        if self.room_group_name:
            await self.channel_layer.group_discard(
                self.room_group_name,
                self.channel_name,
            )
            logger.info(
                f"User {self.scope['user'].id} disconnected from channel "
                f"{self.channel_id} ({close_code})"
            )

    async def receive_json(self, content, **kwargs):
        """
        Handle incoming WebSocket messages.

        Expected message format:
            {"type": "typing", "is_typing": true}
        """
        message_type = content.get("type") if isinstance(content, dict) else None

        if message_type == WS_EVENTS.TYPING:
            await self.channel_layer.group_send(
                self.room_group_name,
                {
                    "type": "chat.typing",
                    "user_id": self.scope["user"].id,
                    "is_typing": bool(content.get("is_typing", True)),
                },
            )
        else:
            await self.send_json(
                {
                    "type": WS_EVENTS.ERROR,
                    "message": f"Unknown message type: {message_type}",
                }
            )

    async def chat_event(self, event):
        """Forward a message event from the REST API to the client."""
        await self.send_json(
            {
                "type": event["event"],
                "message": event["message"],
            }
        )

    async def chat_typing(self, event):
        """Send typing indicator to the client (except the typist)."""
        if self.scope["user"].id == event["user_id"]:
            return

        await self.send_json(
            {
                "type": WS_EVENTS.TYPING,
                "user_id": event["user_id"],
                "is_typing": event["is_typing"],
            }
        )

    @database_sync_to_async
    def _channel_exists(self) -> bool:
        return Channel.objects.filter(pk=self.channel_id, is_deleted=False).exists()

    @database_sync_to_async
    def _is_member(self, user) -> bool:
        return ChannelMember.objects.filter(
            channel_id=self.channel_id,
            user=user,
        ).exists()
