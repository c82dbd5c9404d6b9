"""
Push message changes to WebSocket clients.

REST writes happen in synchronous views; this module hands the change to the
channel layer so every ChatConsumer connected to the channel receives it.

Related files:
    - consumers.py: Receives "chat.event" messages and forwards them
    - services.py: Calls broadcast_message after each message write
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer

from chat.constants import channel_group_name
from chat.serializers import MessageSerializer

if TYPE_CHECKING:
    from chat.models import Message

logger = logging.getLogger(__name__)


def broadcast_message(event_type: str, message: Message) -> bool:
    """
    Send a message event to the channel's WebSocket group.

    Failures are logged, never raised.

    Args:
        event_type: One of the WS_EVENTS message types
        message: Message that was created, edited or deleted

    Returns:
        True if the event was handed to the channel layer
    """
    channel_layer = get_channel_layer()
    if channel_layer is None:
        logger.debug("No channel layer configured, skipping broadcast")
        return False

    try:
        async_to_sync(channel_layer.group_send)(
            channel_group_name(message.channel_id),
            {
                "type": "chat.event",
                "event": event_type,
                "message": dict(MessageSerializer(message).data),
            },
        )
    except Exception:
        logger.exception(
            f"Failed to broadcast {event_type} for message {message.id} "
            f"in channel {message.channel_id}"
        )
        return False

    return True
