"""
Chat app for channel-based messaging.

This app handles:
- Channels and their members
- Message sending, editing and history
- The last-messages inbox
- WebSocket real-time updates and typing indicators

Related apps:
    - authentication: User model and profiles for members

WebSocket Support:
    Uses Django Channels for real-time communication.
    See consumers.py for WebSocket handlers.
    See routing.py for WebSocket URL patterns.

Usage:
    from chat.services import ChannelService, MessageService

    channel = ChannelService.create_channel(
        creator=user,
        name="Weekend plans",
        member_ids=[other_user.id],
    ).data

    message = MessageService.send_message(
        channel=channel,
        sender=user,
        content="Hello!",
    ).data
"""
