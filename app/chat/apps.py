"""
Chat application configuration.

This app provides the chat system with:
- Channels with any number of members
- Membership queries (common channels, exact member sets)
- Messages with soft deletion and editing
- WebSocket push of message changes
"""

from django.apps import AppConfig


class ChatConfig(AppConfig):
    """Configuration for the chat application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "chat"
    verbose_name = "Chat"
