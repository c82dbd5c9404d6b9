"""
Constants and configuration for chat module features.

This module centralizes configuration values for:
- Channel limits
- Message content limits and placeholders
- WebSocket event types and close codes

Import example:
    from chat.constants import MESSAGE_CONFIG, WS_CLOSE_CODES
"""

from typing import Final


# =============================================================================
# Channel Configuration
# =============================================================================


class CHANNEL_CONFIG:
    """Configuration for channel operations."""

    MAX_NAME_LENGTH: Final[int] = 100
    MAX_INITIAL_MEMBERS: Final[int] = 500


# =============================================================================
# Message Configuration
# =============================================================================


class MESSAGE_CONFIG:
    """Configuration for message operations."""

    MAX_CONTENT_LENGTH: Final[int] = 10000  # Characters
    DELETED_PLACEHOLDER: Final[str] = "[Message deleted]"


# =============================================================================
# WebSocket Configuration
# =============================================================================


class WS_EVENTS:
    """Event types sent to WebSocket clients."""

    MESSAGE_NEW: Final[str] = "message.new"
    MESSAGE_UPDATED: Final[str] = "message.updated"
    MESSAGE_DELETED: Final[str] = "message.deleted"
    TYPING: Final[str] = "typing"
    ERROR: Final[str] = "error"


class WS_CLOSE_CODES:
    """Application close codes (4000-4999 range)."""

    UNAUTHENTICATED: Final[int] = 4001
    NOT_A_MEMBER: Final[int] = 4003
    CHANNEL_NOT_FOUND: Final[int] = 4004


def channel_group_name(channel_id) -> str:
    """Channel layer group that receives a channel's events."""
    return f"chat_channel_{channel_id}"
