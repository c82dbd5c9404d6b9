"""
Pagination classes for chat API.

This module provides pagination for the chat system:
- MessageCursorPagination: For message lists (oldest first)
- ChannelPagination: For channel lists (keeps the most-recent-activity order)

Message cursors encode (created_at, id), so pages stay stable while new
messages arrive.
"""

from rest_framework.pagination import CursorPagination, PageNumberPagination


class MessageCursorPagination(CursorPagination):
    """
    Cursor pagination for message lists.

    Orders messages oldest-first for natural chat reading experience.
    Uses (created_at, id) for stable cursor position.

    Default: 50 messages per page
    Maximum: 100 messages per page

    Query parameters:
        cursor: Encoded cursor for position
        page_size: Number of messages (optional override)
    """

    page_size = 50
    max_page_size = 100
    page_size_query_param = "page_size"
    ordering = ("created_at", "id")
    cursor_query_param = "cursor"


class ChannelPagination(PageNumberPagination):
    """
    Page-number pagination for channel lists.

    Channels are sorted by last_message_at, which is null for channels
    without messages; cursor pagination cannot order on a nullable field,
    so channel lists use page numbers and keep the queryset ordering.

    Default: 20 channels per page
    Maximum: 50 channels per page
    """

    page_size = 20
    max_page_size = 50
    page_size_query_param = "page_size"
