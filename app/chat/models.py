"""
Chat system models.

This module defines the data models for the chat system:
- Channels (chat rooms) with any number of members
- Channel memberships linking users to channels
- Messages posted in a channel

Models:
    Channel: Container for messages between members
    ChannelMember: A user's membership in a channel
    Message: Individual message within a channel

Design Decisions:
    - Every member of a channel is equal; the creator alone may rename,
      delete, or move memberships around
    - member_count is cached on Channel and kept in sync by the services
    - Soft delete preserves history while hiding content in API responses
"""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.db.models import Q

from chat.constants import MESSAGE_CONFIG
from core.managers import SoftDeleteManager
from core.model_mixins import SoftDeleteMixin
from core.models import BaseModel


class Channel(SoftDeleteMixin, BaseModel):
    """
    A chat room shared by its members.

    Soft Delete Behavior:
        - is_deleted=True: Channel is hidden from lists and lookups
        - Channel.objects excludes deleted channels; all_objects includes them
        - Memberships and messages are kept for history

    Fields:
        name: Channel name shown in the sidebar
        description: Optional free-form description
        created_by: User who created the channel
        member_count: Cached count of members
        last_message_at: Timestamp of most recent message (for sorting)

    Relationships:
        memberships: All ChannelMember records for this channel
        messages: All Message records for this channel
    """

    name = models.CharField(
        max_length=100,
        help_text="Channel name",
    )

    description = models.TextField(
        blank=True,
        default="",
        help_text="Optional channel description",
    )

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_channels",
        help_text="User who created this channel",
    )

    member_count = models.PositiveIntegerField(
        default=0,
        help_text="Current number of members (cached)",
    )

    last_message_at = models.DateTimeField(
        null=True,
        blank=True,
        db_index=True,
        help_text="Timestamp of most recent message (for sorting channel lists)",
    )

    objects = SoftDeleteManager()
    all_objects = models.Manager()

    class Meta:
        db_table = "chat_channel"
        ordering = ["-last_message_at", "-created_at"]
        indexes = [
            models.Index(
                fields=["-last_message_at"],
                name="chat_channel_last_msg_idx",
                condition=Q(is_deleted=False),
            ),
        ]

    def __str__(self) -> str:
        return self.name or f"Channel({self.pk})"

    def has_member(self, user) -> bool:
        """Check if the user is a member of this channel."""
        if user is None or not getattr(user, "is_authenticated", False):
            return False
        return self.memberships.filter(user=user).exists()

    def is_creator(self, user) -> bool:
        """Check if the user created this channel."""
        return user is not None and self.created_by_id == getattr(user, "pk", None)


class ChannelMember(models.Model):
    """
    Membership of a user in a channel.

    Fields:
        channel: Channel the user belongs to
        user: Member
        joined_at: When the membership was created

    Constraints:
        - UniqueConstraint(channel, user): one membership per user per channel
    """

    channel = models.ForeignKey(
        Channel,
        on_delete=models.CASCADE,
        related_name="memberships",
        help_text="Channel this membership belongs to",
    )

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="channel_memberships",
        help_text="Member of the channel",
    )

    joined_at = models.DateTimeField(
        auto_now_add=True,
        help_text="When the user joined this channel",
    )

    class Meta:
        db_table = "chat_channel_member"
        ordering = ["joined_at", "id"]
        indexes = [
            models.Index(
                fields=["user", "channel"],
                name="chat_member_user_channel_idx",
            ),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["channel", "user"],
                name="unique_channel_member",
            ),
        ]

    def __str__(self) -> str:
        return f"ChannelMember: {self.user_id} in {self.channel_id}"


class Message(SoftDeleteMixin, BaseModel):
    """
    A message posted in a channel.

    Soft Delete Behavior:
        When is_deleted=True:
        - Content is preserved in database
        - API returns sender info but replaces content with "[Message deleted]"
          and hides the attachment

    Fields:
        channel: Channel this message belongs to
        sender: User who sent the message (null once the user is removed)
        content: Message text (may be empty when an attachment is given)
        attachment_url: Download URL of an uploaded file
        edited_at: When the content was last edited (null if never)
    """

    channel = models.ForeignKey(
        Channel,
        on_delete=models.CASCADE,
        related_name="messages",
        help_text="Channel this message belongs to",
    )

    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sent_messages",
        help_text="User who sent this message",
    )

    content = models.TextField(
        blank=True,
        default="",
        max_length=MESSAGE_CONFIG.MAX_CONTENT_LENGTH,
        help_text="Message text",
    )

    attachment_url = models.URLField(
        max_length=1000,
        blank=True,
        default="",
        help_text="Download URL of an attached file",
    )

    edited_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the message was last edited",
    )

    class Meta:
        db_table = "chat_message"
        ordering = ["created_at", "id"]
        indexes = [
            # Messages in a channel (cursor pagination)
            models.Index(
                fields=["channel", "created_at", "id"],
                name="chat_msg_channel_cursor_idx",
            ),
            models.Index(
                fields=["sender", "-created_at"],
                name="chat_msg_sender_idx",
            ),
        ]

    def __str__(self) -> str:
        sender_str = f"User {self.sender_id}" if self.sender_id else "Unknown"
        content_preview = (
            self.content[:50] + "..." if len(self.content) > 50 else self.content
        )
        deleted_str = " [deleted]" if self.is_deleted else ""
        return f"{sender_str}: {content_preview}{deleted_str}"

    @property
    def is_edited(self) -> bool:
        return self.edited_at is not None

    def get_display_content(self) -> str:
        """
        Get content suitable for display.

        Returns:
            - "[Message deleted]" if soft deleted
            - Original content otherwise
        """
        if self.is_deleted:
            return MESSAGE_CONFIG.DELETED_PLACEHOLDER
        return self.content

    def get_display_attachment_url(self) -> str:
        """Attachment URL, or empty string once the message is deleted."""
        if self.is_deleted:
            return ""
        return self.attachment_url
