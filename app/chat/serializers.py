"""
Serializers for chat API.

This module provides serializers for the chat system:
- Channel serializers (read, create, update)
- Channel member serializers (read, create, update)
- Message serializers (read, create, edit, last-message entries)

Serializer Hierarchy:
    ChannelSerializer: Channel with creator and counts
    ChannelCreateSerializer: New channel with initial members
    ChannelUpdateSerializer: Rename / re-describe

    ChannelMemberSerializer: Membership with user info
    ChannelMemberCreateSerializer: Add a user to a channel
    ChannelMemberUpdateSerializer: Move a membership

    MessageSerializer: Message with soft-delete handling
    MessageCreateSerializer: Send new message
    MessageEditSerializer: Change message content
    LastMessageSerializer: Inbox entry (message plus channel name)

Design Decisions:
    - Read and write serializers are separate for clarity
    - Soft-deleted message content is replaced with a placeholder
"""

from __future__ import annotations

from rest_framework import serializers

from authentication.serializers import UserSerializer
from chat.constants import CHANNEL_CONFIG, MESSAGE_CONFIG
from chat.models import Channel, ChannelMember, Message
from core.helpers import MAX_ID


# =============================================================================
# Channel Serializers
# =============================================================================


class ChannelSerializer(serializers.ModelSerializer):
    """Channel read serializer."""

    created_by = UserSerializer(read_only=True)

    class Meta:
        model = Channel
        fields = [
            "id",
            "name",
            "description",
            "created_by",
            "member_count",
            "last_message_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ChannelCreateSerializer(serializers.Serializer):
    """
    Serializer for creating a channel.

    The creator is added automatically; member_ids lists everyone else.
    """

    name = serializers.CharField(
        max_length=CHANNEL_CONFIG.MAX_NAME_LENGTH,
        help_text="Channel name",
    )
    description = serializers.CharField(
        required=False,
        allow_blank=True,
        default="",
        help_text="Optional description",
    )
    member_ids = serializers.ListField(
        child=serializers.IntegerField(min_value=1, max_value=MAX_ID),
        required=False,
        default=list,
        max_length=CHANNEL_CONFIG.MAX_INITIAL_MEMBERS,
        help_text="Ids of users to add besides the creator",
    )


class ChannelUpdateSerializer(serializers.Serializer):
    """Serializer for renaming a channel or changing its description."""

    name = serializers.CharField(
        max_length=CHANNEL_CONFIG.MAX_NAME_LENGTH,
        required=False,
        allow_blank=True,
    )
    description = serializers.CharField(required=False, allow_blank=True)

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Channel name cannot be blank.")
        return value


# =============================================================================
# Channel Member Serializers
# =============================================================================


class ChannelMemberSerializer(serializers.ModelSerializer):
    """Membership with the member's public profile."""

    channel_id = serializers.IntegerField(read_only=True)
    user = UserSerializer(read_only=True)

    class Meta:
        model = ChannelMember
        fields = ["id", "channel_id", "user", "joined_at"]
        read_only_fields = fields


class ChannelMemberCreateSerializer(serializers.Serializer):
    """Serializer for adding a user to a channel."""

    channel_id = serializers.IntegerField(min_value=1, max_value=MAX_ID)
    user_id = serializers.IntegerField(min_value=1, max_value=MAX_ID)


class ChannelMemberUpdateSerializer(serializers.Serializer):
    """Serializer for moving a membership to another channel and/or user."""

    channel_id = serializers.IntegerField(min_value=1, max_value=MAX_ID, required=False)
    user_id = serializers.IntegerField(min_value=1, max_value=MAX_ID, required=False)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError(
                "Provide channel_id and/or user_id to update."
            )
        return attrs


class SuccessSerializer(serializers.Serializer):
    """Plain {"success": true} acknowledgement."""

    success = serializers.BooleanField(read_only=True)


# =============================================================================
# Message Serializers
# =============================================================================


class MessageSerializer(serializers.ModelSerializer):
    """
    Message read serializer.

    Handles soft-deleted messages:
        - content replaced with "[Message deleted]"
        - attachment_url emptied
        - sender info preserved
    """

    channel_id = serializers.IntegerField(read_only=True)
    sender = UserSerializer(read_only=True)
    content = serializers.SerializerMethodField(
        help_text="Message content (replaced if deleted)"
    )
    attachment_url = serializers.SerializerMethodField(
        help_text="Attachment download URL (empty if deleted)"
    )

    class Meta:
        model = Message
        fields = [
            "id",
            "channel_id",
            "sender",
            "content",
            "attachment_url",
            "is_deleted",
            "edited_at",
            "created_at",
        ]
        read_only_fields = fields

    def get_content(self, obj: Message) -> str:
        return obj.get_display_content()

    def get_attachment_url(self, obj: Message) -> str:
        return obj.get_display_attachment_url()


class MessageCreateSerializer(serializers.Serializer):
    """
    Serializer for sending a message.

    Content may be empty only when an attachment is given.
    """

    channel_id = serializers.IntegerField(min_value=1, max_value=MAX_ID)
    content = serializers.CharField(
        max_length=MESSAGE_CONFIG.MAX_CONTENT_LENGTH,
        required=False,
        allow_blank=True,
        default="",
        trim_whitespace=True,
    )
    attachment_url = serializers.URLField(
        max_length=1000,
        required=False,
        allow_blank=True,
        default="",
    )

    def validate(self, attrs):
        if not attrs.get("content") and not attrs.get("attachment_url"):
            raise serializers.ValidationError(
                {"content": ["Message content cannot be empty."]}
            )
        return attrs


class MessageEditSerializer(serializers.Serializer):
    """Serializer for editing a message's content."""

    content = serializers.CharField(
        max_length=MESSAGE_CONFIG.MAX_CONTENT_LENGTH,
        allow_blank=True,
        trim_whitespace=True,
    )


class LastMessageSerializer(MessageSerializer):
    """Inbox entry: the latest message of a channel with the channel's name."""

    channel_name = serializers.CharField(source="channel.name", read_only=True)

    class Meta(MessageSerializer.Meta):
        fields = [*MessageSerializer.Meta.fields, "channel_name"]
        read_only_fields = fields
