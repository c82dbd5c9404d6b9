"""
Chat system service layer.

This module provides the business logic for the chat system, encapsulating
all operations on channels, channel members and messages.

Services:
    ChannelService: Channel lifecycle (create, update, delete, list)
    ChannelMemberService: Membership management and membership queries
        (common channels, channels with an exact member set)
    MessageService: Message operations (send, edit, delete, last messages)

Design Principles:
    - Services are stateless (use class methods)
    - Expected failures return ServiceResult.failure()
    - Unexpected failures raise exceptions
    - All multi-row writes run in a transaction
    - Message changes are pushed to WebSocket clients after the write

Usage:
    from chat.services import ChannelService, ChannelMemberService, MessageService

    result = ChannelService.create_channel(
        creator=user,
        name="Weekend plans",
        member_ids=[2, 3],
    )
    if result.success:
        channel = result.data

    result = MessageService.send_message(
        channel=channel,
        sender=user,
        content="Hello everyone!",
    )
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from django.contrib.auth import get_user_model
from django.db import IntegrityError
from django.db.models import Count, F, IntegerField, OuterRef, Subquery
from django.utils import timezone

from chat import realtime
from chat.constants import CHANNEL_CONFIG, MESSAGE_CONFIG, WS_EVENTS
from chat.models import Channel, ChannelMember, Message
from core.helpers import parse_id
from core.services import BaseService, ServiceResult

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from authentication.models import User

logger = logging.getLogger(__name__)

# Error codes that views render as 403 instead of 400
PERMISSION_ERROR_CODES = frozenset({"NOT_MEMBER", "PERMISSION_DENIED"})


class ChannelService(BaseService):
    """
    Service for channel lifecycle operations.

    Methods:
        get_user_channels: Channels the user belongs to
        get_channel: Non-deleted channel by id
        create_channel: Create a channel and its initial memberships
        update_channel: Rename or re-describe a channel
        delete_channel: Soft delete a channel
    """

    @staticmethod
    def get_user_channels(user: User, search: str | None = None) -> QuerySet[Channel]:
        """
        Non-deleted channels the user is a member of.

        Args:
            user: Member
            search: Optional case-insensitive match on the channel name

        Returns:
            QuerySet ordered by most recent activity
        """
        queryset = Channel.objects.filter(
            memberships__user=user,
            is_deleted=False,
        ).select_related("created_by__profile")

        if search:
            queryset = queryset.filter(name__icontains=search.strip())

        return queryset.distinct().order_by(
            F("last_message_at").desc(nulls_last=True), "-created_at", "-id"
        )

    @staticmethod
    def get_channel(channel_id) -> Channel | None:
        """Return the non-deleted channel with this id, or None."""
        pk = parse_id(channel_id)
        if pk is None:
            return None
        return Channel.objects.filter(pk=pk, is_deleted=False).first()

    @classmethod
    def create_channel(
        cls,
        creator: User,
        name: str,
        description: str = "",
        member_ids: list[int] | None = None,
    ) -> ServiceResult[Channel]:
        """
        Create a new channel.

        The creator is always a member. Duplicate ids and the creator's own
        id in member_ids are ignored.

        Args:
            creator: User creating the channel
            name: Required channel name
            description: Optional description
            member_ids: Ids of other users to add

        Returns:
            ServiceResult with new Channel

        Error codes:
            NAME_REQUIRED: Channel name cannot be empty
            TOO_MANY_MEMBERS: More initial members than allowed
            USER_NOT_FOUND: One or more member ids do not exist
        """
        name = name.strip() if name else ""
        if not name:
            return ServiceResult.failure(
                "Channel name is required",
                error_code="NAME_REQUIRED",
            )

        other_ids = []
        for user_id in member_ids or []:
            if user_id != creator.id and user_id not in other_ids:
                other_ids.append(user_id)

        if len(other_ids) > CHANNEL_CONFIG.MAX_INITIAL_MEMBERS:
            return ServiceResult.failure(
                f"A channel can start with at most "
                f"{CHANNEL_CONFIG.MAX_INITIAL_MEMBERS} members",
                error_code="TOO_MANY_MEMBERS",
            )

        User = get_user_model()
        members = list(User.objects.filter(id__in=other_ids, is_active=True))
        if len(members) != len(other_ids):
            found = {member.id for member in members}
            missing = [user_id for user_id in other_ids if user_id not in found]
            return ServiceResult.failure(
                f"Users not found: {missing}",
                error_code="USER_NOT_FOUND",
            )

        with cls.atomic():
            channel = Channel.objects.create(
                name=name,
                description=(description or "").strip(),
                created_by=creator,
                member_count=1 + len(members),
            )
            ChannelMember.objects.bulk_create(
                [ChannelMember(channel=channel, user=creator)]
                + [ChannelMember(channel=channel, user=member) for member in members]
            )

        cls.get_logger().info(
            f"Created channel {channel.id} '{name}' with {channel.member_count} members"
        )

        return ServiceResult.success(channel)

    @classmethod
    def update_channel(
        cls,
        channel: Channel,
        user: User,
        name: str | None = None,
        description: str | None = None,
    ) -> ServiceResult[Channel]:
        """
        Update a channel's name and/or description.

        Args:
            channel: Channel to update
            user: User performing the update (must be the creator)
            name: New name (unchanged if None)
            description: New description (unchanged if None)

        Returns:
            ServiceResult with updated Channel

        Error codes:
            PERMISSION_DENIED: Only the creator can update the channel
            NAME_REQUIRED: Name cannot be blank
        """
        if not channel.is_creator(user):
            return ServiceResult.failure(
                "Only the channel creator can update this channel",
                error_code="PERMISSION_DENIED",
            )

        update_fields = []
        if name is not None:
            name = name.strip()
            if not name:
                return ServiceResult.failure(
                    "Channel name is required",
                    error_code="NAME_REQUIRED",
                )
            channel.name = name
            update_fields.append("name")

        if description is not None:
            channel.description = description.strip()
            update_fields.append("description")

        if update_fields:
            channel.save(update_fields=[*update_fields, "updated_at"])
            cls.get_logger().info(
                f"User {user.id} updated {update_fields} of channel {channel.id}"
            )

        return ServiceResult.success(channel)

    @classmethod
    def delete_channel(cls, channel: Channel, user: User) -> ServiceResult[None]:
        """
        Soft delete a channel.

        Error codes:
            PERMISSION_DENIED: Only the creator can delete the channel
        """
        if not channel.is_creator(user):
            return ServiceResult.failure(
                "Only the channel creator can delete this channel",
                error_code="PERMISSION_DENIED",
            )

        channel.soft_delete()
        cls.get_logger().info(f"User {user.id} deleted channel {channel.id}")
        return ServiceResult.success(None)


class ChannelMemberService(BaseService):
    """
    Service for channel membership.

    Methods:
        common_channels: Channels shared by every listed user
        channels_with_exact_members: Channels whose member set equals the ids
        get_members: Users belonging to a channel
        add_member: Add a user to a channel
        remove_member: Remove a membership
        move_member: Change the channel and/or user of a membership
    """

    @staticmethod
    def common_channels(user_ids: list[int]) -> list[int]:
        """
        Ids of non-deleted channels in which every listed user is a member.

        Args:
            user_ids: User ids (duplicates are ignored)

        Returns:
            Sorted channel ids; empty when user_ids is empty
        """
        user_ids = sorted(set(user_ids))
        if not user_ids:
            return []

        return list(
            Channel.objects.filter(
                is_deleted=False,
                memberships__user_id__in=user_ids,
            )
            .annotate(matched=Count("memberships__user_id", distinct=True))
            .filter(matched=len(user_ids))
            .order_by("id")
            .values_list("id", flat=True)
        )

    @staticmethod
    def channels_with_exact_members(user_ids: list[int]) -> list[int]:
        """
        Ids of non-deleted channels whose members are exactly these users.

        Used to reuse an existing room for a group of people instead of
        creating a duplicate.

        Args:
            user_ids: User ids (duplicates are ignored)

        Returns:
            Sorted channel ids; empty when user_ids is empty
        """
        user_ids = sorted(set(user_ids))
        if not user_ids:
            return []

        total_members = (
            ChannelMember.objects.filter(channel=OuterRef("pk"))
            .order_by()
            .values("channel")
            .annotate(total=Count("id"))
            .values("total")
        )

        return list(
            Channel.objects.filter(
                is_deleted=False,
                memberships__user_id__in=user_ids,
            )
            .annotate(
                matched=Count("memberships__user_id", distinct=True),
                total=Subquery(total_members, output_field=IntegerField()),
            )
            .filter(matched=len(user_ids), total=len(user_ids))
            .order_by("id")
            .values_list("id", flat=True)
        )

    @staticmethod
    def get_members(channel: Channel) -> QuerySet[User]:
        """Users that belong to the channel, in join order."""
        User = get_user_model()
        return (
            User.objects.filter(channel_memberships__channel=channel)
            .select_related("profile")
            .order_by("channel_memberships__joined_at", "id")
        )

    @classmethod
    def add_member(
        cls,
        channel_id,
        user_id,
        added_by: User,
    ) -> ServiceResult[ChannelMember]:
        """
        Add a user to a channel.

        Any member of the channel may add people.

        Args:
            channel_id: Target channel id
            user_id: Id of the user to add
            added_by: User performing the action

        Returns:
            ServiceResult with new ChannelMember

        Error codes:
            CHANNEL_NOT_FOUND: Channel does not exist or was deleted
            USER_NOT_FOUND: User does not exist or is inactive
            NOT_MEMBER: Adding user is not a member of the channel
            ALREADY_MEMBER: User already belongs to the channel
        """
        channel = ChannelService.get_channel(channel_id)
        if channel is None:
            return ServiceResult.failure(
                f"Channel {channel_id} does not exist",
                error_code="CHANNEL_NOT_FOUND",
            )

        User = get_user_model()
        user = User.objects.filter(pk=user_id, is_active=True).first()
        if user is None:
            return ServiceResult.failure(
                f"User {user_id} does not exist",
                error_code="USER_NOT_FOUND",
            )

        if not channel.has_member(added_by):
            return ServiceResult.failure(
                "You are not a member of this channel",
                error_code="NOT_MEMBER",
            )

        try:
            with cls.atomic():
                member = ChannelMember.objects.create(channel=channel, user=user)
                cls._sync_member_count(channel.id)
        except IntegrityError:
            return ServiceResult.failure(
                "User is already a member of this channel",
                error_code="ALREADY_MEMBER",
            )

        cls.get_logger().info(
            f"User {added_by.id} added user {user.id} to channel {channel.id}"
        )
        return ServiceResult.success(member)

    @classmethod
    def remove_member(cls, member: ChannelMember, removed_by: User) -> ServiceResult[None]:
        """
        Remove a membership.

        Members may remove themselves (leave); the channel creator may
        remove anyone.

        Error codes:
            PERMISSION_DENIED: Neither the member nor the channel creator
        """
        channel = member.channel
        if member.user_id != removed_by.id and not channel.is_creator(removed_by):
            return ServiceResult.failure(
                "Only the member or the channel creator can remove this membership",
                error_code="PERMISSION_DENIED",
            )

        with cls.atomic():
            member.delete()
            cls._sync_member_count(channel.id)

        cls.get_logger().info(
            f"User {removed_by.id} removed user {member.user_id} "
            f"from channel {channel.id}"
        )
        return ServiceResult.success(None)

    @classmethod
    def move_member(
        cls,
        member_id,
        moved_by: User,
        channel_id=None,
        user_id=None,
    ) -> ServiceResult[ChannelMember]:
        """
        Point a membership at another channel and/or user.

        Args:
            member_id: Membership to change
            moved_by: User performing the change (creator of the current channel)
            channel_id: New channel id (unchanged if None)
            user_id: New user id (unchanged if None)

        Returns:
            ServiceResult with the updated ChannelMember

        Error codes:
            MEMBER_NOT_FOUND: Membership does not exist
            PERMISSION_DENIED: Not the creator of the membership's channel
            CHANNEL_NOT_FOUND: New channel does not exist
            USER_NOT_FOUND: New user does not exist
            ALREADY_MEMBER: The resulting membership already exists
        """
        pk = parse_id(member_id)
        member = (
            ChannelMember.objects.select_related("channel").filter(pk=pk).first()
            if pk is not None
            else None
        )
        if member is None:
            return ServiceResult.failure(
                f"channel member ID {member_id} does not exist",
                error_code="MEMBER_NOT_FOUND",
            )

        if not member.channel.is_creator(moved_by):
            return ServiceResult.failure(
                "Only the channel creator can change this membership",
                error_code="PERMISSION_DENIED",
            )

        old_channel_id = member.channel_id

        if channel_id is not None:
            channel = ChannelService.get_channel(channel_id)
            if channel is None:
                return ServiceResult.failure(
                    f"Channel {channel_id} does not exist",
                    error_code="CHANNEL_NOT_FOUND",
                )
            member.channel = channel

        if user_id is not None:
            User = get_user_model()
            user = User.objects.filter(pk=user_id, is_active=True).first()
            if user is None:
                return ServiceResult.failure(
                    f"User {user_id} does not exist",
                    error_code="USER_NOT_FOUND",
                )
            member.user = user

        try:
            with cls.atomic():
                member.save()
                cls._sync_member_count(old_channel_id)
                if member.channel_id != old_channel_id:
                    cls._sync_member_count(member.channel_id)
        except IntegrityError:
            return ServiceResult.failure(
                "User is already a member of this channel",
                error_code="ALREADY_MEMBER",
            )

        cls.get_logger().info(
            f"User {moved_by.id} changed membership {member.id} to "
            f"user {member.user_id} in channel {member.channel_id}"
        )
        return ServiceResult.success(member)

    @staticmethod
    def _sync_member_count(channel_id) -> None:
        """Recount a channel's members into the cached member_count."""
        count = ChannelMember.objects.filter(channel_id=channel_id).count()
        Channel.all_objects.filter(pk=channel_id).update(
            member_count=count,
            updated_at=timezone.now(),
        )


class MessageService(BaseService):
    """
    Service for message operations.

    Methods:
        get_channel_messages: Messages of a channel, oldest first
        send_message: Post a message and broadcast it
        edit_message: Change a message's content
        delete_message: Soft delete a message
        get_last_messages: Most recent message of each of a user's channels
    """

    @staticmethod
    def get_channel_messages(channel: Channel) -> QuerySet[Message]:
        """All messages of a channel (deleted ones included as placeholders)."""
        return (
            Message.objects.filter(channel=channel)
            .select_related("sender__profile")
            .order_by("created_at", "id")
        )

    @classmethod
    def send_message(
        cls,
        channel: Channel,
        sender: User,
        content: str = "",
        attachment_url: str = "",
    ) -> ServiceResult[Message]:
        """
        Post a message to a channel.

        Args:
            channel: Target channel
            sender: User sending the message
            content: Message text
            attachment_url: Optional download URL of an uploaded file

        Returns:
            ServiceResult with new Message

        Error codes:
            CHANNEL_DELETED: Cannot post to a deleted channel
            NOT_MEMBER: Sender is not a member of the channel
            EMPTY_CONTENT: Neither content nor attachment given
            CONTENT_TOO_LONG: Content exceeds the length limit
        """
        if channel.is_deleted:
            return ServiceResult.failure(
                "Cannot send messages to a deleted channel",
                error_code="CHANNEL_DELETED",
            )

        if not channel.has_member(sender):
            return ServiceResult.failure(
                "You are not a member of this channel",
                error_code="NOT_MEMBER",
            )

        content = content.strip() if content else ""
        attachment_url = attachment_url.strip() if attachment_url else ""
        if not content and not attachment_url:
            return ServiceResult.failure(
                "Message content cannot be empty",
                error_code="EMPTY_CONTENT",
            )

        if len(content) > MESSAGE_CONFIG.MAX_CONTENT_LENGTH:
            return ServiceResult.failure(
                f"Message content cannot exceed "
                f"{MESSAGE_CONFIG.MAX_CONTENT_LENGTH} characters",
                error_code="CONTENT_TOO_LONG",
            )

        with cls.atomic():
            message = Message.objects.create(
                channel=channel,
                sender=sender,
                content=content,
                attachment_url=attachment_url,
            )
            channel.last_message_at = message.created_at
            channel.save(update_fields=["last_message_at", "updated_at"])

        cls.get_logger().debug(
            f"User {sender.id} sent message {message.id} to channel {channel.id}"
        )

        realtime.broadcast_message(WS_EVENTS.MESSAGE_NEW, message)
        return ServiceResult.success(message)

    @classmethod
    def edit_message(
        cls,
        message: Message,
        user: User,
        content: str,
    ) -> ServiceResult[Message]:
        """
        Change the content of a message.

        Error codes:
            PERMISSION_DENIED: Only the sender can edit
            MESSAGE_DELETED: Deleted messages cannot be edited
            EMPTY_CONTENT: Content blank and no attachment
            CONTENT_TOO_LONG: Content exceeds the length limit
        """
        if message.sender_id != user.id:
            return ServiceResult.failure(
                "You can only edit your own messages",
                error_code="PERMISSION_DENIED",
            )

        if message.is_deleted:
            return ServiceResult.failure(
                "Cannot edit a deleted message",
                error_code="MESSAGE_DELETED",
            )

        content = content.strip() if content else ""
        if not content and not message.attachment_url:
            return ServiceResult.failure(
                "Message content cannot be empty",
                error_code="EMPTY_CONTENT",
            )

        if len(content) > MESSAGE_CONFIG.MAX_CONTENT_LENGTH:
            return ServiceResult.failure(
                f"Message content cannot exceed "
                f"{MESSAGE_CONFIG.MAX_CONTENT_LENGTH} characters",
                error_code="CONTENT_TOO_LONG",
            )

        message.content = content
        message.edited_at = timezone.now()
        message.save(update_fields=["content", "edited_at", "updated_at"])

        cls.get_logger().info(f"User {user.id} edited message {message.id}")

        realtime.broadcast_message(WS_EVENTS.MESSAGE_UPDATED, message)
        return ServiceResult.success(message)

    @classmethod
    def delete_message(cls, message: Message, user: User) -> ServiceResult[None]:
        """
        Soft delete a message.

        Error codes:
            PERMISSION_DENIED: Only the sender can delete
            ALREADY_DELETED: Message is already deleted
        """
        if message.sender_id != user.id:
            return ServiceResult.failure(
                "You can only delete your own messages",
                error_code="PERMISSION_DENIED",
            )

        if message.is_deleted:
            return ServiceResult.failure(
                "Message is already deleted",
                error_code="ALREADY_DELETED",
            )

        message.soft_delete()
        cls.get_logger().info(
            f"User {user.id} deleted message {message.id} in channel {message.channel_id}"
        )

        realtime.broadcast_message(WS_EVENTS.MESSAGE_DELETED, message)
        return ServiceResult.success(None)

    @staticmethod
    def get_last_messages(user: User) -> QuerySet[Message]:
        """
        Most recent non-deleted message of every channel the user is in.

        Deleted channels and channels without messages are left out.

        Returns:
            QuerySet of messages, newest first
        """
        latest = (
            Message.objects.filter(channel=OuterRef("pk"), is_deleted=False)
            .order_by("-created_at", "-id")
            .values("id")[:1]
        )

        last_ids = (
            Channel.objects.filter(memberships__user=user, is_deleted=False)
            .annotate(last_message_id=Subquery(latest))
            .filter(last_message_id__isnull=False)
            .values("last_message_id")
        )

        return (
            Message.objects.filter(id__in=last_ids)
            .select_related("channel", "sender__profile")
            .order_by("-created_at", "-id")
        )
