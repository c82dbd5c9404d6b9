"""
Permission classes for chat API.

This module provides DRF permission classes for the chat system:
- IsChannelMember: User belongs to the channel
- IsChannelCreator: User created the channel
- IsMessageSender: User sent the message
- CanRemoveChannelMember: User is the member or the channel creator

Permission Rules:
    Any member can:
        - View the channel, its members and its messages
        - Send messages
        - Add people to the channel
        - Leave the channel

    The creator can also:
        - Rename / re-describe the channel
        - Delete the channel
        - Remove or move any membership

    The sender of a message can edit and delete it.

Design Decisions:
    - Permissions resolve the channel from Channel, ChannelMember or Message
    - Permission classes are composable via DRF's AND logic
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rest_framework import permissions

from chat.models import Channel, ChannelMember, Message

if TYPE_CHECKING:
    from rest_framework.request import Request
    from rest_framework.views import APIView


def _channel_for(obj) -> Channel:
    """Resolve the channel a Channel, ChannelMember or Message belongs to."""
    if isinstance(obj, (ChannelMember, Message)):
        return obj.channel
    return obj


class IsChannelMember(permissions.BasePermission):
    """
    Allows access only to members of the channel.

    This is the base permission for most chat endpoints.
    """

    message = "You are not a member of this channel."

    def has_object_permission(self, request: Request, view: APIView, obj) -> bool:
        if not request.user.is_authenticated:
            return False
        return ChannelMember.objects.filter(
            channel=_channel_for(obj),
            user=request.user,
        ).exists()


class IsChannelCreator(permissions.BasePermission):
    """
    Allows access only to the user who created the channel.

    Used for channel updates, deletion and moving memberships.
    """

    message = "Only the channel creator can perform this action."

    def has_object_permission(self, request: Request, view: APIView, obj) -> bool:
        if not request.user.is_authenticated:
            return False
        return _channel_for(obj).created_by_id == request.user.id


class IsMessageSender(permissions.BasePermission):
    """Allows edits and deletes only by the message's sender."""

    message = "You can only modify your own messages."

    def has_object_permission(self, request: Request, view: APIView, obj: Message) -> bool:
        if not request.user.is_authenticated:
            return False
        return obj.sender_id == request.user.id


class CanRemoveChannelMember(permissions.BasePermission):
    """
    Allows removing a membership by the member (leaving) or the creator.
    """

    message = "Only the member or the channel creator can remove this membership."

    def has_object_permission(
        self, request: Request, view: APIView, obj: ChannelMember
    ) -> bool:
        if not request.user.is_authenticated:
            return False
        return (
            obj.user_id == request.user.id
            or obj.channel.created_by_id == request.user.id
        )
