"""
ViewSets for chat API.

This module provides REST API endpoints for the chat system:
- ChannelViewSet: Channel CRUD
- ChannelMemberViewSet: Membership changes and membership queries
- MessageViewSet: Message operations and the last-messages inbox

URL Structure:
    /api/v1/chat/channels/                               GET, POST
    /api/v1/chat/channels/{id}/                          GET, PATCH, DELETE
    /api/v1/chat/channel-members/?member_ids=1,2         GET
    /api/v1/chat/channel-members/                        POST
    /api/v1/chat/channel-members/{id}/                   PATCH, DELETE
    /api/v1/chat/channel-members/common-channels/        GET
    /api/v1/chat/channel-members/members-info/           GET
    /api/v1/chat/messages/?channel_id=N                  GET, POST
    /api/v1/chat/messages/{id}/                          GET, PATCH, DELETE
    /api/v1/chat/messages/last/                          GET

Design Decisions:
    - All operations use the service layer for business logic
    - Service failures become 400, permission failures 403
    - Permissions are enforced at both view and service level
"""

from __future__ import annotations

from django.http import Http404
from django.shortcuts import get_object_or_404
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import (
    OpenApiParameter,
    OpenApiResponse,
    extend_schema,
    extend_schema_view,
)
from rest_framework import serializers, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from authentication.serializers import UserSerializer
from chat.models import Channel, ChannelMember, Message
from chat.pagination import ChannelPagination, MessageCursorPagination
from chat.permissions import (
    CanRemoveChannelMember,
    IsChannelCreator,
    IsChannelMember,
    IsMessageSender,
)
from chat.serializers import (
    ChannelCreateSerializer,
    ChannelMemberCreateSerializer,
    ChannelMemberSerializer,
    ChannelMemberUpdateSerializer,
    ChannelSerializer,
    ChannelUpdateSerializer,
    LastMessageSerializer,
    MessageCreateSerializer,
    MessageEditSerializer,
    MessageSerializer,
    SuccessSerializer,
)
from chat.services import (
    PERMISSION_ERROR_CODES,
    ChannelMemberService,
    ChannelService,
    MessageService,
)
from core.helpers import parse_id, parse_id_list, parse_json_id_list


def service_error_response(result) -> Response:
    """Render a failed ServiceResult as 403 (permission) or 400 (anything else)."""
    status_code = (
        status.HTTP_403_FORBIDDEN
        if result.error_code in PERMISSION_ERROR_CODES
        else status.HTTP_400_BAD_REQUEST
    )
    return Response(
        {"error": result.error, "error_code": result.error_code},
        status=status_code,
    )


def bad_request(error: str, error_code: str) -> Response:
    return Response(
        {"error": error, "error_code": error_code},
        status=status.HTTP_400_BAD_REQUEST,
    )


@extend_schema_view(
    list=extend_schema(
        operation_id="list_channels",
        summary="List channels",
        tags=["Chat - Channels"],
        parameters=[
            OpenApiParameter(
                name="search",
                type=OpenApiTypes.STR,
                description="Filter by channel name",
            ),
        ],
    ),
    create=extend_schema(
        operation_id="create_channel",
        summary="Create channel",
        tags=["Chat - Channels"],
        request=ChannelCreateSerializer,
        responses={201: ChannelSerializer},
    ),
    retrieve=extend_schema(
        operation_id="get_channel",
        summary="Get channel",
        tags=["Chat - Channels"],
    ),
    partial_update=extend_schema(
        operation_id="update_channel",
        summary="Update channel",
        tags=["Chat - Channels"],
        request=ChannelUpdateSerializer,
        responses={200: ChannelSerializer},
    ),
    destroy=extend_schema(
        operation_id="delete_channel",
        summary="Delete channel",
        tags=["Chat - Channels"],
    ),
)
class ChannelViewSet(viewsets.ModelViewSet):
    """
    ViewSet for channel operations.

    list:
        Channels the current user is a member of, most recent activity first.

    create:
        Create a channel. The creator is always a member.

    retrieve:
        Channel details (members only).

    partial_update:
        Rename or re-describe a channel (creator only).

    destroy:
        Soft delete a channel (creator only).
    """

    permission_classes = [IsAuthenticated]
    pagination_class = ChannelPagination
    serializer_class = ChannelSerializer
    http_method_names = ["get", "post", "patch", "delete", "head", "options"]

    def get_queryset(self):
        if self.action == "list":
            return ChannelService.get_user_channels(
                self.request.user,
                search=self.request.query_params.get("search"),
            )
        # Detail actions look across all live channels so that non-members
        # get 403 rather than 404.
        return Channel.objects.filter(is_deleted=False).select_related(
            "created_by__profile"
        )

    def get_permissions(self):
        if self.action in ("partial_update", "destroy"):
            return [IsAuthenticated(), IsChannelCreator()]
        if self.action == "retrieve":
            return [IsAuthenticated(), IsChannelMember()]
        return [IsAuthenticated()]

    def create(self, request):
        serializer = ChannelCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = serializer.validated_data
        result = ChannelService.create_channel(
            creator=request.user,
            name=data["name"],
            description=data.get("description", ""),
            member_ids=data.get("member_ids"),
        )

        if not result.success:
            return service_error_response(result)

        return Response(ChannelSerializer(result.data).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        channel = self.get_object()
        serializer = ChannelUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = ChannelService.update_channel(
            channel=channel,
            user=request.user,
            name=serializer.validated_data.get("name"),
            description=serializer.validated_data.get("description"),
        )

        if not result.success:
            return service_error_response(result)

        return Response(ChannelSerializer(result.data).data)

    def destroy(self, request, pk=None):
        channel = self.get_object()

        result = ChannelService.delete_channel(channel=channel, user=request.user)
        if not result.success:
            return service_error_response(result)

        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema_view(
    list=extend_schema(
        operation_id="find_channels_by_members",
        summary="Find channels with exactly these members",
        description=(
            "Return the ids of channels whose member set is exactly the given "
            "users. Tokens that are not non-negative integers are ignored."
        ),
        tags=["Chat - Channel Members"],
        parameters=[
            OpenApiParameter(
                name="member_ids",
                type=OpenApiTypes.STR,
                description="Comma-separated user ids, e.g. 1,2,3",
            ),
        ],
        responses={200: serializers.ListSerializer(child=serializers.IntegerField())},
    ),
    create=extend_schema(
        operation_id="add_channel_member",
        summary="Add channel member",
        tags=["Chat - Channel Members"],
        request=ChannelMemberCreateSerializer,
        responses={
            201: ChannelMemberSerializer,
            400: OpenApiResponse(description="Unknown channel/user or already a member"),
            403: OpenApiResponse(description="Not a member of the channel"),
        },
    ),
    partial_update=extend_schema(
        operation_id="update_channel_member",
        summary="Move channel member",
        tags=["Chat - Channel Members"],
        request=ChannelMemberUpdateSerializer,
        responses={200: SuccessSerializer},
    ),
    destroy=extend_schema(
        operation_id="remove_channel_member",
        summary="Remove channel member",
        tags=["Chat - Channel Members"],
        responses={200: SuccessSerializer},
    ),
)
class ChannelMemberViewSet(viewsets.GenericViewSet):
    """
    ViewSet for channel memberships.

    list:
        Channels whose members are exactly ?member_ids=.

    create:
        Add a user to a channel (any member may add people).

    partial_update:
        Move a membership to another channel and/or user (creator only).

    destroy:
        Remove a membership (the member themself or the channel creator).

    common_channels:
        Channels shared by every user in ?users=[...].

    members_info:
        Profiles of a channel's members.
    """

    permission_classes = [IsAuthenticated]
    serializer_class = ChannelMemberSerializer
    queryset = ChannelMember.objects.select_related("channel", "user__profile")

    def list(self, request):
        member_ids = parse_id_list(request.query_params.get("member_ids"))
        return Response(ChannelMemberService.channels_with_exact_members(member_ids))

    def create(self, request):
        serializer = ChannelMemberCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = ChannelMemberService.add_member(
            channel_id=serializer.validated_data["channel_id"],
            user_id=serializer.validated_data["user_id"],
            added_by=request.user,
        )

        if not result.success:
            return service_error_response(result)

        return Response(
            ChannelMemberSerializer(result.data).data,
            status=status.HTTP_201_CREATED,
        )

    def partial_update(self, request, pk=None):
        serializer = ChannelMemberUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = ChannelMemberService.move_member(
            member_id=pk,
            moved_by=request.user,
            channel_id=serializer.validated_data.get("channel_id"),
            user_id=serializer.validated_data.get("user_id"),
        )

        if not result.success:
            return service_error_response(result)

        return Response({"success": True})

    def destroy(self, request, pk=None):
        member_id = parse_id(pk)
        if member_id is None:
            raise Http404
        member = get_object_or_404(self.get_queryset(), pk=member_id)

        permission = CanRemoveChannelMember()
        if not permission.has_object_permission(request, self, member):
            self.permission_denied(request, message=permission.message)

        result = ChannelMemberService.remove_member(member=member, removed_by=request.user)
        if not result.success:
            return service_error_response(result)

        return Response({"success": True})

    @extend_schema(
        operation_id="common_channels",
        summary="Channels shared by users",
        description=(
            "Return the sorted ids of channels in which every listed user is "
            "a member. `users` must be a JSON array of user ids."
        ),
        tags=["Chat - Channel Members"],
        parameters=[
            OpenApiParameter(
                name="users",
                type=OpenApiTypes.STR,
                required=True,
                description="JSON array of user ids, e.g. [1,2]",
            ),
        ],
        responses={
            200: serializers.ListSerializer(child=serializers.IntegerField()),
            400: OpenApiResponse(description="users is not a JSON array of ids"),
        },
    )
    @action(detail=False, methods=["get"], url_path="common-channels")
    def common_channels(self, request):
        try:
            user_ids = parse_json_id_list(request.query_params.get("users"))
        except ValueError as e:
            return bad_request(f"Bad request: {e}", "INVALID_USERS")

        return Response(ChannelMemberService.common_channels(user_ids))

    @extend_schema(
        operation_id="channel_members_info",
        summary="Members of a channel",
        tags=["Chat - Channel Members"],
        parameters=[
            OpenApiParameter(
                name="channel_id",
                type=OpenApiTypes.INT,
                required=True,
            ),
        ],
        responses={
            200: UserSerializer(many=True),
            400: OpenApiResponse(description="channel_id missing or invalid"),
            404: OpenApiResponse(description="Channel not found"),
        },
    )
    @action(detail=False, methods=["get"], url_path="members-info")
    def members_info(self, request):
        channel_id = parse_id(request.query_params.get("channel_id", ""))
        if channel_id is None:
            return bad_request("channel_id is required", "CHANNEL_ID_REQUIRED")

        channel = get_object_or_404(Channel, pk=channel_id, is_deleted=False)
        members = ChannelMemberService.get_members(channel)
        return Response(UserSerializer(members, many=True).data)


@extend_schema_view(
    list=extend_schema(
        operation_id="list_messages",
        summary="List messages",
        tags=["Chat - Messages"],
        parameters=[
            OpenApiParameter(
                name="channel_id",
                type=OpenApiTypes.INT,
                required=True,
            ),
        ],
    ),
    create=extend_schema(
        operation_id="send_message",
        summary="Send message",
        tags=["Chat - Messages"],
        request=MessageCreateSerializer,
        responses={201: MessageSerializer},
    ),
    retrieve=extend_schema(
        operation_id="get_message",
        summary="Get message",
        tags=["Chat - Messages"],
    ),
    partial_update=extend_schema(
        operation_id="edit_message",
        summary="Edit message",
        tags=["Chat - Messages"],
        request=MessageEditSerializer,
        responses={200: MessageSerializer},
    ),
    destroy=extend_schema(
        operation_id="delete_message",
        summary="Delete message",
        tags=["Chat - Messages"],
    ),
)
class MessageViewSet(viewsets.ModelViewSet):
    """
    ViewSet for message operations.

    list:
        Messages of ?channel_id=, oldest first (members only).

    create:
        Send a message to a channel (members only).

    retrieve:
        One message (members only).

    partial_update:
        Edit a message (sender only).

    destroy:
        Soft delete a message (sender only).

    last:
        Most recent message of each of the user's channels, newest first.
    """

    permission_classes = [IsAuthenticated]
    pagination_class = MessageCursorPagination
    serializer_class = MessageSerializer
    http_method_names = ["get", "post", "patch", "delete", "head", "options"]

    def get_queryset(self):
        return Message.objects.filter(channel__is_deleted=False).select_related(
            "channel", "sender__profile"
        )

    def get_permissions(self):
        if self.action in ("partial_update", "destroy"):
            return [IsAuthenticated(), IsChannelMember(), IsMessageSender()]
        if self.action == "retrieve":
            return [IsAuthenticated(), IsChannelMember()]
        return [IsAuthenticated()]

    def list(self, request):
        channel_id = parse_id(request.query_params.get("channel_id", ""))
        if channel_id is None:
            return bad_request("channel_id is required", "CHANNEL_ID_REQUIRED")

        channel = get_object_or_404(Channel, pk=channel_id, is_deleted=False)
        if not channel.has_member(request.user):
            self.permission_denied(request, message=IsChannelMember.message)

        queryset = MessageService.get_channel_messages(channel)
        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(MessageSerializer(page, many=True).data)
        return Response(MessageSerializer(queryset, many=True).data)

    def create(self, request):
        serializer = MessageCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = serializer.validated_data
        channel = get_object_or_404(Channel, pk=data["channel_id"], is_deleted=False)

        result = MessageService.send_message(
            channel=channel,
            sender=request.user,
            content=data.get("content", ""),
            attachment_url=data.get("attachment_url", ""),
        )

        if not result.success:
            return service_error_response(result)

        return Response(MessageSerializer(result.data).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        message = self.get_object()
        serializer = MessageEditSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = MessageService.edit_message(
            message=message,
            user=request.user,
            content=serializer.validated_data["content"],
        )

        if not result.success:
            return service_error_response(result)

        return Response(MessageSerializer(result.data).data)

    def destroy(self, request, pk=None):
        message = self.get_object()

        result = MessageService.delete_message(message=message, user=request.user)
        if not result.success:
            return service_error_response(result)

        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        operation_id="last_messages",
        summary="Last message of each channel",
        description=(
            "For every channel the user belongs to, its most recent message, "
            "sorted newest first. Channels without messages are left out."
        ),
        tags=["Chat - Messages"],
        parameters=[
            OpenApiParameter(
                name="user_id",
                type=OpenApiTypes.INT,
                description="Must be the current user when given",
            ),
        ],
        responses={
            200: LastMessageSerializer(many=True),
            403: OpenApiResponse(description="user_id is not the current user"),
        },
    )
    @action(detail=False, methods=["get"], url_path="last")
    def last(self, request):
        raw_user_id = request.query_params.get("user_id", "").strip()
        if raw_user_id:
            user_id = parse_id(raw_user_id)
            if user_id is None:
                return bad_request("user_id must be an integer", "INVALID_USER_ID")
            if user_id != request.user.id:
                self.permission_denied(
                    request,
                    message="You can only list your own last messages.",
                )

        messages = MessageService.get_last_messages(request.user)
        return Response(LastMessageSerializer(messages, many=True).data)
