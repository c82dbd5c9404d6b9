"""
Tests for chat permission classes.

Permissions are checked directly with a bare request; view-level behaviour
is covered in test_views.py.
"""

import pytest
from django.contrib.auth.models import AnonymousUser
from rest_framework.test import APIRequestFactory

from chat.models import ChannelMember
from chat.permissions import (
    CanRemoveChannelMember,
    IsChannelCreator,
    IsChannelMember,
    IsMessageSender,
)

factory = APIRequestFactory()


def request_for(user):
    request = factory.get("/")
    request.user = user
    return request


@pytest.mark.django_db
class TestIsChannelMember:
    def test_member_allowed_on_channel(self, channel, member):
        assert IsChannelMember().has_object_permission(request_for(member), None, channel)

    def test_outsider_denied(self, channel, outsider):
        assert not IsChannelMember().has_object_permission(
            request_for(outsider), None, channel
        )

    def test_resolves_channel_from_message(self, message, creator, outsider):
        permission = IsChannelMember()

        assert permission.has_object_permission(request_for(creator), None, message)
        assert not permission.has_object_permission(request_for(outsider), None, message)

    def test_anonymous_denied(self, channel):
        assert not IsChannelMember().has_object_permission(
            request_for(AnonymousUser()), None, channel
        )


@pytest.mark.django_db
class TestIsChannelCreator:
    def test_creator_allowed(self, channel, creator):
        assert IsChannelCreator().has_object_permission(request_for(creator), None, channel)

    def test_member_denied(self, channel, member):
        assert not IsChannelCreator().has_object_permission(
            request_for(member), None, channel
        )

    def test_resolves_channel_from_membership(self, channel, creator, member):
        membership = ChannelMember.objects.get(channel=channel, user=member)

        assert IsChannelCreator().has_object_permission(
            request_for(creator), None, membership
        )


@pytest.mark.django_db
class TestIsMessageSender:
    def test_sender_allowed(self, message, member):
        assert IsMessageSender().has_object_permission(request_for(member), None, message)

    def test_other_member_denied(self, message, creator):
        assert not IsMessageSender().has_object_permission(
            request_for(creator), None, message
        )


@pytest.mark.django_db
class TestCanRemoveChannelMember:
    def test_member_can_remove_self(self, channel, member):
        membership = ChannelMember.objects.get(channel=channel, user=member)

        assert CanRemoveChannelMember().has_object_permission(
            request_for(member), None, membership
        )

    def test_creator_can_remove_anyone(self, channel, creator, member):
        membership = ChannelMember.objects.get(channel=channel, user=member)

        assert CanRemoveChannelMember().has_object_permission(
            request_for(creator), None, membership
        )

    def test_other_member_cannot_remove_creator(self, channel, creator, member):
        membership = ChannelMember.objects.get(channel=channel, user=creator)

        assert not CanRemoveChannelMember().has_object_permission(
            request_for(member), None, membership
        )
