"""
Test configuration and fixtures for chat tests.

This module provides:
- User fixtures for the creator, a member, and an outsider
- A channel shared by creator and member, plus messages in it
- API client helpers for authenticated requests
- A mock for WebSocket broadcasts

Usage:
    def test_example(channel, creator_client):
        response = creator_client.get(f'/api/v1/chat/channels/{channel.id}/')
        assert response.status_code == 200
"""

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.tests.factories import UserFactory
from chat.tests.factories import ChannelFactory, MessageFactory


# =============================================================================
# User Fixtures
# =============================================================================


@pytest.fixture
def creator(db):
    """User who creates the channel."""
    return UserFactory(display_name="Channel Creator")


@pytest.fixture
def member(db):
    """Regular member of the channel."""
    return UserFactory(display_name="Channel Member")


@pytest.fixture
def outsider(db):
    """User who is not a member of the channel."""
    return UserFactory(display_name="Outsider")


# =============================================================================
# Channel Fixtures
# =============================================================================


@pytest.fixture
def channel(creator, member):
    """Channel created by creator with member as second member."""
    return ChannelFactory(name="General", created_by=creator, members=[member])


@pytest.fixture
def message(channel, member):
    """Message sent by member in channel."""
    return MessageFactory(channel=channel, sender=member, content="Hello there")


# =============================================================================
# API Client Fixtures
# =============================================================================


def _client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")
    return client


@pytest.fixture
def api_client():
    """Unauthenticated API client."""
    return APIClient()


@pytest.fixture
def creator_client(creator):
    return _client_for(creator)


@pytest.fixture
def member_client(member):
    return _client_for(member)


@pytest.fixture
def outsider_client(outsider):
    return _client_for(outsider)


# =============================================================================
# Realtime Fixtures
# =============================================================================


@pytest.fixture
def mock_broadcast(mocker):
    """Replace WebSocket broadcasting made by the message service."""
    return mocker.patch("chat.services.realtime.broadcast_message", return_value=True)
