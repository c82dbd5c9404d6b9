"""
Test configuration and fixtures for authentication tests.

This module provides:
- User fixtures
- API client helpers for authenticated requests
- Firebase claims and a mocked token verifier

Usage:
    def test_example(user, authenticated_client):
        response = authenticated_client.get('/api/v1/auth/profile/')
        assert response.status_code == 200
"""

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.models import User
from authentication.tests.factories import UserFactory


# =============================================================================
# User Fixtures
# =============================================================================


@pytest.fixture
def user(db):
    """Create a verified user with a display name."""
    return UserFactory(display_name="Test User")


@pytest.fixture
def other_user(db):
    """Create a second user."""
    return UserFactory(display_name="Other Person")


@pytest.fixture
def deactivated_user(db):
    """Create a deactivated user (is_active=False)."""
    return UserFactory(is_active=False)


@pytest.fixture
def superuser(db):
    """Create a superuser with admin privileges."""
    return User.objects.create_superuser(
        email="admin@example.com", password="AdminPass123!"
    )


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
def api_client():
    """Unauthenticated API client for public endpoints."""
    return APIClient()


@pytest.fixture
def authenticated_client(user):
    """API client authenticated with a JWT for the default user fixture."""
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")
    return client


# =============================================================================
# Firebase Fixtures
# =============================================================================


@pytest.fixture
def firebase_claims():
    """Decoded claims of a valid Firebase ID token."""
    return {
        "uid": "firebase-new-user",
        "email": "newcomer@example.com",
        "email_verified": True,
        "name": "New Comer",
        "picture": "https://example.com/avatar.png",
    }


@pytest.fixture
def mock_verify_id_token(mocker, firebase_claims):
    """
    Replace Firebase token verification with a stub returning firebase_claims.

    Tests can set mock_verify_id_token.side_effect to simulate failures.
    """
    return mocker.patch(
        "authentication.firebase.verify_id_token",
        return_value=firebase_claims,
    )
