"""
Tests for TokenAuthMiddleware.

The middleware wraps a stub ASGI app that records the scope it receives.
"""

import pytest
from asgiref.sync import async_to_sync
from rest_framework_simplejwt.tokens import AccessToken, RefreshToken

from authentication.firebase import InvalidFirebaseTokenError
from authentication.tests.factories import UserFactory
from chat.middleware import TokenAuthMiddleware


def resolve_user(query_string: bytes):
    """Run the middleware for a websocket scope and return scope["user"]."""
    captured = {}

    async def inner(scope, receive, send):
        captured["user"] = scope["user"]

    middleware = TokenAuthMiddleware(inner)
    async_to_sync(middleware)(
        {"type": "websocket", "path": "/ws/", "query_string": query_string},
        None,
        None,
    )
    return captured["user"]


@pytest.mark.django_db(transaction=True)
class TestJwtAuthentication:
    """?token=<jwt access token>"""

    def test_valid_token_sets_user(self, member):
        token = RefreshToken.for_user(member).access_token

        user = resolve_user(f"token={token}".encode())

        assert user.is_authenticated
        assert user.pk == member.pk

    def test_invalid_token_sets_anonymous(self):
        user = resolve_user(b"token=not-a-jwt")

        assert not user.is_authenticated

    def test_inactive_user_sets_anonymous(self):
        inactive = UserFactory(is_active=False)
        token = AccessToken.for_user(inactive)

        user = resolve_user(f"token={token}".encode())

        assert not user.is_authenticated

    def test_deleted_user_sets_anonymous(self):
        gone = UserFactory()
        token = AccessToken.for_user(gone)
        gone.delete()

        user = resolve_user(f"token={token}".encode())

        assert not user.is_authenticated

    def test_missing_token_sets_anonymous(self):
        user = resolve_user(b"")

        assert not user.is_authenticated


@pytest.mark.django_db(transaction=True)
class TestFirebaseAuthentication:
    """?firebase_token=<firebase id token>"""

    def test_valid_firebase_token_sets_user(self, mocker, member):
        verify = mocker.patch(
            "authentication.firebase.verify_id_token",
            return_value={"uid": member.firebase_uid, "email": member.email},
        )

        user = resolve_user(b"firebase_token=good")

        verify.assert_called_once_with("good")
        assert user.pk == member.pk

    def test_rejected_firebase_token_sets_anonymous(self, mocker):
        mocker.patch(
            "authentication.firebase.verify_id_token",
            side_effect=InvalidFirebaseTokenError("Invalid Firebase ID token"),
        )

        user = resolve_user(b"firebase_token=bad")

        assert not user.is_authenticated

    def test_jwt_takes_precedence(self, mocker, member):
        verify = mocker.patch("authentication.firebase.verify_id_token")
        token = RefreshToken.for_user(member).access_token

        user = resolve_user(f"token={token}&firebase_token=ignored".encode())

        verify.assert_not_called()
        assert user.pk == member.pk
