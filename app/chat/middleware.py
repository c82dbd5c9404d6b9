"""
WebSocket authentication middleware.

Authenticates WebSocket connections with either a SimpleJWT access token
or a Firebase ID token passed in the query string.

Related files:
    - routing.py: WebSocket URL patterns
    - consumers.py: WebSocket handlers
    - config/asgi.py: ASGI configuration

Token Passing:
    ws://host/ws/chat/channels/1/?token=<jwt_access_token>
    ws://host/ws/chat/channels/1/?firebase_token=<firebase_id_token>

Usage in config/asgi.py:
    from chat.middleware import TokenAuthMiddleware

    application = ProtocolTypeRouter({
        "websocket": TokenAuthMiddleware(
            URLRouter(websocket_urlpatterns)
        ),
    })
"""

from __future__ import annotations

import logging
from urllib.parse import parse_qs

from channels.db import database_sync_to_async
from channels.middleware import BaseMiddleware
from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import AccessToken

from authentication.firebase import FirebaseAuthentication

logger = logging.getLogger(__name__)


class TokenAuthMiddleware(BaseMiddleware):
    """
    Token authentication middleware for WebSocket connections.

    Token sources (in order of precedence):
        1. ?token=<jwt access token>
        2. ?firebase_token=<firebase id token>

    Sets scope["user"] to the authenticated user, or AnonymousUser when
    no valid token is given. The consumer decides whether to reject.
    """

    async def __call__(self, scope, receive, send):
        params = parse_qs(scope.get("query_string", b"").decode())
        jwt_token = (params.get("token") or [None])[0]
        firebase_token = (params.get("firebase_token") or [None])[0]

        scope = dict(scope)
        if jwt_token:
            scope["user"] = await self._get_user_from_jwt(jwt_token)
        elif firebase_token:
            scope["user"] = await self._get_user_from_firebase(firebase_token)
        else:
            scope["user"] = AnonymousUser()

        return await super().__call__(scope, receive, send)

    @database_sync_to_async
    def _get_user_from_jwt(self, token: str):
        """
        Validate JWT access token and get user.

        Returns:
            User instance if valid, AnonymousUser otherwise
        """
        User = get_user_model()

        try:
            access_token = AccessToken(token)
            user = User.objects.get(id=access_token["user_id"])
        except TokenError as e:
            logger.warning(f"Invalid JWT token on WebSocket connect: {e}")
            return AnonymousUser()
        except (KeyError, User.DoesNotExist):
            logger.warning("User not found for WebSocket token")
            return AnonymousUser()

        if not user.is_active:
            logger.warning(f"Inactive user attempted WebSocket connection: {user.id}")
            return AnonymousUser()

        return user

    @database_sync_to_async
    def _get_user_from_firebase(self, token: str):
        """Verify a Firebase ID token and get (or create) the local user."""
        try:
            user, _claims = FirebaseAuthentication().authenticate_token(token)
        except AuthenticationFailed as e:
            logger.warning(f"Firebase WebSocket authentication failed: {e}")
            return AnonymousUser()
        return user
