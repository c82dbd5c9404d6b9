"""
WebSocket URL routing for the chat application.

URL Patterns:
    ws/chat/channels/<channel_id>/ - Connect to a specific channel

Authentication:
    Pass ?token=<jwt_access_token> or ?firebase_token=<firebase_id_token>.
    TokenAuthMiddleware validates the token and attaches the user to the
    consumer's scope.
"""

from django.urls import path

from chat import consumers

websocket_urlpatterns = [
    path(
        "ws/chat/channels/<int:channel_id>/",
        consumers.ChatConsumer.as_asgi(),
    ),
]
