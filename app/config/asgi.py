"""
ASGI config for the chat backend.

Routes two protocols:
- HTTP requests go to Django (REST API, admin, docs)
- WebSocket connections go to the chat consumers via Django Channels

Run with an ASGI server, e.g.:
    uvicorn config.asgi:application

For more information on this file, see:
https://docs.djangoproject.com/en/5.2/howto/deployment/asgi/
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

# Django must be set up before consumers and models are imported
django_asgi_app = get_asgi_application()

from channels.routing import ProtocolTypeRouter, URLRouter  # noqa: E402
from channels.security.websocket import AllowedHostsOriginValidator  # noqa: E402

from chat.middleware import TokenAuthMiddleware  # noqa: E402
from chat.routing import websocket_urlpatterns  # noqa: E402

application = ProtocolTypeRouter(
    {
        "http": django_asgi_app,
        # WebSocket connections pass through:
        # 1. AllowedHostsOriginValidator - origin must match ALLOWED_HOSTS
        # 2. TokenAuthMiddleware - user from ?token= or ?firebase_token=
        # 3. URLRouter - consumer for the channel path
        "websocket": AllowedHostsOriginValidator(
            TokenAuthMiddleware(URLRouter(websocket_urlpatterns))
        ),
    }
)
