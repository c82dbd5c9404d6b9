"""
URL configuration for the chat backend.

URL Structure:
    /                              - ReDoc API documentation
    /schema/                       - OpenAPI schema (YAML)
    /admin/                        - Django admin interface
    /health/                       - Health check endpoint (for load balancers, Docker)
    /api/v1/auth/                  - Authentication endpoints
        firebase/                  - Exchange a Firebase ID token for a JWT pair
        token/refresh/             - Refresh JWT access token
        token/verify/              - Verify JWT access token
        profile/                   - Current user's profile (GET/PUT/PATCH)
        users/                     - User directory
    /api/v1/chat/                  - Chat endpoints
        channels/                  - Channel list/create/detail/update/delete
        channel-members/           - Membership changes and queries
        messages/                  - Message list/send/edit/delete, last messages

WebSocket routes live in chat/routing.py and are served by config/asgi.py.

For more information, see:
https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView

from core.views import health_check

# =============================================================================
# API v1 Routes
# =============================================================================
api_v1_patterns = [
    path("auth/", include("authentication.urls")),
    path("chat/", include("chat.urls")),
]

urlpatterns = [
    # Documentation
    path("", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    # Admin
    path("admin/", admin.site.urls),
    # Health check (Docker, Kubernetes, load balancers)
    path("health/", health_check, name="health_check"),
    # API v1
    path("api/v1/", include(api_v1_patterns)),
]

# =============================================================================
# Admin Site Customization
# =============================================================================
admin.site.site_header = "Chat Admin"
admin.site.site_title = "Chat Admin Portal"
admin.site.index_title = "Channels, members and messages"
