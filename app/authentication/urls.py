"""
URL configuration for authentication app.

URL structure:
    /api/v1/auth/firebase/            - Firebase ID token exchange (POST)
    /api/v1/auth/token/refresh/       - Refresh JWT access token (POST)
    /api/v1/auth/token/verify/        - Verify JWT access token (POST)
    /api/v1/auth/profile/             - Current user's profile (GET/PUT/PATCH)
    /api/v1/auth/users/               - User directory (GET)
    /api/v1/auth/users/{id}/          - Single user (GET)
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import TokenRefreshView, TokenVerifyView

from authentication.views import FirebaseLoginView, ProfileView, UserViewSet

router = DefaultRouter()
router.register(r"users", UserViewSet, basename="user")

app_name = "authentication"

urlpatterns = [
    path("firebase/", FirebaseLoginView.as_view(), name="firebase-login"),
    path("token/refresh/", TokenRefreshView.as_view(), name="token-refresh"),
    path("token/verify/", TokenVerifyView.as_view(), name="token-verify"),
    path("profile/", ProfileView.as_view(), name="profile"),
    path("", include(router.urls)),
]
