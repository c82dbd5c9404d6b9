"""
Authentication views.

This module provides API views for:
- Firebase ID token exchange (returns a SimpleJWT pair)
- Profile management for the current user
- User directory (who can be added to a channel)

Related files:
    - serializers.py: Request/response serialization
    - services.py: Business logic (AuthService)
    - firebase.py: Token verification
    - urls.py: URL routing
"""

import logging

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import (
    OpenApiParameter,
    OpenApiResponse,
    extend_schema,
    extend_schema_view,
)
from rest_framework import status, viewsets
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from authentication.firebase import FirebaseAuthentication
from authentication.serializers import (
    FirebaseLoginSerializer,
    ProfileSerializer,
    ProfileUpdateSerializer,
    TokenPairSerializer,
    UserSerializer,
)
from authentication.services import AuthService

logger = logging.getLogger(__name__)


class FirebaseLoginView(APIView):
    """
    Exchange a Firebase ID token for API tokens.

    POST: Verify the token, create or link the local user and return a
    SimpleJWT access/refresh pair plus the user.

    URL: /api/v1/auth/firebase/
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    def get_authenticate_header(self, request):
        # Keeps rejected tokens at 401 (DRF downgrades to 403 without a header)
        return FirebaseAuthentication().authenticate_header(request)

    @extend_schema(
        summary="Sign in with Firebase",
        description=(
            "Verify a Firebase ID token, create the local account on first "
            "sign-in, and return API access and refresh tokens."
        ),
        tags=["Auth - Firebase"],
        request=FirebaseLoginSerializer,
        responses={
            200: TokenPairSerializer,
            400: OpenApiResponse(description="id_token missing"),
            401: OpenApiResponse(description="Token invalid, expired or revoked"),
        },
    )
    def post(self, request):
        serializer = FirebaseLoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user, _claims = FirebaseAuthentication().authenticate_token(
            serializer.validated_data["id_token"]
        )

        tokens = AuthService.issue_tokens(user)
        logger.info(f"User {user.id} signed in with Firebase")

        return Response(
            {
                **tokens,
                "user": UserSerializer(user).data,
            },
            status=status.HTTP_200_OK,
        )


class ProfileView(APIView):
    """
    API view for the current user's profile.

    GET: Retrieve current user's profile
    PUT/PATCH: Update display name, avatar URL and status text

    URL: /api/v1/auth/profile/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Get current user's profile",
        tags=["Auth - Profile"],
        responses={200: ProfileSerializer},
    )
    def get(self, request):
        profile = AuthService.get_or_create_profile(request.user)
        return Response(ProfileSerializer(profile).data)

    @extend_schema(
        summary="Update profile",
        tags=["Auth - Profile"],
        request=ProfileUpdateSerializer,
        responses={200: ProfileSerializer},
    )
    def put(self, request):
        return self._update_profile(request, partial=False)

    @extend_schema(
        summary="Partially update profile",
        tags=["Auth - Profile"],
        request=ProfileUpdateSerializer,
        responses={200: ProfileSerializer},
    )
    def patch(self, request):
        return self._update_profile(request, partial=True)

    def _update_profile(self, request, partial):
        profile = AuthService.get_or_create_profile(request.user)
        serializer = ProfileUpdateSerializer(profile, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        profile = AuthService.update_profile(request.user, **serializer.validated_data)
        return Response(ProfileSerializer(profile).data)


@extend_schema_view(
    list=extend_schema(
        operation_id="list_users",
        summary="List users",
        tags=["Auth - Users"],
        parameters=[
            OpenApiParameter(
                name="search",
                type=OpenApiTypes.STR,
                description="Match on email or display name",
            ),
            OpenApiParameter(
                name="exclude_self",
                type=OpenApiTypes.BOOL,
                description="Leave the current user out of the results",
            ),
        ],
    ),
    retrieve=extend_schema(
        operation_id="get_user",
        summary="Get user",
        tags=["Auth - Users"],
    ),
)
class UserViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Directory of active users.

    list:
        Paginated users, optionally filtered by ?search= and ?exclude_self=true.

    retrieve:
        Public profile of one user.
    """

    permission_classes = [IsAuthenticated]
    serializer_class = UserSerializer

    def get_queryset(self):
        exclude_self = self.request.query_params.get("exclude_self", "").lower() in (
            "1",
            "true",
            "yes",
        )
        return AuthService.search_users(
            query=self.request.query_params.get("search"),
            exclude_user=self.request.user if exclude_self else None,
        )
