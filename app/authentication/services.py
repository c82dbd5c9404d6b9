"""
Authentication services.

This module provides the AuthService class for mapping Firebase identities
to local users, profile management, API token issuing and user lookup.

Related files:
    - models.py: User, Profile
    - firebase.py: ID token verification
    - signals.py: Profile auto-creation
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from django.db.models import Q
from rest_framework_simplejwt.tokens import RefreshToken

from core.services import BaseService, ServiceResult

from authentication.models import Profile, User

if TYPE_CHECKING:
    from typing import Any

    from django.db.models import QuerySet

logger = logging.getLogger(__name__)


class AuthService(BaseService):
    """
    Centralized authentication business logic.

    Usage:
        from authentication.services import AuthService

        result = AuthService.sync_firebase_user(claims)
        if result.success:
            tokens = AuthService.issue_tokens(result.data)
    """

    PROFILE_FIELDS = ("display_name", "avatar_url", "status_text")

    @classmethod
    def sync_firebase_user(cls, claims: dict[str, Any]) -> ServiceResult[User]:
        """
        Get or create the local user for decoded Firebase claims.

        Lookup order:
            1. User already linked to the Firebase uid
            2. Existing user with the same email (linked now)
            3. New user

        Profile fields that are still empty are filled from the "name"
        and "picture" claims; values the user already set are kept.

        Args:
            claims: Decoded ID token claims

        Returns:
            ServiceResult with the User

        Error codes:
            INVALID_CLAIMS: Token has no uid
            EMAIL_REQUIRED: First sign-in without an email claim
            UID_CONFLICT: Email belongs to a user linked to another uid
            ACCOUNT_DISABLED: Local account is deactivated
        """
        uid = claims.get("uid") or claims.get("sub")
        if not uid:
            return ServiceResult.failure(
                "Firebase token has no uid",
                error_code="INVALID_CLAIMS",
            )

        email = (claims.get("email") or "").strip()
        email_verified = bool(claims.get("email_verified", False))

        user = User.objects.filter(firebase_uid=uid).first()

        if user is None:
            if not email:
                return ServiceResult.failure(
                    "An email address is required to sign in",
                    error_code="EMAIL_REQUIRED",
                )

            with cls.atomic():
                user = (
                    User.objects.select_for_update()
                    .filter(email__iexact=email)
                    .first()
                )
                if user is not None:
                    if user.firebase_uid and user.firebase_uid != uid:
                        return ServiceResult.failure(
                            "This email is linked to a different account",
                            error_code="UID_CONFLICT",
                        )
                    user.firebase_uid = uid
                    user.save(update_fields=["firebase_uid", "updated_at"])
                    cls.get_logger().info(
                        f"Linked Firebase uid to existing user {user.id}"
                    )
                else:
                    user = User.objects.create_user(
                        email=email,
                        firebase_uid=uid,
                        email_verified=email_verified,
                    )
                    cls.get_logger().info(f"Created user {user.id} from Firebase sign-in")

        if not user.is_active:
            return ServiceResult.failure(
                "This account has been deactivated",
                error_code="ACCOUNT_DISABLED",
            )

        if email_verified and not user.email_verified:
            user.email_verified = True
            user.save(update_fields=["email_verified", "updated_at"])

        profile = cls.get_or_create_profile(user)
        changed = []
        if not profile.display_name and claims.get("name"):
            profile.display_name = claims["name"][:100]
            changed.append("display_name")
        if not profile.avatar_url and claims.get("picture"):
            profile.avatar_url = claims["picture"]
            changed.append("avatar_url")
        if changed:
            profile.save(update_fields=[*changed, "updated_at"])

        return ServiceResult.success(user)

    @staticmethod
    def get_or_create_profile(user: User) -> Profile:
        """
        Return the user's profile, creating it if the signal did not run.

        The instance is cached on user.profile so later reads of the same
        user object (serializers) see any changes made to it.
        """
        try:
            return user.profile
        except Profile.DoesNotExist:
            profile, _ = Profile.objects.get_or_create(user=user)
            user.profile = profile
            return profile

    @classmethod
    def update_profile(cls, user: User, **fields) -> Profile:
        """
        Update profile fields for a user.

        Unknown keys are ignored; string values are stripped.
        """
        profile = cls.get_or_create_profile(user)
        updated = []
        for name in cls.PROFILE_FIELDS:
            if name in fields:
                value = fields[name]
                setattr(profile, name, value.strip() if isinstance(value, str) else value)
                updated.append(name)

        if updated:
            profile.save(update_fields=[*updated, "updated_at"])
            logger.info(
                f"Profile updated for user {user.id}",
                extra={"user_id": user.id, "fields": updated},
            )
        return profile

    @staticmethod
    def issue_tokens(user: User) -> dict[str, str]:
        """Create a SimpleJWT access/refresh pair for the user."""
        refresh = RefreshToken.for_user(user)
        return {
            "access": str(refresh.access_token),
            "refresh": str(refresh),
        }

    @staticmethod
    def search_users(
        query: str | None = None,
        exclude_user: User | None = None,
    ) -> QuerySet[User]:
        """
        Active users matching a search term.

        Args:
            query: Case-insensitive match on email or display name
            exclude_user: User to leave out (usually the requester)

        Returns:
            QuerySet of users ordered by display name then email
        """
        queryset = User.objects.filter(is_active=True).select_related("profile")

        if query:
            query = query.strip()
            queryset = queryset.filter(
                Q(email__icontains=query) | Q(profile__display_name__icontains=query)
            )

        if exclude_user is not None:
            queryset = queryset.exclude(pk=exclude_user.pk)

        return queryset.order_by("profile__display_name", "email")
