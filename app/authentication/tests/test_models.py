"""
Tests for authentication models and the user manager.

Tests cover:
- UserManager.create_user / create_superuser
- User display helpers (get_full_name, get_short_name)
- Profile auto-creation and string representation
"""

import pytest

from authentication.models import Profile, User
from authentication.tests.factories import UserFactory


@pytest.mark.django_db
class TestUserManager:
    """Tests for UserManager."""

    def test_create_user_normalizes_email_domain(self):
        """Email domain is lower-cased by normalize_email."""
        user = User.objects.create_user(email="Someone@EXAMPLE.COM")

        assert user.email == "Someone@example.com"

    def test_create_user_without_password_has_unusable_password(self):
        """Firebase users have no local password."""
        user = User.objects.create_user(email="firebase@example.com", firebase_uid="uid-1")

        assert not user.has_usable_password()
        assert user.firebase_uid == "uid-1"

    def test_create_user_with_password_hashes_it(self):
        user = User.objects.create_user(email="pw@example.com", password="Secret123!")

        assert user.check_password("Secret123!")
        assert user.password != "Secret123!"

    def test_create_user_missing_email_raises(self):
        with pytest.raises(ValueError):
            User.objects.create_user(email="")

    def test_create_user_ignores_profile_fields(self):
        """display_name belongs on Profile and must not reach the User constructor."""
        user = User.objects.create_user(email="p@example.com", display_name="Nope")

        assert user.profile.display_name == ""

    def test_create_superuser_sets_flags(self, superuser):
        assert superuser.is_staff
        assert superuser.is_superuser
        assert superuser.email_verified
        assert superuser.check_password("AdminPass123!")

    def test_create_superuser_rejects_is_staff_false(self):
        with pytest.raises(ValueError):
            User.objects.create_superuser(
                email="bad@example.com", password="x", is_staff=False
            )


@pytest.mark.django_db
class TestUserModel:
    """Tests for User display helpers."""

    def test_str_returns_email(self):
        user = UserFactory(email="str@example.com")

        assert str(user) == "str@example.com"

    def test_get_full_name_prefers_display_name(self):
        user = UserFactory(display_name="Ada Lovelace")

        assert user.get_full_name() == "Ada Lovelace"

    def test_get_full_name_falls_back_to_email(self):
        user = UserFactory(email="noname@example.com")

        assert user.get_full_name() == "noname@example.com"

    def test_get_short_name_falls_back_to_email_local_part(self):
        user = UserFactory(email="shorty@example.com")

        assert user.get_short_name() == "shorty"

    def test_firebase_uid_is_unique(self):
        from django.db import IntegrityError

        UserFactory(firebase_uid="dup-uid")
        with pytest.raises(IntegrityError):
            UserFactory(firebase_uid="dup-uid")

    def test_multiple_users_without_firebase_uid_allowed(self):
        """Null uids do not collide (admin-only accounts)."""
        UserFactory(firebase_uid=None)
        UserFactory(firebase_uid=None)

        assert User.objects.filter(firebase_uid__isnull=True).count() == 2


@pytest.mark.django_db
class TestProfileModel:
    """Tests for Profile model."""

    def test_profile_created_with_user(self):
        user = UserFactory()

        assert Profile.objects.filter(user=user).exists()

    def test_profile_defaults_are_empty(self):
        profile = UserFactory().profile

        assert profile.display_name == ""
        assert profile.avatar_url == ""
        assert profile.status_text == ""

    def test_profile_str_contains_email(self):
        user = UserFactory(email="profile@example.com")

        assert str(user.profile) == "Profile(profile@example.com)"

    def test_profile_deleted_with_user(self):
        user = UserFactory()
        user_id = user.id

        user.delete()

        assert not Profile.objects.filter(user_id=user_id).exists()
