"""
Authentication models.

This module defines the core authentication models:
- User: Custom user model with email-based identity, linked to a Firebase uid
- Profile: Public profile data shown in channel member lists (OneToOne with User)

Related files:
    - managers.py: Custom user manager for email-based creation
    - firebase.py: Firebase ID token verification and DRF authentication
    - services.py: AuthService business logic
    - signals.py: Auto-create profile on user creation

Security:
    - Firebase users get an unusable password; they sign in through Firebase
    - Staff users may still log in to the admin with a Django password
"""

from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models

from authentication.managers import UserManager
from core.models import BaseModel


class User(AbstractBaseUser, PermissionsMixin):
    """
    Custom User model using email as the primary identifier.

    This is a slim user model focused on authentication only.
    Display data (name, avatar, status) is stored in the Profile model.

    Fields:
        email: Primary identifier, unique
        firebase_uid: Firebase Authentication uid (null for admin-only accounts)
        email_verified: Whether the email was verified (taken from Firebase claims)
        is_active: Whether the user account is active
        is_staff: Whether the user can access Django admin
        date_joined: When the user account was created
        updated_at: When the user record was last modified
    """

    email = models.EmailField(
        unique=True,
        db_index=True,
        max_length=254,
        help_text="User's email address (primary identifier)",
    )

    firebase_uid = models.CharField(
        max_length=128,
        unique=True,
        null=True,
        blank=True,
        help_text="Firebase Authentication uid linked to this account",
    )

    email_verified = models.BooleanField(
        default=False,
        help_text="Whether the user's email has been verified",
    )

    is_active = models.BooleanField(
        default=True,
        help_text="Whether this user account is active. Deselect instead of deleting.",
    )
    is_staff = models.BooleanField(
        default=False,
        help_text="Whether the user can access the admin site.",
    )

    date_joined = models.DateTimeField(
        auto_now_add=True,
        help_text="When the user account was created",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the user record was last modified",
    )

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        verbose_name = "user"
        verbose_name_plural = "users"
        ordering = ["-date_joined"]

    def __str__(self):
        return self.email

    def get_full_name(self):
        """
        Return the user's display name from profile.

        Returns:
            str: Display name, or email if no profile/name set.
        """
        try:
            return self.profile.display_name or self.email
        except Profile.DoesNotExist:
            return self.email

    def get_short_name(self):
        """Return the display name, or the local part of the email."""
        try:
            return self.profile.display_name or self.email.split("@")[0]
        except Profile.DoesNotExist:
            return self.email.split("@")[0]


class Profile(BaseModel):
    """
    Public profile data for a user.

    Shown wherever other people see the user: channel member lists,
    message senders and the user directory.

    Fields:
        user: OneToOne link to User (also serves as primary key)
        display_name: Name shown to other users
        avatar_url: Profile picture URL (usually a Firebase Storage download URL)
        status_text: Short free-form status line
    """

    user = models.OneToOneField(
        User,
        on_delete=models.CASCADE,
        primary_key=True,
        related_name="profile",
    )

    display_name = models.CharField(
        max_length=100,
        blank=True,
        default="",
        db_index=True,
        help_text="Name shown to other users",
    )

    avatar_url = models.URLField(
        max_length=1000,
        blank=True,
        default="",
        help_text="Profile picture URL",
    )

    status_text = models.CharField(
        max_length=140,
        blank=True,
        default="",
        help_text="Short status line shown on the profile",
    )

    class Meta:
        db_table = "authentication_profile"
        verbose_name = "profile"
        verbose_name_plural = "profiles"

    def __str__(self):
        return f"Profile({self.user.email})"
