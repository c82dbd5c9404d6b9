"""
Serializers for authentication models.

This module provides DRF serializers for:
- User model (public read operations, used by chat serializers too)
- Profile model (read/update for the current user)
- Firebase token exchange (request and response)

Related files:
    - models.py: User and Profile models
    - views.py: Views that use these serializers
"""

from rest_framework import serializers

from authentication.models import Profile, User


class UserSerializer(serializers.ModelSerializer):
    """
    Serializer for User model (read operations).

    Flattens profile data so member lists and message senders carry
    everything the client needs to render a user.
    """

    display_name = serializers.SerializerMethodField()
    avatar_url = serializers.SerializerMethodField()
    status_text = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "display_name",
            "avatar_url",
            "status_text",
            "date_joined",
        ]
        read_only_fields = fields

    def get_display_name(self, obj) -> str:
        return obj.get_full_name()

    def get_avatar_url(self, obj) -> str:
        profile = getattr(obj, "profile", None)
        return profile.avatar_url if profile else ""

    def get_status_text(self, obj) -> str:
        profile = getattr(obj, "profile", None)
        return profile.status_text if profile else ""


class ProfileSerializer(serializers.ModelSerializer):
    """Serializer for the current user's Profile (read operations)."""

    user_id = serializers.IntegerField(source="user.id", read_only=True)
    email = serializers.EmailField(source="user.email", read_only=True)
    email_verified = serializers.BooleanField(
        source="user.email_verified", read_only=True
    )

    class Meta:
        model = Profile
        fields = [
            "user_id",
            "email",
            "email_verified",
            "display_name",
            "avatar_url",
            "status_text",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ProfileUpdateSerializer(serializers.ModelSerializer):
    """
    Serializer for updating profile information.

    display_name is required on full updates (PUT) and may not be blank
    when provided.
    """

    display_name = serializers.CharField(
        max_length=100,
        help_text="Name shown to other users",
    )

    class Meta:
        model = Profile
        fields = ["display_name", "avatar_url", "status_text"]

    def validate_display_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Display name cannot be blank.")
        return value


class FirebaseLoginSerializer(serializers.Serializer):
    """Request body for exchanging a Firebase ID token for API tokens."""

    id_token = serializers.CharField(
        help_text="ID token from Firebase Authentication (user.getIdToken())",
    )


class TokenPairSerializer(serializers.Serializer):
    """Response body of a successful Firebase token exchange."""

    access = serializers.CharField(read_only=True)
    refresh = serializers.CharField(read_only=True)
    user = UserSerializer(read_only=True)
