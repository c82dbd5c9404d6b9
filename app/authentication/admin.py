"""
Django admin configuration for authentication models.

Registers User and Profile with the Django admin site.
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from authentication.models import Profile, User


class ProfileInline(admin.StackedInline):
    """Inline profile editing on the user page."""

    model = Profile
    can_delete = False
    readonly_fields = ("created_at", "updated_at")


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """
    Admin configuration for User model.

    Customized for email-based authentication with Firebase uid linking.
    """

    list_display = (
        "email",
        "firebase_uid",
        "email_verified",
        "is_active",
        "is_staff",
        "date_joined",
    )
    list_filter = (
        "is_active",
        "is_staff",
        "is_superuser",
        "email_verified",
        "date_joined",
    )
    search_fields = ("email", "firebase_uid", "profile__display_name")
    ordering = ("-date_joined",)
    inlines = (ProfileInline,)

    fieldsets = (
        (None, {"fields": ("email", "password", "firebase_uid")}),
        (
            "Status",
            {"fields": ("email_verified", "is_active", "is_staff", "is_superuser")},
        ),
        (
            "Permissions",
            {"fields": ("groups", "user_permissions")},
        ),
        (
            "Important dates",
            {"fields": ("date_joined", "last_login")},
        ),
    )

    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": ("email", "password1", "password2"),
            },
        ),
    )

    readonly_fields = ("date_joined", "last_login")


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    """Admin configuration for Profile model."""

    list_display = ("user", "display_name", "status_text", "updated_at")
    search_fields = ("user__email", "display_name")
    readonly_fields = ("created_at", "updated_at")
    raw_id_fields = ("user",)
