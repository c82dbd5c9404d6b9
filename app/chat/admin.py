"""
Django admin configuration for chat models.

Provides admin interfaces for:
- Channel management
- Membership viewing
- Message moderation
"""

from django.contrib import admin

from chat.models import Channel, ChannelMember, Message


class ChannelMemberInline(admin.TabularInline):
    """Inline display of members in channel admin."""

    model = ChannelMember
    extra = 0
    readonly_fields = ["joined_at"]
    raw_id_fields = ["user"]


@admin.register(Channel)
class ChannelAdmin(admin.ModelAdmin):
    """Admin interface for Channel model."""

    list_display = [
        "id",
        "name",
        "created_by",
        "member_count",
        "is_deleted",
        "created_at",
        "last_message_at",
    ]
    list_filter = ["is_deleted", "created_at"]
    search_fields = ["name", "id"]
    readonly_fields = [
        "created_at",
        "updated_at",
        "deleted_at",
        "member_count",
        "last_message_at",
    ]
    raw_id_fields = ["created_by"]
    inlines = [ChannelMemberInline]

    def get_queryset(self, request):
        return Channel.all_objects.select_related("created_by")


@admin.register(ChannelMember)
class ChannelMemberAdmin(admin.ModelAdmin):
    """Admin interface for ChannelMember model."""

    list_display = ["id", "channel", "user", "joined_at"]
    search_fields = ["user__email", "channel__name"]
    raw_id_fields = ["channel", "user"]
    readonly_fields = ["joined_at"]


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    """Admin interface for Message moderation."""

    list_display = ["id", "channel", "sender", "short_content", "is_deleted", "created_at"]
    list_filter = ["is_deleted", "created_at"]
    search_fields = ["content", "sender__email"]
    raw_id_fields = ["channel", "sender"]
    readonly_fields = ["created_at", "updated_at", "deleted_at", "edited_at"]

    @admin.display(description="Content")
    def short_content(self, obj):
        return obj.content[:60]
