# Generated manually - Channel, ChannelMember and Message tables

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    """Create channels, channel memberships and messages."""

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Channel",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "is_deleted",
                    models.BooleanField(
                        db_index=True,
                        default=False,
                        help_text="Whether this record has been soft deleted",
                    ),
                ),
                (
                    "deleted_at",
                    models.DateTimeField(
                        blank=True,
                        null=True,
                        help_text="Timestamp when this record was soft deleted",
                    ),
                ),
                ("name", models.CharField(help_text="Channel name", max_length=100)),
                (
                    "description",
                    models.TextField(
                        blank=True,
                        default="",
                        help_text="Optional channel description",
                    ),
                ),
                (
                    "member_count",
                    models.PositiveIntegerField(
                        default=0,
                        help_text="Current number of members (cached)",
                    ),
                ),
                (
                    "last_message_at",
                    models.DateTimeField(
                        blank=True,
                        db_index=True,
                        null=True,
                        help_text="Timestamp of most recent message (for sorting channel lists)",
                    ),
                ),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="created_channels",
                        to=settings.AUTH_USER_MODEL,
                        help_text="User who created this channel",
                    ),
                ),
            ],
            options={
                "db_table": "chat_channel",
                "ordering": ["-last_message_at", "-created_at"],
                "indexes": [
                    models.Index(
                        condition=models.Q(("is_deleted", False)),
                        fields=["-last_message_at"],
                        name="chat_channel_last_msg_idx",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="ChannelMember",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "joined_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        help_text="When the user joined this channel",
                    ),
                ),
                (
                    "channel",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="memberships",
                        to="chat.channel",
                        help_text="Channel this membership belongs to",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="channel_memberships",
                        to=settings.AUTH_USER_MODEL,
                        help_text="Member of the channel",
                    ),
                ),
            ],
            options={
                "db_table": "chat_channel_member",
                "ordering": ["joined_at", "id"],
                "indexes": [
                    models.Index(
                        fields=["user", "channel"],
                        name="chat_member_user_channel_idx",
                    ),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("channel", "user"),
                        name="unique_channel_member",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Message",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "is_deleted",
                    models.BooleanField(
                        db_index=True,
                        default=False,
                        help_text="Whether this record has been soft deleted",
                    ),
                ),
                (
                    "deleted_at",
                    models.DateTimeField(
                        blank=True,
                        null=True,
                        help_text="Timestamp when this record was soft deleted",
                    ),
                ),
                (
                    "content",
                    models.TextField(
                        blank=True,
                        default="",
                        max_length=10000,
                        help_text="Message text",
                    ),
                ),
                (
                    "attachment_url",
                    models.URLField(
                        blank=True,
                        default="",
                        max_length=1000,
                        help_text="Download URL of an attached file",
                    ),
                ),
                (
                    "edited_at",
                    models.DateTimeField(
                        blank=True,
                        null=True,
                        help_text="When the message was last edited",
                    ),
                ),
                (
                    "channel",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="messages",
                        to="chat.channel",
                        help_text="Channel this message belongs to",
                    ),
                ),
                (
                    "sender",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="sent_messages",
                        to=settings.AUTH_USER_MODEL,
                        help_text="User who sent this message",
                    ),
                ),
            ],
            options={
                "db_table": "chat_message",
                "ordering": ["created_at", "id"],
                "indexes": [
                    models.Index(
                        fields=["channel", "created_at", "id"],
                        name="chat_msg_channel_cursor_idx",
                    ),
                    models.Index(
                        fields=["sender", "-created_at"],
                        name="chat_msg_sender_idx",
                    ),
                ],
            },
        ),
    ]
