"""
Reusable model mixins.

Mixins:
    SoftDeleteMixin: is_deleted / deleted_at fields with soft_delete() and restore()

Usage:
    from core.managers import SoftDeleteManager
    from core.model_mixins import SoftDeleteMixin
    from core.models import BaseModel

    class Message(SoftDeleteMixin, BaseModel):
        objects = SoftDeleteManager()
        all_objects = models.Manager()
"""

from __future__ import annotations

from django.db import models
from django.utils import timezone


class SoftDeleteMixin(models.Model):
    """
    Soft delete support for models.

    Instead of permanently deleting records, marks them as deleted.
    Deleted records are kept for history and can be restored.

    Fields:
        is_deleted: Boolean flag indicating soft delete status
        deleted_at: Timestamp when the record was soft deleted

    Note:
        Pair with core.managers.SoftDeleteManager when deleted rows should be
        hidden by default. Chat models keep the plain manager and filter
        explicitly, because deleted messages are still listed as placeholders.
    """

    is_deleted = models.BooleanField(
        default=False,
        db_index=True,
        help_text="Whether this record has been soft deleted",
    )
    deleted_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="Timestamp when this record was soft deleted",
    )

    class Meta:
        abstract = True

    def soft_delete(self) -> None:
        """
        Mark this record as deleted.

        Sets is_deleted=True and deleted_at to the current time.
        Calling it on an already deleted record keeps the original timestamp.
        """
        if self.is_deleted:
            return
        self.is_deleted = True
        self.deleted_at = timezone.now()
        self.save(update_fields=["is_deleted", "deleted_at", "updated_at"])

    def restore(self) -> None:
        """Restore a soft-deleted record."""
        self.is_deleted = False
        self.deleted_at = None
        self.save(update_fields=["is_deleted", "deleted_at", "updated_at"])

    def hard_delete(self) -> None:
        """
        Permanently delete this record.

        Warning:
            This cannot be undone. Consider soft_delete() instead.
        """
        super().delete()
