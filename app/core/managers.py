"""
Custom QuerySet and Manager classes for soft-deleted models.

Manager vs QuerySet:
    - QuerySet: Defines chainable methods (deleted, active, restore)
    - Manager: Attaches QuerySet to model and applies the default filter

Usage:
    from core.managers import SoftDeleteManager

    class Channel(SoftDeleteMixin, BaseModel):
        objects = SoftDeleteManager()   # Default: excludes deleted
        all_objects = models.Manager()  # Includes deleted

    Channel.objects.all()          # Only live channels
    Channel.objects.deleted()      # Only deleted channels
    Channel.all_objects.all()      # Everything
"""

from __future__ import annotations

from django.db import models
from django.utils import timezone


class SoftDeleteQuerySet(models.QuerySet):
    """
    QuerySet that provides soft delete operations.

    Methods:
        delete(): Soft delete (marks is_deleted=True)
        hard_delete(): Permanent delete
        restore(): Restore soft-deleted records
        deleted(): Filter to only deleted records
        active(): Filter to only active records
    """

    def delete(self) -> tuple[int, dict[str, int]]:
        """
        Soft delete all objects in queryset.

        Returns:
            Tuple of (count, {model_label: count}) matching Django's delete()
        """
        count = self.filter(is_deleted=False).update(
            is_deleted=True, deleted_at=timezone.now()
        )
        return count, {self.model._meta.label: count}

    def hard_delete(self) -> tuple[int, dict[str, int]]:
        """Permanently delete all objects in queryset."""
        return super().delete()

    def restore(self) -> int:
        """Restore all soft-deleted objects in queryset."""
        return self.filter(is_deleted=True).update(is_deleted=False, deleted_at=None)

    def deleted(self) -> SoftDeleteQuerySet:
        return self.filter(is_deleted=True)

    def active(self) -> SoftDeleteQuerySet:
        return self.filter(is_deleted=False)


class SoftDeleteManager(models.Manager.from_queryset(SoftDeleteQuerySet)):
    """
    Manager that filters out soft-deleted records by default.

    Always pair with a standard Manager (all_objects) for accessing
    deleted records from the admin.
    """

    def get_queryset(self) -> SoftDeleteQuerySet:
        """Return queryset excluding soft-deleted records."""
        return super().get_queryset().filter(is_deleted=False)

    def deleted(self) -> SoftDeleteQuerySet:
        """Shortcut to get only deleted records."""
        return SoftDeleteQuerySet(self.model, using=self._db).filter(is_deleted=True)

    def with_deleted(self) -> SoftDeleteQuerySet:
        """Get queryset including deleted records."""
        return SoftDeleteQuerySet(self.model, using=self._db)
