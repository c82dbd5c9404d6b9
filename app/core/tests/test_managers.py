"""
Tests for SoftDeleteManager and SoftDeleteQuerySet.

These tests verify that:
- SoftDeleteManager filters out soft-deleted records by default
- QuerySet operations (delete, hard_delete, restore) work correctly
- all_objects still reaches deleted records

Channel is used as the concrete soft-deletable model.
"""

from __future__ import annotations

import pytest

from chat.models import Channel
from chat.tests.factories import ChannelFactory


@pytest.fixture
def channels(db):
    """Three live channels."""
    return [ChannelFactory(name=f"Room {i}") for i in range(3)]


@pytest.mark.django_db
class TestSoftDeleteManager:
    """Default manager behaviour."""

    def test_objects_excludes_deleted(self, channels):
        channels[0].soft_delete()

        assert set(Channel.objects.all()) == {channels[1], channels[2]}

    def test_all_objects_includes_deleted(self, channels):
        channels[0].soft_delete()

        assert Channel.all_objects.count() == 3

    def test_deleted_returns_only_deleted(self, channels):
        channels[0].soft_delete()

        assert list(Channel.objects.deleted()) == [channels[0]]

    def test_with_deleted_returns_everything(self, channels):
        channels[0].soft_delete()

        assert Channel.objects.with_deleted().count() == 3


@pytest.mark.django_db
class TestSoftDeleteQuerySet:
    """Bulk queryset operations."""

    def test_delete_soft_deletes(self, channels):
        count, detail = Channel.objects.filter(name__in=["Room 0", "Room 1"]).delete()

        assert count == 2
        assert detail == {"chat.Channel": 2}
        assert Channel.objects.count() == 1
        assert Channel.all_objects.filter(is_deleted=True, deleted_at__isnull=False).count() == 2

    def test_hard_delete_removes_rows(self, channels):
        Channel.objects.filter(name="Room 0").hard_delete()

        assert not Channel.all_objects.filter(name="Room 0").exists()

    def test_restore_brings_back_deleted(self, channels):
        Channel.objects.all().delete()

        restored = Channel.objects.with_deleted().restore()

        assert restored == 3
        assert Channel.objects.count() == 3

    def test_active_filters_live_records(self, channels):
        channels[2].soft_delete()

        assert Channel.objects.with_deleted().active().count() == 2
