"""Tests for DevotionalService.

Run with: pytest tests/test_devotionals.py -v
"""

import pytest

from sanctuary.domain.errors import DevotionalNotFoundError, PermissionDeniedError
from sanctuary.repositories import BookmarkRepository

DEVOTIONAL = {
    "title": "Be Still",
    "verse": "Psalm 46:10",
    "verse_text": "Be still, and know that I am God.",
    "content": "A short reflection on rest and trust.",
    "author": {"id": "a1", "name": "Pastor Ann"},
    "category": "Peace",
}


class TestDevotionalService:
    def test_drafts_are_not_published(self, services, admin):
        devotional_id = services.devotionals.create_devotional(admin, DEVOTIONAL)
        assert services.devotionals.list_published() == []
        assert services.devotionals.latest() is None
        assert [d.id for d in services.devotionals.list_all(admin)] == [devotional_id]

    def test_publish_and_read(self, services, admin):
        devotional_id = services.devotionals.create_devotional(admin, {**DEVOTIONAL, "status": "published"})
        devotional = services.devotionals.get_devotional(devotional_id)
        assert devotional.author.name == "Pastor Ann"
        assert devotional.likes == 0
        assert services.devotionals.latest().id == devotional_id
        assert [d.id for d in services.devotionals.list_published("Peace")] == [devotional_id]
        assert services.devotionals.list_published("Joy") == []

    def test_like_increments(self, services, admin, member):
        devotional_id = services.devotionals.create_devotional(admin, DEVOTIONAL)
        assert services.devotionals.like(member, devotional_id) == 1
        assert services.devotionals.like(admin, devotional_id) == 2

    def test_like_missing_devotional(self, services, member):
        with pytest.raises(DevotionalNotFoundError):
            services.devotionals.like(member, "missing")

    def test_update_and_delete(self, services, admin):
        devotional_id = services.devotionals.create_devotional(admin, DEVOTIONAL)
        services.devotionals.update_devotional(admin, devotional_id, {"title": "Be Still, My Soul"})
        assert services.devotionals.get_devotional(devotional_id).title == "Be Still, My Soul"
        services.devotionals.delete_devotional(admin, devotional_id)
        with pytest.raises(DevotionalNotFoundError):
            services.devotionals.get_devotional(devotional_id)

    def test_members_cannot_publish(self, services, member):
        with pytest.raises(PermissionDeniedError):
            services.devotionals.create_devotional(member, DEVOTIONAL)


class TestBookmarks:
    @pytest.fixture
    def devotional_id(self, services, admin):
        return services.devotionals.create_devotional(admin, DEVOTIONAL)

    def test_bookmark_is_per_user_and_idempotent(self, services, store, admin, member, devotional_id):
        other_id = services.devotionals.create_devotional(admin, {**DEVOTIONAL, "title": "Daily Bread"})
        services.devotionals.bookmark(member, devotional_id)
        services.devotionals.bookmark(member, devotional_id)
        services.devotionals.bookmark(member, other_id)

        assert sorted(services.devotionals.list_bookmarks(member)) == sorted([devotional_id, other_id])
        assert services.devotionals.list_bookmarks(admin) == []
        bookmark = BookmarkRepository(store).get(f"{member.uid}:{devotional_id}")
        assert bookmark.created_at is not None

    def test_unbookmark(self, services, member, devotional_id):
        services.devotionals.bookmark(member, devotional_id)
        services.devotionals.unbookmark(member, devotional_id)
        services.devotionals.unbookmark(member, devotional_id)
        assert services.devotionals.list_bookmarks(member) == []

    def test_bookmark_missing_devotional(self, services, member):
        with pytest.raises(DevotionalNotFoundError):
            services.devotionals.bookmark(member, "missing")
        assert services.devotionals.list_bookmarks(member) == []

    def test_anonymous_callers_cannot_bookmark(self, services, devotional_id):
        with pytest.raises(PermissionDeniedError):
            services.devotionals.bookmark(None, devotional_id)
        with pytest.raises(PermissionDeniedError):
            services.devotionals.list_bookmarks(None)

    def test_deleting_a_devotional_removes_its_bookmarks(self, services, admin, member, devotional_id):
        services.devotionals.bookmark(member, devotional_id)
        services.devotionals.delete_devotional(admin, devotional_id)
        assert services.devotionals.list_bookmarks(member) == []
