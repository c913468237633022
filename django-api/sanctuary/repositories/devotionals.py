"""Devotional repository."""

from sanctuary.domain import Bookmark, Devotional, DevotionalAuthor, DevotionalStatus
from sanctuary.repositories.base import Repository
from sanctuary.stores import collections
from sanctuary.stores.interfaces import Filter, OrderBy, Snapshot

_PUBLISHED = Filter("status", "==", DevotionalStatus.PUBLISHED.value)
_NEWEST_FIRST = OrderBy("date", descending=True)


class DevotionalRepository(Repository[Devotional]):
    collection = collections.DEVOTIONALS

    def from_snapshot(self, snapshot: Snapshot) -> Devotional:
        data = snapshot.data
        author = data.get("author") or {}
        return Devotional(
            id=snapshot.id,
            title=data["title"],
            verse=data["verse"],
            verse_text=data["verse_text"],
            content=data["content"],
            author=DevotionalAuthor(
                id=author.get("id", ""),
                name=author.get("name", ""),
                image=author.get("image") or "",
            ),
            category=data.get("category") or "",
            status=DevotionalStatus(data.get("status") or DevotionalStatus.DRAFT.value),
            likes=data.get("likes") or 0,
            comments=data.get("comments") or 0,
            date=data.get("date"),
        )

    def list_all(self) -> list[Devotional]:
        return self.list(order_by=[_NEWEST_FIRST])

    def list_published(self, category: str | None = None) -> list[Devotional]:
        filters = [_PUBLISHED]
        if category:
            filters.append(Filter("category", "==", category))
        return self.list(filters=filters, order_by=[_NEWEST_FIRST])

    def latest(self) -> Devotional | None:
        found = self.list(filters=[_PUBLISHED], order_by=[_NEWEST_FIRST], limit=1)
        return found[0] if found else None


class BookmarkRepository(Repository[Bookmark]):
    """One document per (user, devotional) pair."""

    collection = collections.BOOKMARKS

    @staticmethod
    def bookmark_id(user_id: str, devotional_id: str) -> str:
        return f"{user_id}:{devotional_id}"

    def from_snapshot(self, snapshot: Snapshot) -> Bookmark:
        data = snapshot.data
        return Bookmark(
            id=snapshot.id,
            user_id=data["user_id"],
            devotional_id=data["devotional_id"],
            created_at=data.get("created_at"),
        )

    def list_for_user(self, user_id: str) -> list[Bookmark]:
        return self.list(
            filters=[Filter("user_id", "==", user_id)],
            order_by=[OrderBy("created_at", descending=True)],
        )

    def list_for_devotional(self, devotional_id: str) -> list[Bookmark]:
        return self.list(filters=[Filter("devotional_id", "==", devotional_id)])
