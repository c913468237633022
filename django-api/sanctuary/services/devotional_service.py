"""Devotional service - admin publishing, likes and per-user bookmarks."""

import logging
from collections.abc import Mapping
from typing import Any

from sanctuary.domain import Devotional
from sanctuary.domain.errors import DevotionalNotFoundError
from sanctuary.repositories import BookmarkRepository, DevotionalRepository
from sanctuary.services.authorization import AuthorizationGate, Identity
from sanctuary.services.base import MutationService
from sanctuary.services.rate_limit import RateLimiter
from sanctuary.services.validation import DevotionalInputSerializer, validate_input
from sanctuary.stores import collections
from sanctuary.stores.interfaces import SERVER_TIMESTAMP, DocumentStore, Transaction

logger = logging.getLogger(__name__)


class DevotionalService(MutationService):
    def __init__(
        self,
        store: DocumentStore,
        gate: AuthorizationGate,
        devotionals: DevotionalRepository,
        bookmarks: BookmarkRepository,
        rate_limiter: RateLimiter | None = None,
    ) -> None:
        super().__init__(store, gate, rate_limiter)
        self._devotionals = devotionals
        self._bookmarks = bookmarks

    def _load(self, tx: Transaction, devotional_id: str) -> Devotional:
        devotional = self._devotionals.get_within_transaction(tx, devotional_id)
        if devotional is None:
            raise DevotionalNotFoundError(devotional_id)
        return devotional

    def get_devotional(self, devotional_id: str) -> Devotional:
        devotional = self._read("get devotional", lambda: self._devotionals.get(devotional_id))
        if devotional is None:
            raise DevotionalNotFoundError(devotional_id)
        return devotional

    def list_published(self, category: str | None = None) -> list[Devotional]:
        return self._read("list devotionals", lambda: self._devotionals.list_published(category))

    def latest(self) -> Devotional | None:
        return self._read("latest devotional", self._devotionals.latest)

    def list_all(self, identity: Identity | None) -> list[Devotional]:
        """Admin listing, drafts included."""
        self._gate.require_admin(identity)
        return self._read("list devotionals", self._devotionals.list_all)

    def create_devotional(self, identity: Identity | None, data: Mapping[str, Any]) -> str:
        self._gate.require_admin(identity)
        fields = validate_input(DevotionalInputSerializer, data)
        self._throttle(identity, collections.DEVOTIONALS, "create")
        fields.update(date=SERVER_TIMESTAMP, likes=0, comments=0)
        devotional_id = self._transact("create devotional", lambda tx: self._devotionals.create(tx, fields))
        logger.info("Devotional %s created by %s", devotional_id, identity.uid)
        return devotional_id

    def update_devotional(self, identity: Identity | None, devotional_id: str, data: Mapping[str, Any]) -> None:
        self._gate.require_admin(identity)
        fields = validate_input(DevotionalInputSerializer, data, partial=True)
        self._throttle(identity, collections.DEVOTIONALS, "update")

        def body(tx: Transaction) -> None:
            self._load(tx, devotional_id)
            self._devotionals.update(tx, devotional_id, fields)

        self._transact("update devotional", body)

    def delete_devotional(self, identity: Identity | None, devotional_id: str) -> None:
        self._gate.require_admin(identity)
        self._throttle(identity, collections.DEVOTIONALS, "delete")

        def body(tx: Transaction) -> None:
            self._load(tx, devotional_id)
            for bookmark in self._bookmarks.list_for_devotional(devotional_id):
                self._bookmarks.delete(tx, bookmark.id)
            self._devotionals.delete(tx, devotional_id)

        self._transact("delete devotional", body)
        logger.info("Devotional %s deleted by %s", devotional_id, identity.uid)

    def like(self, identity: Identity | None, devotional_id: str) -> int:
        """Increment the like counter. Returns the new count."""
        identity = self._gate.require_authenticated(identity)
        self._throttle(identity, collections.DEVOTIONALS, "like")

        def body(tx: Transaction) -> int:
            devotional = self._load(tx, devotional_id)
            likes = devotional.likes + 1
            self._devotionals.update(tx, devotional_id, {"likes": likes})
            return likes

        return self._transact("like devotional", body)

    def bookmark(self, identity: Identity | None, devotional_id: str) -> None:
        """Save a devotional for the caller. Saving it twice is a no-op."""
        identity = self._gate.require_authenticated(identity)
        self._throttle(identity, collections.BOOKMARKS, "create")
        bookmark_id = self._bookmarks.bookmark_id(identity.uid, devotional_id)

        def body(tx: Transaction) -> None:
            self._load(tx, devotional_id)
            if self._bookmarks.get_within_transaction(tx, bookmark_id) is not None:
                return
            self._bookmarks.create(
                tx,
                {"user_id": identity.uid, "devotional_id": devotional_id, "created_at": SERVER_TIMESTAMP},
                entity_id=bookmark_id,
            )

        self._transact("bookmark devotional", body)

    def unbookmark(self, identity: Identity | None, devotional_id: str) -> None:
        identity = self._gate.require_authenticated(identity)
        self._throttle(identity, collections.BOOKMARKS, "delete")
        bookmark_id = self._bookmarks.bookmark_id(identity.uid, devotional_id)

        def body(tx: Transaction) -> None:
            if self._bookmarks.get_within_transaction(tx, bookmark_id) is not None:
                self._bookmarks.delete(tx, bookmark_id)

        self._transact("remove bookmark", body)

    def list_bookmarks(self, identity: Identity | None) -> list[str]:
        """Ids of the devotionals the caller saved, most recent first."""
        identity = self._gate.require_authenticated(identity)
        bookmarks = self._read("list bookmarks", lambda: self._bookmarks.list_for_user(identity.uid))
        return [bookmark.devotional_id for bookmark in bookmarks]
