"""Prayer request service.

Each user can add to a request's prayer count once; the marker document and
the counter are written in the same transaction.
"""

import logging
from collections.abc import Mapping
from typing import Any

from sanctuary.domain import PrayerRequest, PrayerStatus
from sanctuary.domain.errors import PrayerRequestNotFoundError, ValidationFailedError
from sanctuary.repositories import PrayerRecordRepository, PrayerRequestRepository
from sanctuary.services.authorization import AuthorizationGate, Identity
from sanctuary.services.base import MutationService
from sanctuary.services.rate_limit import RateLimiter
from sanctuary.services.validation import PrayerRequestInputSerializer, validate_input
from sanctuary.stores import collections
from sanctuary.stores.interfaces import SERVER_TIMESTAMP, DocumentStore, Transaction

logger = logging.getLogger(__name__)


class PrayerService(MutationService):
    def __init__(
        self,
        store: DocumentStore,
        gate: AuthorizationGate,
        requests: PrayerRequestRepository,
        records: PrayerRecordRepository,
        rate_limiter: RateLimiter | None = None,
    ) -> None:
        super().__init__(store, gate, rate_limiter)
        self._requests = requests
        self._records = records

    def _load(self, tx: Transaction, request_id: str) -> PrayerRequest:
        request = self._requests.get_within_transaction(tx, request_id)
        if request is None:
            raise PrayerRequestNotFoundError(request_id)
        return request

    def list_active(self) -> list[PrayerRequest]:
        return self._read("list prayer requests", self._requests.list_active)

    def list_mine(self, identity: Identity | None) -> list[PrayerRequest]:
        identity = self._gate.require_authenticated(identity)
        return self._read("list prayer requests", lambda: self._requests.list_for_user(identity.uid))

    def create_request(
        self,
        identity: Identity | None,
        data: Mapping[str, Any],
        client: str | None = None,
    ) -> str:
        """Submit a prayer request.

        Anonymous callers are allowed; their quota is keyed by ``client``,
        the address the request came from.
        """
        fields = validate_input(PrayerRequestInputSerializer, data)
        self._throttle(identity, collections.PRAYER_REQUESTS, "create", client=client)
        fields.update(
            user_id=identity.uid if identity else None,
            prayer_count=0,
            status=PrayerStatus.ACTIVE.value,
            date=SERVER_TIMESTAMP,
        )
        return self._transact("create prayer request", lambda tx: self._requests.create(tx, fields))

    def pray_for(self, identity: Identity | None, request_id: str) -> int:
        """Count the caller's prayer once. Returns the resulting prayer count."""
        identity = self._gate.require_authenticated(identity)
        self._throttle(identity, collections.PRAYER_RECORDS, "create")
        record_id = self._records.record_id(request_id, identity.uid)

        def body(tx: Transaction) -> int:
            request = self._load(tx, request_id)
            if request.status is not PrayerStatus.ACTIVE:
                raise ValidationFailedError("Prayer request is archived")
            if self._records.get_within_transaction(tx, record_id) is not None:
                return request.prayer_count
            count = request.prayer_count + 1
            self._requests.update(tx, request_id, {"prayer_count": count})
            self._records.create(
                tx,
                {"request_id": request_id, "user_id": identity.uid, "prayed_at": SERVER_TIMESTAMP},
                entity_id=record_id,
            )
            return count

        return self._transact("pray for request", body)

    def archive_request(self, identity: Identity | None, request_id: str) -> None:
        self._gate.require_admin(identity)
        self._throttle(identity, collections.PRAYER_REQUESTS, "update")

        def body(tx: Transaction) -> None:
            self._load(tx, request_id)
            self._requests.update(tx, request_id, {"status": PrayerStatus.ARCHIVED.value})

        self._transact("archive prayer request", body)

    def delete_request(self, identity: Identity | None, request_id: str) -> None:
        self._gate.require_admin(identity)
        self._throttle(identity, collections.PRAYER_REQUESTS, "delete")

        def body(tx: Transaction) -> None:
            self._load(tx, request_id)
            for record in self._records.list_for_request(request_id):
                self._records.delete(tx, record.id)
            self._requests.delete(tx, request_id)

        self._transact("delete prayer request", body)
        logger.info("Prayer request %s deleted by %s", request_id, identity.uid)
