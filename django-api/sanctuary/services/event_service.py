"""Event service - all event business logic lives here.

Services:
- Depend only on interfaces (repositories, the document store)
- Validate domain invariants inside transactions
- Perform orchestration and error mapping
- Return domain models or raise domain errors

The registrations counter on an Event changes only here, in
``register_for_event`` or an admin ``update_event``. Both read the event
through the transaction, so a concurrent change to the same event aborts
and re-runs the body instead of overwriting it.
"""

import logging
from collections.abc import Mapping
from typing import Any

from sanctuary.conf import app_setting
from sanctuary.domain import Event, EventRegistration
from sanctuary.domain.errors import (
    CapacityExceededError,
    EventNotFoundError,
    ValidationFailedError,
)
from sanctuary.repositories import EventRegistrationRepository, EventRepository
from sanctuary.services.authorization import AuthorizationGate, Identity
from sanctuary.services.base import MutationService
from sanctuary.services.rate_limit import RateLimiter
from sanctuary.services.validation import EventInputSerializer, validate_input
from sanctuary.stores import collections
from sanctuary.stores.interfaces import SERVER_TIMESTAMP, DocumentStore, Transaction

logger = logging.getLogger(__name__)

DELETE_POLICIES = ("cascade", "forbid")


class EventService(MutationService):
    """Service for event catalog and registration operations."""

    def __init__(
        self,
        store: DocumentStore,
        gate: AuthorizationGate,
        events: EventRepository,
        registrations: EventRegistrationRepository,
        rate_limiter: RateLimiter | None = None,
        delete_policy: str | None = None,
    ) -> None:
        super().__init__(store, gate, rate_limiter)
        self._events = events
        self._registrations = registrations
        self.delete_policy = delete_policy or app_setting("EVENT_DELETE_POLICY")
        if self.delete_policy not in DELETE_POLICIES:
            raise ValueError(f"Unknown event delete policy {self.delete_policy!r}")

    def _load(self, tx: Transaction, event_id: str) -> Event:
        event = self._events.get_within_transaction(tx, event_id)
        if event is None:
            raise EventNotFoundError(event_id)
        return event

    def list_events(self, category: str | None = None) -> list[Event]:
        """Return all events, newest first, optionally for one category."""
        if category:
            return self._read("list events", lambda: self._events.list_by_category(category))
        return self._read("list events", self._events.list_all)

    def list_featured(self) -> list[Event]:
        return self._read("list events", self._events.list_featured)

    def list_upcoming(self, limit: int = 3) -> list[Event]:
        return self._read("list events", lambda: self._events.list_upcoming(limit))

    def get_event(self, event_id: str) -> Event:
        """Return an event by ID.

        Raises:
            EventNotFoundError: If the event does not exist.
        """
        event = self._read("get event", lambda: self._events.get(event_id))
        if event is None:
            raise EventNotFoundError(event_id)
        return event

    def create_event(self, identity: Identity | None, data: Mapping[str, Any]) -> str:
        """Create an event with no registrations. Returns the new event id."""
        self._gate.require_admin(identity)
        fields = validate_input(EventInputSerializer, data)
        self._throttle(identity, collections.EVENTS, "create")
        fields.update(
            registrations=0,
            created_at=SERVER_TIMESTAMP,
            updated_at=SERVER_TIMESTAMP,
        )
        event_id = self._transact("create event", lambda tx: self._events.create(tx, fields))
        logger.info("Event %s created by %s", event_id, identity.uid)
        return event_id

    def update_event(self, identity: Identity | None, event_id: str, data: Mapping[str, Any]) -> None:
        """Merge ``data`` into an existing event.

        Raises:
            EventNotFoundError: If the event does not exist.
            CapacityExceededError: If the result would hold more registrations
                than capacity.
        """
        self._gate.require_admin(identity)
        fields = validate_input(EventInputSerializer, data, partial=True)
        self._throttle(identity, collections.EVENTS, "update")

        def body(tx: Transaction) -> None:
            event = self._load(tx, event_id)
            capacity = fields.get("capacity", event.capacity.value)
            registrations = fields.get("registrations", event.registrations)
            if registrations > capacity:
                raise CapacityExceededError(
                    event_id,
                    f"Capacity cannot be lower than the {registrations} existing registrations",
                )
            self._events.update(tx, event_id, {**fields, "updated_at": SERVER_TIMESTAMP})

        self._transact("update event", body)
        logger.info("Event %s updated by %s", event_id, identity.uid)

    def delete_event(self, identity: Identity | None, event_id: str) -> int:
        """Delete an event. Returns the number of registrations removed with it.

        Under the ``forbid`` policy an event with registrations is refused
        with ValidationFailedError.
        """
        self._gate.require_admin(identity)
        self._throttle(identity, collections.EVENTS, "delete")

        def body(tx: Transaction) -> int:
            event = self._load(tx, event_id)
            if self.delete_policy == "forbid":
                if event.registrations > 0:
                    raise ValidationFailedError("Cannot delete an event that has registrations")
                registration_ids = []
            else:
                # Queries cannot run inside the transaction. Any registration
                # committed after this query also bumps the event we read, so
                # the commit conflicts and the body re-runs with a fresh list.
                registration_ids = [r.id for r in self._registrations.list_for_event(event_id)]
            for registration_id in registration_ids:
                self._registrations.delete(tx, registration_id)
            self._events.delete(tx, event_id)
            return len(registration_ids)

        removed = self._transact("delete event", body)
        logger.info("Event %s deleted by %s (%d registrations removed)", event_id, identity.uid, removed)
        return removed

    def register_for_event(self, identity: Identity | None, event_id: str) -> str:
        """Take one seat at an event for the caller. Returns the registration id.

        Raises:
            EventNotFoundError: If the event does not exist.
            ValidationFailedError: If registration is closed.
            CapacityExceededError: If the event is full.
            ConflictError: If concurrent registrations kept winning the race.
        """
        identity = self._gate.require_authenticated(identity)
        self._throttle(identity, collections.EVENT_REGISTRATIONS, "create")

        def body(tx: Transaction) -> str:
            event = self._load(tx, event_id)
            if not event.accepts_registrations:
                raise ValidationFailedError("Registration is closed for this event")
            if event.is_full:
                raise CapacityExceededError(event_id)
            self._events.update(
                tx,
                event_id,
                {"registrations": event.registrations + 1, "updated_at": SERVER_TIMESTAMP},
            )
            return self._registrations.create(
                tx,
                {
                    "event_id": event_id,
                    "user_id": identity.uid,
                    "registered_at": SERVER_TIMESTAMP,
                },
            )

        registration_id = self._transact("register for event", body)
        logger.info("User %s registered for event %s", identity.uid, event_id)
        return registration_id

    def list_registrations(self, identity: Identity | None, event_id: str) -> list[EventRegistration]:
        """Admin view of an event's registrations."""
        self._gate.require_admin(identity)
        self.get_event(event_id)
        return self._read("list registrations", lambda: self._registrations.list_for_event(event_id))

    def list_my_registrations(self, identity: Identity | None) -> list[EventRegistration]:
        identity = self._gate.require_authenticated(identity)
        return self._read("list registrations", lambda: self._registrations.list_for_user(identity.uid))
