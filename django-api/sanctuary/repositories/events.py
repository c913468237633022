"""Event and EventRegistration repositories."""

from sanctuary.domain import Capacity, Event, EventRegistration, EventStatus
from sanctuary.repositories.base import Repository
from sanctuary.stores import collections
from sanctuary.stores.interfaces import Filter, OrderBy, Snapshot


class EventRepository(Repository[Event]):
    collection = collections.EVENTS

    def from_snapshot(self, snapshot: Snapshot) -> Event:
        data = snapshot.data
        return Event(
            id=snapshot.id,
            title=data["title"],
            date=data["date"],
            time=data["time"],
            location=data["location"],
            category=data["category"],
            description=data["description"],
            capacity=Capacity(data["capacity"]),
            registrations=data.get("registrations") or 0,
            registration_open=data.get("registration_open", True),
            featured=data.get("featured", False),
            status=EventStatus(data.get("status") or EventStatus.UPCOMING.value),
            image=data.get("image") or "",
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )

    def list_all(self) -> list[Event]:
        """Return all events, newest first."""
        return self.list(order_by=[OrderBy("created_at", descending=True)])

    def list_by_category(self, category: str) -> list[Event]:
        return self.list(
            filters=[Filter("category", "==", category)],
            order_by=[OrderBy("created_at", descending=True)],
        )

    def list_upcoming(self, limit: int = 3) -> list[Event]:
        """Return the next upcoming events, soonest first."""
        return self.list(
            filters=[Filter("status", "==", EventStatus.UPCOMING.value)],
            order_by=[OrderBy("date"), OrderBy("time")],
            limit=limit,
        )

    def list_featured(self) -> list[Event]:
        return self.list(
            filters=[Filter("featured", "==", True)],
            order_by=[OrderBy("date")],
        )


class EventRegistrationRepository(Repository[EventRegistration]):
    collection = collections.EVENT_REGISTRATIONS

    def from_snapshot(self, snapshot: Snapshot) -> EventRegistration:
        data = snapshot.data
        return EventRegistration(
            id=snapshot.id,
            event_id=data["event_id"],
            user_id=data["user_id"],
            registered_at=data.get("registered_at"),
        )

    def list_for_event(self, event_id: str) -> list[EventRegistration]:
        return self.list(
            filters=[Filter("event_id", "==", event_id)],
            order_by=[OrderBy("registered_at")],
        )

    def list_for_user(self, user_id: str) -> list[EventRegistration]:
        return self.list(
            filters=[Filter("user_id", "==", user_id)],
            order_by=[OrderBy("registered_at", descending=True)],
        )
