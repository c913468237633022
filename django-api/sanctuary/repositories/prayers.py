"""Prayer request repositories."""

from sanctuary.domain import PrayerRecord, PrayerRequest, PrayerStatus
from sanctuary.repositories.base import Repository
from sanctuary.stores import collections
from sanctuary.stores.interfaces import Filter, OrderBy, Snapshot


class PrayerRequestRepository(Repository[PrayerRequest]):
    collection = collections.PRAYER_REQUESTS

    def from_snapshot(self, snapshot: Snapshot) -> PrayerRequest:
        data = snapshot.data
        return PrayerRequest(
            id=snapshot.id,
            name=data["name"],
            request=data["request"],
            is_anonymous=data.get("is_anonymous", False),
            user_id=data.get("user_id"),
            prayer_count=data.get("prayer_count") or 0,
            status=PrayerStatus(data.get("status") or PrayerStatus.ACTIVE.value),
            date=data.get("date"),
        )

    def list_active(self) -> list[PrayerRequest]:
        return self.list(
            filters=[Filter("status", "==", PrayerStatus.ACTIVE.value)],
            order_by=[OrderBy("date", descending=True)],
        )

    def list_for_user(self, user_id: str) -> list[PrayerRequest]:
        return self.list(
            filters=[Filter("user_id", "==", user_id)],
            order_by=[OrderBy("date", descending=True)],
        )


class PrayerRecordRepository(Repository[PrayerRecord]):
    """One marker document per (request, user) pair."""

    collection = collections.PRAYER_RECORDS

    @staticmethod
    def record_id(request_id: str, user_id: str) -> str:
        return f"{request_id}:{user_id}"

    def from_snapshot(self, snapshot: Snapshot) -> PrayerRecord:
        data = snapshot.data
        return PrayerRecord(
            id=snapshot.id,
            request_id=data["request_id"],
            user_id=data["user_id"],
            prayed_at=data.get("prayed_at"),
        )

    def list_for_request(self, request_id: str) -> list[PrayerRecord]:
        return self.list(filters=[Filter("request_id", "==", request_id)])
