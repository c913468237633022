"""Tests for PrayerService.

Run with: pytest tests/test_prayers.py -v
"""

import pytest

from sanctuary.domain import PrayerStatus
from sanctuary.domain.errors import PermissionDeniedError, PrayerRequestNotFoundError, ValidationFailedError
from sanctuary.repositories import PrayerRecordRepository
from sanctuary.services import Identity

REQUEST = {"name": "Naomi", "request": "Healing for my mother."}


class TestPrayerService:
    def test_anonymous_callers_can_submit(self, services):
        request_id = services.prayers.create_request(None, REQUEST)
        [request] = services.prayers.list_active()
        assert request.id == request_id
        assert request.user_id is None
        assert request.prayer_count == 0
        assert request.date is not None

    def test_praying_counts_once_per_user(self, services, admin, member):
        request_id = services.prayers.create_request(member, REQUEST)
        assert services.prayers.pray_for(member, request_id) == 1
        assert services.prayers.pray_for(member, request_id) == 1
        assert services.prayers.pray_for(admin, request_id) == 2

    def test_pray_requires_authentication(self, services):
        request_id = services.prayers.create_request(None, REQUEST)
        with pytest.raises(PermissionDeniedError):
            services.prayers.pray_for(None, request_id)

    def test_pray_for_missing_request(self, services, member):
        with pytest.raises(PrayerRequestNotFoundError):
            services.prayers.pray_for(member, "missing")

    def test_archived_requests_are_closed(self, services, admin, member):
        request_id = services.prayers.create_request(member, REQUEST)
        services.prayers.archive_request(admin, request_id)
        assert services.prayers.list_active() == []
        [mine] = services.prayers.list_mine(member)
        assert mine.status is PrayerStatus.ARCHIVED
        with pytest.raises(ValidationFailedError):
            services.prayers.pray_for(member, request_id)

    def test_delete_removes_prayer_records(self, services, store, admin, member):
        request_id = services.prayers.create_request(member, REQUEST)
        services.prayers.pray_for(member, request_id)
        services.prayers.pray_for(Identity(uid="friend"), request_id)
        services.prayers.delete_request(admin, request_id)
        assert PrayerRecordRepository(store).list_for_request(request_id) == []
        with pytest.raises(PrayerRequestNotFoundError):
            services.prayers.archive_request(admin, request_id)

    def test_members_cannot_moderate(self, services, member):
        request_id = services.prayers.create_request(member, REQUEST)
        with pytest.raises(PermissionDeniedError):
            services.prayers.delete_request(member, request_id)
