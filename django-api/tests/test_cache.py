"""Tests for cache behavior.

Run with: pytest tests/test_cache.py -v
"""

from datetime import date, time

import pytest
from django.contrib.admin.sites import site
from django.core.cache import cache
from django.test import RequestFactory

from sanctuary import models
from sanctuary.cache import detail_key, list_key
from sanctuary.stores import collections
from sanctuary.stores.django_store import DjangoDocumentStore


@pytest.mark.django_db
class TestCacheInvalidation:
    """Tests for cache invalidation on document changes."""

    def test_list_is_served_from_cache(self, admin_client):
        admin_client.get("/api/events")
        assert cache.get(list_key(collections.EVENTS)) == []

    def test_event_create_invalidates_list_cache(self, admin_client, event_input):
        assert admin_client.get("/api/events").data == []
        admin_client.post("/api/events", event_input(), format="json")
        assert cache.get(list_key(collections.EVENTS)) is None
        assert len(admin_client.get("/api/events").data) == 1

    def test_registration_invalidates_detail_cache(self, admin_client, member_client, event_input):
        event_id = admin_client.post("/api/events", event_input(), format="json").data["id"]
        assert admin_client.get(f"/api/events/{event_id}").data["registrations"] == 0
        assert cache.get(detail_key(collections.EVENTS, event_id)) is not None

        member_client.post(f"/api/events/{event_id}/registrations")
        assert cache.get(detail_key(collections.EVENTS, event_id)) is None
        assert admin_client.get(f"/api/events/{event_id}").data["registrations"] == 1

    def test_not_found_is_not_cached(self, api_client, app_services):
        api_client.get("/api/events/missing")
        assert cache.get(detail_key(collections.EVENTS, "missing")) is None

    def test_django_store_commit_invalidates(self, django_capture_on_commit_callbacks):
        store = DjangoDocumentStore()
        ref = store.new_ref(collections.EVENTS)
        cache.set(list_key(collections.EVENTS), ["stale"])
        with django_capture_on_commit_callbacks(execute=True):
            store.run_transaction(
                lambda tx: tx.set(
                    ref,
                    {
                        "title": "Prayer Breakfast",
                        "date": date(2026, 11, 14),
                        "time": time(8, 0),
                        "location": "Café",
                        "category": "Fellowship",
                        "description": "Eggs, coffee and intercession.",
                        "capacity": 30,
                    },
                )
            )
        assert cache.get(list_key(collections.EVENTS)) is None

    def test_admin_save_bumps_version_and_invalidates(self, django_capture_on_commit_callbacks):
        event = models.Event.objects.create(
            id="evt-admin",
            title="Choir Practice",
            date=date(2026, 11, 5),
            time=time(19, 30),
            location="Choir Room",
            category="Music",
            description="Advent anthems.",
            capacity=25,
        )
        cache.set(detail_key(collections.EVENTS, event.pk), {"title": "stale"})
        model_admin = site.get_model_admin(models.Event)
        request = RequestFactory().post("/admin/")

        event.title = "Choir Rehearsal"
        with django_capture_on_commit_callbacks(execute=True):
            model_admin.save_model(request, event, form=None, change=True)

        event.refresh_from_db()
        assert event.version == 2
        assert cache.get(detail_key(collections.EVENTS, event.pk)) is None
