"""Integration tests for the HTTP API.

Run with: pytest tests/test_event_catalog.py -v
"""

import pytest
from rest_framework.test import APIClient

from sanctuary.domain.errors import (
    CapacityExceededError,
    ConflictError,
    EventNotFoundError,
    PermissionDeniedError,
    RateLimitedError,
    UnavailableError,
    ValidationFailedError,
)
from sanctuary.handlers.errors import error_response


def create_event(client: APIClient, event_input, **overrides) -> str:
    response = client.post("/api/events", event_input(**overrides), format="json")
    assert response.status_code == 201, response.data
    return response.data["id"]


@pytest.mark.django_db
class TestEventList:
    """Tests for GET/POST /api/events"""

    def test_list_events_empty_catalog(self, api_client: APIClient, app_services):
        response = api_client.get("/api/events")
        assert response.status_code == 200
        assert response.data == []

    def test_admin_creates_event(self, admin_client: APIClient, event_input):
        event_id = create_event(admin_client, event_input)
        response = admin_client.get("/api/events")
        assert [event["id"] for event in response.data] == [event_id]
        assert response.data[0]["capacity"] == 50
        assert response.data[0]["remaining"] == 50
        assert response.data[0]["status"] == "upcoming"

    def test_invalid_event_returns_field_errors(self, admin_client: APIClient, event_input):
        response = admin_client.post("/api/events", event_input(capacity=0), format="json")
        assert response.status_code == 400
        assert response.data["code"] == "VALIDATION_FAILED"
        assert "capacity" in response.data["errors"]

    def test_anonymous_create_is_unauthorized(self, api_client: APIClient, app_services, event_input):
        response = api_client.post("/api/events", event_input(), format="json")
        assert response.status_code == 401
        assert response.data["code"] == "PERMISSION_DENIED"

    def test_member_create_is_forbidden(self, member_client: APIClient, event_input):
        response = member_client.post("/api/events", event_input(), format="json")
        assert response.status_code == 403

    def test_invalid_token_is_rejected(self, api_client: APIClient, app_services):
        api_client.credentials(HTTP_AUTHORIZATION="Bearer forged")
        response = api_client.get("/api/events")
        assert response.status_code == 401


@pytest.mark.django_db
class TestEventDetail:
    """Tests for GET/PATCH/DELETE /api/events/{id}"""

    def test_get_event_returns_details(self, admin_client: APIClient, event_input):
        event_id = create_event(admin_client, event_input)
        response = admin_client.get(f"/api/events/{event_id}")
        assert response.status_code == 200
        assert response.data["title"] == "Christmas Eve Service"
        assert response.data["date"] == "2026-12-24"

    def test_get_event_not_found(self, api_client: APIClient, app_services):
        response = api_client.get("/api/events/missing")
        assert response.status_code == 404
        assert response.data == {"code": "NOT_FOUND", "message": "Event not found"}

    def test_patch_event(self, admin_client: APIClient, event_input):
        event_id = create_event(admin_client, event_input)
        response = admin_client.patch(f"/api/events/{event_id}", {"capacity": 80}, format="json")
        assert response.status_code == 200
        assert response.data["capacity"] == 80

    def test_delete_event(self, admin_client: APIClient, event_input):
        event_id = create_event(admin_client, event_input)
        assert admin_client.delete(f"/api/events/{event_id}").status_code == 204
        assert admin_client.get(f"/api/events/{event_id}").status_code == 404


@pytest.mark.django_db
class TestEventRegistrations:
    """Tests for /api/events/{id}/registrations"""

    def test_register_until_full(self, admin_client, member_client, event_input):
        event_id = create_event(admin_client, event_input, capacity=1)
        url = f"/api/events/{event_id}/registrations"

        assert member_client.post(url).status_code == 201
        response = member_client.post(url)
        assert response.status_code == 409
        assert response.data["code"] == "CAPACITY_EXCEEDED"

        listing = admin_client.get(url)
        assert [r["user_id"] for r in listing.data] == ["member-uid"]
        assert member_client.get(url).status_code == 403

    def test_rate_limited_registration(self, admin_client, member_client, app_services, event_input):
        app_services.rate_limiter.limits = {"event_registrations": 1}
        event_id = create_event(admin_client, event_input)
        url = f"/api/events/{event_id}/registrations"
        assert member_client.post(url).status_code == 201
        response = member_client.post(url)
        assert response.status_code == 429
        assert int(response["Retry-After"]) >= 1


@pytest.mark.django_db
class TestOtherResources:
    def test_product_crud(self, admin_client, api_client, product_input):
        created = admin_client.post("/api/products", product_input(), format="json")
        assert created.status_code == 201
        url = f"/api/products/{created.data['id']}"

        response = api_client.get(url)
        assert response.data["price"] == "24.99"
        assert response.data["original_price"] is None

        patched = admin_client.patch(url, {"stock": 12}, format="json")
        assert patched.data["stock"] == 12
        assert admin_client.delete(url).status_code == 204
        assert api_client.get(url).status_code == 404

    def test_prayer_wall(self, api_client, member_client, app_services):
        created = api_client.post(
            "/api/prayers", {"name": "Jo", "request": "Safe travels.", "is_anonymous": True}, format="json"
        )
        assert created.status_code == 201
        pray_url = f"/api/prayers/{created.data['id']}/pray"
        assert member_client.post(pray_url).data == {"prayer_count": 1}
        [request] = api_client.get("/api/prayers").data
        assert request["name"] == "Anonymous"
        assert request["prayer_count"] == 1

    def test_devotional_bookmarks(self, api_client, admin_client, member_client):
        created = admin_client.post(
            "/api/devotionals",
            {
                "title": "Be Still",
                "verse": "Psalm 46:10",
                "verse_text": "Be still, and know that I am God.",
                "content": "A short reflection on rest and trust.",
                "author": {"id": "a1", "name": "Pastor Ann"},
            },
            format="json",
        )
        assert created.status_code == 201
        url = f"/api/devotionals/{created.data['id']}/bookmark"

        assert member_client.post(url).status_code == 204
        listing = member_client.get("/api/users/me/bookmarks")
        assert listing.data == {"devotional_ids": [created.data["id"]]}
        assert member_client.delete(url).status_code == 204
        assert member_client.get("/api/users/me/bookmarks").data == {"devotional_ids": []}
        assert api_client.post(url).status_code == 401
        assert member_client.post("/api/devotionals/missing/bookmark").status_code == 404

    def test_user_sync_and_role(self, admin_client, member_client):
        synced = member_client.put("/api/users/me", {"email": "mary@example.org"}, format="json")
        assert synced.status_code == 200
        assert synced.data["id"] == "member-uid"

        promoted = admin_client.put("/api/users/member-uid/role", {"is_admin": True}, format="json")
        assert promoted.data["is_admin"] is True
        bad = admin_client.put("/api/users/member-uid/role", {"is_admin": "sometimes"}, format="json")
        assert bad.status_code == 400
        demote_self = admin_client.put("/api/users/admin-uid/role", {"is_admin": False}, format="json")
        assert demote_self.status_code == 403

    def test_non_object_bodies_are_rejected(self, admin_client):
        role = admin_client.put("/api/users/member-uid/role", [True], format="json")
        assert role.status_code == 400
        assert role.data["code"] == "VALIDATION_FAILED"
        order = admin_client.patch("/api/orders/o-1", ["shipped"], format="json")
        assert order.status_code == 400

    def test_anonymous_prayers_are_throttled_per_client(self, api_client, app_services):
        app_services.rate_limiter.limits = {"prayer_requests": 1}
        body = {"name": "Jo", "request": "Safe travels."}
        assert api_client.post("/api/prayers", body, format="json").status_code == 201
        assert api_client.post("/api/prayers", body, format="json").status_code == 429
        elsewhere = api_client.post("/api/prayers", body, format="json", REMOTE_ADDR="10.0.0.9")
        assert elsewhere.status_code == 201


class TestErrorResponses:
    @pytest.mark.parametrize(
        "error, status_code",
        [
            (ValidationFailedError(), 400),
            (PermissionDeniedError(), 403),
            (EventNotFoundError("e"), 404),
            (CapacityExceededError("e"), 409),
            (ConflictError(), 409),
            (RateLimitedError(retry_after=5), 429),
            (UnavailableError(), 503),
        ],
    )
    def test_status_codes(self, error, status_code):
        response = error_response(error)
        assert response.status_code == status_code
        assert set(response.data) == {"code", "message"}

    def test_retry_after_header(self):
        assert error_response(RateLimitedError(retry_after=5))["Retry-After"] == "5"

    def test_anonymous_permission_denied_is_401(self):
        assert error_response(PermissionDeniedError(), anonymous=True).status_code == 401
