"""Tests for the authorization gate.

Run with: pytest tests/test_authorization.py -v
"""

import pytest

from sanctuary.domain import RoleState, UserRole
from sanctuary.domain.errors import PermissionDeniedError, ValidationFailedError
from sanctuary.services.authorization import ensure_admin


class TestRoles:
    def test_unknown_user_gets_default_role(self, services):
        gate = services.gate
        assert gate.role_state("newcomer") is RoleState.UNKNOWN
        role = gate.resolve_role("newcomer")
        assert role == UserRole(id="newcomer", is_admin=False)
        assert gate.role_state("newcomer") is RoleState.ROLE_ASSIGNED

    def test_sync_user_assigns_role(self, services, member):
        services.gate.sync_user(member, {"email": "mary@example.org"})
        assert services.gate.role_state(member.uid) is RoleState.ROLE_ASSIGNED

    def test_sync_user_creates_then_refreshes_profile(self, services, member):
        created = services.gate.sync_user(member, {"email": "mary@example.org", "display_name": "Mary"})
        assert created.email == "mary@example.org"
        assert created.created_at == created.last_sign_in_at

        refreshed = services.gate.sync_user(member, {"display_name": "Mary M."})
        assert refreshed.display_name == "Mary M."
        assert refreshed.created_at == created.created_at
        assert refreshed.last_sign_in_at >= created.last_sign_in_at

    def test_sync_user_validates_profile(self, services, member):
        with pytest.raises(ValidationFailedError):
            services.gate.sync_user(member, {"email": "not-an-email"})

    def test_ensure_admin(self):
        assert ensure_admin(UserRole(id="a", is_admin=True)).is_admin
        with pytest.raises(PermissionDeniedError):
            ensure_admin(UserRole(id="b"))

    def test_anonymous_is_never_admin(self, services):
        assert services.gate.is_admin(None) is False
        with pytest.raises(PermissionDeniedError):
            services.gate.require_admin(None)


class TestSetAdmin:
    def test_admin_promotes_member(self, services, admin, member):
        role = services.gate.set_admin(admin, member.uid, True)
        assert role.is_admin
        assert services.gate.is_admin(member)

    def test_admin_demotes_other_admin(self, services, admin, member):
        services.gate.set_admin(admin, member.uid, True)
        services.gate.set_admin(admin, member.uid, False)
        assert not services.gate.is_admin(member)

    def test_member_cannot_promote(self, services, member):
        with pytest.raises(PermissionDeniedError):
            services.gate.set_admin(member, member.uid, True)
        assert not services.gate.is_admin(member)

    def test_admin_cannot_demote_self(self, services, admin):
        with pytest.raises(PermissionDeniedError):
            services.gate.set_admin(admin, admin.uid, False)
        assert services.gate.is_admin(admin)

    def test_list_admins(self, services, admin, member):
        services.gate.sync_user(admin, {"email": "pastor@example.org"})
        services.gate.sync_user(member, {"email": "mary@example.org"})
        services.gate.set_admin(admin, member.uid, True)
        assert {user.id for user in services.gate.list_admins(admin)} == {admin.uid, member.uid}

    def test_watch_role_pushes_changes(self, services, admin):
        seen = []
        unsubscribe = services.gate.watch_role("deacon", lambda role: seen.append(role.is_admin))
        services.gate.set_admin(admin, "deacon", True)
        services.gate.set_admin(admin, "other", True)
        unsubscribe()
        services.gate.set_admin(admin, "deacon", False)
        assert seen == [False, True, True]
