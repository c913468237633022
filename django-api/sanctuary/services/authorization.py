"""Authorization gate - resolves roles and guards mutations.

Per-user role lifecycle::

    UNKNOWN --sign-in--> ROLE_MISSING --lazy default--> ROLE_ASSIGNED(False)
    ROLE_ASSIGNED(x) --set_admin by an admin--> ROLE_ASSIGNED(y)

Checks against an already resolved ``UserRole`` are pure; only
``resolve_role`` and the explicit mutations touch the store.
"""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from sanctuary.domain import RoleState, User, UserRole
from sanctuary.domain.errors import PermissionDeniedError
from sanctuary.repositories import UserRepository, UserRoleRepository
from sanctuary.services.errors import translated_store_errors
from sanctuary.services.rate_limit import RateLimiter
from sanctuary.services.validation import UserProfileSerializer, validate_input
from sanctuary.stores import collections
from sanctuary.stores.interfaces import SERVER_TIMESTAMP, DocumentStore, Transaction

logger = logging.getLogger(__name__)

DEFAULT_ROLE = {"is_admin": False, "permissions": []}


@dataclass(frozen=True)
class Identity:
    """Authenticated caller as vouched for by the identity provider."""

    uid: str


def caller_key(identity: Identity | None, client: str | None = None) -> str:
    """Rate-limit key: the uid, or the client address for anonymous callers."""
    if identity is not None:
        return identity.uid
    return f"anonymous:{client or 'unknown'}"


def ensure_admin(role: UserRole) -> UserRole:
    """Raises PermissionDeniedError unless ``role`` is an admin role."""
    if not role.is_admin:
        raise PermissionDeniedError("Admin access required")
    return role


class AuthorizationGate:
    """Service for role resolution and permission checks."""

    def __init__(
        self,
        store: DocumentStore,
        users: UserRepository,
        roles: UserRoleRepository,
        rate_limiter: RateLimiter | None = None,
    ) -> None:
        self._store = store
        self._users = users
        self._roles = roles
        self._rate_limiter = rate_limiter

    def _throttle(self, identity: Identity, collection: str, operation: str) -> None:
        if self._rate_limiter is not None:
            self._rate_limiter.hit(caller_key(identity), collection, operation)

    def _ensure_role(self, tx: Transaction, uid: str) -> UserRole:
        role = self._roles.get_within_transaction(tx, uid)
        if role is not None:
            return role
        self._roles.create(tx, DEFAULT_ROLE, entity_id=uid)
        return UserRole(id=uid, is_admin=False)

    def role_state(self, uid: str) -> RoleState:
        with translated_store_errors("role state"):
            if self._roles.get(uid) is not None:
                return RoleState.ROLE_ASSIGNED
            if self._users.get(uid) is not None:
                return RoleState.ROLE_MISSING
        return RoleState.UNKNOWN

    def resolve_role(self, uid: str) -> UserRole:
        """Return the user's role, creating the default non-admin role if missing."""
        with translated_store_errors("resolve role"):
            role = self._roles.get(uid)
            if role is not None:
                return role
            role = self._store.run_transaction(lambda tx: self._ensure_role(tx, uid))
        logger.info("Initialised default role for %s", uid)
        return role

    def require_authenticated(self, identity: Identity | None) -> Identity:
        if identity is None:
            raise PermissionDeniedError("Authentication required")
        return identity

    def require_admin(self, identity: Identity | None) -> UserRole:
        identity = self.require_authenticated(identity)
        return ensure_admin(self.resolve_role(identity.uid))

    def is_admin(self, identity: Identity | None) -> bool:
        if identity is None:
            return False
        return self.resolve_role(identity.uid).is_admin

    def set_admin(self, identity: Identity | None, target_uid: str, is_admin: bool) -> UserRole:
        """Promote or demote a user.

        Raises:
            PermissionDeniedError: If the caller is not an admin, or tries to
                revoke their own admin role.
        """
        identity = self.require_authenticated(identity)
        if identity.uid == target_uid and not is_admin:
            raise PermissionDeniedError("You cannot revoke your own admin role")
        self.require_admin(identity)
        self._throttle(identity, collections.USER_ROLES, "update")

        def body(tx: Transaction) -> UserRole:
            current = self._roles.get_within_transaction(tx, target_uid)
            if current is None:
                self._roles.create(tx, {**DEFAULT_ROLE, "is_admin": is_admin}, entity_id=target_uid)
                return UserRole(id=target_uid, is_admin=is_admin)
            self._roles.update(tx, target_uid, {"is_admin": is_admin})
            return UserRole(id=target_uid, is_admin=is_admin, permissions=current.permissions)

        with translated_store_errors("set admin"):
            role = self._store.run_transaction(body)
        logger.info("%s set admin=%s for %s", identity.uid, is_admin, target_uid)
        return role

    def sync_user(self, identity: Identity | None, profile: Mapping[str, Any]) -> User:
        """Create or refresh the caller's profile on sign-in and initialise their role."""
        identity = self.require_authenticated(identity)
        fields = validate_input(UserProfileSerializer, profile)
        self._throttle(identity, collections.USERS, "update")

        def body(tx: Transaction) -> None:
            existing = self._users.get_within_transaction(tx, identity.uid)
            stamps = {"updated_at": SERVER_TIMESTAMP, "last_sign_in_at": SERVER_TIMESTAMP}
            if existing is None:
                self._users.create(
                    tx, {**fields, **stamps, "created_at": SERVER_TIMESTAMP}, entity_id=identity.uid
                )
            else:
                self._users.update(tx, identity.uid, {**fields, **stamps})
            self._ensure_role(tx, identity.uid)

        with translated_store_errors("sync user"):
            self._store.run_transaction(body)
            return self._users.get(identity.uid)

    def list_admins(self, identity: Identity | None) -> list[User]:
        self.require_admin(identity)
        with translated_store_errors("list admins"):
            users = [self._users.get(role.id) for role in self._roles.list_admins()]
        return [user for user in users if user is not None]

    def watch_role(self, uid: str, callback: Callable[[UserRole], None]) -> Callable[[], None]:
        """Push the user's current role now and whenever it changes."""

        def push(roles) -> None:
            match = [role for role in roles if role.id == uid]
            callback(match[0] if match else UserRole(id=uid, is_admin=False))

        return self._roles.watch(push)
