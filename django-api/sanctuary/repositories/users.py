"""User profile and role repositories. Both are keyed by the uid."""

from sanctuary.domain import User, UserRole
from sanctuary.repositories.base import Repository
from sanctuary.stores import collections
from sanctuary.stores.interfaces import Filter, Snapshot


class UserRepository(Repository[User]):
    collection = collections.USERS

    def from_snapshot(self, snapshot: Snapshot) -> User:
        data = snapshot.data
        return User(
            id=snapshot.id,
            email=data.get("email") or "",
            display_name=data.get("display_name") or "",
            photo_url=data.get("photo_url") or "",
            phone_number=data.get("phone_number") or "",
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
            last_sign_in_at=data.get("last_sign_in_at"),
        )


class UserRoleRepository(Repository[UserRole]):
    collection = collections.USER_ROLES

    def from_snapshot(self, snapshot: Snapshot) -> UserRole:
        data = snapshot.data
        return UserRole(
            id=snapshot.id,
            is_admin=bool(data.get("is_admin", False)),
            permissions=tuple(data.get("permissions") or ()),
        )

    def list_admins(self) -> list[UserRole]:
        return self.list(filters=[Filter("is_admin", "==", True)])
