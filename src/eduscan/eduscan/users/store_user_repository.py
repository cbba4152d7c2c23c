from __future__ import annotations

from typing import Any, Optional, Sequence

from ..core.enums import Role
from ..database.document_store import USERS, DocumentStore
from .model import User
from .repository import UserRepository


def _from_record(r: dict[str, Any]) -> User:
    return User(
        username=str(r["username"]),
        password=str(r.get("password", "")),
        name=str(r.get("name", "")),
        role=Role(r.get("role", Role.TEACHER.value)),
        assigned_class=r.get("assigned_class") or None,
    )


def _to_record(u: User) -> dict[str, Any]:
    return {
        "username": u.username,
        "password": u.password,
        "name": u.name,
        "role": u.role.value,
        "assigned_class": u.assigned_class,
    }


class StoreUserRepository(UserRepository):
    def __init__(self, store: DocumentStore):
        self._store = store

    def list_all(self) -> Sequence[User]:
        return [_from_record(r) for r in self._store.load_all(USERS)]

    def get_by_username(self, username: str) -> Optional[User]:
        for u in self.list_all():
            if u.username == username:
                return u
        return None

    def add(self, user: User) -> None:
        users = list(self.list_all())
        users.append(user)
        self._save(users)

    def update(self, user: User) -> bool:
        users = list(self.list_all())
        for i, u in enumerate(users):
            if u.username == user.username:
                users[i] = user
                self._save(users)
                return True
        return False

    def delete_by_username(self, username: str) -> bool:
        users = list(self.list_all())
        kept = [u for u in users if u.username != username]
        if len(kept) == len(users):
            return False
        self._save(kept)
        return True

    def _save(self, users: Sequence[User]) -> None:
        self._store.save_all(USERS, [_to_record(u) for u in users])
