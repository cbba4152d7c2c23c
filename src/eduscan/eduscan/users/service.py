from __future__ import annotations

import hmac
import logging
from dataclasses import dataclass, replace
from typing import Optional, Sequence

from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    username: str
    name: str
    role: Role
    assigned_class: Optional[str]


def _require_admin(actor: User) -> None:
    if not actor.is_admin:
        raise AuthorizationError("Admin privileges required")


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, username: str, password: str) -> SessionUser:
        user = self._users.get_by_username((username or "").strip())
        if not user or not hmac.compare_digest(user.password.encode("utf-8"), (password or "").encode("utf-8")):
            logger.info("Failed login for %r", username)
            raise AuthenticationError("Invalid username or password")

        logger.info("User %s logged in as %s", user.username, user.role.value)
        return SessionUser(
            username=user.username,
            name=user.name,
            role=user.role,
            assigned_class=user.assigned_class,
        )

    def load_actor(self, username: str) -> Optional[User]:
        """Fresh User for a session username (role/class edits apply immediately)."""
        return self._users.get_by_username(username)


class UserService:
    """Use case: manage users (admin)."""

    def __init__(self, users: UserRepository, *, bootstrap_admin: User):
        if bootstrap_admin.role != Role.ADMIN:
            raise ValueError("Bootstrap account must be an admin")
        self._users = users
        self._bootstrap = bootstrap_admin

    @property
    def bootstrap_username(self) -> str:
        return self._bootstrap.username

    def ensure_bootstrap_admin(self) -> User:
        existing = self._users.get_by_username(self._bootstrap.username)
        if existing:
            if existing.role != Role.ADMIN:
                existing = replace(existing, role=Role.ADMIN, assigned_class=None)
                self._users.update(existing)
                logger.warning("Bootstrap admin %s had its role restored", existing.username)
            return existing
        self._users.add(self._bootstrap)
        logger.info("Bootstrap admin %s created", self._bootstrap.username)
        return self._bootstrap

    def list_users(self, actor: User) -> Sequence[User]:
        _require_admin(actor)
        return self._users.list_all()

    def _validated(self, *, username: str, password: str, name: str, role: Role, assigned_class: Optional[str]) -> User:
        username = require_non_empty(username, "Username")
        password = require_non_empty(password, "Password")
        name = require_non_empty(name, "Name")
        if not isinstance(role, Role):
            try:
                role = Role(role)
            except ValueError:
                raise ValidationError("Invalid role")

        if role == Role.TEACHER:
            assigned_class = require_non_empty(assigned_class or "", "Assigned class")
        else:
            assigned_class = None

        return User(username=username, password=password, name=name, role=role, assigned_class=assigned_class)

    def create_user(
        self,
        actor: User,
        *,
        username: str,
        password: str,
        name: str,
        role: Role,
        assigned_class: Optional[str] = None,
    ) -> User:
        _require_admin(actor)
        user = self._validated(username=username, password=password, name=name, role=role, assigned_class=assigned_class)
        if self._users.get_by_username(user.username):
            raise ValidationError("Username already exists")

        self._users.add(user)
        logger.info("User %s created by %s", user.username, actor.username)
        return user

    def edit_user(
        self,
        actor: User,
        username: str,
        *,
        password: str,
        name: str,
        role: Role,
        assigned_class: Optional[str] = None,
    ) -> User:
        _require_admin(actor)
        if not self._users.get_by_username(username):
            raise ValidationError("User not found")

        user = self._validated(username=username, password=password, name=name, role=role, assigned_class=assigned_class)
        if user.username == self._bootstrap.username and user.role != Role.ADMIN:
            raise ValidationError("The bootstrap admin must stay an admin")

        if not self._users.update(user):
            raise ValidationError("Updating user failed")
        logger.info("User %s updated by %s", user.username, actor.username)
        return user

    def delete_user(self, actor: User, username: str) -> None:
        _require_admin(actor)
        if username == self._bootstrap.username:
            raise ValidationError("The bootstrap admin cannot be deleted")
        if username == actor.username:
            raise ValidationError("You cannot delete your own account")
        if not self._users.get_by_username(username):
            raise ValidationError("User not found")

        if not self._users.delete_by_username(username):
            raise ValidationError("Deleting user failed")
        logger.info("User %s deleted by %s", username, actor.username)
