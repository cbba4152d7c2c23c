from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: an admin or teacher account.

    Note: ``assigned_class`` is only meaningful for teachers. The password is an
    opaque credential compared by exact equality.
    """

    username: str
    password: str
    name: str
    role: Role
    assigned_class: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_teacher(self) -> bool:
        return self.role == Role.TEACHER
