from __future__ import annotations

import uuid
from collections import OrderedDict
from typing import Callable, Optional

from ..access.visibility import VisibilityFilter
from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty
from ..core.constants import UNASSIGNED_CLASS_LABEL
from ..core.exceptions import AuthorizationError, ValidationError
from ..users.model import User
from .model import Student
from .repository import StudentRepository


def _new_student_id() -> str:
    return uuid.uuid4().hex


class StudentService:
    """Use case: manage the student registry.

    Teachers only see and manage students of their assigned class; admins
    manage everyone.
    """

    def __init__(self, students: StudentRepository, *, id_factory: Callable[[], str] = _new_student_id):
        self._students = students
        self._id_factory = id_factory

    def list_visible(self, actor: User) -> list[Student]:
        return VisibilityFilter.filter_students(self._students.list_all(), actor)

    def list_grouped_by_class(self, actor: User) -> "OrderedDict[str, list[Student]]":
        groups: OrderedDict[str, list[Student]] = OrderedDict()
        for s in self.list_visible(actor):
            cls = s.class_section.strip() or UNASSIGNED_CLASS_LABEL
            groups.setdefault(cls, []).append(s)
        return groups

    def _resolve_class(self, actor: User, class_section: Optional[str]) -> str:
        class_section = (class_section or "").strip()
        if actor.is_teacher:
            class_section = class_section or (actor.assigned_class or "")
            if class_section != actor.assigned_class:
                raise AuthorizationError("Teachers can only manage students of their assigned class")
        return require_non_empty(class_section, "Class section")

    def _get_visible(self, actor: User, student_id: str) -> Student:
        student = self._students.get_by_id(student_id)
        if not student:
            raise ValidationError("Student not found")
        if not VisibilityFilter.filter_students([student], actor):
            raise AuthorizationError("You do not have access to this student")
        return student

    def register(
        self,
        actor: User,
        *,
        name: str,
        roll_number: str,
        class_section: Optional[str],
        photo_url: str,
    ) -> Student:
        student = Student(
            id=self._id_factory(),
            name=require_non_empty(name, "Name"),
            roll_number=require_non_empty(roll_number, "Roll number"),
            class_section=self._resolve_class(actor, class_section),
            photo_url=require_non_empty(photo_url, "Photo"),
            registered_at=now_local().isoformat(timespec="seconds"),
        )
        if self._students.get_by_id(student.id):
            raise ValidationError("Student id already exists")
        self._students.add(student)
        return student

    def edit(
        self,
        actor: User,
        student_id: str,
        *,
        name: str,
        roll_number: str,
        class_section: Optional[str],
        photo_url: str,
    ) -> Student:
        current = self._get_visible(actor, student_id)
        updated = Student(
            id=current.id,
            name=require_non_empty(name, "Name"),
            roll_number=require_non_empty(roll_number, "Roll number"),
            class_section=self._resolve_class(actor, class_section),
            photo_url=require_non_empty(photo_url, "Photo"),
            registered_at=current.registered_at,
        )
        if not self._students.update(updated):
            raise ValidationError("Updating student failed")
        return updated

    def delete(self, actor: User, student_id: str) -> None:
        # Ledger events keep their name snapshot; the id reference becomes orphaned.
        self._get_visible(actor, student_id)
        if not self._students.delete_by_id(student_id):
            raise ValidationError("Deleting student failed")
