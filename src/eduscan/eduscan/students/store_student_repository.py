from __future__ import annotations

from typing import Any, Optional, Sequence

from ..database.document_store import STUDENTS, DocumentStore
from .model import Student
from .repository import StudentRepository


def _from_record(r: dict[str, Any]) -> Student:
    return Student(
        id=str(r["id"]),
        name=str(r.get("name", "")),
        roll_number=str(r.get("roll_number", "")),
        class_section=str(r.get("class_section", "")),
        photo_url=str(r.get("photo_url", "")),
        registered_at=str(r.get("registered_at", "")),
    )


def _to_record(s: Student) -> dict[str, Any]:
    return {
        "id": s.id,
        "name": s.name,
        "roll_number": s.roll_number,
        "class_section": s.class_section,
        "photo_url": s.photo_url,
        "registered_at": s.registered_at,
    }


class StoreStudentRepository(StudentRepository):
    def __init__(self, store: DocumentStore):
        self._store = store

    def list_all(self) -> Sequence[Student]:
        return [_from_record(r) for r in self._store.load_all(STUDENTS)]

    def get_by_id(self, student_id: str) -> Optional[Student]:
        for s in self.list_all():
            if s.id == student_id:
                return s
        return None

    def add(self, student: Student) -> None:
        students = list(self.list_all())
        students.append(student)
        self._save(students)

    def update(self, student: Student) -> bool:
        students = list(self.list_all())
        for i, s in enumerate(students):
            if s.id == student.id:
                students[i] = student
                self._save(students)
                return True
        return False

    def delete_by_id(self, student_id: str) -> bool:
        students = list(self.list_all())
        kept = [s for s in students if s.id != student_id]
        if len(kept) == len(students):
            return False
        self._save(kept)
        return True

    def _save(self, students: Sequence[Student]) -> None:
        self._store.save_all(STUDENTS, [_to_record(s) for s in students])
