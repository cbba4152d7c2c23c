from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from ..access.visibility import VisibilityFilter
from ..students.model import Student
from ..users.model import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReferenceEntry:
    """One candidate forwarded to the analyzer."""

    student_id: str
    name: str
    image: str


@dataclass(frozen=True)
class ReferenceSet:
    """Students an analyzer attempt may match against, in registration order."""

    students: tuple[Student, ...]

    @classmethod
    def build(cls, all_students: Iterable[Student], actor: User) -> "ReferenceSet":
        return cls(students=tuple(VisibilityFilter.filter_students(all_students, actor)))

    def __len__(self) -> int:
        return len(self.students)

    def find(self, student_id: Optional[str]) -> Optional[Student]:
        if student_id is None:
            return None
        for s in self.students:
            if s.id == student_id:
                return s
        return None

    def limited(self, cap: int) -> "ReferenceSet":
        """First ``cap`` students only.

        Note: known limitation. Students past the cap are never matched.
        """
        cap = max(0, int(cap))
        if len(self.students) > cap:
            logger.warning(
                "Reference pool truncated to %d of %d students; the rest cannot be matched",
                cap,
                len(self.students),
            )
        return ReferenceSet(students=self.students[:cap])

    def references(self) -> list[ReferenceEntry]:
        return [ReferenceEntry(student_id=s.id, name=s.name, image=s.photo_url) for s in self.students]
