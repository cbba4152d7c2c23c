"""Role-based partitioning of students and attendance events.

Every read path (dashboard, reports, ledger reads, live-scan reference pool,
student registry) goes through these two functions so that a teacher only
ever sees or credits students of the class they are assigned to.
"""

from __future__ import annotations

from typing import Iterable, Sequence, TypeVar

from ..attendance.model import AttendanceEvent
from ..students.model import Student
from ..users.model import User

T = TypeVar("T", bound=AttendanceEvent)


class VisibilityFilter:
    @staticmethod
    def filter_students(students: Iterable[Student], actor: User) -> list[Student]:
        if actor.is_admin:
            return list(students)
        # A teacher without a class sees nothing rather than everything.
        return [s for s in students if actor.assigned_class and s.class_section == actor.assigned_class]

    @classmethod
    def filter_events(cls, events: Iterable[T], students: Sequence[Student], actor: User) -> list[T]:
        """Filter events by the actor's visible students.

        ``students`` must be the unfiltered registry; the visible id-set is
        recomputed on every call.
        """
        if actor.is_admin:
            return list(events)
        visible_ids = {s.id for s in cls.filter_students(students, actor)}
        return [e for e in events if e.student_id in visible_ids]
