from __future__ import annotations

import logging
import threading
from typing import Optional, Sequence

from ..access.visibility import VisibilityFilter
from ..common.datetime_utils import seconds_between
from ..core.constants import DEFAULT_DEDUP_WINDOW_SECONDS
from ..students.model import Student
from ..users.model import User
from .aggregation import aggregate_monthly
from .model import AppendResult, AttendanceEvent, MonthlyAttendance
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceLedger:
    """Append-only attendance log with a per-student, per-date dedup window.

    Events are kept most-recent-first. The whole collection is persisted after
    every accepted append.
    """

    def __init__(self, repository: AttendanceRepository, *, dedup_window_seconds: int = DEFAULT_DEDUP_WINDOW_SECONDS):
        self._repository = repository
        self._dedup_window = float(dedup_window_seconds)
        self._lock = threading.Lock()
        self._events: list[AttendanceEvent] = list(repository.load_all())
        logger.info("Attendance ledger loaded with %d event(s)", len(self._events))

    def __len__(self) -> int:
        return len(self._events)

    def events(self) -> Sequence[AttendanceEvent]:
        return tuple(self._events)

    def find_recent_duplicate(self, candidate: AttendanceEvent) -> Optional[AttendanceEvent]:
        # Time-of-day arithmetic inside one date partition: no merge across midnight.
        for e in self._events:
            if e.student_id != candidate.student_id or e.date != candidate.date:
                continue
            if seconds_between(e.timestamp, candidate.timestamp) < self._dedup_window:
                return e
        return None

    def append(self, candidate: AttendanceEvent) -> AppendResult:
        with self._lock:
            existing = self.find_recent_duplicate(candidate)
            if existing is not None:
                logger.info(
                    "Duplicate event for student %s on %s at %s (existing %s at %s)",
                    candidate.student_id,
                    candidate.date,
                    candidate.timestamp,
                    existing.id,
                    existing.timestamp,
                )
                return AppendResult(accepted=False, event=candidate)

            events = [candidate, *self._events]
            self._repository.save_all(events)
            self._events = events
            logger.info(
                "Recorded %s for student %s (%s) on %s at %s",
                candidate.status.value,
                candidate.student_id,
                candidate.student_name,
                candidate.date,
                candidate.timestamp,
            )
            return AppendResult(accepted=True, event=candidate)

    def read_all(self, actor: User, students: Sequence[Student]) -> list[AttendanceEvent]:
        """Events visible to ``actor``; ``students`` is the unfiltered registry."""
        return VisibilityFilter.filter_events(self.events(), students, actor)

    def aggregate_monthly(self, student_id: str, year: int, month: int) -> MonthlyAttendance:
        return aggregate_monthly(self.events(), student_id, year, month)
