from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceEvent:
    """Domain entity: one attendance event in the ledger.

    Note: ``student_name`` is a snapshot taken when the event was created;
    ``student_id`` may outlive the student it points to.
    """

    id: str
    student_id: str
    student_name: str
    timestamp: str
    date: str
    status: AttendanceStatus
    confidence: float
    emotion: Optional[str] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class AppendResult:
    accepted: bool
    event: AttendanceEvent


@dataclass(frozen=True)
class MonthlyAttendance:
    """Read-model for monthly reports (absent days are derived, never stored)."""

    student_id: str
    year: int
    month: int
    present_days: int
    total_scanned_days: int

    @property
    def absent_days(self) -> int:
        return max(0, self.total_scanned_days - self.present_days)

    @property
    def percentage(self) -> int:
        if self.total_scanned_days == 0:
            return 0
        pct = int(self.present_days * 100 / self.total_scanned_days + 0.5)
        return min(100, pct)
