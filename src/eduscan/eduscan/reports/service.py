from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from ..access.visibility import VisibilityFilter
from ..attendance.aggregation import aggregate_monthly, events_in_month
from ..attendance.ledger import AttendanceLedger
from ..attendance.model import AttendanceEvent
from ..common.datetime_utils import format_date, now_local
from ..core.enums import AttendanceStatus
from ..students.repository import StudentRepository
from ..users.model import User

MONTHLY_FIELDS = ["name", "roll_number", "class_section", "present_days", "absent_days", "percentage"]
DAILY_FIELDS = ["student_id", "student_name", "date", "timestamp", "status", "confidence", "emotion", "notes"]


@dataclass(frozen=True)
class DashboardStats:
    total_students: int
    present_today: int
    absent_today: int
    proxy_attempts_today: int


def write_csv(rows: Sequence[dict], fieldnames: Sequence[str]) -> bytes:
    """Render report rows as CSV (UTF-8 with BOM so spreadsheets pick the encoding)."""
    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=list(fieldnames), extrasaction="ignore")
    writer.writeheader()
    for row in rows:
        writer.writerow(row)
    return out.getvalue().encode("utf-8-sig")


class ReportService:
    """Dashboard counts, monthly summary and daily log, all visibility-filtered."""

    def __init__(self, ledger: AttendanceLedger, students: StudentRepository):
        self._ledger = ledger
        self._students = students

    def _visible(self, actor: User):
        all_students = list(self._students.list_all())
        students = VisibilityFilter.filter_students(all_students, actor)
        events = self._ledger.read_all(actor, all_students)
        return students, events

    def dashboard(self, actor: User, *, today: Optional[date] = None) -> DashboardStats:
        today_s = format_date(today or now_local().date())
        students, events = self._visible(actor)
        todays = [e for e in events if e.date == today_s]

        present = len({e.student_id for e in todays if e.status == AttendanceStatus.PRESENT})
        proxies = sum(1 for e in todays if e.status == AttendanceStatus.PROXY_ATTEMPT)
        return DashboardStats(
            total_students=len(students),
            present_today=present,
            absent_today=max(0, len(students) - present),
            proxy_attempts_today=proxies,
        )

    def monthly_summary(self, actor: User, *, year: int, month: int, search: str = "") -> list[dict]:
        students, events = self._visible(actor)
        month_events = events_in_month(events, year, month)
        needle = (search or "").strip().lower()

        rows = []
        for s in students:
            if needle and needle not in s.name.lower():
                continue
            stats = aggregate_monthly(month_events, s.id, year, month)
            rows.append(
                {
                    "student_id": s.id,
                    "name": s.name,
                    "roll_number": s.roll_number,
                    "class_section": s.class_section,
                    "present_days": stats.present_days,
                    "absent_days": stats.absent_days,
                    "total_scanned_days": stats.total_scanned_days,
                    "percentage": stats.percentage,
                }
            )
        return rows

    def daily_log(self, actor: User, *, on: Optional[str] = None) -> list[dict]:
        _, events = self._visible(actor)
        if on:
            events = [e for e in events if e.date == on]
        return [self._to_log_row(e) for e in events]

    @staticmethod
    def _to_log_row(e: AttendanceEvent) -> dict:
        return {
            "id": e.id,
            "student_id": e.student_id,
            "student_name": e.student_name,
            "date": e.date,
            "timestamp": e.timestamp,
            "status": e.status.value,
            "confidence": e.confidence,
            "emotion": e.emotion or "N/A",
            "notes": e.notes or "",
        }

    def monthly_summary_csv(self, actor: User, *, year: int, month: int, search: str = "") -> bytes:
        rows = [
            {**r, "percentage": f"{r['percentage']}%"}
            for r in self.monthly_summary(actor, year=year, month=month, search=search)
        ]
        return write_csv(rows, MONTHLY_FIELDS)

    def daily_log_csv(self, actor: User, *, on: Optional[str] = None) -> bytes:
        return write_csv(self.daily_log(actor, on=on), DAILY_FIELDS)
