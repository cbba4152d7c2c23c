from __future__ import annotations

from typing import Iterable

from ..common.datetime_utils import parse_iso_date
from ..core.enums import AttendanceStatus
from .model import AttendanceEvent, MonthlyAttendance


def events_in_month(events: Iterable[AttendanceEvent], year: int, month: int) -> list[AttendanceEvent]:
    out = []
    for e in events:
        d = parse_iso_date(e.date)
        if d.year == year and d.month == month:
            out.append(e)
    return out


def aggregate_monthly(events: Iterable[AttendanceEvent], student_id: str, year: int, month: int) -> MonthlyAttendance:
    """Monthly presence for one student.

    The denominator is the number of distinct dates on which any scan was
    recorded for any student in ``events``, not the calendar day count.
    """
    month_events = events_in_month(events, year, month)
    scanned_days = {e.date for e in month_events}
    present = sum(
        1 for e in month_events if e.student_id == student_id and e.status == AttendanceStatus.PRESENT
    )
    return MonthlyAttendance(
        student_id=student_id,
        year=int(year),
        month=int(month),
        present_days=present,
        total_scanned_days=len(scanned_days),
    )
