from __future__ import annotations

import csv
import io
from datetime import date

import pytest

from src.eduscan.eduscan.attendance.model import AttendanceEvent
from src.eduscan.eduscan.core.enums import AttendanceStatus
from src.eduscan.eduscan.reports.service import DAILY_FIELDS, MONTHLY_FIELDS, ReportService, write_csv


def _event(event_id, student_id, day, timestamp="08:00:00", status=AttendanceStatus.PRESENT, emotion="Calm", notes="ok"):
    return AttendanceEvent(
        id=event_id,
        student_id=student_id,
        student_name={"s1": "An Nguyen", "s2": "Binh Pham", "s3": "Chi Vo"}[student_id],
        timestamp=timestamp,
        date=day,
        status=status,
        confidence=0.9,
        emotion=emotion,
        notes=notes,
    )


@pytest.fixture
def reports(ledger, roster, students_repo) -> ReportService:
    for e in [
        _event("e1", "s1", "2024-05-02"),
        _event("e2", "s2", "2024-05-03"),
        _event("e3", "s1", "2024-05-06"),
        _event("e4", "s1", "2024-05-06", timestamp="10:00:00"),
        _event("e5", "s3", "2024-05-06", status=AttendanceStatus.PROXY_ATTEMPT, emotion=None, notes=None),
        _event("e6", "s2", "2024-05-06", status=AttendanceStatus.PROXY_ATTEMPT),
    ]:
        assert ledger.append(e).accepted
    return ReportService(ledger, students_repo)


def _parse_csv(data: bytes) -> list[dict]:
    return list(csv.DictReader(io.StringIO(data.decode("utf-8-sig"))))


def test_dashboard_for_admin(reports, admin):
    stats = reports.dashboard(admin, today=date(2024, 5, 6))

    assert stats.total_students == 3
    # s1 was marked twice today but counts once.
    assert stats.present_today == 1
    assert stats.absent_today == 2
    assert stats.proxy_attempts_today == 2


def test_dashboard_for_teacher(reports, teacher_10b):
    stats = reports.dashboard(teacher_10b, today=date(2024, 5, 6))

    assert (stats.total_students, stats.present_today, stats.absent_today, stats.proxy_attempts_today) == (1, 0, 1, 1)


def test_monthly_summary_denominator_is_visible_scan_days(reports, admin, teacher_10a):
    rows = {r["student_id"]: r for r in reports.monthly_summary(admin, year=2024, month=5)}

    assert (rows["s1"]["present_days"], rows["s1"]["total_scanned_days"], rows["s1"]["absent_days"]) == (3, 3, 0)
    assert rows["s2"]["percentage"] == 33

    teacher_rows = {r["student_id"]: r for r in reports.monthly_summary(teacher_10a, year=2024, month=5)}
    assert set(teacher_rows) == {"s1", "s3"}
    # 10-A scans happened on 05-02 and 05-06 only.
    assert teacher_rows["s1"]["total_scanned_days"] == 2
    assert teacher_rows["s1"]["percentage"] == 100
    assert teacher_rows["s3"]["present_days"] == 0


def test_monthly_summary_search(reports, admin):
    rows = reports.monthly_summary(admin, year=2024, month=5, search="  binh ")

    assert [r["name"] for r in rows] == ["Binh Pham"]


def test_daily_log_defaults_and_filter(reports, teacher_10a):
    rows = reports.daily_log(teacher_10a, on="2024-05-06")

    assert [r["id"] for r in rows] == ["e5", "e4", "e3"]
    assert rows[0]["emotion"] == "N/A"
    assert rows[0]["notes"] == ""
    assert rows[0]["status"] == "PROXY_ATTEMPT"


def test_monthly_csv(reports, admin):
    data = reports.monthly_summary_csv(admin, year=2024, month=5)

    assert data.startswith(b"\xef\xbb\xbf")
    rows = _parse_csv(data)
    assert list(rows[0]) == MONTHLY_FIELDS
    assert rows[0] == {
        "name": "An Nguyen",
        "roll_number": "S1",
        "class_section": "10-A",
        "present_days": "3",
        "absent_days": "0",
        "percentage": "100%",
    }


def test_daily_csv(reports, teacher_10b):
    rows = _parse_csv(reports.daily_log_csv(teacher_10b))

    assert list(rows[0]) == DAILY_FIELDS
    assert [r["student_id"] for r in rows] == ["s2", "s2"]


def test_write_csv_ignores_extra_keys():
    data = write_csv([{"a": 1, "b": 2, "c": 3}], ["a", "b"])

    assert data.decode("utf-8-sig").splitlines() == ["a,b", "1,2"]
