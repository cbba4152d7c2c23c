from __future__ import annotations

import pytest

from src.eduscan.eduscan.attendance.ledger import AttendanceLedger
from src.eduscan.eduscan.attendance.model import AttendanceEvent
from src.eduscan.eduscan.attendance.store_attendance_repository import StoreAttendanceRepository
from src.eduscan.eduscan.core.enums import AttendanceStatus
from src.eduscan.eduscan.database.document_store import ATTENDANCE_EVENTS


def _event(
    event_id: str,
    *,
    student_id: str = "s1",
    date: str = "2024-05-06",
    timestamp: str = "09:00:00",
    status: AttendanceStatus = AttendanceStatus.PRESENT,
) -> AttendanceEvent:
    return AttendanceEvent(
        id=event_id,
        student_id=student_id,
        student_name="An Nguyen",
        timestamp=timestamp,
        date=date,
        status=status,
        confidence=0.9,
        emotion="Neutral",
        notes="ok",
    )


def test_first_event_is_accepted_and_persisted(ledger, store):
    result = ledger.append(_event("e1"))

    assert result.accepted is True
    assert len(ledger) == 1
    assert store.collections[ATTENDANCE_EVENTS][0]["id"] == "e1"
    assert store.collections[ATTENDANCE_EVENTS][0]["status"] == "PRESENT"


def test_same_student_within_window_is_rejected(ledger, store):
    ledger.append(_event("e1", timestamp="09:00:00"))
    saves_before = len(store.saves)

    result = ledger.append(_event("e2", timestamp="09:00:10"))

    assert result.accepted is False
    assert result.event.id == "e2"
    assert [e.id for e in ledger.events()] == ["e1"]
    assert len(store.saves) == saves_before


def test_window_is_symmetric_around_existing_event(ledger):
    ledger.append(_event("e1", timestamp="09:00:30"))

    assert ledger.append(_event("e2", timestamp="09:00:00")).accepted is False


@pytest.mark.parametrize(
    "second_timestamp, accepted",
    [
        ("09:00:59", False),
        ("09:01:00", True),
        ("09:05:00", True),
    ],
)
def test_window_boundary_is_strict(ledger, second_timestamp, accepted):
    ledger.append(_event("e1", timestamp="09:00:00"))

    assert ledger.append(_event("e2", timestamp=second_timestamp)).accepted is accepted


def test_same_time_on_another_date_is_accepted(ledger):
    ledger.append(_event("e1", date="2024-05-06", timestamp="09:00:00"))

    result = ledger.append(_event("e2", date="2024-05-07", timestamp="09:00:00"))

    assert result.accepted is True
    assert len(ledger) == 2


def test_other_student_is_not_a_duplicate(ledger):
    ledger.append(_event("e1", student_id="s1"))

    assert ledger.append(_event("e2", student_id="s2")).accepted is True


def test_status_is_ignored_by_dedup(ledger):
    ledger.append(_event("e1", status=AttendanceStatus.PRESENT))

    result = ledger.append(_event("e2", timestamp="09:00:20", status=AttendanceStatus.PROXY_ATTEMPT))

    assert result.accepted is False


def test_accepted_events_are_most_recent_first(ledger):
    ledger.append(_event("e1", student_id="s1"))
    ledger.append(_event("e2", student_id="s2"))
    ledger.append(_event("e3", student_id="s3"))

    assert [e.id for e in ledger.events()] == ["e3", "e2", "e1"]


def test_events_survive_reload(store):
    first = AttendanceLedger(StoreAttendanceRepository(store))
    first.append(_event("e1", student_id="s1"))
    first.append(_event("e2", student_id="s2", status=AttendanceStatus.PROXY_ATTEMPT))

    reloaded = AttendanceLedger(StoreAttendanceRepository(store))

    assert [e.id for e in reloaded.events()] == ["e2", "e1"]
    assert reloaded.events()[0].status == AttendanceStatus.PROXY_ATTEMPT
    # Dedup still applies against the persisted history.
    assert reloaded.append(_event("e3", student_id="s1", timestamp="09:00:05")).accepted is False


def test_failed_save_leaves_ledger_unchanged(store):
    class BrokenRepository(StoreAttendanceRepository):
        def save_all(self, events):
            raise RuntimeError("storage unavailable")

    ledger = AttendanceLedger(BrokenRepository(store))

    with pytest.raises(RuntimeError):
        ledger.append(_event("e1"))
    assert len(ledger) == 0


def test_custom_dedup_window(store):
    ledger = AttendanceLedger(StoreAttendanceRepository(store), dedup_window_seconds=300)
    ledger.append(_event("e1", timestamp="09:00:00"))

    assert ledger.append(_event("e2", timestamp="09:04:00")).accepted is False
    assert ledger.append(_event("e3", timestamp="09:05:00")).accepted is True


def test_read_all_filters_by_teacher_class(ledger, roster, teacher_10a, admin):
    ledger.append(_event("e1", student_id="s1"))
    ledger.append(_event("e2", student_id="s2"))
    ledger.append(_event("e3", student_id="s3"))

    assert [e.id for e in ledger.read_all(teacher_10a, roster)] == ["e3", "e1"]
    assert len(ledger.read_all(admin, roster)) == 3


def test_scans_either_side_of_midnight_are_both_accepted(ledger):
    late = ledger.append(_event("e1", date="2024-05-06", timestamp="23:59:50"))
    early = ledger.append(_event("e2", date="2024-05-07", timestamp="00:00:05"))

    assert late.accepted is True
    assert early.accepted is True
    assert [e.id for e in ledger.events()] == ["e2", "e1"]
