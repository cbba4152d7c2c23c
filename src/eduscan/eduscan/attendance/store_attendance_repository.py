from __future__ import annotations

from typing import Any, Sequence

from ..core.enums import AttendanceStatus
from ..database.document_store import ATTENDANCE_EVENTS, DocumentStore
from .model import AttendanceEvent
from .repository import AttendanceRepository


def _from_record(r: dict[str, Any]) -> AttendanceEvent:
    return AttendanceEvent(
        id=str(r["id"]),
        student_id=str(r["student_id"]),
        student_name=str(r.get("student_name", "")),
        timestamp=str(r["timestamp"]),
        date=str(r["date"]),
        status=AttendanceStatus(r["status"]),
        confidence=float(r.get("confidence", 0.0)),
        emotion=r.get("emotion"),
        notes=r.get("notes"),
    )


def _to_record(e: AttendanceEvent) -> dict[str, Any]:
    return {
        "id": e.id,
        "student_id": e.student_id,
        "student_name": e.student_name,
        "timestamp": e.timestamp,
        "date": e.date,
        "status": e.status.value,
        "confidence": e.confidence,
        "emotion": e.emotion,
        "notes": e.notes,
    }


class StoreAttendanceRepository(AttendanceRepository):
    def __init__(self, store: DocumentStore):
        self._store = store

    def load_all(self) -> Sequence[AttendanceEvent]:
        return [_from_record(r) for r in self._store.load_all(ATTENDANCE_EVENTS)]

    def save_all(self, events: Sequence[AttendanceEvent]) -> None:
        self._store.save_all(ATTENDANCE_EVENTS, [_to_record(e) for e in events])
