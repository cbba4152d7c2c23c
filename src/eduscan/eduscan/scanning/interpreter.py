from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from ..common.datetime_utils import format_date, format_time
from ..core.constants import SPOOFING_NOTE_PREFIX
from ..core.enums import AttendanceStatus
from ..attendance.model import AttendanceEvent
from .reference_set import ReferenceSet
from .verdict import Verdict


@dataclass(frozen=True)
class Interpretation:
    event: Optional[AttendanceEvent]
    reason: str


def _new_event_id() -> str:
    return uuid.uuid4().hex


class ScanVerdictInterpreter:
    """Turn a Verdict into at most one AttendanceEvent.

    Rules, in order:
    - no match id -> no event
    - match id not in the reference set -> no event
    - real person -> PRESENT
    - spoof -> PROXY_ATTEMPT (recorded, subject to the same dedup window)
    """

    def __init__(self, *, id_factory: Callable[[], str] = _new_event_id):
        self._id_factory = id_factory

    def interpret(self, verdict: Verdict, reference: ReferenceSet, *, now: datetime) -> Interpretation:
        if verdict.match_id is None:
            return Interpretation(event=None, reason=verdict.description)

        student = reference.find(verdict.match_id)
        if student is None:
            return Interpretation(
                event=None,
                reason=f"Unknown student id {verdict.match_id!r}: {verdict.description}",
            )

        if verdict.is_real_person:
            status = AttendanceStatus.PRESENT
            notes = verdict.description
        else:
            status = AttendanceStatus.PROXY_ATTEMPT
            notes = SPOOFING_NOTE_PREFIX + verdict.description

        event = AttendanceEvent(
            id=self._id_factory(),
            student_id=student.id,
            student_name=student.name,
            timestamp=format_time(now),
            date=format_date(now.date()),
            status=status,
            confidence=verdict.confidence,
            emotion=verdict.emotion,
            notes=notes,
        )
        return Interpretation(event=event, reason=notes)
