from __future__ import annotations

from typing import Protocol, Sequence

from .model import AttendanceEvent


class AttendanceRepository(Protocol):
    """Persistence for the attendance ledger (most recent event first)."""

    def load_all(self) -> Sequence[AttendanceEvent]:
        raise NotImplementedError

    def save_all(self, events: Sequence[AttendanceEvent]) -> None:
        raise NotImplementedError
