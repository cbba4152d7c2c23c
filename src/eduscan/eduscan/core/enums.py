from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for visibility and permission checks."""

    ADMIN = "admin"
    TEACHER = "teacher"


class AttendanceStatus(str, Enum):
    """Status stored on every attendance event."""

    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    PROXY_ATTEMPT = "PROXY_ATTEMPT"


class ScanState(str, Enum):
    IDLE = "IDLE"
    ACTIVE = "ACTIVE"
    SCANNING = "SCANNING"


class ScanOutcome(str, Enum):
    """What happened to a single scan attempt."""

    RECORDED_PRESENT = "RECORDED_PRESENT"
    RECORDED_PROXY = "RECORDED_PROXY"
    DUPLICATE = "DUPLICATE"
    NO_MATCH = "NO_MATCH"
    ANALYSIS_FAILED = "ANALYSIS_FAILED"
    CAPTURE_FAILED = "CAPTURE_FAILED"
    SKIPPED = "SKIPPED"
