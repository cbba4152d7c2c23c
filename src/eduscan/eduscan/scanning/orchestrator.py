from __future__ import annotations

import logging
import threading
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional

from ..access.visibility import VisibilityFilter
from ..attendance.ledger import AttendanceLedger
from ..attendance.model import AttendanceEvent
from ..common.datetime_utils import format_time, now_local
from ..core.constants import DEFAULT_REFERENCE_POOL_CAP, DEFAULT_SCAN_INTERVAL_SECONDS, DEFAULT_SCAN_LOG_SIZE
from ..core.enums import AttendanceStatus, ScanOutcome, ScanState
from ..core.exceptions import AnalysisError, AuthorizationError, CameraError, ValidationError
from ..students.repository import StudentRepository
from ..users.model import User
from .analyzer import Analyzer
from .auto_timer import RepeatingTimer, ScanTimer, TimerFactory
from .camera import FrameSource
from .interpreter import ScanVerdictInterpreter
from .reference_set import ReferenceSet
from .verdict import Verdict, parse_verdict

logger = logging.getLogger(__name__)

ActorLoader = Callable[[str], Optional[User]]


@dataclass(frozen=True)
class ScanReport:
    outcome: ScanOutcome
    message: str
    verdict: Optional[Verdict] = None
    event: Optional[AttendanceEvent] = None

    @property
    def recorded(self) -> bool:
        return self.outcome in (ScanOutcome.RECORDED_PRESENT, ScanOutcome.RECORDED_PROXY)

    @property
    def student_id(self) -> Optional[str]:
        """Student this report is about, if any."""
        if self.event is not None:
            return self.event.student_id
        if self.verdict is not None:
            return self.verdict.match_id
        return None


@dataclass(frozen=True)
class ScanLogEntry:
    time: str
    message: str
    student_id: Optional[str] = None


@dataclass(frozen=True)
class ScannerStatus:
    state: ScanState
    auto_mode: bool
    auto_owner: Optional[str] = None
    last_report: Optional[ScanReport] = None
    logs: list[ScanLogEntry] = field(default_factory=list)


class ScanOrchestrator:
    """Drives the live scanner: camera on/off, manual and periodic scans.

    States: IDLE (camera off) -> ACTIVE (camera on) -> SCANNING (one analysis
    in flight) -> ACTIVE. Auto mode is a flag on an active camera.

    At most one scan runs at a time. A manual scan requested while another is
    in flight is rejected, and an auto tick that fires during a scan is
    dropped. Stopping the camera cancels future ticks but lets the in-flight
    scan finish and record its result.

    The acting user is passed to every call. Auto mode keeps only the
    username that armed it; each tick loads that user again through
    ``actor_loader``, so class reassignments apply on the next tick and a
    deleted account switches auto mode off.

    Status and log reads are filtered for the reader: entries about a student
    the reader cannot see are left out.
    """

    def __init__(
        self,
        camera: FrameSource,
        analyzer: Analyzer,
        students: StudentRepository,
        ledger: AttendanceLedger,
        *,
        actor_loader: ActorLoader,
        interpreter: Optional[ScanVerdictInterpreter] = None,
        reference_cap: int = DEFAULT_REFERENCE_POOL_CAP,
        scan_interval_seconds: float = DEFAULT_SCAN_INTERVAL_SECONDS,
        timer_factory: Optional[TimerFactory] = None,
        clock: Callable[[], datetime] = now_local,
        log_size: int = DEFAULT_SCAN_LOG_SIZE,
    ):
        self._camera = camera
        self._analyzer = analyzer
        self._students = students
        self._ledger = ledger
        self._actor_loader = actor_loader
        self._interpreter = interpreter or ScanVerdictInterpreter()
        self._reference_cap = int(reference_cap)
        self._interval = float(scan_interval_seconds)
        self._timer_factory = timer_factory or RepeatingTimer
        self._clock = clock

        self._lock = threading.Lock()
        self._camera_on = False
        self._scanning = False
        self._release_after_scan = False
        self._timer: Optional[ScanTimer] = None
        self._auto_owner: Optional[str] = None
        self._last_report: Optional[ScanReport] = None
        self._logs: deque[ScanLogEntry] = deque(maxlen=int(log_size))

    @property
    def state(self) -> ScanState:
        if self._scanning:
            return ScanState.SCANNING
        if self._camera_on:
            return ScanState.ACTIVE
        return ScanState.IDLE

    @property
    def auto_mode(self) -> bool:
        return self._timer is not None

    def _visible_ids(self, reader: User) -> Optional[set[str]]:
        # None means no restriction.
        if reader.is_admin:
            return None
        return {s.id for s in VisibilityFilter.filter_students(self._students.list_all(), reader)}

    @staticmethod
    def _is_visible(student_id: Optional[str], visible_ids: Optional[set[str]]) -> bool:
        return visible_ids is None or student_id is None or student_id in visible_ids

    def status(self, reader: User) -> ScannerStatus:
        visible_ids = self._visible_ids(reader)
        report = self._last_report
        if report is not None and not self._is_visible(report.student_id, visible_ids):
            report = None
        return ScannerStatus(
            state=self.state,
            auto_mode=self.auto_mode,
            auto_owner=self._auto_owner,
            last_report=report,
            logs=[e for e in self._logs if self._is_visible(e.student_id, visible_ids)],
        )

    def recent_logs(self, reader: User) -> list[ScanLogEntry]:
        return self.status(reader).logs

    def _log(self, message: str, *, level: int = logging.INFO, student_id: Optional[str] = None) -> None:
        self._logs.appendleft(ScanLogEntry(time=format_time(self._clock()), message=message, student_id=student_id))
        logger.log(level, "[scanner] %s", message)

    def _require_control(self, actor: Optional[User]) -> None:
        # Only the user who armed auto mode (or an admin) may interrupt it.
        if actor is None or actor.is_admin or self._auto_owner is None:
            return
        if actor.username != self._auto_owner:
            raise AuthorizationError("Auto scan is running for another user")

    def start(self) -> ScanState:
        with self._lock:
            if self._camera_on:
                return self.state
            try:
                self._camera.open()
            except CameraError as exc:
                self._log(f"Error accessing camera: {exc}", level=logging.ERROR)
                raise
            self._camera_on = True
            self._release_after_scan = False
        self._log("Camera started")
        return self.state

    def stop(self, actor: Optional[User] = None) -> ScanState:
        with self._lock:
            if not self._camera_on:
                return self.state
            self._require_control(actor)
            self._camera_on = False
            self._cancel_timer()
            if self._scanning:
                self._release_after_scan = True
            else:
                self._camera.close()
        self._log("Camera stopped")
        return self.state

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._auto_owner = None

    def toggle_auto(self, actor: User) -> bool:
        with self._lock:
            if not self._camera_on:
                raise ValidationError("Start the camera before toggling auto scan")
            if self._timer is not None:
                self._require_control(actor)
                self._cancel_timer()
                enabled = False
            else:
                timer = self._timer_factory(self._interval, self.tick)
                timer.start()
                self._timer = timer
                self._auto_owner = actor.username
                enabled = True
        self._log(f"Auto scan {'enabled' if enabled else 'disabled'} by {actor.username}")
        return enabled

    def tick(self) -> Optional[ScanReport]:
        """Auto-timer entry point. Skipped while another scan is in flight."""
        with self._lock:
            if not self._camera_on or self._timer is None:
                return None
            if self._scanning:
                logger.debug("Auto-scan tick skipped: scan in progress")
                return None
            owner = self._auto_owner

        actor = self._actor_loader(owner) if owner else None
        if actor is None:
            with self._lock:
                if self._auto_owner == owner:
                    self._cancel_timer()
            self._log(f"Auto scan disabled: user {owner} no longer exists", level=logging.WARNING)
            return None
        return self.scan(actor)

    def scan(self, actor: User) -> ScanReport:
        with self._lock:
            if not self._camera_on:
                raise ValidationError("Camera is not active")
            if self._scanning:
                logger.info("Scan rejected: another scan is in progress")
                return ScanReport(outcome=ScanOutcome.SKIPPED, message="Scan already in progress")
            self._scanning = True

        try:
            report = self._run_scan(actor)
        finally:
            with self._lock:
                self._scanning = False
                if self._release_after_scan and not self._camera_on:
                    self._camera.close()
                self._release_after_scan = False

        self._last_report = report
        return report

    def _run_scan(self, actor: User) -> ScanReport:
        self._log("Scanning frame...")

        try:
            frame = self._camera.capture_frame()
        except CameraError as exc:
            return self._report(ScanOutcome.CAPTURE_FAILED, f"Capture failed: {exc}", level=logging.WARNING)

        reference = ReferenceSet.build(self._students.list_all(), actor)
        pool = reference.limited(self._reference_cap)

        try:
            verdict = parse_verdict(self._analyzer.analyze(frame, pool.references()))
        except AnalysisError as exc:
            return self._report(ScanOutcome.ANALYSIS_FAILED, f"Scan failed: {exc}", level=logging.ERROR)

        interpretation = self._interpreter.interpret(verdict, reference, now=self._clock())
        event = interpretation.event
        if event is None:
            return self._report(ScanOutcome.NO_MATCH, f"No match: {interpretation.reason}", verdict=verdict)

        result = self._ledger.append(event)
        if not result.accepted:
            return self._report(
                ScanOutcome.DUPLICATE,
                f"{event.student_name} already recorded within the dedup window",
                verdict=verdict,
                event=event,
            )
        if event.status == AttendanceStatus.PRESENT:
            return self._report(
                ScanOutcome.RECORDED_PRESENT,
                f"Marked {event.student_name} as PRESENT",
                verdict=verdict,
                event=event,
            )
        return self._report(
            ScanOutcome.RECORDED_PROXY,
            f"Proxy attempt flagged for {event.student_name}",
            verdict=verdict,
            event=event,
            level=logging.WARNING,
        )

    def _report(
        self,
        outcome: ScanOutcome,
        message: str,
        *,
        verdict: Optional[Verdict] = None,
        event: Optional[AttendanceEvent] = None,
        level: int = logging.INFO,
    ) -> ScanReport:
        report = ScanReport(outcome=outcome, message=message, verdict=verdict, event=event)
        self._log(message, level=level, student_id=report.student_id)
        return report
