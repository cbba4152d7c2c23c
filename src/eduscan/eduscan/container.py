from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .attendance.ledger import AttendanceLedger
from .attendance.store_attendance_repository import StoreAttendanceRepository
from .core import constants
from .core.enums import Role
from .database.connection import DatabaseConnection, DBConfig
from .database.document_store import DocumentStore, MySQLDocumentStore
from .reports.service import ReportService
from .scanning.analyzer import Analyzer
from .scanning.camera import CameraConfig, FrameSource, OpenCVCamera
from .scanning.orchestrator import ScanOrchestrator
from .school.repository import StoreSchoolConfigRepository
from .school.service import SchoolService
from .students.service import StudentService
from .students.store_student_repository import StoreStudentRepository
from .users.model import User
from .users.service import AuthService, UserService
from .users.store_user_repository import StoreUserRepository


@dataclass(frozen=True)
class Container:
    store: DocumentStore

    students_repo: StoreStudentRepository
    users_repo: StoreUserRepository
    attendance_repo: StoreAttendanceRepository
    school_repo: StoreSchoolConfigRepository

    ledger: AttendanceLedger
    scanner: ScanOrchestrator

    auth_service: AuthService
    user_service: UserService
    student_service: StudentService
    school_service: SchoolService
    report_service: ReportService


def _setting(settings: Any, name: str, default: Any) -> Any:
    return getattr(settings, name, default)


def build_container(
    settings: Any,
    *,
    store: Optional[DocumentStore] = None,
    camera: Optional[FrameSource] = None,
    analyzer: Optional[Analyzer] = None,
) -> Container:
    """Wire repositories, services and the scanner from a settings module.

    ``store``, ``camera`` and ``analyzer`` replace the MySQL store, the OpenCV
    camera and the face_recognition analyzer when given.
    """
    if store is None:
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(_setting(settings, "DB_CONFIG", {})))
        store = MySQLDocumentStore(conn)

    students_repo = StoreStudentRepository(store)
    users_repo = StoreUserRepository(store)
    attendance_repo = StoreAttendanceRepository(store)
    school_repo = StoreSchoolConfigRepository(store)

    ledger = AttendanceLedger(
        attendance_repo,
        dedup_window_seconds=int(_setting(settings, "DEDUP_WINDOW_SECONDS", constants.DEFAULT_DEDUP_WINDOW_SECONDS)),
    )

    camera = camera or OpenCVCamera(CameraConfig(index=int(_setting(settings, "CAMERA_INDEX", 0))))
    if analyzer is None:
        # Imported here: face_recognition pulls in dlib.
        from .scanning.face_analyzer import FaceRecognitionAnalyzer

        analyzer = FaceRecognitionAnalyzer(
            tolerance=float(_setting(settings, "FACE_MATCH_TOLERANCE", constants.DEFAULT_FACE_MATCH_TOLERANCE)),
            texture_threshold=float(
                _setting(settings, "LIVENESS_TEXTURE_THRESHOLD", constants.DEFAULT_LIVENESS_TEXTURE_THRESHOLD)
            ),
        )
    scanner = ScanOrchestrator(
        camera,
        analyzer,
        students_repo,
        ledger,
        actor_loader=users_repo.get_by_username,
        reference_cap=int(_setting(settings, "REFERENCE_POOL_CAP", constants.DEFAULT_REFERENCE_POOL_CAP)),
        scan_interval_seconds=float(
            _setting(settings, "SCAN_INTERVAL_SECONDS", constants.DEFAULT_SCAN_INTERVAL_SECONDS)
        ),
    )

    admin_cfg = dict(_setting(settings, "BOOTSTRAP_ADMIN", {}))
    bootstrap_admin = User(
        username=str(admin_cfg.get("username", "admin")),
        password=str(admin_cfg.get("password", "admin123")),
        name=str(admin_cfg.get("name", "Super Admin")),
        role=Role.ADMIN,
    )

    return Container(
        store=store,
        students_repo=students_repo,
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        school_repo=school_repo,
        ledger=ledger,
        scanner=scanner,
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo, bootstrap_admin=bootstrap_admin),
        student_service=StudentService(students_repo),
        school_service=SchoolService(school_repo),
        report_service=ReportService(ledger, students_repo),
    )
