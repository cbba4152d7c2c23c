from __future__ import annotations

from datetime import datetime

import pytest

from src.eduscan.eduscan.attendance.ledger import AttendanceLedger
from src.eduscan.eduscan.attendance.store_attendance_repository import StoreAttendanceRepository
from src.eduscan.eduscan.core.enums import Role
from src.eduscan.eduscan.students.model import Student
from src.eduscan.eduscan.students.store_student_repository import StoreStudentRepository
from src.eduscan.eduscan.users.model import User
from src.eduscan.eduscan.users.store_user_repository import StoreUserRepository
from tests.fakes import InMemoryDocumentStore, MutableClock, make_student


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def students_repo(store) -> StoreStudentRepository:
    return StoreStudentRepository(store)


@pytest.fixture
def ledger(store) -> AttendanceLedger:
    return AttendanceLedger(StoreAttendanceRepository(store), dedup_window_seconds=60)


@pytest.fixture
def clock() -> MutableClock:
    return MutableClock(datetime(2024, 5, 6, 9, 0, 0))


@pytest.fixture
def admin() -> User:
    return User(username="admin", password="admin123", name="Super Admin", role=Role.ADMIN)


@pytest.fixture
def teacher_10a() -> User:
    return User(username="ms.lan", password="pw", name="Lan Tran", role=Role.TEACHER, assigned_class="10-A")


@pytest.fixture
def teacher_10b() -> User:
    return User(username="mr.khoa", password="pw", name="Khoa Le", role=Role.TEACHER, assigned_class="10-B")


@pytest.fixture
def roster(students_repo) -> list[Student]:
    """Two students in 10-A and one in 10-B, in registration order."""
    students = [
        make_student("s1", "An Nguyen", "10-A"),
        make_student("s2", "Binh Pham", "10-B"),
        make_student("s3", "Chi Vo", "10-A"),
    ]
    for s in students:
        students_repo.add(s)
    return students


@pytest.fixture
def users_repo(store, admin, teacher_10a, teacher_10b) -> StoreUserRepository:
    repo = StoreUserRepository(store)
    for user in (admin, teacher_10a, teacher_10b):
        repo.add(user)
    return repo
