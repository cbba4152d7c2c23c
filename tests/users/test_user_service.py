from __future__ import annotations

import pytest

from src.eduscan.eduscan.core.enums import Role
from src.eduscan.eduscan.core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from src.eduscan.eduscan.users.model import User
from src.eduscan.eduscan.users.service import AuthService, UserService
from src.eduscan.eduscan.users.store_user_repository import StoreUserRepository


@pytest.fixture
def users_repo(store) -> StoreUserRepository:
    return StoreUserRepository(store)


@pytest.fixture
def user_service(users_repo, admin) -> UserService:
    service = UserService(users_repo, bootstrap_admin=admin)
    service.ensure_bootstrap_admin()
    return service


def test_bootstrap_admin_is_seeded_once(users_repo, user_service, admin):
    user_service.ensure_bootstrap_admin()

    assert [u.username for u in users_repo.list_all()] == ["admin"]
    assert users_repo.get_by_username("admin").role == Role.ADMIN


def test_bootstrap_admin_role_is_restored(users_repo, user_service):
    users_repo.update(User(username="admin", password="x", name="Hijacked", role=Role.TEACHER, assigned_class="1-A"))

    restored = user_service.ensure_bootstrap_admin()

    assert restored.role == Role.ADMIN
    assert restored.assigned_class is None
    assert restored.password == "x"


def test_authenticate_exact_match(users_repo, user_service):
    auth = AuthService(users_repo)

    session_user = auth.authenticate("admin", "admin123")

    assert session_user.username == "admin"
    assert session_user.role == Role.ADMIN
    with pytest.raises(AuthenticationError):
        auth.authenticate("admin", "Admin123")
    with pytest.raises(AuthenticationError):
        auth.authenticate("nobody", "admin123")


def test_admin_creates_teacher(user_service, users_repo, admin):
    created = user_service.create_user(
        admin, username="ms.lan", password="pw", name="Lan Tran", role="teacher", assigned_class=" 10-A "
    )

    assert created.role == Role.TEACHER
    assert created.assigned_class == "10-A"
    assert users_repo.get_by_username("ms.lan") == created


def test_admin_role_drops_assigned_class(user_service, admin):
    created = user_service.create_user(admin, username="vp", password="pw", name="Vice", role=Role.ADMIN, assigned_class="10-A")

    assert created.assigned_class is None


@pytest.mark.parametrize(
    "fields",
    [
        dict(username="", password="pw", name="X", role="teacher", assigned_class="1-A"),
        dict(username="x", password="", name="X", role="teacher", assigned_class="1-A"),
        dict(username="x", password="pw", name=" ", role="teacher", assigned_class="1-A"),
        dict(username="x", password="pw", name="X", role="teacher", assigned_class=""),
        dict(username="x", password="pw", name="X", role="principal"),
        dict(username="admin", password="pw", name="X", role="admin"),
    ],
)
def test_create_user_validation(user_service, admin, fields):
    with pytest.raises(ValidationError):
        user_service.create_user(admin, **fields)


def test_teacher_cannot_manage_users(user_service, teacher_10a):
    with pytest.raises(AuthorizationError):
        user_service.list_users(teacher_10a)
    with pytest.raises(AuthorizationError):
        user_service.create_user(teacher_10a, username="x", password="pw", name="X", role="teacher", assigned_class="1-A")
    with pytest.raises(AuthorizationError):
        user_service.delete_user(teacher_10a, "admin")


def test_edit_user_keeps_username(user_service, users_repo, admin):
    user_service.create_user(admin, username="ms.lan", password="pw", name="Lan", role="teacher", assigned_class="10-A")

    edited = user_service.edit_user(admin, "ms.lan", password="new", name="Lan Tran", role="teacher", assigned_class="10-B")

    assert edited.username == "ms.lan"
    assert users_repo.get_by_username("ms.lan").assigned_class == "10-B"
    with pytest.raises(ValidationError):
        user_service.edit_user(admin, "ghost", password="pw", name="G", role="admin")


def test_bootstrap_admin_cannot_be_demoted(user_service, admin):
    with pytest.raises(ValidationError):
        user_service.edit_user(admin, "admin", password="pw", name="Super Admin", role="teacher", assigned_class="1-A")


def test_delete_rules(user_service, users_repo, admin):
    other_admin = user_service.create_user(admin, username="vp", password="pw", name="Vice", role="admin")
    user_service.create_user(admin, username="ms.lan", password="pw", name="Lan", role="teacher", assigned_class="10-A")

    with pytest.raises(ValidationError):
        user_service.delete_user(other_admin, "admin")
    with pytest.raises(ValidationError):
        user_service.delete_user(other_admin, "vp")
    with pytest.raises(ValidationError):
        user_service.delete_user(admin, "ghost")

    user_service.delete_user(other_admin, "ms.lan")

    assert users_repo.get_by_username("ms.lan") is None
