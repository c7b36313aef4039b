from __future__ import annotations

import pytest

from camp_checkin.core.enums import UserRole
from camp_checkin.core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from camp_checkin.users.model import Session, StaffUser
from camp_checkin.users.service import AuthService, UserService, require_role


def test_login_returns_session(users_repo):
    s = AuthService(users_repo).authenticate(" Editor@Camp.test ", "editor123")

    assert s == Session(user_id=2, email="editor@camp.test", role=UserRole.EDITOR)


@pytest.mark.parametrize(
    "email, password",
    [
        ("editor@camp.test", "wrong"),
        ("nobody@camp.test", "editor123"),
        ("former@camp.test", "former123"),
    ],
)
def test_login_failures(users_repo, email, password):
    with pytest.raises(AuthenticationError):
        AuthService(users_repo).authenticate(email, password)


def test_placeholder_hash_never_matches(users_repo):
    users_repo.users[9] = StaffUser(9, "legacy@camp.test", "CHANGE_ME", UserRole.ADMIN)

    with pytest.raises(AuthenticationError):
        AuthService(users_repo).authenticate("legacy@camp.test", "CHANGE_ME")


def test_session_for_inactive_user_is_none(users_repo):
    auth = AuthService(users_repo)

    assert auth.session_for(4) is None
    assert auth.session_for(1).role is UserRole.ADMIN


def test_role_hierarchy(admin, editor, viewer):
    assert admin.has_role(UserRole.EDITOR)
    assert editor.has_role(UserRole.VIEWER)
    assert not viewer.has_role(UserRole.EDITOR)
    assert require_role(editor, UserRole.EDITOR) is editor
    with pytest.raises(AuthorizationError):
        require_role(editor, UserRole.ADMIN)
    with pytest.raises(AuthorizationError):
        require_role(None, UserRole.VIEWER)


def test_admin_creates_staff_account(users_repo, admin):
    svc = UserService(users_repo)

    user_id = svc.create_user(admin, email="Nuevo@Camp.test", password="secreto1", role=UserRole.VIEWER)

    assert users_repo.get_by_id(user_id).email == "nuevo@camp.test"
    assert AuthService(users_repo).authenticate("nuevo@camp.test", "secreto1").role is UserRole.VIEWER


@pytest.mark.parametrize(
    "email, password",
    [("editor@camp.test", "secreto1"), ("nuevo@camp.test", "corta"), ("sin-arroba", "secreto1")],
)
def test_create_user_validation(users_repo, admin, email, password):
    with pytest.raises(ValidationError):
        UserService(users_repo).create_user(admin, email=email, password=password, role=UserRole.EDITOR)


def test_only_admin_creates_accounts(users_repo, editor):
    with pytest.raises(AuthorizationError):
        UserService(users_repo).create_user(editor, email="x@camp.test", password="secreto1", role=UserRole.VIEWER)
