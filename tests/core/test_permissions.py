from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import pytest

from src.core.auth.models import UserRole
from src.core.auth.permissions import MODULE_ACCESS, can_access_module, modules_for_role
from src.core.auth.views import (
    AdminView,
    AuthSession,
    CommitteeView,
    LoggedOutView,
    StudentView,
    TeacherView,
    select_view,
    view_modules,
)


@dataclass
class FakeProfile:
    id: int
    role: str
    student_id: int | None = None
    teacher_id: int | None = None
    status: str = "active"


def _session(user_id: int = 1, minutes: int = 30) -> AuthSession:
    return AuthSession(
        user_id=user_id, expires_at=datetime.now(timezone.utc) + timedelta(minutes=minutes)
    )


class TestModuleAccess:
    """Tests for the role to module permission table."""

    @pytest.mark.parametrize(
        "module",
        ["students", "teachers", "spp", "expenses", "donations", "reports", "roles"],
    )
    def test_admin_only_modules(self, module: str):
        assert can_access_module(UserRole.ADMIN, module)
        assert not can_access_module(UserRole.SANTRI, module)
        assert not can_access_module(UserRole.GURU, module)
        assert not can_access_module(UserRole.KOMITE, module)

    @pytest.mark.parametrize("module", ["savings", "cash", "monitoring"])
    def test_committee_modules(self, module: str):
        assert can_access_module(UserRole.ADMIN, module)
        assert can_access_module(UserRole.KOMITE, module)
        assert not can_access_module(UserRole.SANTRI, module)

    def test_self_service_modules(self):
        assert can_access_module(UserRole.SANTRI, "my-savings")
        assert can_access_module(UserRole.SANTRI, "my-payments")
        assert not can_access_module(UserRole.GURU, "my-savings")
        assert can_access_module(UserRole.GURU, "my-salary")
        assert can_access_module(UserRole.GURU, "my-assignments")
        assert not can_access_module(UserRole.ADMIN, "my-salary")

    def test_every_role_has_dashboard_and_profile(self):
        for role in UserRole:
            assert can_access_module(role, "dashboard")
            assert can_access_module(role, "my-profile")

    def test_unknown_role_or_module_denied(self):
        assert not can_access_module("superuser", "dashboard")
        assert not can_access_module(UserRole.ADMIN, "payroll")

    def test_role_as_string(self):
        assert can_access_module("komite", "cash")

    def test_modules_for_role_in_table_order(self):
        modules = modules_for_role(UserRole.SANTRI)
        assert modules == [m for m in MODULE_ACCESS if UserRole.SANTRI in MODULE_ACCESS[m]]
        assert "students" not in modules


class TestSelectView:
    """Tests for role routing."""

    def test_admin(self):
        view = select_view(_session(), FakeProfile(id=1, role="admin"))
        assert view == AdminView(profile_id=1)
        assert view.kind == "admin"

    def test_student_keeps_link(self):
        view = select_view(_session(), FakeProfile(id=1, role="santri", student_id=7))
        assert isinstance(view, StudentView)
        assert view.student_id == 7

    def test_teacher_keeps_link(self):
        view = select_view(_session(), FakeProfile(id=1, role="guru", teacher_id=3))
        assert isinstance(view, TeacherView)
        assert view.teacher_id == 3

    def test_committee(self):
        view = select_view(_session(), FakeProfile(id=1, role="komite"))
        assert isinstance(view, CommitteeView)

    def test_no_session(self):
        assert isinstance(select_view(None, FakeProfile(id=1, role="admin")), LoggedOutView)

    def test_no_profile(self):
        assert isinstance(select_view(_session(), None), LoggedOutView)

    def test_expired_session(self):
        view = select_view(_session(minutes=-1), FakeProfile(id=1, role="admin"))
        assert isinstance(view, LoggedOutView)

    def test_profile_of_someone_else(self):
        view = select_view(_session(user_id=2), FakeProfile(id=1, role="admin"))
        assert isinstance(view, LoggedOutView)

    def test_unknown_role(self):
        view = select_view(_session(), FakeProfile(id=1, role="bendahara"))
        assert isinstance(view, LoggedOutView)

    @pytest.mark.parametrize("role", ["admin", "santri", "guru", "komite"])
    def test_deactivated_profile_with_live_session(self, role: str):
        profile = FakeProfile(id=1, role=role, student_id=7, teacher_id=3, status="inactive")
        assert isinstance(select_view(_session(), profile), LoggedOutView)

    def test_view_modules(self):
        assert view_modules(LoggedOutView()) == []
        assert "roles" in view_modules(AdminView(profile_id=1))
        assert "roles" not in view_modules(CommitteeView(profile_id=1))
