"""Role routing: which dashboard a signed-in user lands on.

`select_view` is a pure function of the session and the profile; nothing is
read from global state.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, ClassVar, Protocol, Union

from src.core.auth.models import ProfileStatus, UserRole
from src.core.auth.permissions import modules_for_role


@dataclass(frozen=True)
class AuthSession:
    """A verified access token."""

    user_id: int
    expires_at: datetime

    def is_expired(self, now: datetime | None = None) -> bool:
        now = now or datetime.now(timezone.utc)
        return self.expires_at <= now


class ProfileLike(Protocol):
    id: int
    role: str
    student_id: int | None
    teacher_id: int | None
    status: str


@dataclass(frozen=True)
class AdminView:
    kind: ClassVar[str] = "admin"
    role: ClassVar[UserRole | None] = UserRole.ADMIN

    profile_id: int


@dataclass(frozen=True)
class StudentView:
    kind: ClassVar[str] = "student"
    role: ClassVar[UserRole | None] = UserRole.SANTRI

    profile_id: int
    student_id: int | None


@dataclass(frozen=True)
class TeacherView:
    kind: ClassVar[str] = "teacher"
    role: ClassVar[UserRole | None] = UserRole.GURU

    profile_id: int
    teacher_id: int | None


@dataclass(frozen=True)
class CommitteeView:
    kind: ClassVar[str] = "committee"
    role: ClassVar[UserRole | None] = UserRole.KOMITE

    profile_id: int


@dataclass(frozen=True)
class LoggedOutView:
    kind: ClassVar[str] = "logged_out"
    role: ClassVar[UserRole | None] = None


ViewVariant = Union[AdminView, StudentView, TeacherView, CommitteeView, LoggedOutView]


ROLE_VIEWS: dict[UserRole, Callable[[ProfileLike], ViewVariant]] = {
    UserRole.ADMIN: lambda p: AdminView(profile_id=p.id),
    UserRole.SANTRI: lambda p: StudentView(profile_id=p.id, student_id=p.student_id),
    UserRole.GURU: lambda p: TeacherView(profile_id=p.id, teacher_id=p.teacher_id),
    UserRole.KOMITE: lambda p: CommitteeView(profile_id=p.id),
}


def select_view(
    session: AuthSession | None,
    profile: ProfileLike | None,
    now: datetime | None = None,
) -> ViewVariant:
    """
    Pick the view for a session and its profile.

    Logged out when there is no valid session or no profile. Also logged out
    when the profile belongs to someone else, has been deactivated, or
    stores a role that is not a known role.
    """
    if session is None or session.is_expired(now) or profile is None:
        return LoggedOutView()
    if profile.id != session.user_id:
        return LoggedOutView()
    if profile.status != ProfileStatus.ACTIVE.value:
        return LoggedOutView()
    try:
        role = UserRole(profile.role)
    except ValueError:
        return LoggedOutView()
    return ROLE_VIEWS[role](profile)


def view_modules(view: ViewVariant) -> list[str]:
    """Modules reachable from a view."""
    if view.role is None:
        return []
    return modules_for_role(view.role)
