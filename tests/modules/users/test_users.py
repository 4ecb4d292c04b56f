import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.auth.models import ProfileStatus, UserRole
from src.core.exceptions import AuthorizationError, NotFoundError
from src.modules.students.models import Gender
from src.modules.students.schemas import StudentCreate
from src.modules.students.service import StudentService
from src.modules.users.schemas import RoleChange, UserCreate, UserListFilters
from src.modules.users.service import UserService


async def _student_id(db: AsyncSession) -> int:
    student = await StudentService(db).create_student(
        StudentCreate(nim="2026001", full_name="Ahmad Fauzi", gender=Gender.MALE), 1
    )
    return student.id


class TestUserService:
    """Tests for UserService."""

    async def test_create_santri_with_student(self, db_session: AsyncSession):
        student_id = await _student_id(db_session)

        profile = await UserService(db_session).create(
            UserCreate(
                email="ahmad@pesantren.test",
                password="Password123",
                full_name="Ahmad Fauzi",
                role=UserRole.SANTRI,
                student_id=student_id,
                teacher_id=7,
            ),
            created_by_id=1,
        )

        assert profile.role == "santri"
        assert profile.student_id == student_id
        assert profile.teacher_id is None

    async def test_create_with_missing_student(self, db_session: AsyncSession):
        with pytest.raises(NotFoundError):
            await UserService(db_session).create(
                UserCreate(
                    email="x@pesantren.test",
                    password="Password123",
                    full_name="Someone",
                    role=UserRole.SANTRI,
                    student_id=999,
                ),
                created_by_id=1,
            )

    async def test_change_role_drops_links(self, db_session: AsyncSession, make_account):
        student_id = await _student_id(db_session)
        profile_id, _ = await make_account(UserRole.SANTRI, student_id=student_id)

        profile = await UserService(db_session).change_role(
            profile_id, RoleChange(role=UserRole.KOMITE, student_id=student_id), changed_by_id=1
        )

        assert profile.role == "komite"
        assert profile.student_id is None

    async def test_role_counts(self, db_session: AsyncSession, make_account):
        await make_account(UserRole.ADMIN)
        await make_account(UserRole.SANTRI)
        await make_account(UserRole.SANTRI)

        counts = await UserService(db_session).role_counts()

        assert counts.total == 3
        assert counts.by_role == {"admin": 1, "santri": 2, "guru": 0, "komite": 0}

    async def test_list_by_role(self, db_session: AsyncSession, make_account):
        await make_account(UserRole.ADMIN)
        guru_id, _ = await make_account(UserRole.GURU)

        profiles = await UserService(db_session).list_users(UserListFilters(role=UserRole.GURU))

        assert [p.id for p in profiles] == [guru_id]

    async def test_cannot_deactivate_self(self, db_session: AsyncSession, make_account):
        admin_id, _ = await make_account(UserRole.ADMIN)
        with pytest.raises(AuthorizationError):
            await UserService(db_session).set_status(admin_id, ProfileStatus.INACTIVE, admin_id)

    async def test_cannot_delete_self(self, db_session: AsyncSession, make_account):
        admin_id, _ = await make_account(UserRole.ADMIN)
        with pytest.raises(AuthorizationError):
            await UserService(db_session).delete(admin_id, admin_id)

    async def test_delete(self, db_session: AsyncSession, make_account):
        admin_id, _ = await make_account(UserRole.ADMIN)
        santri_id, _ = await make_account(UserRole.SANTRI)
        service = UserService(db_session)

        await service.delete(santri_id, admin_id)

        with pytest.raises(NotFoundError):
            await service.get_by_id(santri_id)


class TestUserEndpoints:
    async def test_create_and_list(self, client: AsyncClient, admin):
        _, headers = admin
        response = await client.post(
            "/api/v1/users",
            json={
                "email": "komite@pesantren.test",
                "password": "Password123",
                "full_name": "Ketua Komite",
                "role": "komite",
            },
            headers=headers,
        )
        assert response.status_code == 201

        response = await client.get(
            "/api/v1/users", params={"search": "ketua"}, headers=headers
        )
        data = response.json()["data"]
        assert data["total"] == 1
        assert data["items"][0]["role"] == "komite"

        response = await client.get("/api/v1/users/role-counts", headers=headers)
        assert response.json()["data"]["by_role"]["komite"] == 1

    async def test_deactivated_account_cannot_sign_in(self, client: AsyncClient, admin):
        _, headers = admin
        created = await client.post(
            "/api/v1/users",
            json={
                "email": "guru@pesantren.test",
                "password": "Password123",
                "full_name": "Ustadz Mahmud",
                "role": "guru",
            },
            headers=headers,
        )
        user_id = created.json()["data"]["id"]
        credentials = {"email": "guru@pesantren.test", "password": "Password123"}

        response = await client.post(f"/api/v1/users/{user_id}/deactivate", headers=headers)
        assert response.json()["data"]["status"] == "inactive"
        assert (await client.post("/api/v1/auth/login", json=credentials)).status_code == 401

        await client.post(f"/api/v1/users/{user_id}/activate", headers=headers)
        assert (await client.post("/api/v1/auth/login", json=credentials)).status_code == 200

    async def test_deactivated_account_token_lands_logged_out(
        self, client: AsyncClient, admin, make_account
    ):
        _, admin_headers = admin
        komite_id, komite_headers = await make_account(UserRole.KOMITE)

        view = (await client.get("/api/v1/auth/view", headers=komite_headers)).json()["data"]
        assert view["kind"] == "committee"

        await client.post(f"/api/v1/users/{komite_id}/deactivate", headers=admin_headers)

        view = (await client.get("/api/v1/auth/view", headers=komite_headers)).json()["data"]
        assert view["kind"] == "logged_out"
        assert view["modules"] == []
        response = await client.get("/api/v1/dashboard", headers=komite_headers)
        assert response.status_code == 401

    async def test_change_role_is_logged(self, client: AsyncClient, admin, make_account):
        _, headers = admin
        santri_id, _ = await make_account(UserRole.SANTRI)

        response = await client.patch(
            f"/api/v1/users/{santri_id}/role", json={"role": "guru"}, headers=headers
        )
        assert response.json()["data"]["role"] == "guru"

        response = await client.get(
            "/api/v1/users/activities",
            params={"module": "roles", "action_type": "CHANGE_ROLE"},
            headers=headers,
        )
        items = response.json()["data"]["items"]
        assert len(items) == 1
        assert items[0]["details"]["new_role"] == "guru"

    async def test_delete_self_forbidden(self, client: AsyncClient, admin):
        admin_id, headers = admin
        response = await client.delete(f"/api/v1/users/{admin_id}", headers=headers)
        assert response.status_code == 403

    async def test_non_admin_denied(self, client: AsyncClient, make_account):
        _, headers = await make_account(UserRole.KOMITE)
        response = await client.get("/api/v1/users", headers=headers)
        assert response.status_code == 403
