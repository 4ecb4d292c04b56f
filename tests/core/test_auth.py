import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.activity import UserActivity
from src.core.auth.jwt import create_access_token, create_refresh_token, decode_token
from src.core.auth.models import UserRole
from src.core.auth.service import AuthService
from src.core.exceptions import AuthenticationError, DuplicateError


class TestAuthService:
    """Tests for AuthService."""

    async def test_create_account(self, db_session: AsyncSession):
        """Test creating a login and its profile."""
        auth_service = AuthService(db_session)

        profile = await auth_service.create_account(
            email="Bendahara@Pesantren.test",
            password="Password123",
            role=UserRole.ADMIN,
            full_name="Bendahara",
        )

        assert profile.id is not None
        assert profile.email == "bendahara@pesantren.test"
        assert profile.role == "admin"
        assert profile.status == "active"

        user = await auth_service.get_user_by_id(profile.id)
        assert user.is_active is True
        assert user.password_hash != "Password123"

    async def test_register_gives_santri(self, db_session: AsyncSession):
        profile = await AuthService(db_session).register("baru@pesantren.test", "Password123")
        assert profile.role == UserRole.SANTRI.value
        # Name defaults to the local part of the e-mail
        assert profile.full_name == "baru"

    async def test_create_account_duplicate_email(self, db_session: AsyncSession):
        auth_service = AuthService(db_session)
        await auth_service.register("dup@pesantren.test", "Password123")

        with pytest.raises(DuplicateError) as exc_info:
            await auth_service.register("DUP@pesantren.test", "Password456")

        assert "already exists" in str(exc_info.value)

    async def test_authenticate_success(self, db_session: AsyncSession):
        auth_service = AuthService(db_session)
        await auth_service.register("santri@pesantren.test", "Password123")

        profile, access_token, refresh_token = await auth_service.authenticate(
            email="santri@pesantren.test",
            password="Password123",
        )

        assert profile.email == "santri@pesantren.test"
        assert decode_token(access_token)["role"] == "santri"
        assert decode_token(refresh_token, token_type="refresh")["sub"] == str(profile.id)

        logins = (
            await db_session.execute(
                select(UserActivity).where(UserActivity.action_type == "LOGIN")
            )
        ).scalars().all()
        assert len(logins) == 1

    async def test_authenticate_wrong_password(self, db_session: AsyncSession):
        auth_service = AuthService(db_session)
        await auth_service.register("santri@pesantren.test", "Password123")

        with pytest.raises(AuthenticationError):
            await auth_service.authenticate("santri@pesantren.test", "WrongPassword")

    async def test_authenticate_inactive_user(self, db_session: AsyncSession):
        auth_service = AuthService(db_session)
        profile = await auth_service.register("santri@pesantren.test", "Password123")
        user = await auth_service.get_user_by_id(profile.id)
        user.is_active = False
        await db_session.flush()

        with pytest.raises(AuthenticationError) as exc_info:
            await auth_service.authenticate("santri@pesantren.test", "Password123")

        assert "deactivated" in str(exc_info.value)

    async def test_refresh_tokens(self, db_session: AsyncSession):
        auth_service = AuthService(db_session)
        profile = await auth_service.register("santri@pesantren.test", "Password123")

        access, refresh = await auth_service.refresh_tokens(create_refresh_token(profile.id))
        assert decode_token(access)["sub"] == str(profile.id)
        assert refresh

    async def test_access_token_rejected_as_refresh(self, db_session: AsyncSession):
        auth_service = AuthService(db_session)
        profile = await auth_service.register("santri@pesantren.test", "Password123")

        with pytest.raises(AuthenticationError):
            await auth_service.refresh_tokens(create_access_token(profile.id, profile.role))


class TestAuthEndpoints:
    """Tests for auth API endpoints."""

    async def test_register(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/auth/register",
            json={
                "email": "baru@pesantren.test",
                "password": "Password123",
                "confirm_password": "Password123",
            },
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["role"] == "santri"
        assert data["student_id"] is None

    async def test_register_password_mismatch(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/auth/register",
            json={
                "email": "baru@pesantren.test",
                "password": "Password123",
                "confirm_password": "Password124",
            },
        )
        assert response.status_code == 422
        assert response.json()["success"] is False

    async def test_register_short_password(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/auth/register",
            json={"email": "baru@pesantren.test", "password": "123"},
        )
        assert response.status_code == 422

    async def test_login_success(self, client: AsyncClient, db_session: AsyncSession):
        await AuthService(db_session).create_account(
            email="admin@pesantren.test",
            password="Password123",
            role=UserRole.ADMIN,
        )
        await db_session.commit()

        response = await client.post(
            "/api/v1/auth/login",
            json={"email": "admin@pesantren.test", "password": "Password123"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert "access_token" in data["data"]
        assert "refresh_token" in data["data"]
        assert data["data"]["profile"]["role"] == "admin"

    async def test_login_wrong_credentials(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": "wrong@pesantren.test", "password": "WrongPass"},
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid email or password"

    async def test_get_me_unauthorized(self, client: AsyncClient):
        response = await client.get("/api/v1/auth/me")
        assert response.status_code == 401

    async def test_get_me_authorized(self, client: AsyncClient, admin):
        _, headers = admin
        response = await client.get("/api/v1/auth/me", headers=headers)

        assert response.status_code == 200
        assert response.json()["data"]["role"] == "admin"

    async def test_update_own_name(self, client: AsyncClient, make_account):
        _, headers = await make_account(UserRole.KOMITE)

        response = await client.patch(
            "/api/v1/auth/me", json={"full_name": "  Ketua Komite "}, headers=headers
        )

        assert response.status_code == 200
        assert response.json()["data"]["full_name"] == "Ketua Komite"

    async def test_refresh_endpoint(self, client: AsyncClient, admin):
        admin_id, _ = admin
        response = await client.post(
            "/api/v1/auth/refresh", json={"refresh_token": create_refresh_token(admin_id)}
        )
        assert response.status_code == 200
        assert response.json()["data"]["token_type"] == "bearer"


class TestViewEndpoint:
    """Which dashboard the caller lands on."""

    async def test_without_token(self, client: AsyncClient):
        response = await client.get("/api/v1/auth/view")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["kind"] == "logged_out"
        assert data["modules"] == []

    async def test_invalid_token(self, client: AsyncClient):
        response = await client.get(
            "/api/v1/auth/view", headers={"Authorization": "Bearer not-a-token"}
        )
        assert response.json()["data"]["kind"] == "logged_out"

    async def test_admin(self, client: AsyncClient, admin):
        admin_id, headers = admin
        data = (await client.get("/api/v1/auth/view", headers=headers)).json()["data"]

        assert data["kind"] == "admin"
        assert data["profile_id"] == admin_id
        assert "roles" in data["modules"]

    async def test_guru(self, client: AsyncClient, make_account):
        _, headers = await make_account(UserRole.GURU)
        data = (await client.get("/api/v1/auth/view", headers=headers)).json()["data"]

        assert data["kind"] == "teacher"
        assert data["teacher_id"] is None
        assert "my-salary" in data["modules"]
