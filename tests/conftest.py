from collections.abc import AsyncGenerator, Awaitable, Callable

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from src.core.auth.jwt import create_access_token
from src.core.auth.models import UserRole
from src.core.auth.service import AuthService
from src.core.database import get_db
from src.core.database.base import Base
from src.main import app

# In-memory SQLite, one database per test
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

AuthHeaders = dict[str, str]


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create tables before each test and drop after."""
    test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await test_engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Get test database session."""
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Get test HTTP client with overridden database dependency."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def make_account(
    db_session: AsyncSession,
) -> Callable[..., Awaitable[tuple[int, AuthHeaders]]]:
    """
    Factory creating an account with a role and returning (profile_id, headers).

    Usage:
        admin_id, headers = await make_account(UserRole.ADMIN)
    """
    counter = {"n": 0}

    async def _make(
        role: UserRole,
        student_id: int | None = None,
        teacher_id: int | None = None,
    ) -> tuple[int, AuthHeaders]:
        counter["n"] += 1
        profile = await AuthService(db_session).create_account(
            email=f"{role.value}{counter['n']}@pesantren.test",
            password="Password123",
            role=role,
            full_name=f"Test {role.value.title()}",
            student_id=student_id,
            teacher_id=teacher_id,
        )
        await db_session.commit()
        token = create_access_token(profile.id, profile.role)
        return profile.id, {"Authorization": f"Bearer {token}"}

    return _make


@pytest.fixture
async def admin(make_account) -> tuple[int, AuthHeaders]:
    """Signed-in admin: (profile_id, headers)."""
    return await make_account(UserRole.ADMIN)
