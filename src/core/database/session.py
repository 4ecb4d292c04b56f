from collections.abc import AsyncGenerator
import sys

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from src.core.config import settings

if not settings.database_url:
    print("[Database] ERROR: DATABASE_URL is empty!", file=sys.stderr)
    raise ValueError("DATABASE_URL environment variable is not set")

_url = make_url(settings.database_url)
# Host and database only, the password stays out of the log
print(f"[Database] Connecting to: {_url.host or 'local'}/{_url.database}", file=sys.stderr)

engine = create_async_engine(
    _url,
    echo=settings.debug and not settings.is_production,
    pool_pre_ping=_url.get_backend_name() == "postgresql",
)

async_session = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Request-scoped session.

    Services commit their own unit of work (payment + receipt number +
    activity entry); anything left pending is committed here, and an error
    rolls back whatever the request had flushed.
    """
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
