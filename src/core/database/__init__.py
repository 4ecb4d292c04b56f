from src.core.database.base import Base, BigIntPK, RecordedModel, TimestampedModel
from src.core.database.session import async_session, engine, get_db

__all__ = [
    "async_session",
    "engine",
    "get_db",
    "Base",
    "BigIntPK",
    "RecordedModel",
    "TimestampedModel",
]
