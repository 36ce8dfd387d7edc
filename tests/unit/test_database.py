"""Tests for op_common.database engine and session wiring."""

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.op_common.database import engine, get_db_session


def test_pool_sized_from_settings() -> None:
    assert engine.pool.size() == settings.DB_POOL_SIZE
    assert engine.pool._max_overflow == settings.DB_MAX_OVERFLOW
    assert engine.pool._pre_ping is True


async def test_session_dependency_yields_async_session() -> None:
    sessions = get_db_session()
    session = await anext(sessions)
    try:
        assert isinstance(session, AsyncSession)
        assert session.sync_session.expire_on_commit is False
    finally:
        await sessions.aclose()
