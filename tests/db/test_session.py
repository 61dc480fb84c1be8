"""Tests for database session configuration."""

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.db import session


@pytest_asyncio.fixture(autouse=True)
async def reset_engine():
    await session.dispose_engine()
    yield
    await session.dispose_engine()


@pytest.mark.asyncio
async def test_engine_is_created_lazily_and_cached(monkeypatch):
    monkeypatch.setattr(settings, "DATABASE_POOL_SIZE", 7)

    assert session._engine is None

    engine = session.get_engine()

    assert session.get_engine() is engine
    assert engine.pool.size() == 7
    assert engine.url.drivername == "postgresql+asyncpg"


@pytest.mark.asyncio
async def test_session_maker_is_shared():
    maker = session.get_session_maker()
    assert session.get_session_maker() is maker
    assert maker.kw["expire_on_commit"] is False


@pytest.mark.asyncio
async def test_dispose_resets_state():
    session.get_session_maker()

    await session.dispose_engine()

    assert session._engine is None
    assert session._session_maker is None


@pytest.mark.asyncio
async def test_get_db_yields_session():
    generator = session.get_db()

    db = await generator.__anext__()

    assert isinstance(db, AsyncSession)
    await generator.aclose()
