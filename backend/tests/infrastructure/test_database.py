"""Marketplace database — read-only reader sessions, error mapping, reachability."""

import pytest
from sqlalchemy import func, select, text
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

import taskhive.models  # noqa: F401
from taskhive.core.errors import DatabaseError
from taskhive.db.base import Base
from taskhive.infrastructure.database import MarketplaceDatabase, build_engine
from taskhive.models.user_profile import UserProfile


@pytest.fixture
async def marketplace():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False}, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    db = MarketplaceDatabase(engine)
    yield db
    await db.dispose()


async def test_reader_discards_flushed_writes(marketplace):
    async with marketplace.reader() as session:
        session.add(UserProfile(role="worker"))
        await session.flush()

    async with marketplace.reader() as session:
        count = await session.scalar(select(func.count()).select_from(UserProfile))
    assert count == 0


async def test_reader_maps_sqlalchemy_errors(marketplace):
    with pytest.raises(DatabaseError) as exc:
        async with marketplace.reader() as session:
            await session.execute(text("SELECT * FROM no_such_table"))
    assert exc.value.operation == "read"
    assert exc.value.http_status == 503


async def test_reachable_in_memory(marketplace):
    assert await marketplace.is_reachable() is True


async def test_unreachable_file_is_reported_not_raised():
    db = MarketplaceDatabase(
        build_engine("sqlite+aiosqlite:////nonexistent-dir/marketplace.db"),
    )
    assert await db.is_reachable() is False
    await db.dispose()


def test_postgres_engine_uses_pool_settings():
    engine = build_engine(
        "postgresql+asyncpg://u:p@db:5432/app", pool_size=5, max_overflow=2,
    )
    assert engine.pool.size() == 5
    assert engine.url.drivername == "postgresql+asyncpg"
