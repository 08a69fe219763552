"""Service test fixtures — async DB, fake identity provider, FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db and get_identity_provider dependencies overridden per test
    - marketplace_db patched so the readiness check sees the test engine

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for read routes
    - StaticPool: one shared connection so every session sees the same :memory: DB
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool
from httpx import ASGITransport, AsyncClient

import taskhive.models  # noqa: F401
from taskhive.db.base import Base
from taskhive.infrastructure.database import MarketplaceDatabase, get_db
from taskhive.infrastructure.identity_client import get_identity_provider
import taskhive.infrastructure.database as db_module
from taskhive.main import app
from taskhive.services.auth_context import AuthContext

from tests.services.fake_identity import FakeIdentityProvider


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
        connect_args={"check_same_thread": False}, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def identity():
    return FakeIdentityProvider()


@pytest.fixture
def auth(identity):
    return AuthContext(identity)


@pytest.fixture
async def client(test_engine, identity):
    """FastAPI test client with DB and identity dependencies overridden."""
    marketplace = MarketplaceDatabase(test_engine)

    async def override_get_db():
        async with marketplace.reader() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_identity_provider] = lambda: identity

    original_db = db_module.marketplace_db
    db_module.marketplace_db = marketplace

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.marketplace_db = original_db
