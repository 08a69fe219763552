"""Marketplace Database — read-only async access to the mirrored marketplace tables.

Invariants:
    - No commit path: a reader session is closed without commit, which
      discards anything a route added or flushed
    - Postgres connections open with default_transaction_read_only=on, so
      the server refuses writes even if one slips through
    - SQLAlchemy failures inside a reader surface as DatabaseError("read")

Design Decisions:
    - tasks, transactions and user_profiles are owned by the external store;
      this service only lists and fetches them
    - SQLite URLs (tests) get a plain engine: no pool sizing, no server settings
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine,
)

from taskhive.core.errors import DatabaseError, ErrorContext

logger = logging.getLogger(__name__)

_READ_ONLY_SERVER_SETTINGS = {"default_transaction_read_only": "on"}


def build_engine(
    database_url: str, pool_size: int = 20, max_overflow: int = 10,
) -> AsyncEngine:
    if database_url.startswith("sqlite"):
        return create_async_engine(database_url)
    return create_async_engine(
        database_url,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_pre_ping=True,
        connect_args={"server_settings": _READ_ONLY_SERVER_SETTINGS},
    )


class MarketplaceDatabase:
    """Hands out read-only sessions over the marketplace mirror."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self._sessions = async_sessionmaker(
            engine, expire_on_commit=False, autoflush=False,
        )

    @asynccontextmanager
    async def reader(self) -> AsyncGenerator[AsyncSession, None]:
        async with self._sessions() as session:
            try:
                yield session
            except SQLAlchemyError as e:
                logger.error(
                    f"Marketplace read failed: {e}",
                    extra={"operation": "read"},
                )
                raise DatabaseError(
                    type(e).__name__, "read", ErrorContext(operation="read"),
                ) from e

    async def is_reachable(self) -> bool:
        try:
            async with self.reader() as session:
                await session.execute(text("SELECT 1"))
        except (DatabaseError, OSError) as e:
            logger.warning(f"Marketplace database unreachable: {e}")
            return False
        return True

    async def dispose(self) -> None:
        await self.engine.dispose()


# Built in the FastAPI lifespan
marketplace_db: MarketplaceDatabase | None = None


def init_marketplace_db(database_url: str, **kwargs) -> MarketplaceDatabase:
    global marketplace_db
    marketplace_db = MarketplaceDatabase(build_engine(database_url, **kwargs))
    return marketplace_db


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one read-only session per request."""
    if not marketplace_db:
        raise RuntimeError("Marketplace database not initialized")
    async with marketplace_db.reader() as session:
        yield session
