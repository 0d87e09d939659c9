"""Database and Redis connections.

The service only reads the CRM's tables, one short session per request or
per re-scoring run, so the engine keeps SQLAlchemy's default pool size.
Redis carries the CRM change feed in and recomputed matches out.
"""

from __future__ import annotations

import contextlib
from collections.abc import AsyncGenerator

import redis.asyncio as aioredis
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from src.config import settings

# ── PostgreSQL ───────────────────────────────────────────────────────

engine: AsyncEngine = create_async_engine(
    settings.db.database_url,
    echo=settings.log_level == "DEBUG",
    pool_pre_ping=True,
)

async_session_factory = async_sessionmaker(engine, expire_on_commit=False)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding a session; rolls back and re-raises on error."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


# ── Redis ────────────────────────────────────────────────────────────

redis_client: aioredis.Redis = aioredis.from_url(settings.db.redis_url, decode_responses=True)


# ── Lifespan ─────────────────────────────────────────────────────────


@contextlib.asynccontextmanager
async def db_lifespan() -> AsyncGenerator[None, None]:
    """Check the database is reachable on startup; dispose connections on shutdown.

    The tables belong to the CRM; nothing here creates or migrates them.
    """
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    try:
        yield
    finally:
        await engine.dispose()
        await redis_client.aclose()
