"""Database engine and per-request sessions for the portal.

One engine serves the whole process. Each HTTP request gets its own
session through ``get_db``; the request's writes (new service requests,
OTP rows, note appends, admin edits) land in a single transaction that
commits when the endpoint returns and rolls back if it raises.
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from portal.core.config import settings


def build_engine(database_url: str) -> AsyncEngine:
    """Create an async engine for ``database_url``.

    SQL echo follows the development environment. Pooled connections are
    checked before reuse so a restarted database does not fail the first
    request after it.
    """
    return create_async_engine(
        database_url,
        echo=settings.environment == "development",
        pool_pre_ping=True,
    )


engine = build_engine(settings.database_url)

# Rows stay readable after commit: endpoints serialize them afterwards.
async_session_factory = async_sessionmaker(engine, expire_on_commit=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield a session scoped to one request and settle its transaction."""
    async with async_session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        await session.commit()


async def dispose_engine() -> None:
    """Close pooled connections on application shutdown."""
    await engine.dispose()
