import os
import uuid
from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta

import jwt
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from pydantic import SecretStr
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from portal.core.auth import SESSION_AUDIENCE
from portal.core.config import settings
from portal.models import Base, Profile, ProjectManager, ServiceRequest

# Set TEST_DATABASE_URL (postgresql+asyncpg://...) to run against PostgreSQL.
# Default: a throwaway SQLite file per test.
_TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL")

# Security: These are test-only secrets. Production uses real values from env.
TEST_AUTH_SECRET = "test-secret-key-that-is-at-least-32-characters-long"  # nosec B105
TEST_ADMIN_KEY = "test-admin-key"  # nosec B105

PM_EMAIL = "alice@example.com"
OTHER_PM_EMAIL = "bob@example.com"


def create_test_pm_token(
    pm_id: uuid.UUID,
    *,
    secret: str = TEST_AUTH_SECRET,
    expires_delta: timedelta | None = None,
    audience: str = SESSION_AUDIENCE,
) -> str:
    """Create a signed PM session token for test authentication.

    Args:
        pm_id: Project manager UUID for the sub claim.
        secret: Signing secret (must match settings.auth_secret in tests).
        expires_delta: Time until expiration. Defaults to 1 hour; pass a
            negative delta for an expired token.
        audience: aud claim.

    Returns:
        Encoded JWT string.
    """
    now = datetime.now(UTC)
    payload = {
        "sub": str(pm_id),
        "aud": audience,
        "iss": settings.auth_issuer,
        "exp": now + (expires_delta or timedelta(hours=1)),
        "iat": now,
    }
    return jwt.encode(payload, secret, algorithm="HS256")


async def make_service_request(
    db: AsyncSession,
    *,
    title: str = "Company website",
    status: str = "pending",
    created_at: datetime | None = None,
    **fields: object,
) -> ServiceRequest:
    """Insert a service request with an explicit creation time."""
    request = ServiceRequest(
        title=title,
        description="Build a marketing site",
        status=status,
        created_at=created_at or datetime.now(UTC),
        **fields,
    )
    db.add(request)
    await db.commit()
    await db.refresh(request)
    return request


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """Create test database engine with a fresh schema."""
    url = _TEST_DATABASE_URL or f"sqlite+aiosqlite:///{tmp_path / 'portal_test.db'}"
    engine = create_async_engine(url, echo=False, poolclass=NullPool)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    async_session = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def pm(db_session: AsyncSession) -> ProjectManager:
    """Project manager who logs in during tests."""
    manager = ProjectManager(
        name="Alice Carter",
        email=PM_EMAIL,
        phone="+1 555 0100",
        specialization="Web Development",
    )
    db_session.add(manager)
    await db_session.commit()
    await db_session.refresh(manager)
    return manager


@pytest_asyncio.fixture
async def other_pm(db_session: AsyncSession) -> ProjectManager:
    """Second PM for cross-PM isolation tests."""
    manager = ProjectManager(
        name="Bob Lee",
        email=OTHER_PM_EMAIL,
        is_available=False,
    )
    db_session.add(manager)
    await db_session.commit()
    await db_session.refresh(manager)
    return manager


@pytest_asyncio.fixture
async def customer(db_session: AsyncSession) -> Profile:
    """Customer profile referenced by service requests."""
    profile = Profile(
        user_id=uuid.uuid4(),
        full_name="Dana Customer",
        email="dana@example.com",
    )
    db_session.add(profile)
    await db_session.commit()
    await db_session.refresh(profile)
    return profile


@pytest_asyncio.fixture
async def client(db_engine) -> AsyncGenerator[AsyncClient, None]:
    """Unauthenticated HTTP client bound to the test database.

    Send PM tokens or the admin key per request.
    """
    from portal.core.database import get_db
    from portal.main import app

    test_session_factory = async_sessionmaker(
        db_engine, class_=AsyncSession, expire_on_commit=False
    )

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with test_session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    original_auth_secret = settings.auth_secret
    original_admin_key = settings.admin_api_key
    settings.auth_secret = SecretStr(TEST_AUTH_SECRET)
    settings.admin_api_key = SecretStr(TEST_ADMIN_KEY)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    settings.auth_secret = original_auth_secret
    settings.admin_api_key = original_admin_key
    app.dependency_overrides.clear()
