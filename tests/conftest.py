"""Shared test fixtures: database, application client, users and tokens."""

import os

# Settings are read at import time by joytask.utils.db and joytask.main
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "a1b2c3d4e5f6g7h8i9j0k1l2m3n4o5p6q7r8s9t0")
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from collections.abc import AsyncGenerator
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool

from joytask.models import Base, User, UserRole, UserStatus
from joytask.utils.db import build_engine, get_db
from joytask.utils.security import create_access_token


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest_asyncio.fixture(scope="function")
async def test_engine(tmp_path):
    """Test database engine with fresh tables for each test.

    Defaults to a throwaway SQLite file; set TEST_DATABASE_URL to run
    against PostgreSQL.
    """
    database_url = os.getenv(
        "TEST_DATABASE_URL",
        f"sqlite+aiosqlite:///{tmp_path / 'joytask_test.db'}",
    )
    engine = build_engine(database_url, poolclass=NullPool, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def test_db(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Test database session configured like the production session factory."""
    session_factory = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


# =============================================================================
# FastAPI App & Client Fixtures
# =============================================================================


@pytest_asyncio.fixture(scope="function")
async def test_app(test_db: AsyncSession):
    """The application with its database dependency bound to the test session."""
    from joytask.main import app

    async def override_get_db():
        try:
            yield test_db
            await test_db.commit()
        except Exception:
            await test_db.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db
    yield app
    app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def test_client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for the test application."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


# =============================================================================
# User & Auth Fixtures
# =============================================================================


async def make_user(
    db: AsyncSession,
    name: str,
    email: str,
    role: str = UserRole.USER.value,
    status: str = UserStatus.ACTIVE.value,
) -> User:
    """Insert and commit a user."""
    user = User(id=str(uuid4()), name=name, email=email, role=role, status=status)
    db.add(user)
    await db.commit()
    return user


@pytest_asyncio.fixture(scope="function")
async def test_user(test_db: AsyncSession) -> User:
    """An active player."""
    return await make_user(test_db, "Test Player", "player@example.com")


@pytest_asyncio.fixture(scope="function")
async def test_user2(test_db: AsyncSession) -> User:
    """A second active player."""
    return await make_user(test_db, "Another Player", "another@example.com")


@pytest_asyncio.fixture(scope="function")
async def admin_user(test_db: AsyncSession) -> User:
    """An active dashboard admin."""
    return await make_user(
        test_db, "Admin", "admin@example.com", role=UserRole.ADMIN.value
    )


@pytest_asyncio.fixture(scope="function")
async def super_admin_user(test_db: AsyncSession) -> User:
    """An active dashboard super-admin."""
    return await make_user(
        test_db, "Root", "root@example.com", role=UserRole.SUPER_ADMIN.value
    )


@pytest_asyncio.fixture(scope="function")
async def inactive_user(test_db: AsyncSession) -> User:
    """A suspended player."""
    return await make_user(
        test_db,
        "Suspended Player",
        "suspended@example.com",
        status=UserStatus.SUSPENDED.value,
    )


@pytest.fixture
def auth_headers(test_user: User) -> dict[str, str]:
    """Authorization headers with a valid access token."""
    return {"Authorization": f"Bearer {create_access_token(test_user.id)}"}


@pytest.fixture
def admin_headers(admin_user: User) -> dict[str, str]:
    """Authorization headers for the admin user."""
    return {"Authorization": f"Bearer {create_access_token(admin_user.id)}"}


@pytest.fixture
def inactive_auth_headers(inactive_user: User) -> dict[str, str]:
    """Authorization headers for the suspended user."""
    return {"Authorization": f"Bearer {create_access_token(inactive_user.id)}"}


@pytest.fixture
def invalid_auth_headers() -> dict[str, str]:
    """Authorization headers with an invalid token."""
    return {"Authorization": "Bearer invalid-token-12345"}
