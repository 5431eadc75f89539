"""Database connection and session management."""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from joytask.config import get_settings

settings = get_settings()


def engine_options(database_url: str) -> dict[str, Any]:
    """Pool options for the given URL (SQLite drivers take no pool sizing)."""
    if database_url.startswith("sqlite"):
        return {}
    return {
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_pre_ping": True,
    }


def _sqlite_connect(dbapi_connection, connection_record) -> None:
    # Stop the driver from issuing its own BEGIN/COMMIT
    dbapi_connection.isolation_level = None


def _sqlite_begin(conn) -> None:
    conn.exec_driver_sql("BEGIN")


def enable_sqlite_savepoints(engine: AsyncEngine) -> None:
    """Let SQLAlchemy own transaction boundaries on SQLite.

    Otherwise the driver treats RELEASE SAVEPOINT as a commit.
    """
    event.listen(engine.sync_engine, "connect", _sqlite_connect)
    event.listen(engine.sync_engine, "begin", _sqlite_begin)


def build_engine(database_url: str, **kwargs: Any) -> AsyncEngine:
    """Create an async engine for ``database_url``.

    Pool sizing is skipped when a ``poolclass`` is passed.
    """
    options = {} if "poolclass" in kwargs else engine_options(database_url)
    engine = create_async_engine(database_url, future=True, **options, **kwargs)
    if database_url.startswith("sqlite"):
        enable_sqlite_savepoints(engine)
    return engine


# Create async engine
engine = build_engine(
    settings.database_url,
    echo=settings.app_debug and settings.log_level.upper() == "DEBUG",
)

# Session factory
async_session_factory = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting async database session.

    Usage:
        @app.get("/items")
        async def get_items(db: AsyncSession = Depends(get_db)):
            ...
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def init_db() -> None:
    """Initialize database connection pool."""
    async with engine.begin() as conn:
        await conn.run_sync(lambda _: None)


async def close_db() -> None:
    """Close database connection pool."""
    await engine.dispose()
