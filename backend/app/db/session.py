"""Engine and session factories shared by the API, the daily job and scripts."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.core.config import get_settings

_engines: dict[str, AsyncEngine] = {}
_sessionmakers: dict[str, async_sessionmaker[AsyncSession]] = {}


def _enable_sqlite_foreign_keys(dbapi_connection, _record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _create_engine(url: str) -> AsyncEngine:
    engine = create_async_engine(url, echo=False, pool_pre_ping=True)
    if engine.dialect.name == "sqlite":
        # notification rows cascade with their horse and owner
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def get_sessionmaker(
    database_url: str | None = None,
) -> async_sessionmaker[AsyncSession]:
    """Return the cached session factory for ``database_url`` (default: settings)."""
    url = database_url or get_settings().database_url
    factory = _sessionmakers.get(url)
    if factory is None:
        engine = _create_engine(url)
        factory = async_sessionmaker(engine, expire_on_commit=False)
        _engines[url] = engine
        _sessionmakers[url] = factory
    return factory


async def get_session() -> AsyncIterator[AsyncSession]:
    """Request-scoped session for FastAPI dependencies."""
    async with get_sessionmaker()() as session:
        yield session


@asynccontextmanager
async def session_scope(database_url: str | None = None) -> AsyncIterator[AsyncSession]:
    """Session for scripts; rolled back if the block raises."""
    async with get_sessionmaker(database_url)() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def dispose_engine(database_url: str | None = None) -> None:
    url = database_url or get_settings().database_url
    _sessionmakers.pop(url, None)
    engine = _engines.pop(url, None)
    if engine is not None:
        await engine.dispose()
