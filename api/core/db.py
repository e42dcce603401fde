"""
Async database access (SQLAlchemy ORM over asyncpg).

This module owns the engine and the session factory. FastAPI initializes the
engine on startup and disposes it on shutdown (see `api/main.py`).

Routers receive a session through `Depends(get_session)` and pass it
explicitly to repository functions; repositories never create sessions.
"""

from __future__ import annotations

import os
from collections.abc import AsyncIterator
from datetime import datetime, timezone
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool


class Base(DeclarativeBase):
    pass


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)

    # Plain Postgres DSNs are routed to the asyncpg dialect.
    if parts.scheme in ("postgres", "postgresql"):
        url = "postgresql+asyncpg" + url[len(parts.scheme) :]
        parts = urlsplit(url)

    if not parts.query:
        return url

    # asyncpg does not accept `sslmode` as a connect argument.
    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def database_url() -> str:
    url = os.environ.get("DATABASE_URL", "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL is not set.")
    return _sanitize_database_url(url)


def echo_sql() -> bool:
    return os.environ.get("DB_ECHO", "").strip().lower() in ("1", "true", "yes")


def _engine_kwargs(url: str) -> dict[str, Any]:
    if url.startswith("sqlite"):
        kwargs: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        # In-memory databases only live as long as their single connection.
        if url.rstrip("/").endswith(("sqlite+aiosqlite:", ":memory:")):
            kwargs["poolclass"] = StaticPool
        return kwargs
    return {
        "pool_size": 5,
        "max_overflow": 0,
        "pool_pre_ping": True,
        "connect_args": {"command_timeout": 30},
    }


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _: Any) -> None:
    # SQLite ignores ON DELETE CASCADE unless this is switched on per connection.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


async def init_engine(url: str | None = None) -> None:
    global _engine, _session_factory
    if _engine is not None:
        return None

    dsn = _sanitize_database_url(url) if url else database_url()
    _engine = create_async_engine(dsn, echo=echo_sql(), **_engine_kwargs(dsn))
    if _engine.dialect.name == "sqlite":
        event.listen(_engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

    _session_factory = async_sessionmaker(_engine, expire_on_commit=False, class_=AsyncSession)


async def close_engine() -> None:
    global _engine, _session_factory
    if _engine is None:
        return None
    await _engine.dispose()
    _engine = None
    _session_factory = None


def engine() -> AsyncEngine:
    if _engine is None:
        raise RuntimeError("DB engine is not initialized. Call init_engine() on startup.")
    return _engine


def session_factory() -> async_sessionmaker[AsyncSession]:
    if _session_factory is None:
        raise RuntimeError("DB engine is not initialized. Call init_engine() on startup.")
    return _session_factory


async def create_all() -> None:
    """
    Create every table registered on `Base.metadata`.

    Model modules must be imported before this runs.
    """
    async with engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_session() -> AsyncIterator[AsyncSession]:
    """
    FastAPI dependency: one session per request.

    Uncommitted work is rolled back when the session closes.
    """
    async with session_factory()() as session:
        yield session
