"""Persistence: async engine, session factory, and Base for SQLAlchemy ORM.

Postgres schema is managed by Alembic migrations. SQLite (local development
and tests) can build the schema with init_models().

Engine and session factory are created lazily on first use (get_db /
get_db_transactional) so import does not trigger Settings validation.
"""

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any

from sqlalchemy import event
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from docarchive.core.config import get_settings
from docarchive.domain.exceptions import ConflictException, PersistenceException

logger = logging.getLogger(__name__)

AfterTransaction = Callable[[], Awaitable[object]]

_AFTER_COMMIT = "after_commit"
_AFTER_ROLLBACK = "after_rollback"

# Set by _ensure_engine() on first use; avoids get_settings() at import time.
engine: AsyncEngine | None = None
AsyncSessionLocal: async_sessionmaker[AsyncSession] | None = None


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy declarative models."""


def enable_sqlite_foreign_keys(target: AsyncEngine) -> None:
    """Turn on FK enforcement for every SQLite connection (cascade deletes rely on it)."""

    @event.listens_for(target.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection: Any, connection_record: Any) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def _ensure_engine() -> None:
    """Create engine and AsyncSessionLocal on first use."""
    global engine, AsyncSessionLocal
    if AsyncSessionLocal is not None:
        return
    settings = get_settings()
    kwargs: dict[str, Any] = {"echo": settings.database_echo}
    if not settings.is_sqlite:
        kwargs.update(
            pool_pre_ping=True,
            pool_size=settings.db_pool_size if settings.db_pool_size is not None else 20,
            max_overflow=(
                settings.db_max_overflow if settings.db_max_overflow is not None else 30
            ),
            pool_recycle=3600,
        )
    engine = create_async_engine(settings.database_url, **kwargs)
    if settings.is_sqlite:
        enable_sqlite_foreign_keys(engine)
    AsyncSessionLocal = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
        autocommit=False,
    )


async def init_models() -> None:
    """Create all tables (SQLite / development only; Postgres uses Alembic)."""
    _ensure_engine()
    assert engine is not None
    # Register every model on Base.metadata before create_all.
    from docarchive.infrastructure.persistence import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    """Dispose the engine (application shutdown)."""
    global engine, AsyncSessionLocal
    if engine is not None:
        await engine.dispose()
        logger.info("Database engine disposed")
    engine = None
    AsyncSessionLocal = None


def after_commit(session: AsyncSession, callback: AfterTransaction) -> None:
    """Run callback once the session's current transaction commits (see commit())."""
    session.info.setdefault(_AFTER_COMMIT, []).append(callback)


def after_rollback(session: AsyncSession, callback: AfterTransaction) -> None:
    """Run callback if the session's current transaction is rolled back instead."""
    session.info.setdefault(_AFTER_ROLLBACK, []).append(callback)


async def _run_callbacks(session: AsyncSession, run: str, discard: str) -> None:
    callbacks = session.info.pop(run, [])
    session.info.pop(discard, None)
    for callback in callbacks:
        try:
            await callback()
        except Exception:
            logger.exception("Post-transaction callback %s failed", run)


async def commit(session: AsyncSession) -> None:
    """Commit, then run the after_commit callbacks. Rollback callbacks are dropped."""
    await session.commit()
    await _run_callbacks(session, _AFTER_COMMIT, _AFTER_ROLLBACK)


async def rollback(session: AsyncSession) -> None:
    """Roll back, then run the after_rollback callbacks. Commit callbacks are dropped."""
    await session.rollback()
    await _run_callbacks(session, _AFTER_ROLLBACK, _AFTER_COMMIT)


async def get_db() -> AsyncIterator[AsyncSession]:
    """Database session dependency for read operations.

    Does not commit; use get_db_transactional for writes.
    Yields a session and closes it on exit.
    """
    _ensure_engine()
    assert AsyncSessionLocal is not None
    async with AsyncSessionLocal() as session:
        yield session


async def get_db_transactional() -> AsyncIterator[AsyncSession]:
    """Database session dependency for write operations.

    Commits on success and rolls back on exception, running the
    callbacks registered with after_commit / after_rollback.
    Constraint violations surface as ConflictException; other SQLAlchemy
    errors are logged with full context and re-raised as PersistenceException
    so driver details never reach the caller.
    Use for POST, PUT, PATCH, DELETE endpoints.
    """
    _ensure_engine()
    assert AsyncSessionLocal is not None
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await commit(session)
        except IntegrityError as e:
            await rollback(session)
            logger.warning("Transaction rolled back after constraint violation: %s", e.orig)
            raise ConflictException(
                "Record conflicts with existing data", resource_type="record"
            ) from e
        except SQLAlchemyError as e:
            await rollback(session)
            logger.exception("Transaction rolled back after database error")
            raise PersistenceException("transaction") from e
        except Exception:
            await rollback(session)
            raise
