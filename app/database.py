"""
Database Configuration

SECURITY:
- SQLAlchemy echo disabled in production to prevent row data leakage
- Connection string never logged
"""

import logging
import time

from sqlalchemy import event
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
from app.config import settings
from app.exceptions import DuplicateEntryError, DatabaseError

logger = logging.getLogger(__name__)


def _engine_options(database_url: str) -> dict:
    """Pool settings only apply to server databases; SQLite uses its own pool."""
    options = {"echo": settings.sqlalchemy_echo, "future": True}
    if not database_url.startswith("sqlite"):
        options.update(
            pool_size=10,
            max_overflow=5,
            pool_recycle=3600,      # Recycle connections after 1 hour to prevent stale connections
            pool_pre_ping=True,
        )
    return options


# Create async engine
engine = create_async_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))


# Slow query logging
def _before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
    conn.info["query_start_time"] = time.monotonic()


def _after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
    start = conn.info.get("query_start_time")
    if start is None:
        return
    duration_ms = (time.monotonic() - start) * 1000
    if duration_ms >= settings.SLOW_QUERY_THRESHOLD_MS:
        param_count = len(parameters) if parameters else 0
        truncated = statement[:200] + ("..." if len(statement) > 200 else "")
        logger.warning(
            "Slow query (%.0fms, %d params): %s", duration_ms, param_count, truncated
        )


event.listen(engine.sync_engine, "before_cursor_execute", _before_cursor_execute)
event.listen(engine.sync_engine, "after_cursor_execute", _after_cursor_execute)

# Session factory
async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


async def get_db() -> AsyncSession:
    """Dependency to get database session.

    Note: Endpoints are responsible for calling commit() when needed.
    This dependency only provides the session and handles cleanup.
    """
    session = async_session_maker()
    try:
        yield session
    finally:
        await session.close()


async def init_db():
    """Initialize database tables."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def commit_or_raise(session: AsyncSession, duplicate_detail: str) -> None:
    """Commit, translating storage failures into API errors.

    A unique constraint hit becomes a 409 ``DuplicateEntryError``; any other
    failure a 503 ``DatabaseError``. The session is rolled back either way.
    """
    try:
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        logger.warning(f"Integrity error on commit: {e.orig}")
        raise DuplicateEntryError(duplicate_detail)
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"Database error on commit: {type(e).__name__}: {e}")
        raise DatabaseError()
