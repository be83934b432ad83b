"""
ShiftMaster Backend — Database Session Management
===================================================

What:  Async SQLAlchemy engine, session factory, and lifecycle helpers.
How:   Creates an async engine with connection pooling; the reporting data
       store opens one short-lived session per count query.
Who:   Used by the data store, the health check, and the app lifespan.
When:  Engine is created at module import; sessions are created per query.

Connection Pooling:
    pool_size + max_overflow bound the number of concurrent queries. The
    dashboard fans out five counts per request, so the pool must hold at
    least that many connections for a request not to queue on itself.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, text
from sqlalchemy.types import TypeDecorator
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    stop_after_attempt,
    wait_exponential_jitter,
)

from shiftmaster.config import settings

logger = logging.getLogger(__name__)


# ── Engine Configuration ──────────────────────────────────────────────────
engine = create_async_engine(
    settings.database_url,
    pool_size=settings.db_pool_size,
    max_overflow=settings.db_max_overflow,
    pool_pre_ping=settings.db_pool_pre_ping,
    pool_recycle=3600,
    echo=settings.log_level == "DEBUG",
)

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: attributes stay readable after commit
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Every collection the API exposes is a table registered on this metadata;
    the data store resolves collection names through it.
    """
    pass


# ── Column Types ──────────────────────────────────────────────────────────
class UTCDateTime(TypeDecorator):
    """
    TIMESTAMP WITH TIME ZONE that is always written and read as UTC.

    PostgreSQL normalises offsets itself; SQLite stores the wall-clock text
    and drops the offset. Converting on bind makes stored values and range
    bounds compare as UTC instants on both.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is None:
            return None
        if value.tzinfo is None or value.utcoffset() is None:
            raise ValueError(f"Naive datetime {value.isoformat()} for a UTC column")
        return value.astimezone(timezone.utc)

    def process_result_value(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def ping(target: AsyncEngine = engine) -> None:
    """Runs SELECT 1; raises whatever the driver raises when unreachable."""
    async with target.connect() as conn:
        await conn.execute(text("SELECT 1"))


async def connect_to_database(target: AsyncEngine = engine) -> None:
    """
    Verify the database is reachable before serving traffic.

    What:    Pings the database, retrying with exponential backoff + jitter.
    When:    Called once from the application lifespan.
    Raises:  The last connection error once attempts are exhausted; the
             lifespan lets it propagate so the server refuses to start.
    """
    async for attempt in AsyncRetrying(
        stop=stop_after_attempt(settings.db_connect_max_attempts),
        wait=wait_exponential_jitter(
            initial=settings.db_connect_min_wait,
            max=settings.db_connect_max_wait,
            jitter=1,
        ),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    ):
        with attempt:
            await ping(target)
    logger.info("Database connection established")


async def dispose_engine() -> None:
    """Closes all pooled connections (application shutdown)."""
    await engine.dispose()
