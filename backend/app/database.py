"""
Contacts API - Database Engine & Session Management
=====================================================

What:  Async SQLAlchemy engine factory, session factory, and declarative base.
How:   create_engine() builds an async engine with connection pooling from
       Settings; create_session_factory() wraps it in an async_sessionmaker.
Who:   ContactRepository owns the engine it is built with; nothing else in
       the application talks to the engine directly.
When:  One engine per application instance, created in app.main.create_app().

Connection Pooling Strategy:
    pool_size=10:      Persistent connections for normal load
    max_overflow=10:   Temporary connections for traffic spikes
    pool_pre_ping:     Validates connections before use (catches stale connections)
    pool_recycle=3600: Recycles connections every hour

    SQLite (used by the test-suite through aiosqlite) does not accept the
    queue-pool arguments, so they are only passed for server databases.
"""

from typing import Any, Dict, Optional

from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.config import Settings, settings as default_settings


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All models inherit from this class so that Base.metadata knows every
    table; the schema initializer runs create_all() against it.
    """
    pass


# ── Engine Configuration ──────────────────────────────────────────────────
def create_engine(
    url: Optional[URL | str] = None,
    config: Optional[Settings] = None,
) -> AsyncEngine:
    """
    Build the async engine for the configured store.

    Args:
        url:    Explicit URL (tests pass a SQLite file URL). Defaults to
                config.sqlalchemy_url.
        config: Settings to read pool options from. Defaults to the
                module-level singleton.
    """
    config = config or default_settings
    url = url if url is not None else config.sqlalchemy_url

    options: Dict[str, Any] = {
        # Echo SQL queries in DEBUG mode for development visibility
        "echo": config.log_level == "DEBUG",
    }
    if not str(url).startswith("sqlite"):
        options.update(
            pool_size=config.db_pool_size,
            max_overflow=config.db_max_overflow,
            pool_pre_ping=config.db_pool_pre_ping,
            pool_recycle=3600,
        )

    return create_async_engine(url, **options)


# ── Session Factory ───────────────────────────────────────────────────────
def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Creates new AsyncSession instances bound to `engine`.

    expire_on_commit=False keeps loaded attributes readable after commit;
    otherwise touching a column would trigger an implicit (and, in async
    code, illegal) refresh query.
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def dispose_engine(engine: AsyncEngine) -> None:
    """
    What:  Gracefully closes all connections in the pool.
    When:  Called during application shutdown (lifespan handler).
    """
    await engine.dispose()
