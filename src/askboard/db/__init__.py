"""Database connection and session management."""

import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from askboard.config import get_config
from askboard.core import get_logger

logger = get_logger(__name__)

# Global engine and session factory
_engine: Optional[AsyncEngine] = None
_session_factory: Optional[sessionmaker] = None


def get_engine() -> AsyncEngine:
    """
    Get or create the database engine.

    Returns:
        AsyncEngine instance
    """
    global _engine

    if _engine is None:
        settings = get_config()
        database_url = settings.database_url

        connect_args = {}
        kwargs = {}
        if settings.is_sqlite:
            # sqlite+aiosqlite:///path/to/db
            path_part = database_url.split(":///")[-1]
            db_dir = os.path.dirname(path_part)
            if db_dir and path_part != ":memory:":
                os.makedirs(db_dir, exist_ok=True)
            connect_args = {"check_same_thread": False}
        else:
            # PostgreSQL supports pooling
            kwargs = {
                "pool_size": 10,
                "max_overflow": 20,
            }

        _engine = create_async_engine(
            database_url,
            echo=settings.database_echo,
            connect_args=connect_args,
            pool_pre_ping=True,
            **kwargs,
        )
        logger.info("Database engine created", url=_engine.url.render_as_string(hide_password=True))

    return _engine


def get_session_factory() -> sessionmaker:
    """Get the session factory bound to the global engine."""
    global _session_factory

    if _session_factory is None:
        _session_factory = sessionmaker(
            get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
        )
    return _session_factory


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Get a database session.

    Yields:
        AsyncSession instance
    """
    async_session = get_session_factory()

    async with async_session() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def close_db() -> None:
    """Close the database connection."""
    global _engine, _session_factory

    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _session_factory = None
        logger.info("Database connection closed")


# Alias used by the API dependencies
get_db_session = get_session


async def create_tables(engine: Optional[AsyncEngine] = None) -> None:
    """
    Create all database tables.

    This should be called once to initialize the database schema.
    """
    from askboard.models import Base

    engine = engine or get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created")


async def drop_tables(engine: Optional[AsyncEngine] = None) -> None:
    """Drop all database tables."""
    from askboard.models import Base

    engine = engine or get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    logger.info("Database tables dropped")
