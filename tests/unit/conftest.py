"""Shared fixtures: an in-memory SQLite database per test."""

from typing import AsyncIterator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from askboard.config import get_config
from askboard.core import Settings
from askboard.db import create_tables
from askboard.services import QAService, UserService, allow_any

TEST_DB_URL = "sqlite+aiosqlite://"


@pytest.fixture(autouse=True)
def fresh_config():
    """Reload the merged configuration for every test."""
    get_config.cache_clear()
    yield
    get_config.cache_clear()


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_tables(engine)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine) -> AsyncIterator[AsyncSession]:
    factory = async_sessionmaker(engine, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture
def test_settings() -> Settings:
    """Settings with the built-in product rules."""
    return Settings(_env_file=None)


@pytest.fixture
def qa(db_session, test_settings) -> QAService:
    return QAService(db_session, acceptance_policy=allow_any, config=test_settings)


@pytest.fixture
def users(db_session) -> UserService:
    return UserService(db_session)


@pytest.fixture
def ask(qa):
    """Create a question with sensible defaults."""

    async def _ask(title="How do I test async code?", content="<p>Need guidance</p>", author_id="u-author", tags=None):
        return await qa.create_question(title=title, content=content, author_id=author_id, tags=tags)

    return _ask
