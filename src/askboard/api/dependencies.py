"""FastAPI dependencies."""

from typing import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from askboard.config import get_config
from askboard.core import Settings
from askboard.db import get_db_session
from askboard.services import QAService, UserService


def get_settings() -> Settings:
    """Get the merged application configuration."""
    return get_config()


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    async with get_db_session() as session:
        yield session


async def get_qa_service(
    session: AsyncSession = Depends(get_session),
    config: Settings = Depends(get_settings),
) -> QAService:
    """Get Q&A service dependency."""
    return QAService(session, config=config)


async def get_user_service(session: AsyncSession = Depends(get_session)) -> UserService:
    """Get user service dependency."""
    return UserService(session)
