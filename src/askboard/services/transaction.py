"""Commit-or-rollback boundary shared by the services."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from askboard.core import ConflictException, get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def transaction(session: AsyncSession, operation: str) -> AsyncGenerator[None, None]:
    """
    Commit everything done in the block, or roll all of it back.

    Integrity violations are logged and re-raised as ConflictException;
    every other error propagates unchanged after the rollback.

    Args:
        session: Session holding the unit of work
        operation: Operation name for logs and error details
    """
    try:
        yield
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        logger.error("Integrity violation", operation=operation, error=str(e.orig))
        raise ConflictException(
            code="INTEGRITY_CONFLICT",
            message=f"Conflicting write during {operation}",
            details={"operation": operation},
        ) from e
    except Exception:
        await session.rollback()
        raise
