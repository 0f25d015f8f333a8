"""Dialect-specific INSERT ... ON CONFLICT constructs."""

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from askboard.core import AskBoardException

_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def conflict_insert(session: AsyncSession, target):
    """
    Build an ``insert()`` that supports ``on_conflict_do_update``/``do_nothing``.

    Args:
        session: Session whose bind decides the dialect
        target: Mapped class or Table to insert into

    Returns:
        Dialect-specific Insert construct
    """
    dialect = session.get_bind().dialect.name
    try:
        insert = _INSERTS[dialect]
    except KeyError:
        raise AskBoardException(
            code="UNSUPPORTED_DATABASE",
            message=f"Atomic upserts are not supported on '{dialect}'",
            details={"dialect": dialect},
        ) from None
    return insert(target)
