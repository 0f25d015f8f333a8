"""Tag resolver - maps free-text tag names to Tag rows, creating missing ones."""

from typing import Iterable, List

from sqlalchemy.ext.asyncio import AsyncSession

from askboard.core import get_logger
from askboard.db.repositories import TagRepository
from askboard.models import Tag

logger = get_logger(__name__)


def normalize_tag_names(names: Iterable[str]) -> List[str]:
    """
    Trim and lower-case tag names, dropping empties and duplicates.

    The first occurrence of each name keeps its position.
    """
    normalized = (name.strip().lower() for name in names if name is not None)
    return list(dict.fromkeys(name for name in normalized if name))


class TagResolver:
    """Resolve tag names to shared Tag rows without ever duplicating a name."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.tag_repo = TagRepository(session)

    async def resolve(self, names: Iterable[str]) -> List[Tag]:
        """
        Return one Tag per distinct normalized name, creating missing tags.

        Runs inside the caller's transaction and does not commit. Result order
        is unspecified.

        Args:
            names: Tag names as typed by the user

        Returns:
            List of Tag rows
        """
        wanted = normalize_tag_names(names)
        if not wanted:
            return []

        existing = await self.tag_repo.get_by_names(wanted)
        known = {tag.name for tag in existing}
        missing = [name for name in wanted if name not in known]
        if not missing:
            return existing

        logger.info("Creating tags", names=",".join(missing))
        # Names created concurrently by another request are skipped by the
        # insert and picked up by the re-read.
        await self.tag_repo.insert_missing(missing)
        return await self.tag_repo.get_by_names(wanted)
