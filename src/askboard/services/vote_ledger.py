"""Vote ledger - at most one vote per (user, item), overwritten on re-vote."""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from askboard.core import NotFoundException, ValidationException, get_logger
from askboard.db.repositories import VOTE_TARGETS, UserRepository, VoteRepository

logger = get_logger(__name__)

VOTE_VALUES = (1, -1)


def validate_vote_type(vote_type: int) -> None:
    """Reject anything but +1 and -1."""
    if isinstance(vote_type, bool) or vote_type not in VOTE_VALUES:
        raise ValidationException(
            code="INVALID_VOTE_VALUE",
            message="Vote value must be 1 (upvote) or -1 (downvote)",
            details={"vote_type": vote_type},
        )


def validate_item_kind(item_kind: str) -> None:
    if item_kind not in VOTE_TARGETS:
        raise ValidationException(
            code="INVALID_ITEM_KIND",
            message=f"Invalid item kind: {item_kind}",
            details={"item_kind": item_kind, "allowed": sorted(VOTE_TARGETS)},
        )


class VoteLedger:
    """
    Records votes on questions and answers.

    Writes go through a single INSERT ... ON CONFLICT DO UPDATE keyed on the
    (item, user) pair, so concurrent votes by one user can never produce two
    rows. Sums are computed on read. The ledger works inside the caller's
    transaction and never commits.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.vote_repo = VoteRepository(session)
        self.user_repo = UserRepository(session)

    async def _require_item(self, item_kind: str, item_id: int) -> None:
        if not await self.vote_repo.item_exists(item_kind, item_id):
            raise NotFoundException(
                code=f"{item_kind.upper()}_NOT_FOUND",
                message=f"{item_kind.capitalize()} not found",
                details={f"{item_kind}_id": item_id},
            )

    async def cast_vote(self, item_kind: str, item_id: int, user_id: str, vote_type: int) -> None:
        """
        Record or overwrite a user's vote on an item.

        Args:
            item_kind: 'question' or 'answer'
            item_id: Question or answer ID
            user_id: Voter (must already have a user row)
            vote_type: 1 or -1

        Raises:
            ValidationException: Unknown item kind or vote value
            NotFoundException: Item or user does not exist
        """
        validate_item_kind(item_kind)
        validate_vote_type(vote_type)

        await self._require_item(item_kind, item_id)
        if not await self.user_repo.exists(user_id):
            raise NotFoundException(
                code="USER_NOT_FOUND",
                message="User not found",
                details={"user_id": user_id},
            )

        await self.vote_repo.upsert(item_kind, item_id, user_id, vote_type)
        logger.info("Vote recorded", item_kind=item_kind, item_id=item_id, user_id=user_id, vote_type=vote_type)

    async def get_vote_sum(self, item_kind: str, item_id: int) -> int:
        """Signed sum of all votes on an item (0 when nobody voted)."""
        validate_item_kind(item_kind)
        return await self.vote_repo.get_vote_sum(item_kind, item_id)

    async def get_user_vote(self, item_kind: str, item_id: int, user_id: str) -> Optional[int]:
        """The user's current vote on an item, or None."""
        validate_item_kind(item_kind)
        await self._require_item(item_kind, item_id)
        return await self.vote_repo.get_user_vote(item_kind, item_id, user_id)
