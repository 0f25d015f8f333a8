"""Vote repository - one row per (item, user), upserted atomically."""

from dataclasses import dataclass
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from askboard.db.upsert import conflict_insert
from askboard.models import Answer, AnswerVote, Question, QuestionVote


@dataclass(frozen=True)
class VoteTarget:
    """Where the votes for one kind of item live."""

    item_model: type
    vote_model: type
    item_column: str


VOTE_TARGETS = {
    "question": VoteTarget(Question, QuestionVote, "question_id"),
    "answer": VoteTarget(Answer, AnswerVote, "answer_id"),
}


def vote_sum_subquery(item_kind: str, item_id_column):
    """
    Correlated scalar subquery summing the votes of the enclosing item row.

    Args:
        item_kind: 'question' or 'answer'
        item_id_column: Id column of the outer query (e.g. ``Question.id``)

    Returns:
        Scalar subquery evaluating to the signed vote sum (0 when no votes)
    """
    target = VOTE_TARGETS[item_kind]
    vote_model = target.vote_model
    return (
        select(func.coalesce(func.sum(vote_model.vote_type), 0))
        .where(getattr(vote_model, target.item_column) == item_id_column)
        .correlate(target.item_model)
        .scalar_subquery()
    )


class VoteRepository:
    """Repository for QuestionVote and AnswerVote rows."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def upsert(self, item_kind: str, item_id: int, user_id: str, vote_type: int) -> None:
        """Insert a vote or overwrite the existing one in a single statement."""
        target = VOTE_TARGETS[item_kind]
        stmt = conflict_insert(self.session, target.vote_model).values(
            {target.item_column: item_id, "user_id": user_id, "vote_type": vote_type}
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[target.item_column, "user_id"],
            set_={"vote_type": stmt.excluded.vote_type, "updated_at": func.now()},
        )
        await self.session.execute(stmt)

    async def item_exists(self, item_kind: str, item_id: int) -> bool:
        """Check whether the voted item exists."""
        item_model = VOTE_TARGETS[item_kind].item_model
        result = await self.session.execute(select(item_model.id).where(item_model.id == item_id))
        return result.scalar_one_or_none() is not None

    async def get_vote_sum(self, item_kind: str, item_id: int) -> int:
        """Calculate total vote sum for an item."""
        target = VOTE_TARGETS[item_kind]
        vote_model = target.vote_model
        result = await self.session.execute(
            select(func.coalesce(func.sum(vote_model.vote_type), 0)).where(
                getattr(vote_model, target.item_column) == item_id
            )
        )
        return int(result.scalar() or 0)

    async def get_user_vote(self, item_kind: str, item_id: int, user_id: str) -> Optional[int]:
        """Get the vote a user currently has on an item, if any."""
        target = VOTE_TARGETS[item_kind]
        vote_model = target.vote_model
        result = await self.session.execute(
            select(vote_model.vote_type).where(
                getattr(vote_model, target.item_column) == item_id,
                vote_model.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    async def count_by_user(self, user_id: str) -> int:
        """Count votes a user has cast on questions and answers."""
        total = 0
        for target in VOTE_TARGETS.values():
            vote_model = target.vote_model
            result = await self.session.execute(
                select(func.count(vote_model.id)).where(vote_model.user_id == user_id)
            )
            total += result.scalar() or 0
        return total
