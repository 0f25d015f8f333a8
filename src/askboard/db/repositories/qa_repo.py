"""Q&A repositories - Question, Answer, Tag."""

from typing import List, Optional, Sequence

from sqlalchemy import case, func, insert, select, update
from sqlalchemy.engine import Row
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from askboard.db.repositories.vote_repo import vote_sum_subquery
from askboard.db.upsert import conflict_insert
from askboard.models import Answer, Question, Tag, question_tags


def _contains_pattern(text: str) -> str:
    """LIKE pattern matching ``text`` anywhere, with wildcards escaped."""
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class TagRepository:
    """Repository for Tag model."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_all(self) -> List[Tag]:
        """List all tags ordered by name."""
        result = await self.session.execute(select(Tag).order_by(Tag.name))
        return list(result.scalars().all())

    async def get_by_names(self, names: Sequence[str]) -> List[Tag]:
        """Get all tags whose name is in ``names`` in one query."""
        if not names:
            return []
        result = await self.session.execute(select(Tag).where(Tag.name.in_(list(names))))
        return list(result.scalars().all())

    async def insert_missing(self, names: Sequence[str]) -> None:
        """Batch insert tags, skipping names that already exist."""
        if not names:
            return
        stmt = conflict_insert(self.session, Tag).values([{"name": name} for name in names])
        stmt = stmt.on_conflict_do_nothing(index_elements=["name"])
        await self.session.execute(stmt)

    async def link_to_question(self, question_id: int, tag_ids: Sequence[int]) -> None:
        """Insert question_tags rows for the given tags."""
        if not tag_ids:
            return
        await self.session.execute(
            insert(question_tags),
            [{"question_id": question_id, "tag_id": tag_id} for tag_id in tag_ids],
        )


class QuestionRepository:
    """Repository for Question model."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, question: Question) -> Question:
        """Create a new question."""
        self.session.add(question)
        await self.session.flush()
        await self.session.refresh(question)
        return question

    async def get_by_id(self, question_id: int) -> Optional[Question]:
        """Get question by ID."""
        result = await self.session.execute(select(Question).where(Question.id == question_id))
        return result.scalar_one_or_none()

    async def exists(self, question_id: int) -> bool:
        """Check whether a question row exists."""
        result = await self.session.execute(
            select(Question.id).where(Question.id == question_id)
        )
        return result.scalar_one_or_none() is not None

    def _aggregate_query(self):
        """Select questions with vote sum and answer count computed on read."""
        vote_count = vote_sum_subquery("question", Question.id)
        answer_count = (
            select(func.count(Answer.id))
            .where(Answer.question_id == Question.id)
            .correlate(Question)
            .scalar_subquery()
        )
        query = (
            select(
                Question,
                vote_count.label("vote_count"),
                answer_count.label("answer_count"),
            )
            .options(selectinload(Question.author), selectinload(Question.tags))
            .execution_options(populate_existing=True)
        )
        return query, vote_count, answer_count

    async def list_aggregates(
        self,
        limit: int = 20,
        offset: int = 0,
        order_by_votes: bool = False,
        unanswered_only: bool = False,
    ) -> List[Row]:
        """
        List question rows as (Question, vote_count, answer_count).

        Args:
            limit: Page size
            offset: Rows to skip
            order_by_votes: Order by vote sum instead of creation time
            unanswered_only: Keep only questions without answers
        """
        query, vote_count, answer_count = self._aggregate_query()

        if unanswered_only:
            query = query.where(answer_count == 0)

        if order_by_votes:
            query = query.order_by(vote_count.desc(), Question.created_at.desc(), Question.id.desc())
        else:
            query = query.order_by(Question.created_at.desc(), Question.id.desc())

        result = await self.session.execute(query.limit(limit).offset(offset))
        return list(result.all())

    async def get_aggregate(self, question_id: int) -> Optional[Row]:
        """Get one (Question, vote_count, answer_count) row."""
        query, _, _ = self._aggregate_query()
        result = await self.session.execute(query.where(Question.id == question_id))
        return result.one_or_none()

    async def search_aggregates(self, text: str, limit: int = 100) -> List[Row]:
        """Case-insensitive substring search on title and content, newest first.

        Matches against the casefolded search_text column so folding is done
        by Python and behaves the same on every backend.
        """
        query, _, _ = self._aggregate_query()
        pattern = _contains_pattern(text.casefold())
        query = (
            query.where(Question.search_text.like(pattern, escape="\\"))
            .order_by(Question.created_at.desc(), Question.id.desc())
            .limit(limit)
        )
        result = await self.session.execute(query)
        return list(result.all())

    async def list_aggregates_by_author(self, author_id: str) -> List[Row]:
        """List a user's questions, newest first."""
        query, _, _ = self._aggregate_query()
        query = query.where(Question.author_id == author_id).order_by(
            Question.created_at.desc(), Question.id.desc()
        )
        result = await self.session.execute(query)
        return list(result.all())

    async def count_by_author(self, author_id: str) -> int:
        """Count questions asked by a user."""
        result = await self.session.execute(
            select(func.count(Question.id)).where(Question.author_id == author_id)
        )
        return result.scalar() or 0


class AnswerRepository:
    """Repository for Answer model."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, answer: Answer) -> Answer:
        """Create a new answer."""
        self.session.add(answer)
        await self.session.flush()
        await self.session.refresh(answer)
        return answer

    async def get_by_id(self, answer_id: int) -> Optional[Answer]:
        """Get answer by ID."""
        result = await self.session.execute(
            select(Answer)
            .where(Answer.id == answer_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    def _aggregate_query(self):
        """Select answers with their vote sum."""
        vote_count = vote_sum_subquery("answer", Answer.id)
        return (
            select(Answer, vote_count.label("vote_count"))
            .options(selectinload(Answer.author))
            .execution_options(populate_existing=True)
        )

    async def list_aggregates_by_question(self, question_id: int) -> List[Row]:
        """List (Answer, vote_count) rows, accepted first, then newest first."""
        query = (
            self._aggregate_query()
            .where(Answer.question_id == question_id)
            .order_by(Answer.is_accepted.desc(), Answer.created_at.desc(), Answer.id.desc())
        )
        result = await self.session.execute(query)
        return list(result.all())

    async def list_aggregates_by_author(self, author_id: str) -> List[Row]:
        """List a user's answers with their parent question, newest first."""
        query = (
            self._aggregate_query()
            .options(selectinload(Answer.question))
            .where(Answer.author_id == author_id)
            .order_by(Answer.created_at.desc(), Answer.id.desc())
        )
        result = await self.session.execute(query)
        return list(result.all())

    async def count_by_author(self, author_id: str, accepted_only: bool = False) -> int:
        """Count answers written by a user."""
        query = select(func.count(Answer.id)).where(Answer.author_id == author_id)
        if accepted_only:
            query = query.where(Answer.is_accepted.is_(True))
        result = await self.session.execute(query)
        return result.scalar() or 0

    async def count_accepted_for_question(self, question_id: int) -> int:
        """Count accepted answers of a question (0 or 1 when consistent)."""
        result = await self.session.execute(
            select(func.count(Answer.id)).where(
                Answer.question_id == question_id,
                Answer.is_accepted.is_(True),
            )
        )
        return result.scalar() or 0

    async def set_accepted_exclusive(self, question_id: int, answer_id: int) -> None:
        """Accept one answer and unaccept its siblings in a single UPDATE."""
        await self.session.execute(
            update(Answer)
            .where(Answer.question_id == question_id)
            .values(is_accepted=case((Answer.id == answer_id, True), else_=False))
            .execution_options(synchronize_session=False)
        )
