"""Q&A service - Questions, Answers, Tags, Votes."""

import re
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from askboard.config import get_config
from askboard.core import NotFoundException, Settings, ValidationException, get_logger
from askboard.db.repositories import AnswerRepository, QuestionRepository, TagRepository
from askboard.models import Answer, Question, Tag
from askboard.services.acceptance import AcceptanceManager, AcceptancePolicy
from askboard.services.aggregates import AnswerAggregate, QuestionAggregate
from askboard.services.tag_resolver import TagResolver, normalize_tag_names
from askboard.services.transaction import transaction
from askboard.services.user_service import UserService
from askboard.services.vote_ledger import VoteLedger, validate_vote_type

logger = get_logger(__name__)

QUESTION_FILTERS = ("newest", "unanswered", "most-voted")

_TAG_RE = re.compile(r"<[^>]*>")


def _has_text(content: Optional[str]) -> bool:
    """True when rich-text content has something besides markup and blanks."""
    if not content:
        return False
    text = _TAG_RE.sub("", content).replace("&nbsp;", " ")
    return bool(text.strip())


class QAService:
    """Service for Q&A operations."""

    def __init__(
        self,
        session: AsyncSession,
        acceptance_policy: Optional[AcceptancePolicy] = None,
        config: Optional[Settings] = None,
    ):
        self.session = session
        self.config = config or get_config()
        self.question_repo = QuestionRepository(session)
        self.answer_repo = AnswerRepository(session)
        self.tag_repo = TagRepository(session)
        self.users = UserService(session)
        self.tag_resolver = TagResolver(session)
        self.vote_ledger = VoteLedger(session)
        self.acceptance = AcceptanceManager(session, policy=acceptance_policy, config=self.config)

    # ============ Tag Operations ============

    async def list_tags(self) -> List[Tag]:
        """List all tags."""
        return await self.tag_repo.list_all()

    # ============ Question Operations ============

    def _validate_question(self, title: str, content: str, tags: List[str]) -> None:
        """Apply the product rules for a new question."""
        if len(title) < self.config.title_min_length:
            raise ValidationException(
                code="INVALID_TITLE",
                message=f"Title must be at least {self.config.title_min_length} characters",
                details={"field": "title", "min_length": self.config.title_min_length},
            )
        if len(title) > self.config.title_max_length:
            raise ValidationException(
                code="INVALID_TITLE",
                message=f"Title must be at most {self.config.title_max_length} characters",
                details={"field": "title", "max_length": self.config.title_max_length},
            )
        if not _has_text(content):
            raise ValidationException(
                code="INVALID_CONTENT",
                message="Question content is required",
                details={"field": "content"},
            )
        if len(tags) > self.config.max_tags_per_question:
            raise ValidationException(
                code="TOO_MANY_TAGS",
                message=f"A question can have at most {self.config.max_tags_per_question} tags",
                details={"field": "tags", "count": len(tags)},
            )
        too_long = [tag for tag in tags if len(tag) > self.config.tag_max_length]
        if too_long:
            raise ValidationException(
                code="INVALID_TAG",
                message=f"Tags must be at most {self.config.tag_max_length} characters",
                details={"field": "tags", "tags": too_long},
            )

    async def create_question(
        self,
        title: str,
        content: str,
        author_id: str,
        tags: Optional[List[str]] = None,
    ) -> Question:
        """Create a new question.

        Args:
            title: Question title
            content: Question body (HTML)
            author_id: Identity provider user ID; an empty shadow record is
                created if the user is unknown
            tags: Tag names; normalized, de-duplicated and created as needed

        Returns:
            The created question, without aggregates
        """
        title = (title or "").strip()
        tag_names = normalize_tag_names(tags or [])
        self._validate_question(title, content, tag_names)

        logger.info("Creating question", title=title[:50], author_id=author_id, tags=",".join(tag_names))

        async with transaction(self.session, "create_question"):
            await self.users.ensure_user(author_id)
            question = await self.question_repo.create(
                Question(title=title, content=content, author_id=author_id)
            )
            resolved = await self.tag_resolver.resolve(tag_names)
            await self.tag_repo.link_to_question(question.id, [tag.id for tag in resolved])

        logger.info("Question created", question_id=question.id, title=title[:50])
        return question

    async def get_question(self, question_id: int) -> QuestionAggregate:
        """Get question by ID with its aggregates."""
        row = await self.question_repo.get_aggregate(question_id)
        if not row:
            raise NotFoundException(
                code="QUESTION_NOT_FOUND",
                message="Question not found",
                details={"question_id": question_id},
            )
        return QuestionAggregate.from_row(row)

    async def list_questions(
        self,
        offset: int = 0,
        limit: Optional[int] = None,
        filter: str = "newest",
    ) -> List[QuestionAggregate]:
        """List questions with offset/limit pagination.

        Args:
            offset: Rows to skip
            limit: Page size (defaults to the configured page size)
            filter: 'newest', 'unanswered' (no answers yet, newest first) or
                'most-voted'
        """
        if filter not in QUESTION_FILTERS:
            raise ValidationException(
                code="INVALID_FILTER",
                message=f"Invalid filter: {filter}",
                details={"filter": filter, "allowed": list(QUESTION_FILTERS)},
            )
        limit = self.config.default_page_size if limit is None else limit
        if offset < 0 or limit < 1 or limit > self.config.max_page_size:
            raise ValidationException(
                code="INVALID_PAGINATION",
                message=f"offset must be >= 0 and limit between 1 and {self.config.max_page_size}",
                details={"offset": offset, "limit": limit},
            )

        rows = await self.question_repo.list_aggregates(
            limit=limit,
            offset=offset,
            order_by_votes=filter == "most-voted",
            unanswered_only=filter == "unanswered",
        )
        return [QuestionAggregate.from_row(row) for row in rows]

    async def search_questions(self, query: str) -> List[QuestionAggregate]:
        """Search questions by a case-insensitive substring of title or content."""
        query = (query or "").strip()
        if not query:
            raise ValidationException(
                code="INVALID_SEARCH_QUERY",
                message="Search query required",
                details={"q": query},
            )
        rows = await self.question_repo.search_aggregates(query, limit=self.config.search_max_results)
        return [QuestionAggregate.from_row(row) for row in rows]

    # ============ Answer Operations ============

    async def create_answer(self, question_id: int, content: str, author_id: str) -> Answer:
        """Create a new answer.

        Args:
            question_id: Question to answer
            content: Answer body (HTML)
            author_id: Identity provider user ID
        """
        if not _has_text(content):
            raise ValidationException(
                code="INVALID_CONTENT",
                message="Answer content is required",
                details={"field": "content"},
            )

        logger.info("Creating answer", question_id=question_id, author_id=author_id)

        async with transaction(self.session, "create_answer"):
            if not await self.question_repo.exists(question_id):
                raise NotFoundException(
                    code="QUESTION_NOT_FOUND",
                    message="Question not found",
                    details={"question_id": question_id},
                )
            await self.users.ensure_user(author_id)
            answer = await self.answer_repo.create(
                Answer(
                    question_id=question_id,
                    content=content,
                    author_id=author_id,
                    is_accepted=False,
                )
            )

        logger.info("Answer created", answer_id=answer.id, question_id=question_id)
        return answer

    async def list_answers(self, question_id: int) -> List[AnswerAggregate]:
        """List answers for a question, accepted first, then newest first."""
        if not await self.question_repo.exists(question_id):
            raise NotFoundException(
                code="QUESTION_NOT_FOUND",
                message="Question not found",
                details={"question_id": question_id},
            )
        rows = await self.answer_repo.list_aggregates_by_question(question_id)
        return [AnswerAggregate.from_row(row) for row in rows]

    async def accept_answer(self, answer_id: int, actor_id: Optional[str] = None) -> Answer:
        """Accept an answer as the solution."""
        return await self.acceptance.accept_answer(answer_id, actor_id=actor_id)

    # ============ Vote Operations ============

    async def vote(self, item_kind: str, item_id: int, user_id: str, vote_type: int) -> int:
        """
        Cast or change a vote on a question or answer.

        Returns:
            The item's vote sum after the vote
        """
        validate_vote_type(vote_type)

        logger.info("Casting vote", item_kind=item_kind, item_id=item_id, vote_type=vote_type)

        async with transaction(self.session, f"vote_{item_kind}"):
            await self.users.ensure_user(user_id)
            await self.vote_ledger.cast_vote(item_kind, item_id, user_id, vote_type)
            new_score = await self.vote_ledger.get_vote_sum(item_kind, item_id)

        logger.info("Vote cast", item_kind=item_kind, item_id=item_id, new_score=new_score)
        return new_score

    async def get_user_vote(self, item_kind: str, item_id: int, user_id: str) -> Optional[int]:
        """The vote a user currently holds on a question or answer, or None."""
        return await self.vote_ledger.get_user_vote(item_kind, item_id, user_id)

    async def vote_question(self, question_id: int, user_id: str, vote_type: int) -> int:
        return await self.vote("question", question_id, user_id, vote_type)

    async def vote_answer(self, answer_id: int, user_id: str, vote_type: int) -> int:
        return await self.vote("answer", answer_id, user_id, vote_type)
