"""User service - shadow records, profile statistics and activity."""

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from askboard.core import NotFoundException, ValidationException, get_logger
from askboard.db.repositories import (
    AnswerRepository,
    QuestionRepository,
    UserRepository,
    VoteRepository,
)
from askboard.models import User
from askboard.services.aggregates import AnswerAggregate, QuestionAggregate, UserStatistics
from askboard.services.transaction import transaction

logger = get_logger(__name__)


def _validate_user_id(user_id: str) -> str:
    if not user_id or not user_id.strip():
        raise ValidationException(
            code="INVALID_USER_ID",
            message="User ID is required",
            details={"user_id": user_id},
        )
    return user_id


class UserService:
    """Service for user operations."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.user_repo = UserRepository(session)
        self.question_repo = QuestionRepository(session)
        self.answer_repo = AnswerRepository(session)
        self.vote_repo = VoteRepository(session)

    async def sync_user(
        self,
        user_id: str,
        email: Optional[str] = None,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        profile_image_url: Optional[str] = None,
    ) -> User:
        """Create or refresh the shadow record from identity provider data."""
        _validate_user_id(user_id)
        logger.info("Syncing user", user_id=user_id)

        async with transaction(self.session, "sync_user"):
            user = await self.user_repo.upsert(
                user_id,
                email=email,
                first_name=first_name,
                last_name=last_name,
                profile_image_url=profile_image_url,
            )

        logger.info("User synced", user_id=user_id)
        return user

    async def ensure_user(self, user_id: str) -> None:
        """
        Make sure a shadow record exists for ``user_id``.

        Inserts an empty profile when the id is new. Does not commit.
        """
        _validate_user_id(user_id)
        await self.user_repo.ensure_exists(user_id)

    async def get_user(self, user_id: str) -> User:
        """Get user by ID."""
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundException(
                code="USER_NOT_FOUND",
                message="User not found",
                details={"user_id": user_id},
            )
        return user

    async def get_statistics(self, user_id: str) -> UserStatistics:
        """Count a user's questions, answers, accepted answers and votes."""
        await self.get_user(user_id)
        return UserStatistics(
            questions_asked=await self.question_repo.count_by_author(user_id),
            answers_given=await self.answer_repo.count_by_author(user_id),
            accepted_answers=await self.answer_repo.count_by_author(user_id, accepted_only=True),
            votes_cast=await self.vote_repo.count_by_user(user_id),
        )

    async def list_user_questions(self, user_id: str) -> List[QuestionAggregate]:
        """List the questions a user asked, newest first."""
        await self.get_user(user_id)
        rows = await self.question_repo.list_aggregates_by_author(user_id)
        return [QuestionAggregate.from_row(row) for row in rows]

    async def list_user_answers(self, user_id: str) -> List[AnswerAggregate]:
        """List the answers a user wrote, newest first."""
        await self.get_user(user_id)
        rows = await self.answer_repo.list_aggregates_by_author(user_id)
        return [AnswerAggregate.from_row(row, with_question=True) for row in rows]
