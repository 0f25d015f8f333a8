"""Answer acceptance - at most one accepted answer per question."""

from typing import Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from askboard.config import get_config
from askboard.core import (
    AskBoardException,
    ForbiddenException,
    NotFoundException,
    Settings,
    get_logger,
)
from askboard.db.repositories import AnswerRepository, QuestionRepository
from askboard.models import Answer, Question
from askboard.services.transaction import transaction

logger = get_logger(__name__)

# (question, answer, actor_id) -> may the actor accept this answer?
AcceptancePolicy = Callable[[Question, Answer, Optional[str]], bool]


def allow_any(question: Question, answer: Answer, actor_id: Optional[str]) -> bool:
    return True


def question_author_only(question: Question, answer: Answer, actor_id: Optional[str]) -> bool:
    return actor_id is not None and actor_id == question.author_id


ACCEPTANCE_POLICIES = {
    "any": allow_any,
    "question_author": question_author_only,
}


def get_acceptance_policy(name: str) -> AcceptancePolicy:
    """Look up a built-in acceptance policy by its settings name."""
    try:
        return ACCEPTANCE_POLICIES[name]
    except KeyError:
        raise AskBoardException(
            code="UNKNOWN_ACCEPT_POLICY",
            message=f"Unknown accept policy: {name}",
            details={"policy": name, "allowed": sorted(ACCEPTANCE_POLICIES)},
        ) from None


class AcceptanceManager:
    """Marks an answer as accepted, unaccepting its siblings atomically."""

    def __init__(
        self,
        session: AsyncSession,
        policy: Optional[AcceptancePolicy] = None,
        config: Optional[Settings] = None,
    ):
        self.session = session
        self.config = config or get_config()
        self.answer_repo = AnswerRepository(session)
        self.question_repo = QuestionRepository(session)
        # An explicit policy wins over the configured accept_policy
        self.policy = policy or get_acceptance_policy(self.config.accept_policy)

    async def accept_answer(self, answer_id: int, actor_id: Optional[str] = None) -> Answer:
        """
        Accept an answer as the solution to its question.

        Calling it again on the accepted answer changes nothing.

        Args:
            answer_id: Answer to accept
            actor_id: Caller identity handed to the policy

        Raises:
            NotFoundException: The answer does not exist
            ForbiddenException: The policy refused the caller
        """
        answer = await self.answer_repo.get_by_id(answer_id)
        if not answer:
            raise NotFoundException(
                code="ANSWER_NOT_FOUND",
                message="Answer not found",
                details={"answer_id": answer_id},
            )

        question = await self.question_repo.get_by_id(answer.question_id)
        if not self.policy(question, answer, actor_id):
            raise ForbiddenException(
                code="ACCEPT_NOT_ALLOWED",
                message="Not allowed to accept an answer for this question",
                details={"answer_id": answer_id, "actor_id": actor_id},
            )

        async with transaction(self.session, "accept_answer"):
            await self.answer_repo.set_accepted_exclusive(answer.question_id, answer.id)

        # Refresh answer
        answer = await self.answer_repo.get_by_id(answer_id)
        logger.info("Answer accepted", answer_id=answer_id, question_id=answer.question_id)
        return answer
