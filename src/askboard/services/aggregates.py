"""Read models composed from entities and on-read aggregates."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from sqlalchemy.engine import Row

from askboard.models import User


@dataclass
class QuestionAggregate:
    """A question with its author, vote sum, answer count and tag names."""

    id: int
    title: str
    content: str
    author_id: str
    author: Optional[User]
    vote_count: int
    answer_count: int
    created_at: datetime
    updated_at: datetime
    tags: List[str] = field(default_factory=list)

    @classmethod
    def from_row(cls, row: Row) -> "QuestionAggregate":
        question, vote_count, answer_count = row
        return cls(
            id=question.id,
            title=question.title,
            content=question.content,
            author_id=question.author_id,
            author=question.author,
            vote_count=int(vote_count or 0),
            answer_count=int(answer_count or 0),
            created_at=question.created_at,
            updated_at=question.updated_at,
            # Link rows are unique per tag, but the read model never repeats a name
            tags=list(dict.fromkeys(tag.name for tag in question.tags)),
        )


@dataclass
class AnswerAggregate:
    """An answer with its author and vote sum."""

    id: int
    question_id: int
    content: str
    author_id: str
    author: Optional[User]
    vote_count: int
    is_accepted: bool
    created_at: datetime
    updated_at: datetime
    question_title: Optional[str] = None

    @classmethod
    def from_row(cls, row: Row, with_question: bool = False) -> "AnswerAggregate":
        answer, vote_count = row
        return cls(
            id=answer.id,
            question_id=answer.question_id,
            content=answer.content,
            author_id=answer.author_id,
            author=answer.author,
            vote_count=int(vote_count or 0),
            is_accepted=bool(answer.is_accepted),
            created_at=answer.created_at,
            updated_at=answer.updated_at,
            question_title=answer.question.title if with_question else None,
        )


@dataclass
class UserStatistics:
    """Activity counts shown on a profile."""

    questions_asked: int
    answers_given: int
    accepted_answers: int
    votes_cast: int
