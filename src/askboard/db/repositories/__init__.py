"""Database repositories."""

from .qa_repo import AnswerRepository, QuestionRepository, TagRepository
from .user_repo import UserRepository
from .vote_repo import VOTE_TARGETS, VoteRepository, vote_sum_subquery

__all__ = [
    "UserRepository",
    # Q&A
    "TagRepository",
    "QuestionRepository",
    "AnswerRepository",
    # Votes
    "VoteRepository",
    "VOTE_TARGETS",
    "vote_sum_subquery",
]
