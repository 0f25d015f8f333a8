"""Service layer."""

from .acceptance import (
    ACCEPTANCE_POLICIES,
    AcceptanceManager,
    allow_any,
    get_acceptance_policy,
    question_author_only,
)
from .aggregates import AnswerAggregate, QuestionAggregate, UserStatistics
from .qa_service import QUESTION_FILTERS, QAService
from .tag_resolver import TagResolver, normalize_tag_names
from .user_service import UserService
from .vote_ledger import VoteLedger

__all__ = [
    "QAService",
    "UserService",
    "VoteLedger",
    "TagResolver",
    "normalize_tag_names",
    "AcceptanceManager",
    "ACCEPTANCE_POLICIES",
    "allow_any",
    "question_author_only",
    "get_acceptance_policy",
    "QuestionAggregate",
    "AnswerAggregate",
    "UserStatistics",
    "QUESTION_FILTERS",
]
