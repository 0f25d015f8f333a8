"""API schemas (Pydantic models)."""

from .qa import (
    AcceptRequest,
    AckResponse,
    AnswerCreate,
    AnswerCreatedResponse,
    AnswerResponse,
    QuestionCreate,
    QuestionCreatedResponse,
    QuestionResponse,
    TagResponse,
    UserVoteResponse,
    VoteCreate,
    VoteResponse,
)
from .users import UserResponse, UserStatisticsResponse, UserSummary, UserSync

__all__ = [
    # Tags
    "TagResponse",
    # Questions
    "QuestionCreate",
    "QuestionCreatedResponse",
    "QuestionResponse",
    # Answers
    "AnswerCreate",
    "AnswerCreatedResponse",
    "AnswerResponse",
    "AcceptRequest",
    # Votes
    "VoteCreate",
    "VoteResponse",
    "UserVoteResponse",
    "AckResponse",
    # Users
    "UserSummary",
    "UserResponse",
    "UserSync",
    "UserStatisticsResponse",
]
