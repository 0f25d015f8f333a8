"""Q&A API schemas - Questions, Answers, Tags, Votes."""

from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, Field, StrictInt, field_validator
from pydantic.alias_generators import to_camel

from .users import UserSummary


class CamelModel(BaseModel):
    """Base schema exchanging camelCase JSON keys."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


# ============ Tag Schemas ============


class TagResponse(CamelModel):
    """Tag response."""

    id: int
    name: str
    created_at: Optional[datetime] = None


# ============ Question Schemas ============


class QuestionCreate(CamelModel):
    """Create question request."""

    title: str = Field(..., min_length=1, description="Question title")
    content: str = Field(..., min_length=1, description="Question body (HTML)")
    author_id: str = Field(..., min_length=1, max_length=255, description="Author identifier")
    tags: Optional[Union[List[str], str]] = Field(
        None,
        description="Tag names, as a list or a comma-separated string",
    )

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, value):
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value


class QuestionCreatedResponse(CamelModel):
    """Newly created question, before any aggregates exist."""

    id: int
    title: str
    content: str
    author_id: str
    created_at: datetime
    updated_at: datetime


class QuestionResponse(CamelModel):
    """Question aggregate response."""

    id: int
    title: str
    content: str
    author_id: str
    author: Optional[UserSummary] = None
    vote_count: int
    answer_count: int
    tags: List[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


# ============ Answer Schemas ============


class AnswerCreate(CamelModel):
    """Create answer request."""

    content: str = Field(..., min_length=1, description="Answer body (HTML)")
    author_id: str = Field(..., min_length=1, max_length=255, description="Author identifier")


class AnswerCreatedResponse(CamelModel):
    """Newly created answer."""

    id: int
    question_id: int
    content: str
    author_id: str
    is_accepted: bool
    created_at: datetime
    updated_at: datetime


class AnswerResponse(CamelModel):
    """Answer aggregate response."""

    id: int
    question_id: int
    question_title: Optional[str] = None
    content: str
    author_id: str
    author: Optional[UserSummary] = None
    vote_count: int
    is_accepted: bool
    created_at: datetime
    updated_at: datetime


class AcceptRequest(CamelModel):
    """Optional body naming who accepts the answer."""

    user_id: Optional[str] = Field(None, max_length=255, description="Accepting user")


# ============ Vote Schemas ============


class VoteCreate(CamelModel):
    """Cast vote request."""

    vote_type: StrictInt = Field(..., description="1 for upvote, -1 for downvote")
    user_id: str = Field(..., min_length=1, max_length=255, description="Voter identifier")


class AckResponse(CamelModel):
    """Success acknowledgement."""

    success: bool = True


class VoteResponse(AckResponse):
    """Vote acknowledgement with the item's new vote sum."""

    vote_count: int


class UserVoteResponse(CamelModel):
    """A user's current vote on an item; vote_type is None when they have not voted."""

    user_id: str
    vote_type: Optional[int] = None
