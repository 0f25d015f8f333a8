"""User API schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class UserSummary(BaseModel):
    """Author profile embedded in question and answer aggregates."""

    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class UserResponse(UserSummary):
    """User record response."""

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserSync(BaseModel):
    """Identity provider profile to store as the user's shadow record."""

    id: str = Field(..., min_length=1, max_length=255, description="Identity provider user ID")
    email: Optional[str] = Field(None, max_length=255)
    first_name: Optional[str] = Field(None, max_length=255)
    last_name: Optional[str] = Field(None, max_length=255)
    profile_image_url: Optional[str] = Field(None, max_length=1024)

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class UserStatisticsResponse(BaseModel):
    """Profile activity counts."""

    questions_asked: int
    answers_given: int
    accepted_answers: int
    votes_cast: int

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True
