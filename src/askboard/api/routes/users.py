"""User API routes - shadow records and profile activity."""

from typing import List

from fastapi import APIRouter, Depends

from askboard.api.dependencies import get_user_service
from askboard.api.schemas import (
    AnswerResponse,
    QuestionResponse,
    UserResponse,
    UserStatisticsResponse,
    UserSync,
)
from askboard.services import UserService

router = APIRouter()


@router.post("/users", response_model=UserResponse)
async def sync_user(
    request: UserSync,
    service: UserService = Depends(get_user_service),
):
    """Create or refresh a user from identity provider data."""
    user = await service.sync_user(
        user_id=request.id,
        email=request.email,
        first_name=request.first_name,
        last_name=request.last_name,
        profile_image_url=request.profile_image_url,
    )
    return UserResponse.model_validate(user)


@router.get("/users/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    service: UserService = Depends(get_user_service),
):
    """Get user by ID."""
    user = await service.get_user(user_id)
    return UserResponse.model_validate(user)


@router.get("/users/{user_id}/statistics", response_model=UserStatisticsResponse)
async def get_user_statistics(
    user_id: str,
    service: UserService = Depends(get_user_service),
):
    """Get a user's activity counts."""
    stats = await service.get_statistics(user_id)
    return UserStatisticsResponse.model_validate(stats)


@router.get("/users/{user_id}/questions", response_model=List[QuestionResponse])
async def list_user_questions(
    user_id: str,
    service: UserService = Depends(get_user_service),
):
    """List the questions a user asked."""
    questions = await service.list_user_questions(user_id)
    return [QuestionResponse.model_validate(q) for q in questions]


@router.get("/users/{user_id}/answers", response_model=List[AnswerResponse])
async def list_user_answers(
    user_id: str,
    service: UserService = Depends(get_user_service),
):
    """List the answers a user wrote."""
    answers = await service.list_user_answers(user_id)
    return [AnswerResponse.model_validate(a) for a in answers]
