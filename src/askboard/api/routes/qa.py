"""Q&A API routes - Questions, Answers, Tags, Votes.

Service errors are left to the application's exception handlers, which
render every failure in the same ``{"error", "message", "details"}`` shape.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from askboard.api.dependencies import get_qa_service
from askboard.api.schemas import (
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
from askboard.services import QAService

router = APIRouter()


# ============ Tag Routes ============


@router.get("/tags", response_model=List[TagResponse])
async def list_tags(service: QAService = Depends(get_qa_service)):
    """List all tags."""
    tags = await service.list_tags()
    return [TagResponse.model_validate(t) for t in tags]


# ============ Question Routes ============


@router.get("/questions", response_model=List[QuestionResponse])
async def list_questions(
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1),
    filter: str = Query("newest"),
    service: QAService = Depends(get_qa_service),
):
    """List questions, one page at a time."""
    limit = limit or service.config.default_page_size
    questions = await service.list_questions(
        offset=(page - 1) * limit,
        limit=limit,
        filter=filter,
    )
    return [QuestionResponse.model_validate(item) for item in questions]


@router.post("/questions", response_model=QuestionCreatedResponse, status_code=201)
async def create_question(
    request: QuestionCreate,
    service: QAService = Depends(get_qa_service),
):
    """Ask a new question."""
    question = await service.create_question(
        title=request.title,
        content=request.content,
        author_id=request.author_id,
        tags=request.tags,
    )
    return QuestionCreatedResponse.model_validate(question)


@router.get("/questions/{question_id}", response_model=QuestionResponse)
async def get_question(
    question_id: int,
    service: QAService = Depends(get_qa_service),
):
    """Get question by ID."""
    question = await service.get_question(question_id)
    return QuestionResponse.model_validate(question)


@router.post("/questions/{question_id}/vote", response_model=VoteResponse)
async def vote_question(
    question_id: int,
    request: VoteCreate,
    service: QAService = Depends(get_qa_service),
):
    """Vote on a question."""
    vote_count = await service.vote_question(question_id, request.user_id, request.vote_type)
    return VoteResponse(vote_count=vote_count)


@router.get("/questions/{question_id}/vote", response_model=UserVoteResponse)
async def get_question_vote(
    question_id: int,
    user_id: str = Query(..., alias="userId", min_length=1),
    service: QAService = Depends(get_qa_service),
):
    """Get the caller's current vote on a question."""
    vote_type = await service.get_user_vote("question", question_id, user_id)
    return UserVoteResponse(user_id=user_id, vote_type=vote_type)


# ============ Answer Routes ============


@router.get("/questions/{question_id}/answers", response_model=List[AnswerResponse])
async def list_answers(
    question_id: int,
    service: QAService = Depends(get_qa_service),
):
    """List answers for a question."""
    answers = await service.list_answers(question_id)
    return [AnswerResponse.model_validate(a) for a in answers]


@router.post(
    "/questions/{question_id}/answers",
    response_model=AnswerCreatedResponse,
    status_code=201,
)
async def create_answer(
    question_id: int,
    request: AnswerCreate,
    service: QAService = Depends(get_qa_service),
):
    """Post an answer to a question."""
    answer = await service.create_answer(
        question_id=question_id,
        content=request.content,
        author_id=request.author_id,
    )
    return AnswerCreatedResponse.model_validate(answer)


@router.post("/answers/{answer_id}/vote", response_model=VoteResponse)
async def vote_answer(
    answer_id: int,
    request: VoteCreate,
    service: QAService = Depends(get_qa_service),
):
    """Vote on an answer."""
    vote_count = await service.vote_answer(answer_id, request.user_id, request.vote_type)
    return VoteResponse(vote_count=vote_count)


@router.get("/answers/{answer_id}/vote", response_model=UserVoteResponse)
async def get_answer_vote(
    answer_id: int,
    user_id: str = Query(..., alias="userId", min_length=1),
    service: QAService = Depends(get_qa_service),
):
    """Get the caller's current vote on an answer."""
    vote_type = await service.get_user_vote("answer", answer_id, user_id)
    return UserVoteResponse(user_id=user_id, vote_type=vote_type)


@router.post("/answers/{answer_id}/accept", response_model=AckResponse)
async def accept_answer(
    answer_id: int,
    request: Optional[AcceptRequest] = None,
    service: QAService = Depends(get_qa_service),
):
    """Accept an answer as the solution."""
    await service.accept_answer(answer_id, actor_id=request.user_id if request else None)
    return AckResponse()


# ============ Search Routes ============


@router.get("/search", response_model=List[QuestionResponse])
async def search_questions(
    q: str = Query(""),
    service: QAService = Depends(get_qa_service),
):
    """Search questions by title or content."""
    questions = await service.search_questions(q)
    return [QuestionResponse.model_validate(item) for item in questions]
