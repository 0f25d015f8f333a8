"""HTTP tests for the API routes."""

from contextlib import asynccontextmanager

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from askboard.api import main
from askboard.api.dependencies import get_session, get_settings
from askboard.api.main import app
from askboard.core import Settings
from askboard.services import QAService


@asynccontextmanager
async def _test_client(db_session, raise_app_exceptions=True):
    async def _get_session_override():
        yield db_session

    app.dependency_overrides[get_session] = _get_session_override
    transport = ASGITransport(app=app, raise_app_exceptions=raise_app_exceptions)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as test_client:
            yield test_client
    finally:
        app.dependency_overrides.pop(get_session, None)


@pytest_asyncio.fixture
async def client(db_session):
    async with _test_client(db_session) as test_client:
        yield test_client


async def _post_question(client, **overrides):
    body = {
        "title": "How do I test async code?",
        "content": "<p>Need guidance</p>",
        "authorId": "u-author",
        "tags": ["testing"],
    }
    body.update(overrides)
    response = await client.post("/api/questions", json=body)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["dependencies"]["database"]["status"] == "healthy"


@pytest.mark.asyncio
async def test_question_lifecycle(client):
    question = await _post_question(client, tags="Testing, asyncio ,")
    assert question["authorId"] == "u-author"
    assert "createdAt" in question

    answer_response = await client.post(
        f"/api/questions/{question['id']}/answers",
        json={"content": "Use async test runners", "authorId": "u-helper"},
    )
    assert answer_response.status_code == 201
    answer = answer_response.json()
    assert answer["isAccepted"] is False

    for user_id in ("U1", "U2"):
        vote = await client.post(
            f"/api/answers/{answer['id']}/vote",
            json={"voteType": 1, "userId": user_id},
        )
        assert vote.status_code == 200
        assert vote.json()["success"] is True
    assert vote.json()["voteCount"] == 2

    accept = await client.post(f"/api/answers/{answer['id']}/accept")
    assert accept.status_code == 200
    assert accept.json() == {"success": True}

    answers = (await client.get(f"/api/questions/{question['id']}/answers")).json()
    assert answers[0]["voteCount"] == 2
    assert answers[0]["isAccepted"] is True
    assert answers[0]["author"]["id"] == "u-helper"

    detail = (await client.get(f"/api/questions/{question['id']}")).json()
    assert detail["tags"] == ["asyncio", "testing"]
    assert detail["answerCount"] == 1
    assert detail["voteCount"] == 0
    assert set(detail["author"]) == {"id", "email", "firstName", "lastName", "profileImageUrl"}


@pytest.mark.asyncio
async def test_missing_question_returns_404(client):
    response = await client.get("/api/questions/999999")

    assert response.status_code == 404
    assert response.json()["error"] == "QUESTION_NOT_FOUND"


@pytest.mark.asyncio
async def test_short_title_returns_400(client):
    response = await client.post(
        "/api/questions",
        json={"title": "Short", "content": "Body", "authorId": "u1"},
    )

    assert response.status_code == 400
    assert response.json()["error"] == "INVALID_TITLE"


@pytest.mark.asyncio
async def test_invalid_vote_value_returns_400(client):
    question = await _post_question(client)

    response = await client.post(
        f"/api/questions/{question['id']}/vote",
        json={"voteType": 2, "userId": "u1"},
    )

    assert response.status_code == 400
    assert response.json()["error"] == "INVALID_VOTE_VALUE"


@pytest.mark.asyncio
async def test_malformed_body_returns_400(client):
    response = await client.post("/api/questions", json={"title": "Missing everything else"})

    assert response.status_code == 400
    assert response.json()["error"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_list_questions_paging_and_filter(client):
    first = await _post_question(client, title="First question on the board")
    second = await _post_question(client, title="Second question on the board")
    await client.post(
        f"/api/questions/{first['id']}/answers",
        json={"content": "An answer", "authorId": "u2"},
    )

    page_one = (await client.get("/api/questions", params={"page": 1, "limit": 1})).json()
    page_two = (await client.get("/api/questions", params={"page": 2, "limit": 1})).json()
    unanswered = (await client.get("/api/questions", params={"filter": "unanswered"})).json()

    assert [q["id"] for q in page_one + page_two] == [second["id"], first["id"]]
    assert [q["id"] for q in unanswered] == [second["id"]]

    bad = await client.get("/api/questions", params={"filter": "hottest"})
    assert bad.status_code == 400
    assert bad.json()["error"] == "INVALID_FILTER"


@pytest.mark.asyncio
async def test_search_and_tags(client):
    await _post_question(client, title="Deploying FastAPI apps", tags=["Python", "web"])

    results = (await client.get("/api/search", params={"q": "fastapi"})).json()
    tags = (await client.get("/api/tags")).json()

    assert [q["title"] for q in results] == ["Deploying FastAPI apps"]
    assert [t["name"] for t in tags] == ["python", "web"]

    empty = await client.get("/api/search")
    assert empty.status_code == 400


@pytest.mark.asyncio
async def test_accept_missing_answer_returns_404(client):
    response = await client.post("/api/answers/999/accept")

    assert response.status_code == 404
    assert response.json()["error"] == "ANSWER_NOT_FOUND"


@pytest.mark.asyncio
async def test_user_sync_and_profile(client):
    response = await client.post(
        "/api/users",
        json={"id": "u-profile", "email": "p@example.com", "firstName": "Pat"},
    )
    assert response.status_code == 200
    assert response.json()["firstName"] == "Pat"

    question = await _post_question(client, authorId="u-profile")
    await client.post(
        f"/api/questions/{question['id']}/answers",
        json={"content": "Self answer", "authorId": "u-profile"},
    )

    user = (await client.get("/api/users/u-profile")).json()
    stats = (await client.get("/api/users/u-profile/statistics")).json()
    questions = (await client.get("/api/users/u-profile/questions")).json()
    answers = (await client.get("/api/users/u-profile/answers")).json()

    assert user["email"] == "p@example.com"
    assert stats == {"questionsAsked": 1, "answersGiven": 1, "acceptedAnswers": 0, "votesCast": 0}
    assert [q["id"] for q in questions] == [question["id"]]
    assert answers[0]["questionTitle"] == question["title"]

    missing = await client.get("/api/users/nobody")
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_service_errors_use_the_error_envelope(client):
    response = await client.get("/api/questions/424242/answers")

    assert response.status_code == 404
    assert response.json() == {
        "error": "QUESTION_NOT_FOUND",
        "message": "Question not found",
        "details": {"question_id": 424242},
    }


@pytest.mark.asyncio
async def test_unexpected_errors_hide_details_in_production(db_session, monkeypatch):
    async def _failing_list_tags(self):
        raise RuntimeError("connect failed postgresql://admin:s3cret@db/askboard")

    monkeypatch.setattr(QAService, "list_tags", _failing_list_tags)
    monkeypatch.setattr(main, "get_config", lambda: Settings(_env_file=None, environment="production"))

    async with _test_client(db_session, raise_app_exceptions=False) as test_client:
        response = await test_client.get("/api/tags")

    assert response.status_code == 500
    assert response.json() == {
        "error": "INTERNAL_ERROR",
        "message": "An internal error occurred",
        "details": {},
    }
    assert "s3cret" not in response.text


@pytest.mark.asyncio
async def test_unexpected_errors_show_details_in_development(db_session, monkeypatch):
    async def _failing_list_tags(self):
        raise RuntimeError("disk full")

    monkeypatch.setattr(QAService, "list_tags", _failing_list_tags)
    monkeypatch.setattr(main, "get_config", lambda: Settings(_env_file=None, environment="development"))

    async with _test_client(db_session, raise_app_exceptions=False) as test_client:
        response = await test_client.get("/api/tags")

    assert response.status_code == 500
    assert response.json()["details"] == {"error": "disk full"}


@pytest.mark.asyncio
async def test_user_vote_routes(client):
    question = await _post_question(client)
    answer = (
        await client.post(
            f"/api/questions/{question['id']}/answers",
            json={"content": "An answer", "authorId": "u-helper"},
        )
    ).json()

    await client.post(f"/api/questions/{question['id']}/vote", json={"voteType": -1, "userId": "u-voter"})

    on_question = await client.get(f"/api/questions/{question['id']}/vote", params={"userId": "u-voter"})
    on_answer = await client.get(f"/api/answers/{answer['id']}/vote", params={"userId": "u-voter"})
    missing = await client.get("/api/answers/9999/vote", params={"userId": "u-voter"})

    assert on_question.json() == {"userId": "u-voter", "voteType": -1}
    assert on_answer.json() == {"userId": "u-voter", "voteType": None}
    assert missing.status_code == 404
    assert missing.json()["error"] == "ANSWER_NOT_FOUND"


@pytest.mark.asyncio
async def test_configured_accept_policy_is_enforced(client):
    question = await _post_question(client)
    answer = (
        await client.post(
            f"/api/questions/{question['id']}/answers",
            json={"content": "An answer", "authorId": "u-helper"},
        )
    ).json()

    app.dependency_overrides[get_settings] = lambda: Settings(_env_file=None, accept_policy="question_author")
    try:
        refused = await client.post(f"/api/answers/{answer['id']}/accept", json={"userId": "u-helper"})
        accepted = await client.post(f"/api/answers/{answer['id']}/accept", json={"userId": "u-author"})
    finally:
        app.dependency_overrides.pop(get_settings, None)

    assert refused.status_code == 403
    assert refused.json()["error"] == "ACCEPT_NOT_ALLOWED"
    assert accepted.status_code == 200
