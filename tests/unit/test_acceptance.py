"""Tests for answer acceptance."""

import pytest

from askboard.core import AskBoardException, ForbiddenException, NotFoundException, Settings
from askboard.services import (
    AcceptanceManager,
    QAService,
    allow_any,
    get_acceptance_policy,
    question_author_only,
)


async def _accepted_ids(qa, question_id):
    return [a.id for a in await qa.list_answers(question_id) if a.is_accepted]


@pytest.mark.asyncio
async def test_accepting_another_answer_moves_acceptance(qa, ask):
    question = await ask()
    first = await qa.create_answer(question.id, "Answer A", "u-a")
    second = await qa.create_answer(question.id, "Answer B", "u-b")

    await qa.accept_answer(first.id)
    accepted = await qa.accept_answer(second.id)

    assert accepted.id == second.id
    assert accepted.is_accepted is True
    assert await _accepted_ids(qa, question.id) == [second.id]
    assert await qa.answer_repo.count_accepted_for_question(question.id) == 1


@pytest.mark.asyncio
async def test_accepting_twice_is_a_no_op(qa, ask):
    question = await ask()
    answer = await qa.create_answer(question.id, "Answer A", "u-a")
    await qa.create_answer(question.id, "Answer B", "u-b")

    await qa.accept_answer(answer.id)
    await qa.accept_answer(answer.id)

    assert await _accepted_ids(qa, question.id) == [answer.id]


@pytest.mark.asyncio
async def test_acceptance_is_scoped_to_the_question(qa, ask):
    q1 = await ask(title="First question title")
    q2 = await ask(title="Second question title")
    a1 = await qa.create_answer(q1.id, "Answer one", "u-a")
    a2 = await qa.create_answer(q2.id, "Answer two", "u-b")

    await qa.accept_answer(a1.id)
    await qa.accept_answer(a2.id)

    assert await _accepted_ids(qa, q1.id) == [a1.id]
    assert await _accepted_ids(qa, q2.id) == [a2.id]


@pytest.mark.asyncio
async def test_accepted_answer_is_listed_first(qa, ask):
    question = await ask()
    older = await qa.create_answer(question.id, "Older answer", "u-a")
    await qa.create_answer(question.id, "Newer answer", "u-b")

    await qa.accept_answer(older.id)

    answers = await qa.list_answers(question.id)
    assert answers[0].id == older.id


@pytest.mark.asyncio
async def test_accept_missing_answer(qa):
    with pytest.raises(NotFoundException) as exc_info:
        await qa.accept_answer(424242)

    assert exc_info.value.code == "ANSWER_NOT_FOUND"


@pytest.mark.asyncio
async def test_question_author_policy(db_session, ask, qa):
    question = await ask(author_id="owner")
    answer = await qa.create_answer(question.id, "Answer", "helper")
    manager = AcceptanceManager(db_session, policy=question_author_only)

    with pytest.raises(ForbiddenException) as exc_info:
        await manager.accept_answer(answer.id, actor_id="helper")
    assert exc_info.value.status_code == 403
    assert await _accepted_ids(qa, question.id) == []

    accepted = await manager.accept_answer(answer.id, actor_id="owner")
    assert accepted.is_accepted is True


@pytest.mark.asyncio
async def test_service_passes_custom_policy(db_session, ask):
    calls = []

    def record(question, answer, actor_id):
        calls.append((question.id, answer.id, actor_id))
        return True

    service = QAService(db_session, acceptance_policy=record)
    question = await ask()
    answer = await service.create_answer(question.id, "Answer", "u-a")

    await service.accept_answer(answer.id, actor_id="someone")

    assert calls == [(question.id, answer.id, "someone")]


def test_policy_lookup():
    assert get_acceptance_policy("any") is allow_any
    assert get_acceptance_policy("question_author") is question_author_only

    with pytest.raises(AskBoardException) as exc_info:
        get_acceptance_policy("moderators")
    assert exc_info.value.code == "UNKNOWN_ACCEPT_POLICY"


@pytest.mark.asyncio
async def test_service_uses_configured_policy(db_session, ask):
    service = QAService(db_session, config=Settings(_env_file=None, accept_policy="question_author"))
    question = await ask(author_id="owner")
    answer = await service.create_answer(question.id, "Answer", "helper")

    with pytest.raises(ForbiddenException):
        await service.accept_answer(answer.id, actor_id="stranger")

    accepted = await service.accept_answer(answer.id, actor_id="owner")
    assert accepted.is_accepted is True


@pytest.mark.asyncio
async def test_policy_from_local_yaml(db_session, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("askboard.config.get_global_config_path", lambda: tmp_path / "global.yaml")
    monkeypatch.delenv("ASKBOARD_ACCEPT_POLICY", raising=False)
    (tmp_path / "askboard.yaml").write_text("accept_policy: question_author\n")

    service = QAService(db_session)

    assert service.config.accept_policy == "question_author"
    assert service.acceptance.policy is question_author_only
