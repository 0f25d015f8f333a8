"""Tests for user shadow records and profile activity."""

import pytest

from askboard.core import NotFoundException, ValidationException


@pytest.mark.asyncio
async def test_sync_user_inserts_then_refreshes(users):
    created = await users.sync_user("u1", email="a@example.com", first_name="Ada")
    assert created.email == "a@example.com"

    updated = await users.sync_user("u1", first_name="Ada", last_name="Lovelace")

    assert updated.id == "u1"
    assert updated.last_name == "Lovelace"
    # Fields not sent keep their stored value
    assert updated.email == "a@example.com"


@pytest.mark.asyncio
async def test_sync_user_fills_in_shadow_record(users, ask):
    await ask(author_id="late-sync")

    user = await users.sync_user("late-sync", email="late@example.com")

    assert user.email == "late@example.com"


@pytest.mark.asyncio
async def test_ensure_user_is_idempotent(users, db_session):
    await users.sync_user("u1", email="keep@example.com")

    await users.ensure_user("u1")
    await db_session.commit()

    user = await users.get_user("u1")
    assert user.email == "keep@example.com"


@pytest.mark.asyncio
async def test_blank_user_id_rejected(users):
    with pytest.raises(ValidationException) as exc_info:
        await users.ensure_user("  ")

    assert exc_info.value.code == "INVALID_USER_ID"


@pytest.mark.asyncio
async def test_get_missing_user(users):
    with pytest.raises(NotFoundException) as exc_info:
        await users.get_user("nobody")

    assert exc_info.value.code == "USER_NOT_FOUND"


@pytest.mark.asyncio
async def test_statistics(users, qa, ask):
    mine = await ask(author_id="me", title="My first question here")
    await ask(author_id="me", title="My second question here")
    other = await ask(author_id="other", title="Someone else's question")

    accepted = await qa.create_answer(other.id, "Accepted answer", "me")
    await qa.create_answer(mine.id, "Answering myself", "me")
    await qa.accept_answer(accepted.id)

    await qa.vote_question(other.id, "me", 1)
    await qa.vote_answer(accepted.id, "me", -1)
    await qa.vote_answer(accepted.id, "me", 1)

    stats = await users.get_statistics("me")

    assert stats.questions_asked == 2
    assert stats.answers_given == 2
    assert stats.accepted_answers == 1
    assert stats.votes_cast == 2


@pytest.mark.asyncio
async def test_user_questions_and_answers(users, qa, ask):
    older = await ask(author_id="me", title="My older question here")
    newer = await ask(author_id="me", title="My newer question here")
    await ask(author_id="other", title="Not my question at all")
    answer = await qa.create_answer(older.id, "My answer", "me")

    questions = await users.list_user_questions("me")
    answers = await users.list_user_answers("me")

    assert [q.id for q in questions] == [newer.id, older.id]
    assert [a.id for a in answers] == [answer.id]
    assert answers[0].question_title == "My older question here"


@pytest.mark.asyncio
async def test_statistics_for_missing_user(users):
    with pytest.raises(NotFoundException):
        await users.get_statistics("nobody")
