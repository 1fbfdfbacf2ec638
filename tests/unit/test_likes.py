"""Unit tests for the like toggle."""

import asyncio
import random
import uuid
from types import SimpleNamespace

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_api.errors import BadRequest, NotFound
from portfolio_api.kernel.identity import IdentityService
from portfolio_api.kernel.models import User
from portfolio_api.services import ForumService, LikeState, ProjectService
from portfolio_api.services.likes import LikeToggle

PROJECT = {"title": "Portfolio site", "description": "A personal site built with FastAPI"}


@pytest.mark.asyncio
async def test_toggle_twice_restores_state(db_session: AsyncSession, alice: User, bob: User):
    service = ProjectService(db_session)
    project = await service.create(alice.id, PROJECT)

    liked = await service.toggle_like(bob.id, project.id)
    assert liked.state is LikeState.LIKED
    assert liked.liked
    assert liked.likes_count == 1

    unliked = await service.toggle_like(bob.id, project.id)
    assert unliked.state is LikeState.UNLIKED
    assert unliked.likes_count == 0
    assert not await service.likes.is_member(project.id, bob.id)


@pytest.mark.asyncio
async def test_owner_may_like_own_entity(db_session: AsyncSession, alice: User):
    service = ForumService(db_session)
    forum = await service.create(alice.id, {"title": "General", "description": "Talk about anything"})

    result = await service.toggle_like(alice.id, forum.id)
    assert result.likes_count == 1

    reloaded = await service.get(forum.id)
    assert [user.id for user in reloaded.liked_by] == [alice.id]


@pytest.mark.asyncio
async def test_interleaved_toggles_by_many_users(db_session: AsyncSession, alice: User):
    identity = IdentityService(db_session)
    users = [
        await identity.register_user(f"user{i}", f"user{i}@example.com", "secret123")
        for i in range(6)
    ]
    service = ProjectService(db_session)
    project = await service.create(alice.id, PROJECT)

    # user i toggles i + 1 times; odd counts end liked
    toggles = [user.id for i, user in enumerate(users) for _ in range(i + 1)]
    random.Random(7).shuffle(toggles)
    for user_id in toggles:
        await service.toggle_like(user_id, project.id)

    expected = {user.id for i, user in enumerate(users) if (i + 1) % 2 == 1}
    assert await service.likes.count(project.id) == len(expected)
    reloaded = await service.get(project.id)
    assert {user.id for user in reloaded.liked_by} == expected


@pytest.mark.asyncio
async def test_like_missing_or_malformed_entity(db_session: AsyncSession, alice: User):
    service = ProjectService(db_session)

    with pytest.raises(NotFound):
        await service.toggle_like(alice.id, uuid.uuid4())
    with pytest.raises(BadRequest):
        await service.toggle_like(alice.id, "nope")


@pytest.mark.asyncio
async def test_concurrent_toggles_from_separate_sessions(
    db_session: AsyncSession, session_maker, alice: User
):
    identity = IdentityService(db_session)
    users = [
        await identity.register_user(f"fan{i}", f"fan{i}@example.com", "secret123")
        for i in range(8)
    ]
    project = await ProjectService(db_session).create(alice.id, PROJECT)
    await db_session.commit()

    async def toggle(user_id):
        async with session_maker() as session:
            result = await ProjectService(session).toggle_like(user_id, project.id)
            await session.commit()
            return result

    liked = await asyncio.gather(*(toggle(user.id) for user in users))
    assert all(result.liked for result in liked)

    async with session_maker() as session:
        assert await ProjectService(session).likes.count(project.id) == 8

    unliked = await asyncio.gather(*(toggle(user.id) for user in users[:4]))
    assert not any(result.liked for result in unliked)

    async with session_maker() as session:
        assert await ProjectService(session).likes.count(project.id) == 4


def test_like_toggle_refuses_unsupported_dialect():
    bind = SimpleNamespace(dialect=SimpleNamespace(name="mysql"))
    session = SimpleNamespace(get_bind=lambda: bind)
    toggle = LikeToggle(session, ProjectService.likes_table, ProjectService.likes_column, "Project")

    with pytest.raises(RuntimeError):
        toggle._insert_if_absent(uuid.uuid4(), uuid.uuid4())
