"""Unit tests for the in-memory repositories."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from tally.domain.error import ConflictError, NotFoundError
from tally.domain.model import Vote
from tally.domain.value import (
    RankingCursor,
    ResourceType,
    UserId,
    VoteCounter,
    VoteDirection,
    VoteId,
)
from tally.persistence.repository.inmemory import (
    InMemoryPostRepository,
    InMemoryStore,
    InMemoryVoteRepository,
)
from tests.factories import make_post

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def _vote(user_id, resource_id, direction=VoteDirection.UP) -> Vote:
    return Vote(
        id=VoteId(uuid4()),
        user_id=user_id,
        resource_type=ResourceType.POST,
        resource_id=resource_id,
        direction=direction,
    )


class TestIncrementCounter:
    """Tests for atomic counter adjustments."""

    @pytest.mark.asyncio
    async def test_returns_new_value(self):
        repository = InMemoryPostRepository()
        post = await repository.save(make_post())

        assert await repository.increment_counter(post.id, VoteCounter.COUNT_UP, 1) == 1
        assert await repository.increment_counter(post.id, VoteCounter.SCORE, -3) == -3

    @pytest.mark.asyncio
    async def test_respects_floor_and_ceiling(self):
        repository = InMemoryPostRepository()
        post = await repository.save(make_post())

        floored = await repository.increment_counter(
            post.id, VoteCounter.COUNT_DOWN, -1, minimum=0
        )
        capped = await repository.increment_counter(
            post.id, VoteCounter.COUNT_UP, 10, maximum=5
        )

        assert floored == 0
        assert capped == 5

    @pytest.mark.asyncio
    async def test_missing_resource(self):
        repository = InMemoryPostRepository()

        with pytest.raises(NotFoundError):
            await repository.increment_counter(uuid4(), VoteCounter.SCORE, 1)


class TestFindActive:
    """Tests for the ranking pass query."""

    @pytest.mark.asyncio
    async def test_active_filter_and_keyset_order(self):
        repository = InMemoryPostRepository()
        window = NOW - timedelta(hours=24)
        recent = await repository.save(make_post(created_at=NOW - timedelta(hours=1)))
        newest = await repository.save(make_post(created_at=NOW))
        decaying = await repository.save(
            make_post(created_at=NOW - timedelta(hours=30), time_score=4)
        )
        await repository.save(make_post(created_at=NOW - timedelta(hours=30), time_score=0))
        deleted = await repository.save(make_post(created_at=NOW))
        await repository.soft_delete(deleted.id, NOW)

        first = await repository.find_active(window, 0, limit=2)
        rest = await repository.find_active(
            window,
            0,
            after=RankingCursor(created_at=first[-1].created_at, post_id=first[-1].id),
            limit=2,
        )

        assert [p.id for p in first] == [newest.id, recent.id]
        assert [p.id for p in rest] == [decaying.id]


class TestVoteRepository:
    """Tests for vote uniqueness and compare-and-set."""

    @pytest.mark.asyncio
    async def test_duplicate_vote_conflicts(self):
        repository = InMemoryVoteRepository()
        user_id, post_id = UserId(uuid4()), uuid4()
        await repository.save(_vote(user_id, post_id))

        with pytest.raises(ConflictError):
            await repository.save(_vote(user_id, post_id, VoteDirection.DOWN))

    @pytest.mark.asyncio
    async def test_update_direction_is_compare_and_set(self):
        repository = InMemoryVoteRepository()
        vote = await repository.save(_vote(UserId(uuid4()), uuid4()))

        stale = await repository.update_direction(
            vote.id, VoteDirection.DOWN, VoteDirection.UP, NOW
        )
        flipped = await repository.update_direction(
            vote.id, VoteDirection.UP, VoteDirection.DOWN, NOW
        )

        assert stale is None
        assert flipped.direction == VoteDirection.DOWN
        assert flipped.updated_at == NOW

    @pytest.mark.asyncio
    async def test_delete_reports_whether_removed(self):
        repository = InMemoryVoteRepository()
        vote = await repository.save(_vote(UserId(uuid4()), uuid4()))

        assert await repository.delete(vote.id) is True
        assert await repository.delete(vote.id) is False

    @pytest.mark.asyncio
    async def test_repositories_share_a_store(self):
        store = InMemoryStore()
        post = await InMemoryPostRepository(store).save(make_post())

        assert await InMemoryPostRepository(store).find_by_id(post.id) == post
        assert await InMemoryPostRepository().find_by_id(post.id) is None
