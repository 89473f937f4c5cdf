"""Unit tests for ReconciliationService."""

from datetime import timedelta
from uuid import uuid4

import pytest

from tally.domain.error import NotFoundError
from tally.domain.repository import CommentRepository, PostRepository
from tally.domain.service import ReconciliationService, VoteService
from tally.domain.value import ResourceType, UserId, VoteCounter, VoteDirection
from tally.util.clock import Clock
from tests.factories import make_comment, make_post
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


async def _vote(env, resource_id, resource_type, directions):
    vote_service = await env.get(VoteService)
    for direction in directions:
        await vote_service.apply_vote(
            UserId(uuid4()), resource_id, resource_type, direction
        )


class TestReconcile:
    """Tests for reconcile."""

    @pytest.mark.asyncio
    async def test_repairs_drifted_post_counters(self, unit_env):
        service = await unit_env.get(ReconciliationService)
        post_repo = await unit_env.get(PostRepository)
        post = await post_repo.save(make_post())
        await _vote(
            unit_env,
            post.id,
            ResourceType.POST,
            [VoteDirection.UP, VoteDirection.UP, VoteDirection.DOWN],
        )
        # Simulate a lost score increment
        await post_repo.increment_counter(post.id, VoteCounter.SCORE, 5)

        repaired = await service.reconcile(ResourceType.POST, post.id)

        stored = await post_repo.find_by_id(post.id)
        assert repaired is True
        assert (stored.count_up, stored.count_down, stored.score) == (2, 1, 1)

    @pytest.mark.asyncio
    async def test_consistent_counters_are_left_alone(self, unit_env):
        service = await unit_env.get(ReconciliationService)
        comment_repo = await unit_env.get(CommentRepository)
        post_repo = await unit_env.get(PostRepository)
        post = await post_repo.save(make_post())
        comment = await comment_repo.save(make_comment(post.id))
        await _vote(unit_env, comment.id, ResourceType.COMMENT, [VoteDirection.DOWN])

        repaired = await service.reconcile(ResourceType.COMMENT, comment.id)

        stored = await comment_repo.find_by_id(comment.id)
        assert repaired is False
        assert stored.score == -1

    @pytest.mark.asyncio
    async def test_missing_resource_raises_not_found(self, unit_env):
        service = await unit_env.get(ReconciliationService)

        with pytest.raises(NotFoundError):
            await service.reconcile(ResourceType.POST, uuid4())


class TestReconcileActivePosts:
    """Tests for the active post sweep."""

    @pytest.mark.asyncio
    async def test_sweep_repairs_only_active_posts(self, unit_env):
        service = await unit_env.get(ReconciliationService)
        post_repo = await unit_env.get(PostRepository)
        clock = await unit_env.get(Clock)
        drifted = await post_repo.save(
            make_post(created_at=clock.now(), count_up=3, score=3)
        )
        healthy = await post_repo.save(make_post(created_at=clock.now()))
        stale = await post_repo.save(
            make_post(
                created_at=clock.now() - timedelta(days=3),
                count_up=9,
                score=9,
                time_score=0,
            )
        )

        repaired = await service.reconcile_active_posts(clock.now())

        assert repaired == 1
        assert (await post_repo.find_by_id(drifted.id)).score == 0
        assert (await post_repo.find_by_id(healthy.id)).score == 0
        # Outside the active set, left for a later targeted repair
        assert (await post_repo.find_by_id(stale.id)).score == 9
