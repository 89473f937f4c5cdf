"""Unit tests for CastVoteUseCase."""

from uuid import uuid4

import pytest

from tally.application.usecase.vote import CastVoteRequest, CastVoteUseCase
from tally.domain.error import ConflictError, InvalidArgumentError, UnauthenticatedError
from tally.domain.repository import PostRepository, VoteRepository
from tally.domain.value import VoteDirection, VoteOutcome
from tests.factories import make_post
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


def _request(post_id, user_id, direction="up", resource_type="post") -> CastVoteRequest:
    return CastVoteRequest(
        resource_id=str(post_id),
        resource_type=resource_type,
        direction=direction,
        user_id=str(user_id) if user_id else None,
    )


class TestCastVote:
    """Tests for the cast vote flow."""

    @pytest.mark.asyncio
    async def test_cast_vote_returns_transition_and_score(self, unit_env):
        use_case = await unit_env.get(CastVoteUseCase)
        post_repo = await unit_env.get(PostRepository)
        post = await post_repo.save(make_post())
        user_id = uuid4()

        created = await use_case.execute(_request(post.id, user_id, "up"))
        changed = await use_case.execute(_request(post.id, user_id, "down"))
        removed = await use_case.execute(_request(post.id, user_id, "down"))

        assert (created.result, created.direction, created.score) == (
            VoteOutcome.CREATED,
            VoteDirection.UP,
            1,
        )
        assert (changed.result, changed.direction, changed.score) == (
            VoteOutcome.CHANGED,
            VoteDirection.DOWN,
            -1,
        )
        assert (removed.result, removed.direction, removed.score) == (
            VoteOutcome.REMOVED,
            None,
            0,
        )

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "field, value",
        [
            ("direction", "sideways"),
            ("resource_type", "user"),
            ("resource_id", "42"),
            ("user_id", "not-a-uuid"),
        ],
    )
    async def test_bad_values_are_invalid_arguments(self, unit_env, field, value):
        use_case = await unit_env.get(CastVoteUseCase)
        post_repo = await unit_env.get(PostRepository)
        post = await post_repo.save(make_post())
        request = _request(post.id, uuid4()).model_copy(update={field: value})

        with pytest.raises(InvalidArgumentError):
            await use_case.execute(request)

    @pytest.mark.asyncio
    async def test_anonymous_vote_is_unauthenticated(self, unit_env):
        use_case = await unit_env.get(CastVoteUseCase)
        post_repo = await unit_env.get(PostRepository)
        post = await post_repo.save(make_post())

        with pytest.raises(UnauthenticatedError):
            await use_case.execute(_request(post.id, None))


class TestConflictRetry:
    """Tests for re-applying a vote after a concurrent change."""

    @pytest.mark.asyncio
    async def test_duplicate_create_is_retried_against_current_state(
        self, unit_env, monkeypatch
    ):
        """A racing duplicate 'up' turns into a removal instead of a second vote."""
        use_case = await unit_env.get(CastVoteUseCase)
        post_repo = await unit_env.get(PostRepository)
        vote_repo = await unit_env.get(VoteRepository)
        post = await post_repo.save(make_post())
        user_id = uuid4()
        await use_case.execute(_request(post.id, user_id, "up"))

        # The next read is stale, as if it ran before the first vote landed
        real_find = vote_repo.find_by_user_and_resource
        stale_reads = [None]

        async def racing_find(*args):
            if stale_reads:
                return stale_reads.pop()
            return await real_find(*args)

        monkeypatch.setattr(vote_repo, "find_by_user_and_resource", racing_find)

        response = await use_case.execute(_request(post.id, user_id, "up"))

        stored = await post_repo.find_by_id(post.id)
        assert response.result == VoteOutcome.REMOVED
        assert response.score == 0
        assert (stored.count_up, stored.count_down, stored.score) == (0, 0, 0)

    @pytest.mark.asyncio
    async def test_persistent_conflict_is_raised(self, unit_env, monkeypatch):
        use_case = await unit_env.get(CastVoteUseCase)
        post_repo = await unit_env.get(PostRepository)
        vote_repo = await unit_env.get(VoteRepository)
        post = await post_repo.save(make_post())
        user_id = uuid4()
        await use_case.execute(_request(post.id, user_id, "up"))

        async def always_stale(*args):
            return None

        async def duplicate(vote):
            raise ConflictError("Duplicate vote")

        monkeypatch.setattr(vote_repo, "find_by_user_and_resource", always_stale)
        monkeypatch.setattr(vote_repo, "save", duplicate)

        with pytest.raises(ConflictError):
            await use_case.execute(_request(post.id, user_id, "down"))

        # Conflicts never touch the counters
        stored = await post_repo.find_by_id(post.id)
        assert (stored.count_up, stored.count_down, stored.score) == (1, 0, 1)
