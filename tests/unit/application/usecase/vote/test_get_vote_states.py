"""Unit tests for the vote state use cases."""

from uuid import uuid4

import pytest

from tally.application.usecase.vote import (
    CastVoteRequest,
    CastVoteUseCase,
    GetVoteStateRequest,
    GetVoteStateUseCase,
    GetVoteStatesRequest,
    GetVoteStatesUseCase,
    ResourceItem,
)
from tally.application.usecase.vote.get_vote_states import MAX_BATCH_SIZE
from tally.domain.error import InvalidArgumentError, NotFoundError
from tally.domain.repository import PostRepository
from tally.domain.value import VoteDirection
from tests.factories import make_post
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


class TestGetVoteState:
    """Tests for the single resource lookup."""

    @pytest.mark.asyncio
    async def test_returns_callers_direction(self, unit_env):
        cast_vote = await unit_env.get(CastVoteUseCase)
        use_case = await unit_env.get(GetVoteStateUseCase)
        post_repo = await unit_env.get(PostRepository)
        post = await post_repo.save(make_post())
        user_id = str(uuid4())
        await cast_vote.execute(
            CastVoteRequest(
                resource_id=str(post.id),
                resource_type="post",
                direction="down",
                user_id=user_id,
            )
        )

        response = await use_case.execute(
            GetVoteStateRequest(resource_id=str(post.id), user_id=user_id)
        )

        assert response.direction == VoteDirection.DOWN
        assert (response.count_up, response.count_down, response.score) == (0, 1, -1)

    @pytest.mark.asyncio
    async def test_unknown_resource(self, unit_env):
        use_case = await unit_env.get(GetVoteStateUseCase)

        with pytest.raises(NotFoundError):
            await use_case.execute(GetVoteStateRequest(resource_id=str(uuid4())))

    @pytest.mark.asyncio
    async def test_malformed_id(self, unit_env):
        use_case = await unit_env.get(GetVoteStateUseCase)

        with pytest.raises(InvalidArgumentError):
            await use_case.execute(GetVoteStateRequest(resource_id="abc"))


class TestGetVoteStates:
    """Tests for the batch lookup."""

    @pytest.mark.asyncio
    async def test_every_requested_id_is_answered(self, unit_env):
        use_case = await unit_env.get(GetVoteStatesUseCase)
        post_repo = await unit_env.get(PostRepository)
        post = await post_repo.save(make_post(count_up=2, score=2))
        missing = str(uuid4())

        response = await use_case.execute(
            GetVoteStatesRequest(
                resources=[
                    ResourceItem(resource_id=str(post.id)),
                    ResourceItem(resource_id=missing, resource_type="comment"),
                    ResourceItem(resource_id="garbage"),
                ],
                user_id=str(uuid4()),
            )
        )

        assert set(response.votes) == {str(post.id), missing, "garbage"}
        assert response.votes[str(post.id)].score == 2
        assert response.votes[missing].direction is None
        assert response.votes["garbage"].score == 0

    @pytest.mark.asyncio
    async def test_unknown_resource_type_rejects_request(self, unit_env):
        use_case = await unit_env.get(GetVoteStatesUseCase)

        with pytest.raises(InvalidArgumentError):
            await use_case.execute(
                GetVoteStatesRequest(
                    resources=[ResourceItem(resource_id=str(uuid4()), resource_type="user")]
                )
            )

    @pytest.mark.asyncio
    async def test_batch_size_is_bounded(self, unit_env):
        use_case = await unit_env.get(GetVoteStatesUseCase)
        resources = [
            ResourceItem(resource_id=str(uuid4())) for _ in range(MAX_BATCH_SIZE + 1)
        ]

        with pytest.raises(InvalidArgumentError):
            await use_case.execute(GetVoteStatesRequest(resources=resources))
