"""Unit tests for the comment use cases."""

from uuid import uuid4

import pytest

from tally.application.usecase.comment import (
    CreateCommentRequest,
    CreateCommentUseCase,
    GetCommentsRequest,
    GetCommentsUseCase,
)
from tally.application.usecase.vote import CastVoteRequest, CastVoteUseCase
from tally.domain.error import InvalidArgumentError, UnauthenticatedError
from tally.domain.repository import PostRepository
from tally.domain.value import VoteDirection
from tests.factories import make_post
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


class TestCreateComment:
    """Tests for CreateCommentUseCase."""

    @pytest.mark.asyncio
    async def test_creates_reply(self, unit_env):
        use_case = await unit_env.get(CreateCommentUseCase)
        post_repo = await unit_env.get(PostRepository)
        post = await post_repo.save(make_post())

        parent = await use_case.execute(
            CreateCommentRequest(post_id=str(post.id), text="top", author_id=str(uuid4()))
        )
        reply = await use_case.execute(
            CreateCommentRequest(
                post_id=str(post.id),
                text="reply",
                author_id=str(uuid4()),
                parent_id=parent.comment_id,
            )
        )

        assert parent.parent_id is None
        assert reply.parent_id == parent.comment_id

    @pytest.mark.asyncio
    async def test_requires_author(self, unit_env):
        use_case = await unit_env.get(CreateCommentUseCase)

        with pytest.raises(UnauthenticatedError):
            await use_case.execute(CreateCommentRequest(post_id=str(uuid4()), text="x"))

    @pytest.mark.asyncio
    async def test_empty_text_is_invalid(self, unit_env):
        use_case = await unit_env.get(CreateCommentUseCase)
        post_repo = await unit_env.get(PostRepository)
        post = await post_repo.save(make_post())

        with pytest.raises(InvalidArgumentError):
            await use_case.execute(
                CreateCommentRequest(post_id=str(post.id), text="", author_id=str(uuid4()))
            )

    @pytest.mark.asyncio
    async def test_malformed_parent_id(self, unit_env):
        use_case = await unit_env.get(CreateCommentUseCase)

        with pytest.raises(InvalidArgumentError):
            await use_case.execute(
                CreateCommentRequest(
                    post_id=str(uuid4()),
                    text="x",
                    author_id=str(uuid4()),
                    parent_id="nope",
                )
            )


class TestGetComments:
    """Tests for GetCommentsUseCase."""

    @pytest.mark.asyncio
    async def test_comments_carry_callers_votes(self, unit_env):
        create_comment = await unit_env.get(CreateCommentUseCase)
        cast_vote = await unit_env.get(CastVoteUseCase)
        use_case = await unit_env.get(GetCommentsUseCase)
        post_repo = await unit_env.get(PostRepository)
        post = await post_repo.save(make_post())
        voter = str(uuid4())
        comment = await create_comment.execute(
            CreateCommentRequest(post_id=str(post.id), text="hi", author_id=str(uuid4()))
        )
        await cast_vote.execute(
            CastVoteRequest(
                resource_id=comment.comment_id,
                resource_type="comment",
                direction="down",
                user_id=voter,
            )
        )

        response = await use_case.execute(
            GetCommentsRequest(post_id=str(post.id), user_id=voter)
        )

        assert response.total == 1
        item = response.comments[0]
        assert item.vote == VoteDirection.DOWN
        assert (item.count_down, item.score) == (1, -1)
