"""Unit tests for CommentService."""

from uuid import uuid4

import pytest

from tally.domain.error import InvalidArgumentError, NotFoundError
from tally.domain.repository import CommentRepository, PostRepository
from tally.domain.service import CommentService
from tally.domain.value import CommentId, PostId, UserId
from tally.util.clock import Clock
from tests.factories import make_comment, make_post
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


class TestCreateComment:
    """Tests for create_comment."""

    @pytest.mark.asyncio
    async def test_comment_increments_post_comment_count(self, unit_env):
        comment_service = await unit_env.get(CommentService)
        post_repo = await unit_env.get(PostRepository)
        post = await post_repo.save(make_post())

        comment = await comment_service.create_comment(
            post_id=post.id, author_id=UserId(uuid4()), text="First!"
        )

        stored = await post_repo.find_by_id(post.id)
        assert comment.post_id == post.id
        assert comment.parent_id is None
        assert (comment.count_up, comment.count_down, comment.score) == (0, 0, 0)
        assert stored.comment_count == 1

    @pytest.mark.asyncio
    async def test_reply_to_comment_on_same_post(self, unit_env):
        comment_service = await unit_env.get(CommentService)
        post_repo = await unit_env.get(PostRepository)
        post = await post_repo.save(make_post())
        parent = await comment_service.create_comment(
            post_id=post.id, author_id=UserId(uuid4()), text="Parent"
        )

        reply = await comment_service.create_comment(
            post_id=post.id,
            author_id=UserId(uuid4()),
            text="Reply",
            parent_id=parent.id,
        )

        assert reply.parent_id == parent.id
        assert (await post_repo.find_by_id(post.id)).comment_count == 2

    @pytest.mark.asyncio
    async def test_parent_on_another_post_is_rejected(self, unit_env):
        comment_service = await unit_env.get(CommentService)
        post_repo = await unit_env.get(PostRepository)
        comment_repo = await unit_env.get(CommentRepository)
        post = await post_repo.save(make_post())
        other = await post_repo.save(make_post())
        foreign = await comment_repo.save(make_comment(other.id))

        with pytest.raises(InvalidArgumentError):
            await comment_service.create_comment(
                post_id=post.id,
                author_id=UserId(uuid4()),
                text="Wrong thread",
                parent_id=foreign.id,
            )

    @pytest.mark.asyncio
    async def test_missing_post_or_parent(self, unit_env):
        comment_service = await unit_env.get(CommentService)
        post_repo = await unit_env.get(PostRepository)
        post = await post_repo.save(make_post())

        with pytest.raises(NotFoundError):
            await comment_service.create_comment(
                post_id=PostId(uuid4()), author_id=UserId(uuid4()), text="Hello"
            )
        with pytest.raises(NotFoundError):
            await comment_service.create_comment(
                post_id=post.id,
                author_id=UserId(uuid4()),
                text="Hello",
                parent_id=CommentId(uuid4()),
            )


class TestGetComments:
    """Tests for get_comments_for_post."""

    @pytest.mark.asyncio
    async def test_oldest_first_without_deleted(self, unit_env):
        comment_service = await unit_env.get(CommentService)
        comment_repo = await unit_env.get(CommentRepository)
        post_repo = await unit_env.get(PostRepository)
        clock = await unit_env.get(Clock)
        post = await post_repo.save(make_post())

        first = await comment_service.create_comment(
            post_id=post.id, author_id=UserId(uuid4()), text="one"
        )
        clock.advance(minutes=1)
        second = await comment_service.create_comment(
            post_id=post.id, author_id=UserId(uuid4()), text="two"
        )
        await comment_repo.save(
            make_comment(post.id, created_at=clock.now(), deleted_at=clock.now())
        )

        comments = await comment_service.get_comments_for_post(post.id)
        everything = await comment_service.get_comments_for_post(
            post.id, include_deleted=True
        )

        assert [c.id for c in comments] == [first.id, second.id]
        assert len(everything) == 3

    @pytest.mark.asyncio
    async def test_missing_post(self, unit_env):
        comment_service = await unit_env.get(CommentService)

        with pytest.raises(NotFoundError):
            await comment_service.get_comments_for_post(PostId(uuid4()))
