"""Unit tests for PostService."""

from datetime import timedelta
from uuid import uuid4

import pytest
from pydantic import ValidationError

from tally.domain.error import NotAuthorizedError, NotFoundError
from tally.domain.repository import PostRepository, PostSortOrder
from tally.domain.service import PostService
from tally.domain.value import PostId, UserId
from tally.util.clock import Clock
from tests.factories import make_post
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


class TestCreatePost:
    """Tests for create_post."""

    @pytest.mark.asyncio
    async def test_new_post_is_seeded_and_ranked(self, unit_env):
        post_service = await unit_env.get(PostService)
        post_repo = await unit_env.get(PostRepository)
        clock = await unit_env.get(Clock)
        author_id = UserId(uuid4())

        post = await post_service.create_post(
            author_id=author_id, title="Show: a tiny ledger", link="https://ledger.dev"
        )

        stored = await post_repo.find_by_id(post.id)
        assert stored == post
        assert post.author_id == author_id
        assert post.created_at == clock.now()
        assert (post.count_up, post.count_down, post.score) == (0, 0, 0)
        assert post.time_score == 100
        assert post.rank > 0

    @pytest.mark.asyncio
    async def test_link_or_text_required(self, unit_env):
        post_service = await unit_env.get(PostService)

        with pytest.raises(ValidationError):
            await post_service.create_post(author_id=UserId(uuid4()), title="Empty")


class TestListPosts:
    """Tests for list_posts."""

    @pytest.mark.asyncio
    async def test_rank_order_then_newest(self, unit_env):
        post_service = await unit_env.get(PostService)
        post_repo = await unit_env.get(PostRepository)
        clock = await unit_env.get(Clock)
        now = clock.now()
        low = await post_repo.save(make_post(created_at=now, rank=10.0))
        high_old = await post_repo.save(
            make_post(created_at=now - timedelta(hours=1), rank=50.0)
        )
        high_new = await post_repo.save(make_post(created_at=now, rank=50.0))

        posts, total = await post_service.list_posts(sort=PostSortOrder.RANK)

        assert [p.id for p in posts] == [high_new.id, high_old.id, low.id]
        assert total == 3

    @pytest.mark.asyncio
    async def test_recent_order_and_paging(self, unit_env):
        post_service = await unit_env.get(PostService)
        post_repo = await unit_env.get(PostRepository)
        clock = await unit_env.get(Clock)
        posts = [
            await post_repo.save(
                make_post(created_at=clock.now() - timedelta(minutes=m))
            )
            for m in range(4)
        ]

        page, total = await post_service.list_posts(
            sort=PostSortOrder.RECENT, limit=2, offset=1
        )

        assert [p.id for p in page] == [posts[1].id, posts[2].id]
        assert total == 4

    @pytest.mark.asyncio
    async def test_deleted_posts_are_hidden(self, unit_env):
        post_service = await unit_env.get(PostService)
        post = await post_service.create_post(
            author_id=UserId(uuid4()), title="Gone soon", text="body"
        )
        await post_service.delete_post(post.id, post.author_id)

        posts, total = await post_service.list_posts()

        assert posts == []
        assert total == 0
        assert await post_service.get_post_by_id(post.id) is None


class TestDeletePost:
    """Tests for delete_post."""

    @pytest.mark.asyncio
    async def test_author_can_delete(self, unit_env):
        post_service = await unit_env.get(PostService)
        post_repo = await unit_env.get(PostRepository)
        post = await post_service.create_post(
            author_id=UserId(uuid4()), title="Mine", text="body"
        )

        await post_service.delete_post(post.id, post.author_id)

        stored = await post_repo.find_by_id(post.id)
        assert stored.is_deleted

    @pytest.mark.asyncio
    async def test_other_user_cannot_delete(self, unit_env):
        post_service = await unit_env.get(PostService)
        post = await post_service.create_post(
            author_id=UserId(uuid4()), title="Not yours", text="body"
        )

        with pytest.raises(NotAuthorizedError):
            await post_service.delete_post(post.id, UserId(uuid4()))

    @pytest.mark.asyncio
    async def test_missing_or_already_deleted(self, unit_env):
        post_service = await unit_env.get(PostService)
        post = await post_service.create_post(
            author_id=UserId(uuid4()), title="Twice", text="body"
        )
        await post_service.delete_post(post.id, post.author_id)

        with pytest.raises(NotFoundError):
            await post_service.delete_post(post.id, post.author_id)
        with pytest.raises(NotFoundError):
            await post_service.delete_post(PostId(uuid4()), post.author_id)
