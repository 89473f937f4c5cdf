"""In-memory post repository for testing."""

from datetime import datetime
from typing import Optional, Sequence

from tally.domain.model import Post, RankUpdate
from tally.domain.repository.post import PostRepository, PostSortOrder
from tally.domain.value import PostId, RankingCursor

from .store import InMemoryStore
from .votable import InMemoryVotableMixin


class InMemoryPostRepository(InMemoryVotableMixin[Post], PostRepository):
    """In-memory implementation of PostRepository for testing."""

    resource_name = "post"

    def __init__(self, store: InMemoryStore | None = None) -> None:
        self._store = store or InMemoryStore()
        self._items = self._store.posts

    @property
    def _posts(self) -> dict[PostId, Post]:
        return self._store.posts

    async def find_by_id(self, resource_id: PostId) -> Optional[Post]:
        """Find a post by ID."""
        return self._posts.get(resource_id)

    async def find_by_ids(self, resource_ids: Sequence[PostId]) -> list[Post]:
        """Find several posts."""
        return [self._posts[i] for i in set(resource_ids) if i in self._posts]

    async def find_all(
        self,
        sort: PostSortOrder = PostSortOrder.RANK,
        limit: int = 30,
        offset: int = 0,
    ) -> list[Post]:
        """Find non-deleted posts with pagination."""
        posts = [p for p in self._posts.values() if p.deleted_at is None]

        if sort == PostSortOrder.RANK:
            posts.sort(key=lambda p: (p.rank, p.created_at, p.id), reverse=True)
        else:
            posts.sort(key=lambda p: (p.created_at, p.id), reverse=True)

        return posts[offset : offset + limit]

    async def count(self) -> int:
        """Count non-deleted posts."""
        return sum(1 for p in self._posts.values() if p.deleted_at is None)

    async def find_active(
        self,
        created_after: datetime,
        time_score_floor: int,
        after: Optional[RankingCursor] = None,
        limit: int = 1000,
    ) -> list[Post]:
        """Find one keyset page of posts for the ranking pass."""
        posts = [
            p
            for p in self._posts.values()
            if p.deleted_at is None
            and (p.created_at >= created_after or p.time_score > time_score_floor)
        ]
        if after is not None:
            posts = [
                p for p in posts if (p.created_at, p.id) < (after.created_at, after.post_id)
            ]
        posts.sort(key=lambda p: (p.created_at, p.id), reverse=True)
        return posts[:limit]

    async def find_top_by_score(
        self,
        created_after: datetime,
        limit: int,
    ) -> list[Post]:
        """Find recent posts with the highest net vote score."""
        posts = [
            p
            for p in self._posts.values()
            if p.deleted_at is None and p.created_at >= created_after
        ]
        posts.sort(key=lambda p: (p.score, p.created_at, p.id), reverse=True)
        return posts[:limit]

    async def update_ranks(self, updates: Sequence[RankUpdate]) -> None:
        """Write ranking values for many posts."""
        for update in updates:
            post = self._posts.get(update.post_id)
            if post is not None:
                self._posts[update.post_id] = post.model_copy(
                    update={"time_score": update.time_score, "rank": update.rank}
                )

    async def save(self, post: Post) -> Post:
        """Save a post."""
        self._posts[post.id] = post
        return post

    async def soft_delete(self, post_id: PostId, deleted_at: datetime) -> bool:
        """Mark a post as deleted unless it already is."""
        post = self._posts.get(post_id)
        if post is None or post.deleted_at is not None:
            return False
        self._posts[post_id] = post.model_copy(update={"deleted_at": deleted_at})
        return True

    async def increment_comment_count(self, post_id: PostId) -> None:
        """Increment comment count by 1."""
        post = self._posts.get(post_id)
        if post is not None:
            self._posts[post_id] = post.model_copy(
                update={"comment_count": post.comment_count + 1}
            )
