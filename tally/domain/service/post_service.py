"""Post domain service."""

from typing import Optional
from uuid import uuid4

import logfire

from tally.config import RankingSettings
from tally.domain.error import NotAuthorizedError, NotFoundError
from tally.domain.model import Post
from tally.domain.repository import PostRepository, PostSortOrder
from tally.domain.value import PostId, UserId
from tally.util.clock import Clock

from .base import Service
from .ranking import PostScorer


class PostService(Service):
    """Domain service for post operations."""

    def __init__(
        self,
        post_repository: PostRepository,
        ranking_settings: RankingSettings,
        clock: Clock,
    ) -> None:
        """Initialize post service.

        Args:
            post_repository: Post repository
            ranking_settings: Used to seed the rank of new posts
            clock: Time source for creation and deletion timestamps
        """
        self.post_repository = post_repository
        self.clock = clock
        self.scorer = PostScorer(ranking_settings)

    async def create_post(
        self,
        author_id: UserId,
        title: str,
        link: Optional[str] = None,
        text: Optional[str] = None,
    ) -> Post:
        """Create a post with a seeded time score and initial rank.

        The rank is computed right away so new posts show up in the ranked
        listing before the next ranking pass.

        Args:
            author_id: Author user ID
            title: Post title
            link: Optional URL
            text: Optional body

        Returns:
            Created post
        """
        with logfire.span(
            "post_service.create_post", author_id=str(author_id), title=title
        ):
            now = self.clock.now()
            post = Post(
                id=PostId(uuid4()),
                author_id=author_id,
                title=title,
                link=link,
                text=text,
                created_at=now,
            )
            seeded = self.scorer.rank_post(post, now)
            post = post.model_copy(
                update={"time_score": seeded.time_score, "rank": seeded.rank}
            )

            saved = await self.post_repository.save(post)
            logfire.info("Post created", post_id=str(saved.id), rank=saved.rank)
            return saved

    async def get_post_by_id(self, post_id: PostId) -> Post | None:
        """Get a non-deleted post by ID.

        Args:
            post_id: Post ID

        Returns:
            Post if found, None otherwise
        """
        with logfire.span("post_service.get_post_by_id", post_id=str(post_id)):
            post = await self.post_repository.find_by_id(post_id)

            if post and not post.is_deleted:
                logfire.info("Post found", post_id=str(post_id), title=post.title)
                return post

            logfire.warn("Post not found", post_id=str(post_id))
            return None

    async def list_posts(
        self,
        sort: PostSortOrder = PostSortOrder.RANK,
        limit: int = 30,
        offset: int = 0,
    ) -> tuple[list[Post], int]:
        """List non-deleted posts.

        Args:
            sort: Rank (rank DESC, then newest) or recent (newest first)
            limit: Page size
            offset: Number of posts to skip

        Returns:
            Tuple of (posts, total count)
        """
        with logfire.span(
            "post_service.list_posts", sort=sort.value, limit=limit, offset=offset
        ):
            posts = await self.post_repository.find_all(
                sort=sort, limit=limit, offset=offset
            )
            total = await self.post_repository.count()
            logfire.info("Posts listed", count=len(posts), total=total)
            return posts, total

    async def delete_post(self, post_id: PostId, user_id: UserId) -> None:
        """Soft delete a post. Only the author may delete it.

        Votes on the post are left as they are.

        Args:
            post_id: Post ID
            user_id: Caller

        Raises:
            NotFoundError: If the post does not exist or is already deleted
            NotAuthorizedError: If the caller is not the author
        """
        with logfire.span(
            "post_service.delete_post", post_id=str(post_id), user_id=str(user_id)
        ):
            post = await self.post_repository.find_by_id(post_id)
            if post is None or post.is_deleted:
                raise NotFoundError("Post", str(post_id))

            if post.author_id != user_id:
                logfire.warn(
                    "Unauthorized post deletion attempt",
                    post_id=str(post_id),
                    author_id=str(post.author_id),
                    user_id=str(user_id),
                )
                raise NotAuthorizedError("post", str(post_id), str(user_id))

            deleted = await self.post_repository.soft_delete(post_id, self.clock.now())
            if not deleted:
                # Deleted by a concurrent request
                raise NotFoundError("Post", str(post_id))

            logfire.info("Post deleted", post_id=str(post_id))

    async def increment_comment_count(self, post_id: PostId) -> None:
        """Atomically increment a post's comment count.

        Args:
            post_id: Post ID
        """
        with logfire.span("post_service.increment_comment_count", post_id=str(post_id)):
            await self.post_repository.increment_comment_count(post_id)
            logfire.info("Comment count incremented", post_id=str(post_id))
