"""Comment domain service."""

from uuid import uuid4

import logfire

from tally.domain.error import InvalidArgumentError, NotFoundError
from tally.domain.model import Comment
from tally.domain.repository import CommentRepository, PostRepository
from tally.domain.value import CommentId, PostId, UserId
from tally.util.clock import Clock

from .base import Service


class CommentService(Service):
    """Domain service for comment operations."""

    def __init__(
        self,
        comment_repository: CommentRepository,
        post_repository: PostRepository,
        clock: Clock,
    ) -> None:
        """Initialize comment service.

        Args:
            comment_repository: Comment repository
            post_repository: Post repository (for comment counts)
            clock: Time source for creation timestamps
        """
        self.comment_repository = comment_repository
        self.post_repository = post_repository
        self.clock = clock

    async def create_comment(
        self,
        post_id: PostId,
        author_id: UserId,
        text: str,
        parent_id: CommentId | None = None,
    ) -> Comment:
        """Create a comment on a post or reply to another comment.

        Args:
            post_id: Post ID
            author_id: Author user ID
            text: Comment text
            parent_id: Parent comment ID for replies (None for top-level)

        Returns:
            Created comment

        Raises:
            NotFoundError: If the post or parent comment does not exist
            InvalidArgumentError: If the parent belongs to another post
        """
        with logfire.span(
            "comment_service.create_comment",
            post_id=str(post_id),
            author_id=str(author_id),
            parent_id=str(parent_id) if parent_id else None,
        ):
            post = await self.post_repository.find_by_id(post_id)
            if post is None or post.is_deleted:
                logfire.warn("Comment on non-existent post", post_id=str(post_id))
                raise NotFoundError("Post", str(post_id))

            if parent_id:
                parent = await self.comment_repository.find_by_id(parent_id)
                if parent is None or parent.is_deleted:
                    logfire.error(
                        "Parent comment not found",
                        parent_id=str(parent_id),
                        post_id=str(post_id),
                    )
                    raise NotFoundError("Comment", str(parent_id))
                if parent.post_id != post_id:
                    logfire.error(
                        "Parent comment does not belong to post",
                        parent_id=str(parent_id),
                        parent_post_id=str(parent.post_id),
                        target_post_id=str(post_id),
                    )
                    raise InvalidArgumentError(
                        "Parent comment does not belong to this post"
                    )

            comment = Comment(
                id=CommentId(uuid4()),
                post_id=post_id,
                author_id=author_id,
                text=text,
                parent_id=parent_id,
                created_at=self.clock.now(),
            )

            saved = await self.comment_repository.save(comment)
            await self.post_repository.increment_comment_count(post_id)

            logfire.info(
                "Comment created",
                comment_id=str(saved.id),
                post_id=str(post_id),
                is_reply=parent_id is not None,
            )
            return saved

    async def get_comments_for_post(
        self, post_id: PostId, include_deleted: bool = False
    ) -> list[Comment]:
        """Get all comments for a post, oldest first.

        Args:
            post_id: Post ID
            include_deleted: Whether to include deleted comments

        Returns:
            List of comments

        Raises:
            NotFoundError: If the post does not exist
        """
        with logfire.span(
            "comment_service.get_comments_for_post",
            post_id=str(post_id),
            include_deleted=include_deleted,
        ):
            post = await self.post_repository.find_by_id(post_id)
            if post is None or post.is_deleted:
                raise NotFoundError("Post", str(post_id))

            comments = await self.comment_repository.find_by_post(
                post_id=post_id,
                include_deleted=include_deleted,
            )
            logfire.info(
                "Comments retrieved for post",
                post_id=str(post_id),
                count=len(comments),
            )
            return comments
